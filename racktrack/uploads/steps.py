from pathlib import Path

from racktrack.artifacts.locator import ArtifactLocator
from racktrack.logging.logger import Log
from racktrack.reports.publisher import ReportPublisher
from racktrack.runner.process_runner import ProcessRunner
from racktrack.storage.paths import to_stored_path
from racktrack.uploads.pipeline import PipelineContext, PipelineStage, PipelineStep
from racktrack.uploads.placement import UploadPlacer
from racktrack.uploads.registry import UploadRegistry
from racktrack.uploads.selection import select_for_processing
from racktrack.uploads.validator import UploadValidator, discard_staged


class ValidateStep(PipelineStep):
    def __init__(self, validator: UploadValidator) -> None:
        self._validator = validator

    def run(self, context: PipelineContext) -> PipelineContext:
        context.rule = self._validator.validate(context.upload_type, context.files)
        context.stage = PipelineStage.VALIDATED
        Log.info(f"Validated {len(context.files)} {context.upload_type} file(s)")
        return context


class PlaceStep(PipelineStep):
    def __init__(self, placer: UploadPlacer, registry: UploadRegistry) -> None:
        self._placer = placer
        self._registry = registry

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.upload_type is None:
            raise ValueError("PipelineContext.upload_type must be set before placement")
        context.placed = self._placer.place(context.files, context.upload_type)
        for item in context.placed:
            self._registry.add(item.upload)
        context.stage = PipelineStage.PLACED
        return context


class SelectTargetsStep(PipelineStep):
    def __init__(self, placer: UploadPlacer, locator: ArtifactLocator) -> None:
        self._placer = placer
        self._locator = locator

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.upload_type is None:
            raise ValueError("PipelineContext.upload_type must be set before selection")
        folder = self._placer.type_folder(context.upload_type)
        context.targets = select_for_processing(context.placed, folder, self._locator)
        Log.info(f"Selected {len(context.targets)} file(s) for processing")
        return context


class ProcessStep(PipelineStep):
    def __init__(
        self,
        runner: ProcessRunner,
        executable: Path,
        scripts_root: Path,
        upload_scripts: dict[str, str],
        timeout: float | None = None,
    ) -> None:
        self._runner = runner
        self._executable = executable
        self._scripts_root = scripts_root
        self._upload_scripts = upload_scripts
        self._timeout = timeout

    def run(self, context: PipelineContext) -> PipelineContext:
        script_name = self._upload_scripts.get(context.upload_type or "")
        if not script_name:
            Log.warning(f"No script configured for upload type: {context.upload_type}")
        else:
            script = self._scripts_root / script_name
            for target in context.targets:
                result = self._runner.run_script(
                    self._executable, script, [target], timeout=self._timeout
                )
                context.process_results.append(result)
        context.stage = PipelineStage.PROCESSED
        return context


class AssociateReportsStep(PipelineStep):
    def __init__(self, publisher: ReportPublisher, artifact: Path, base_dir: Path) -> None:
        self._publisher = publisher
        self._artifact = artifact
        self._base_dir = base_dir

    def run(self, context: PipelineContext) -> PipelineContext:
        identity = context.identity
        if identity is None or not identity.is_authenticated:
            Log.info("Requester not authenticated, no report recorded")
            context.stage = PipelineStage.ASSOCIATION_SKIPPED
            return context
        if not context.process_results or not self._artifact.exists():
            Log.info(f"No artifact at {self._artifact}, no report recorded")
            context.stage = PipelineStage.ASSOCIATION_SKIPPED
            return context

        for target in context.targets:
            report = self._publisher.publish(
                identity.user_id or "",
                self._artifact,
                to_stored_path(target, self._base_dir),
            )
            if report is not None:
                context.reports.append(report)
        context.stage = (
            PipelineStage.ASSOCIATED if context.reports else PipelineStage.ASSOCIATION_SKIPPED
        )
        return context


class DiscardStagedStep(PipelineStep):
    """Failure handler: remove whatever is still in staging. Placed files stay."""

    def run(self, context: PipelineContext) -> PipelineContext:
        discard_staged(context.files)
        Log.error(
            f"Upload failed at stage {context.stage.value}: {context.error_message}"
        )
        context.stage = PipelineStage.FAILED
        return context
