from collections.abc import Sequence
from pathlib import Path

from racktrack.artifacts.locator import ArtifactLocator
from racktrack.config.settings import Settings
from racktrack.logging.logger import Log
from racktrack.reports.publisher import ReportPublisher
from racktrack.runner.process_runner import ProcessRunner
from racktrack.sessions.models import Identity
from racktrack.storage.base import BaseReportStore
from racktrack.uploads.models import IncomingFile
from racktrack.uploads.pipeline import PipelineContext, PipelineStage, PipelineStep
from racktrack.uploads.placement import UploadPlacer
from racktrack.uploads.registry import UploadRegistry
from racktrack.uploads.steps import (
    AssociateReportsStep,
    DiscardStagedStep,
    PlaceStep,
    ProcessStep,
    SelectTargetsStep,
    ValidateStep,
)
from racktrack.uploads.validator import UploadValidator


class UploadPipeline:
    """Runs an upload batch through its steps in order.

    Pipeline: validate -> place -> select -> process -> associate.
    Any exception runs the failure step and propagates to the caller.
    """

    def __init__(self, steps: Sequence[PipelineStep], failed_step: PipelineStep) -> None:
        self._steps = list(steps)
        self._failed_step = failed_step

    def run(
        self,
        upload_type: str | None,
        files: Sequence[IncomingFile],
        identity: Identity | None = None,
    ) -> PipelineContext:
        context = PipelineContext(
            upload_type=upload_type,
            files=list(files),
            identity=identity,
        )
        Log.info(f"Received {len(context.files)} file(s)", upload_type=upload_type)
        try:
            for step in self._steps:
                context = step.run(context)
        except Exception as exc:
            context.error_message = str(exc)
            self._failed_step.run(context)
            raise
        context.stage = PipelineStage.COMPLETED
        Log.info(
            f"Upload completed: {len(context.placed)} placed, "
            f"{len(context.reports)} report(s) recorded"
        )
        return context


def build_upload_pipeline(
    settings: Settings,
    report_store: BaseReportStore,
    registry: UploadRegistry,
    runner: ProcessRunner | None = None,
    locator: ArtifactLocator | None = None,
) -> UploadPipeline:
    """Build an UploadPipeline wired from settings."""
    runner = runner or ProcessRunner(default_timeout=settings.process_timeout_seconds)
    locator = locator or ArtifactLocator()
    placer = UploadPlacer(settings.files_path, settings.root_path)
    publisher = ReportPublisher(report_store, settings.reports_path, settings.root_path)
    steps: list[PipelineStep] = [
        ValidateStep(UploadValidator(max_file_bytes=settings.max_file_bytes)),
        PlaceStep(placer, registry),
        SelectTargetsStep(placer, locator),
        ProcessStep(
            runner,
            executable=Path(settings.python_executable),
            scripts_root=settings.scripts_path,
            upload_scripts=settings.upload_scripts,
            timeout=settings.process_timeout_seconds,
        ),
        AssociateReportsStep(publisher, settings.results_pdf_path, settings.root_path),
    ]
    return UploadPipeline(steps=steps, failed_step=DiscardStagedStep())
