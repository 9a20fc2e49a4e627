from collections.abc import Sequence
from pathlib import Path

from racktrack.artifacts.exceptions import AssociationWarning
from racktrack.artifacts.locator import ArtifactLocator
from racktrack.artifacts.models import FileRef
from racktrack.logging.logger import Log
from racktrack.reports.exceptions import ReportGenerationError
from racktrack.reports.models import ExecutionLog, GenerationOutcome
from racktrack.reports.publisher import ReportPublisher
from racktrack.runner.exceptions import ProcessError, RunnerError
from racktrack.runner.process_runner import ProcessRunner
from racktrack.sessions.models import Identity
from racktrack.storage.exceptions import PersistenceError
from racktrack.storage.models import Report, utc_now_iso
from racktrack.storage.paths import to_stored_path


class ReportGenerator:
    """Runs the report script sequence and records the merged artifact for the requester."""

    def __init__(
        self,
        runner: ProcessRunner,
        publisher: ReportPublisher,
        locator: ArtifactLocator,
        *,
        executable: Path,
        scripts_root: Path,
        scripts: Sequence[str],
        artifact: Path,
        upload_folders: Sequence[Path],
        base_dir: Path,
        timeout: float | None = None,
    ) -> None:
        self._runner = runner
        self._publisher = publisher
        self._locator = locator
        self._executable = executable
        self._scripts_root = scripts_root
        self._scripts = list(scripts)
        self._artifact = artifact
        self._upload_folders = list(upload_folders)
        self._base_dir = base_dir
        self._timeout = timeout

    def generate(self, identity: Identity | None = None) -> GenerationOutcome:
        """Regenerate the merged artifact and, for authenticated callers, record a report.

        Raises:
            ReportGenerationError: if any script fails or no artifact is produced.
        """
        Log.info("Starting report generation")
        if self._artifact.exists():
            self._artifact.unlink()
            Log.info(f"Cleared existing artifact {self._artifact}")

        outcome = GenerationOutcome(artifact=self._artifact)
        for script in self._scripts:
            outcome.logs.append(self._run_script(script, outcome.logs))

        if not self._artifact.exists():
            raise ReportGenerationError("PDF was not generated successfully", outcome.logs)
        Log.info("Report generated successfully")

        if identity is not None and identity.is_authenticated:
            outcome.report = self._record(identity.user_id or "")
        return outcome

    def _run_script(self, script: str, logs: list[ExecutionLog]) -> ExecutionLog:
        timestamp = utc_now_iso()
        Log.info("Running report script", script=script)
        try:
            result = self._runner.run_script(
                self._executable, self._scripts_root / script, timeout=self._timeout
            )
        except RunnerError as exc:
            stderr = exc.stderr if isinstance(exc, ProcessError) else ""
            logs.append(
                ExecutionLog(
                    script=script,
                    status="error",
                    stdout="",
                    stderr=stderr,
                    timestamp=timestamp,
                    error=str(exc),
                )
            )
            raise ReportGenerationError(f"Failed to run {script}: {exc}", logs) from exc
        return ExecutionLog(
            script=script,
            status="success",
            stdout=result.stdout,
            stderr=result.stderr,
            timestamp=timestamp,
        )

    def _record(self, user_id: str) -> Report | None:
        """Copy the artifact for user_id and record it. None if the record cannot be written."""
        try:
            pdf_file = self._publisher.copy_artifact(user_id, self._artifact)
        except OSError as exc:
            Log.error(f"Failed to copy artifact to reports folder: {exc}")
            pdf_file = self._artifact

        try:
            processed_image: str | None = self._associate_image()
        except AssociationWarning as warning:
            Log.warning(f"Failed to determine associated image: {warning}")
            processed_image = None

        try:
            report = self._publisher.record(user_id, pdf_file, processed_image)
        except PersistenceError as exc:
            Log.error(f"Failed to persist report metadata for user {user_id}: {exc}")
            if pdf_file != self._artifact:
                pdf_file.unlink(missing_ok=True)
            return None
        Log.info(f"Saved report metadata for user {user_id} -> {report.pdf_path}")
        return report

    def _associate_image(self) -> str:
        try:
            candidates: list[FileRef] = self._locator.scan(self._upload_folders)
            reference_ms = FileRef.from_path(self._artifact).mtime_ms
        except OSError as exc:
            raise AssociationWarning(str(exc)) from exc
        match = self._locator.find_best_match(candidates, reference_ms)
        if match is None:
            raise AssociationWarning("no uploaded images to associate")
        Log.info(f"Associated report with {match.path}")
        return to_stored_path(match.path, self._base_dir)
