import shutil
import uuid
from pathlib import Path

from racktrack.logging.logger import Log
from racktrack.storage.base import BaseReportStore
from racktrack.storage.exceptions import PersistenceError
from racktrack.storage.models import Report, ReportDraft, utc_now_iso
from racktrack.storage.paths import to_stored_path


class ReportPublisher:
    """Copies a generated artifact into a user's report folder and records it."""

    def __init__(self, report_store: BaseReportStore, reports_root: Path, base_dir: Path) -> None:
        self._report_store = report_store
        self._reports_root = reports_root
        self._base_dir = base_dir

    def copy_artifact(self, user_id: str, artifact: Path) -> Path:
        """Copy artifact to `<reports_root>/<user_id>/<uuid>.pdf`.

        Raises:
            OSError: if the copy fails.
        """
        user_dir = self._reports_root / user_id
        user_dir.mkdir(parents=True, exist_ok=True)
        destination = user_dir / f"{uuid.uuid4()}.pdf"
        shutil.copyfile(artifact, destination)
        return destination

    def record(self, user_id: str, pdf_file: Path, processed_image: str | None) -> Report:
        return self._report_store.create(
            ReportDraft(
                user_id=user_id,
                title=f"Merged Result {utc_now_iso()}",
                filename=pdf_file.name,
                pdf_path=to_stored_path(pdf_file, self._base_dir),
                processed_image=processed_image,
            )
        )

    def publish(self, user_id: str, artifact: Path, processed_image: str | None) -> Report | None:
        """Copy then record.

        A failed copy or a failed write of the record is logged and no report is
        created. A copy whose record could not be written is removed again.
        """
        try:
            destination = self.copy_artifact(user_id, artifact)
        except OSError as exc:
            Log.error(f"Failed to copy {artifact} to reports folder for user {user_id}: {exc}")
            return None
        try:
            report = self.record(user_id, destination, processed_image)
        except PersistenceError as exc:
            Log.error(f"Failed to persist report metadata for user {user_id}: {exc}")
            destination.unlink(missing_ok=True)
            return None
        Log.info(f"Saved report {report.id} for user {user_id} -> {report.pdf_path}")
        return report
