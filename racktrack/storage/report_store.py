import threading
import uuid
from pathlib import Path

from racktrack.logging.logger import Log
from racktrack.storage.base import BaseReportStore
from racktrack.storage.exceptions import PersistenceError
from racktrack.storage.json_file import read_json_list, write_json_atomic
from racktrack.storage.models import Report, ReportDraft, utc_now_iso
from racktrack.storage.paths import resolve_stored_path


class InMemoryReportStore(BaseReportStore):
    """Report history held in a dict. Mutations are serialized by a lock."""

    def __init__(self, base_dir: Path | None = None) -> None:
        self._base_dir = base_dir
        self._reports: dict[str, Report] = {}
        self._lock = threading.RLock()

    def create(self, draft: ReportDraft) -> Report:
        if not draft.user_id:
            raise ValueError("Report.user_id is required")
        report = Report(
            id=str(uuid.uuid4()),
            user_id=draft.user_id,
            title=draft.title,
            filename=draft.filename,
            pdf_path=draft.pdf_path,
            processed_image=draft.processed_image or None,
            created_at=utc_now_iso(),
        )
        with self._lock:
            snapshot = dict(self._reports)
            self._reports[report.id] = report
            try:
                self._persist()
            except PersistenceError:
                self._reports = snapshot
                raise
        Log.info("Created report", report_id=report.id, user_id=report.user_id)
        self._warn_on_missing_image(report)
        return report

    def get(self, report_id: str) -> Report | None:
        with self._lock:
            return self._reports.get(report_id)

    def list_by_user(self, user_id: str) -> list[Report]:
        with self._lock:
            return [r for r in self._reports.values() if r.user_id == user_id]

    def list_all(self) -> list[Report]:
        with self._lock:
            return list(self._reports.values())

    def delete(self, report_id: str) -> bool:
        with self._lock:
            if report_id not in self._reports:
                return False
            snapshot = dict(self._reports)
            del self._reports[report_id]
            try:
                self._persist()
            except PersistenceError:
                self._reports = snapshot
                raise
        Log.info("Deleted report", report_id=report_id)
        return True

    def _persist(self) -> None:
        """Hook for durable backends; called with the lock held after each mutation."""

    def _warn_on_missing_image(self, report: Report) -> None:
        if not report.processed_image:
            Log.warning(
                f"Report {report.id} created without processedImage for user {report.user_id}"
            )
            return
        if self._base_dir is not None:
            path = resolve_stored_path(report.processed_image, self._base_dir)
            if not path.exists():
                Log.warning(
                    f"Report {report.id} references missing processedImage {report.processed_image}"
                )


class JsonFileReportStore(InMemoryReportStore):
    """Report history persisted as one JSON array, rewritten atomically on every mutation."""

    def __init__(self, path: Path, base_dir: Path | None = None) -> None:
        super().__init__(base_dir=base_dir)
        self._path = path
        for record in read_json_list(path):
            report = Report.from_dict(record)
            self._reports[report.id] = report
        Log.info(f"Loaded {len(self._reports)} reports from {path}")

    @property
    def path(self) -> Path:
        return self._path

    def _persist(self) -> None:
        write_json_atomic(self._path, [r.to_dict() for r in self._reports.values()])
