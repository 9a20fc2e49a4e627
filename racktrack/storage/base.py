from abc import ABC, abstractmethod

from racktrack.storage.models import Report, ReportDraft


class BaseReportStore(ABC):
    """Contract for all report persistence backends.

    Reports are append-only history: `create` always inserts a new record and
    nothing ever updates an existing one.
    """

    @abstractmethod
    def create(self, draft: ReportDraft) -> Report:
        """Assign a fresh id and creation timestamp and persist a new report.

        Raises:
            ValueError: if draft.user_id is empty.
            PersistenceError: if the backing store cannot be written.
        """

    @abstractmethod
    def get(self, report_id: str) -> Report | None:
        """Return the report with this id, or None."""

    @abstractmethod
    def list_by_user(self, user_id: str) -> list[Report]:
        """Return every report owned by user_id, in no guaranteed order."""

    @abstractmethod
    def list_all(self) -> list[Report]:
        """Return every stored report."""

    @abstractmethod
    def delete(self, report_id: str) -> bool:
        """Remove the report record. Returns whether it existed.

        The report's PDF file is left on disk.
        """
