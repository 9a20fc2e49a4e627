from racktrack.config.settings import Settings
from racktrack.storage.base import BaseReportStore
from racktrack.storage.report_store import InMemoryReportStore, JsonFileReportStore

REPORTS_FILE = "reports.json"


class ReportStoreFactory:
    """Creates the configured report store backend."""

    BACKENDS = ("json", "memory")

    @classmethod
    def create(cls, settings: Settings) -> BaseReportStore:
        backend = settings.report_store_backend.lower()
        if backend == "json":
            return JsonFileReportStore(
                settings.data_path / REPORTS_FILE, base_dir=settings.root_path
            )
        if backend == "memory":
            return InMemoryReportStore(base_dir=settings.root_path)
        raise ValueError(
            f"Unknown report store backend '{backend}'. Choose from: {list(cls.BACKENDS)}"
        )
