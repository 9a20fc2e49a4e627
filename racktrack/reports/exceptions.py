from racktrack.reports.models import ExecutionLog


class ReportGenerationError(Exception):
    """Raised when the report script sequence fails or produces no artifact."""

    def __init__(self, message: str, logs: list[ExecutionLog] | None = None) -> None:
        super().__init__(message)
        self.logs = logs or []
