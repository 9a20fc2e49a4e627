from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from racktrack.storage.models import Report


@dataclass(frozen=True)
class ExecutionLog:
    """Outcome of one script in the report sequence."""

    script: str
    status: str  # "success" | "error"
    stdout: str
    stderr: str
    timestamp: str
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        if self.error is None:
            data.pop("error")
        return data


@dataclass
class GenerationOutcome:
    artifact: Path
    logs: list[ExecutionLog] = field(default_factory=list)
    report: Report | None = None
