from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ProcessSpec:
    """Everything needed to spawn one external process. Never passed through a shell."""

    executable: Path
    args: tuple[Path, ...] = ()
    cwd: Path | None = None
    timeout: float | None = None

    def argv(self) -> list[str]:
        return [str(self.executable), *(str(a) for a in self.args)]


@dataclass(frozen=True)
class ProcessResult:
    """Captured output of a completed external process."""

    stdout: str
    stderr: str
    exit_code: int
    duration_seconds: float = 0.0
