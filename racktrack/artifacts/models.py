from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class FileRef:
    """A candidate file and its modification time in milliseconds."""

    path: Path
    mtime_ms: float

    @classmethod
    def from_path(cls, path: Path) -> "FileRef":
        return cls(path=path, mtime_ms=path.stat().st_mtime_ns / 1_000_000)
