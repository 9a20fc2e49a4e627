"""Timestamp-based matching between generated artifacts and uploaded images."""

import math
from collections.abc import Iterable, Sequence
from pathlib import Path

from racktrack.artifacts.models import FileRef

IMAGE_EXTENSIONS = frozenset(
    {".jpg", ".jpeg", ".png", ".gif", ".webp", ".tif", ".tiff", ".bmp"}
)


def find_best_match(
    candidates: Sequence[FileRef], reference_time_ms: float
) -> FileRef | None:
    """Pick the candidate most likely to have produced an artifact at reference_time_ms.

    Prefers the newest file modified at or before the reference time. When every
    candidate is newer, falls back to the one closest in time. Returns None for an
    empty candidate set. Ties resolve to the earliest candidate in input order.
    """
    if not candidates:
        return None
    earlier = [c for c in candidates if c.mtime_ms <= reference_time_ms]
    if earlier:
        return max(earlier, key=lambda c: c.mtime_ms)
    return min(candidates, key=lambda c: abs(c.mtime_ms - reference_time_ms))


class ArtifactLocator:
    """Scans directories for candidate files and matches them by modification time."""

    def scan(
        self,
        directories: Iterable[Path],
        extensions: Iterable[str] | None = None,
        recursive: bool = False,
    ) -> list[FileRef]:
        """Collect regular files under the given directories.

        Missing directories are skipped. Extensions are compared case-insensitively.
        """
        allowed = {e.lower() for e in extensions} if extensions is not None else None
        refs: list[FileRef] = []
        for directory in directories:
            if not directory.is_dir():
                continue
            entries = directory.rglob("*") if recursive else directory.iterdir()
            for path in sorted(entries):
                if not path.is_file():
                    continue
                if allowed is not None and path.suffix.lower() not in allowed:
                    continue
                refs.append(FileRef.from_path(path))
        return refs

    def find_best_match(
        self, candidates: Sequence[FileRef], reference_time_ms: float
    ) -> FileRef | None:
        return find_best_match(candidates, reference_time_ms)

    def newest(self, candidates: Sequence[FileRef]) -> FileRef | None:
        """Return the most recently modified candidate."""
        return find_best_match(candidates, math.inf)
