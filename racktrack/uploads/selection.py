from collections.abc import Sequence
from pathlib import Path

from racktrack.artifacts.locator import ArtifactLocator
from racktrack.artifacts.models import FileRef
from racktrack.uploads.models import PlacedUpload


def select_for_processing(
    placed: Sequence[PlacedUpload],
    type_folder: Path,
    locator: ArtifactLocator,
) -> list[Path]:
    """Pick the single most recently modified file to hand to the external processor.

    Only one file per request is processed, however large the batch. Without
    placed uploads, the newest file already in type_folder is used instead.
    """
    if placed:
        candidates = [FileRef.from_path(p.path) for p in placed]
    else:
        candidates = locator.scan([type_folder])
    newest = locator.newest(candidates)
    return [newest.path] if newest is not None else []
