import re
import secrets
import shutil
import time
import uuid
from collections.abc import Sequence
from pathlib import Path

from racktrack.logging.logger import Log
from racktrack.storage.models import utc_now_iso
from racktrack.storage.paths import to_stored_path
from racktrack.uploads.models import IncomingFile, PlacedUpload, Upload

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9\-_]")


def sanitize_basename(name: str) -> str:
    """Replace every character outside [a-zA-Z0-9-_] with an underscore."""
    return _UNSAFE_CHARS.sub("_", name)


def unique_filename(original_name: str) -> str:
    """Build `<epoch-ms>-<random>-<sanitized stem><ext>` from a client-supplied name."""
    original = Path(original_name)
    stamp = int(time.time() * 1000)
    suffix = secrets.randbelow(10**9)
    return f"{stamp}-{suffix}-{sanitize_basename(original.stem)}{original.suffix}"


class UploadPlacer:
    """Moves validated files from staging into their per-type directory."""

    def __init__(self, files_root: Path, base_dir: Path) -> None:
        self._files_root = files_root
        self._base_dir = base_dir

    def type_folder(self, upload_type: str) -> Path:
        return self._files_root / upload_type

    def place(self, files: Sequence[IncomingFile], upload_type: str) -> list[PlacedUpload]:
        """Move every file or none of them.

        On failure, files already moved are deleted and the error is re-raised.
        """
        folder = self.type_folder(upload_type)
        folder.mkdir(parents=True, exist_ok=True)
        placed: list[PlacedUpload] = []
        try:
            for incoming in files:
                destination = folder / unique_filename(incoming.original_name)
                shutil.move(str(incoming.staged_path), destination)
                placed.append(self._record(incoming, destination, upload_type))
        except OSError:
            Log.error(f"Placement failed for {upload_type} batch, rolling back")
            for item in placed:
                item.path.unlink(missing_ok=True)
            raise
        Log.info(f"Placed {len(placed)} file(s) into {folder}")
        return placed

    def _record(self, incoming: IncomingFile, destination: Path, upload_type: str) -> PlacedUpload:
        upload = Upload(
            id=str(uuid.uuid4()),
            file_name=incoming.original_name,
            file_type=incoming.mimetype,
            file_path=to_stored_path(destination, self._base_dir),
            upload_type=upload_type,
            uploaded_at=utc_now_iso(),
        )
        return PlacedUpload(upload=upload, path=destination)
