"""Whole-document JSON persistence with atomic replacement."""

import json
import os
import shutil
import tempfile
import time
from pathlib import Path
from typing import Any

from racktrack.logging.logger import Log
from racktrack.storage.exceptions import PersistenceError


def read_json_list(path: Path) -> list[dict[str, Any]]:
    """Read a JSON array of objects. A missing file reads as an empty list.

    Raises:
        PersistenceError: if the file exists but is unreadable or not a JSON array.
    """
    if not path.exists():
        return []
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise PersistenceError(f"Failed to read {path}: {exc}") from exc
    if not isinstance(data, list):
        raise PersistenceError(f"Expected a JSON array in {path}")
    return data


def write_json_atomic(path: Path, data: Any) -> None:
    """Serialize data next to path and atomically replace it.

    Readers observe either the previous document or the new one, never a
    truncated file.

    Raises:
        PersistenceError: if writing or replacing fails. The original file is untouched.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
    except OSError as exc:
        raise PersistenceError(f"Failed to prepare write of {path}: {exc}") from exc

    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(data, handle, indent=2, ensure_ascii=False)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    except (OSError, TypeError, ValueError) as exc:
        tmp_path.unlink(missing_ok=True)
        raise PersistenceError(f"Failed to write {path}: {exc}") from exc


def backup_file(path: Path, label: str | None = None) -> Path:
    """Copy path to `<name>.bak[.label].<epoch-ms>` beside it and return the copy's path.

    Backups are never pruned.
    """
    stamp = int(time.time() * 1000)
    infix = f".{label}" if label else ""
    backup = path.with_name(f"{path.name}.bak{infix}.{stamp}")
    try:
        shutil.copyfile(path, backup)
    except OSError as exc:
        raise PersistenceError(f"Failed to back up {path}: {exc}") from exc
    Log.info(f"Backup created: {backup}")
    return backup
