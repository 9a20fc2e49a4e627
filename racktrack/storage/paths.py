from pathlib import Path


def to_stored_path(path: Path, base_dir: Path) -> str:
    """Render path relative to base_dir with forward slashes, as kept in JSON records."""
    try:
        relative = path.resolve().relative_to(base_dir.resolve())
    except ValueError:
        return path.as_posix()
    return relative.as_posix()


def resolve_stored_path(value: str, base_dir: Path) -> Path:
    """Turn a stored path back into an absolute filesystem path."""
    path = Path(value.replace("\\", "/"))
    if path.is_absolute():
        return path
    return base_dir / path
