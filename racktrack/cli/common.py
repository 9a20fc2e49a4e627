import argparse
import json
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from racktrack.logging.logger import Log

REPORTS_FILE = "reports.json"


class ReportsFileError(Exception):
    """Raised when the reports file is missing or unparsable."""


class _ArgumentParser(argparse.ArgumentParser):
    """Exits with status 1 on unusable arguments."""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def parse_args(prog: str, description: str, argv: Sequence[str] | None) -> argparse.Namespace:
    parser = _ArgumentParser(prog=prog, description=description)
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the proposed changes without writing anything (default).",
    )
    mode.add_argument(
        "--apply",
        action="store_true",
        help="Back up the reports file, then rewrite it.",
    )
    parser.add_argument("--base-dir", default=".", help="Project root. Default: current directory.")
    parser.add_argument(
        "--data-dir",
        default=None,
        help="Directory holding reports.json. Default: <base-dir>/data.",
    )
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args(argv)


def reports_file_path(args: argparse.Namespace) -> Path:
    base_dir = Path(args.base_dir).resolve()
    data_dir = Path(args.data_dir) if args.data_dir else base_dir / "data"
    return data_dir / REPORTS_FILE


def load_reports(path: Path) -> list[dict[str, Any]]:
    """Read the raw report records.

    Raises:
        ReportsFileError: if the file is missing, not JSON, or not an array.
    """
    if not path.exists():
        raise ReportsFileError(f"{path} not found. Run from project root or pass --data-dir.")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ReportsFileError(f"Failed to parse {path}: {exc}") from exc
    if not isinstance(data, list):
        raise ReportsFileError(f"Expected a JSON array in {path}")
    Log.info(f"Loaded {len(data)} report(s) from {path}")
    return data
