"""Collapse duplicate reports to the latest one per (userId, processedImage)."""

import sys
from collections.abc import Sequence

from racktrack.cli.common import ReportsFileError, load_reports, parse_args, reports_file_path
from racktrack.logging.logger import Log
from racktrack.storage.exceptions import PersistenceError
from racktrack.storage.json_file import backup_file, write_json_atomic
from racktrack.storage.maintenance import dedupe_reports


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args("racktrack-dedupe-reports", __doc__ or "", argv)
    Log.configure(args.log_level)
    path = reports_file_path(args)

    try:
        records = load_reports(path)
    except ReportsFileError as exc:
        Log.error(str(exc))
        return 1

    result = dedupe_reports(records)
    Log.info(
        f"Would remove {len(result.removed)} duplicate report(s). "
        f"Final count: {len(result.kept)}"
    )
    for record in result.removed:
        Log.info(f"- remove id={record.get('id')} createdAt={record.get('createdAt')}")

    if not args.apply:
        Log.info("Dry run complete. No files were modified.")
        return 0

    try:
        backup_file(path, label="dedupe")
        write_json_atomic(path, result.kept)
    except PersistenceError as exc:
        Log.error(str(exc))
        return 1
    Log.info(f"Deduplication complete. {len(result.removed)} report(s) removed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
