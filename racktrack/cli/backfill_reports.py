"""Propose (and optionally apply) processedImage associations for reports lacking one."""

import sys
from collections.abc import Sequence
from pathlib import Path

from racktrack.artifacts.locator import ArtifactLocator
from racktrack.cli.common import ReportsFileError, load_reports, parse_args, reports_file_path
from racktrack.logging.logger import Log
from racktrack.storage.exceptions import PersistenceError
from racktrack.storage.json_file import backup_file, write_json_atomic
from racktrack.storage.maintenance import apply_backfill, collect_image_candidates, plan_backfill


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args("racktrack-backfill-reports", __doc__ or "", argv)
    Log.configure(args.log_level)
    base_dir = Path(args.base_dir).resolve()
    path = reports_file_path(args)

    try:
        records = load_reports(path)
    except ReportsFileError as exc:
        Log.error(str(exc))
        return 1

    locator = ArtifactLocator()
    candidates = collect_image_candidates(base_dir / "files", locator)
    proposals = plan_backfill(records, candidates, base_dir, locator)
    if not proposals:
        Log.info("No reports need backfilling (all have valid processedImage fields).")
        return 0

    Log.info(f"Proposed updates for {len(proposals)} report(s):")
    for proposal in proposals:
        Log.info(f"- id={proposal.report_id}  ->  {proposal.before}  =>  {proposal.after}")

    if not args.apply:
        Log.info("Dry run complete. No files were modified. Re-run with --apply to write them.")
        return 0

    try:
        backup_file(path)
        changed = apply_backfill(records, proposals)
        write_json_atomic(path, records)
    except PersistenceError as exc:
        Log.error(str(exc))
        return 1
    Log.info(f"Applied changes. {changed} report(s) updated.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
