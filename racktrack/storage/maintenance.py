"""Offline reconciliation of the report collection.

Used by the maintenance CLIs; never called on the request path. Works on raw
JSON records so that fields unknown to the current model survive a rewrite.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from racktrack.artifacts.locator import ArtifactLocator, IMAGE_EXTENSIONS
from racktrack.artifacts.models import FileRef
from racktrack.logging.logger import Log
from racktrack.storage.models import parse_timestamp_ms
from racktrack.storage.paths import resolve_stored_path, to_stored_path


@dataclass
class DedupeResult:
    """Outcome of collapsing duplicate report records."""

    kept: list[dict[str, Any]] = field(default_factory=list)
    removed: list[dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class BackfillProposal:
    """A suggested processedImage for one report."""

    report_id: str
    before: str | None
    after: str | None


def dedupe_key(record: dict[str, Any]) -> tuple[str, str]:
    processed = (record.get("processedImage") or "").replace("\\", "/")
    return (str(record.get("userId")), processed)


def dedupe_reports(records: list[dict[str, Any]]) -> DedupeResult:
    """Keep only the latest record per (userId, processedImage).

    Groups keep the position of their first member. A record replaces the current
    group winner only when both createdAt values parse and it is strictly newer.
    """
    winners: dict[tuple[str, str], dict[str, Any]] = {}
    for record in records:
        key = dedupe_key(record)
        current = winners.get(key)
        if current is None:
            winners[key] = record
            continue
        incoming_ms = parse_timestamp_ms(record.get("createdAt"))
        current_ms = parse_timestamp_ms(current.get("createdAt"))
        if incoming_ms is not None and current_ms is not None and incoming_ms > current_ms:
            winners[key] = record

    kept = list(winners.values())
    kept_ids = {id(r) for r in kept}
    removed = [r for r in records if id(r) not in kept_ids]
    return DedupeResult(kept=kept, removed=removed)


def report_identifier(record: dict[str, Any]) -> str | None:
    return record.get("id") or record.get("reportId") or record.get("pdfPath")


def collect_image_candidates(files_root: Path, locator: ArtifactLocator) -> list[FileRef]:
    """Every image file anywhere under files_root."""
    return locator.scan([files_root], extensions=IMAGE_EXTENSIONS, recursive=True)


def _needs_backfill(record: dict[str, Any], base_dir: Path) -> bool:
    processed = record.get("processedImage")
    if not processed:
        return True
    return not resolve_stored_path(processed, base_dir).exists()


def _reference_time_ms(record: dict[str, Any], base_dir: Path) -> float:
    pdf_path = record.get("pdfPath") or record.get("path")
    if pdf_path:
        pdf_abs = resolve_stored_path(pdf_path, base_dir)
        if pdf_abs.exists():
            return pdf_abs.stat().st_mtime_ns / 1_000_000
    created_ms = parse_timestamp_ms(record.get("createdAt"))
    if created_ms:
        return created_ms
    return time.time() * 1000


def plan_backfill(
    records: list[dict[str, Any]],
    candidates: list[FileRef],
    base_dir: Path,
    locator: ArtifactLocator | None = None,
) -> list[BackfillProposal]:
    """Propose a processedImage for every report lacking a valid one.

    The reference time is the report PDF's mtime, else its createdAt, else now.
    """
    locator = locator or ArtifactLocator()
    proposals: list[BackfillProposal] = []
    for record in records:
        if not _needs_backfill(record, base_dir):
            continue
        match = locator.find_best_match(candidates, _reference_time_ms(record, base_dir))
        after = to_stored_path(match.path, base_dir) if match is not None else None
        proposals.append(
            BackfillProposal(
                report_id=str(report_identifier(record)),
                before=record.get("processedImage") or None,
                after=after,
            )
        )
    return proposals


def apply_backfill(
    records: list[dict[str, Any]], proposals: list[BackfillProposal]
) -> int:
    """Write proposed associations into records in place. Returns how many changed."""
    changed = 0
    for proposal in proposals:
        if not proposal.after:
            continue
        record = next(
            (r for r in records if report_identifier(r) == proposal.report_id), None
        )
        if record is None:
            Log.warning(f"Report {proposal.report_id} vanished before backfill apply")
            continue
        if record.get("processedImage") != proposal.after:
            record["processedImage"] = proposal.after
            changed += 1
    return changed
