import json
from pathlib import Path

import pytest

from racktrack.cli import backfill_reports, dedupe_reports
from tests.helpers import set_mtime_ms


def _write_reports(base_dir: Path, records: list[dict]) -> Path:
    path = base_dir / "data" / "reports.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(records, indent=2))
    return path


DUPLICATES = [
    {"id": "a", "userId": "u1", "processedImage": "files/x.png", "createdAt": "2024-01-01T00:00:00.000Z"},
    {"id": "b", "userId": "u1", "processedImage": "files/x.png", "createdAt": "2024-01-02T00:00:00.000Z"},
    {"id": "c", "userId": "u2", "processedImage": "files/x.png", "createdAt": "2024-01-01T00:00:00.000Z"},
]


class TestDedupeCli:
    def test_dry_run_changes_nothing(self, tmp_path: Path) -> None:
        path = _write_reports(tmp_path, DUPLICATES)
        before = path.read_bytes()

        assert dedupe_reports.main(["--base-dir", str(tmp_path)]) == 0

        assert path.read_bytes() == before
        assert list(path.parent.iterdir()) == [path]

    def test_apply_keeps_latest_and_backs_up(self, tmp_path: Path) -> None:
        path = _write_reports(tmp_path, DUPLICATES)
        before = path.read_bytes()

        assert dedupe_reports.main(["--apply", "--base-dir", str(tmp_path)]) == 0

        assert [r["id"] for r in json.loads(path.read_text())] == ["b", "c"]
        backups = list(path.parent.glob("reports.json.bak.dedupe.*"))
        assert len(backups) == 1
        assert backups[0].read_bytes() == before

    def test_data_dir_override(self, tmp_path: Path) -> None:
        other = tmp_path / "elsewhere"
        path = _write_reports(other, DUPLICATES)

        assert dedupe_reports.main(["--apply", "--data-dir", str(path.parent)]) == 0

        assert len(json.loads(path.read_text())) == 2

    def test_missing_file_exits_1(self, tmp_path: Path) -> None:
        assert dedupe_reports.main(["--base-dir", str(tmp_path)]) == 1

    def test_corrupt_file_exits_1(self, tmp_path: Path) -> None:
        path = tmp_path / "data" / "reports.json"
        path.parent.mkdir()
        path.write_text("[oops")

        assert dedupe_reports.main(["--apply", "--base-dir", str(tmp_path)]) == 1
        assert path.read_text() == "[oops"

    def test_conflicting_flags_exit_1(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            dedupe_reports.main(["--apply", "--dry-run"])

        assert exc_info.value.code == 1


class TestBackfillCli:
    def _project(self, tmp_path: Path) -> Path:
        image = tmp_path / "files" / "single-image" / "scan.png"
        image.parent.mkdir(parents=True)
        image.write_bytes(b"img")
        set_mtime_ms(image, 1_000)
        return _write_reports(
            tmp_path,
            [
                {"id": "r1", "userId": "u1", "pdfPath": "reports/u1/r1.pdf",
                 "processedImage": None, "createdAt": "2024-01-01T00:00:00.000Z", "extra": 1},
            ],
        )

    def test_dry_run_changes_nothing(self, tmp_path: Path) -> None:
        path = self._project(tmp_path)
        before = path.read_bytes()

        assert backfill_reports.main(["--dry-run", "--base-dir", str(tmp_path)]) == 0

        assert path.read_bytes() == before

    def test_apply_writes_association_and_backs_up(self, tmp_path: Path) -> None:
        path = self._project(tmp_path)
        before = path.read_bytes()

        assert backfill_reports.main(["--apply", "--base-dir", str(tmp_path)]) == 0

        record = json.loads(path.read_text())[0]
        assert record["processedImage"] == "files/single-image/scan.png"
        assert record["extra"] == 1
        backups = [p for p in path.parent.iterdir() if p.name.startswith("reports.json.bak.")]
        assert len(backups) == 1
        assert backups[0].read_bytes() == before

    def test_nothing_to_do(self, tmp_path: Path) -> None:
        path = _write_reports(tmp_path, [])

        assert backfill_reports.main(["--apply", "--base-dir", str(tmp_path)]) == 0
        assert list(path.parent.iterdir()) == [path]
