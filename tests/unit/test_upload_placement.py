import re
import shutil
from pathlib import Path
from unittest.mock import patch

import pytest

from racktrack.artifacts.locator import ArtifactLocator
from racktrack.uploads.models import IncomingFile
from racktrack.uploads.placement import UploadPlacer, sanitize_basename, unique_filename
from racktrack.uploads.registry import UploadRegistry
from racktrack.uploads.selection import select_for_processing
from tests.helpers import set_mtime_ms


def _stage(tmp_path: Path, name: str, mimetype: str = "image/png") -> IncomingFile:
    staged = tmp_path / "files" / "temp" / f"staged-{name}"
    staged.parent.mkdir(parents=True, exist_ok=True)
    staged.write_bytes(name.encode())
    return IncomingFile(original_name=name, mimetype=mimetype, staged_path=staged)


class TestFilenames:
    def test_sanitize_replaces_unsafe_characters(self) -> None:
        assert sanitize_basename("my scan (1)") == "my_scan__1_"
        assert sanitize_basename("ok-name_2") == "ok-name_2"

    def test_unique_filename_shape(self) -> None:
        name = unique_filename("../../etc/pass wd.png")

        assert re.fullmatch(r"\d+-\d+-pass_wd\.png", name)

    def test_unique_filenames_differ(self) -> None:
        assert len({unique_filename("a.png") for _ in range(50)}) == 50


class TestUploadPlacer:
    def test_moves_files_into_type_folder(self, tmp_path: Path) -> None:
        placer = UploadPlacer(tmp_path / "files", tmp_path)
        incoming = [_stage(tmp_path, "a.png"), _stage(tmp_path, "b.png")]

        placed = placer.place(incoming, "multiple-images")

        assert len(placed) == 2
        for item, source in zip(placed, incoming):
            assert item.path.parent == tmp_path / "files" / "multiple-images"
            assert item.path.exists()
            assert not source.staged_path.exists()
            assert item.upload.file_name == source.original_name
            assert item.upload.file_type == "image/png"
            assert item.upload.upload_type == "multiple-images"
            assert item.upload.file_path == f"files/multiple-images/{item.path.name}"

    def test_failed_move_rolls_back_batch(self, tmp_path: Path) -> None:
        placer = UploadPlacer(tmp_path / "files", tmp_path)
        incoming = [_stage(tmp_path, "a.png"), _stage(tmp_path, "b.png")]
        real_move = shutil.move
        calls = {"n": 0}

        def flaky_move(src: str, dst: Path) -> str:
            calls["n"] += 1
            if calls["n"] == 2:
                raise OSError("disk full")
            return real_move(src, dst)

        with patch("racktrack.uploads.placement.shutil.move", side_effect=flaky_move):
            with pytest.raises(OSError):
                placer.place(incoming, "multiple-images")

        assert list((tmp_path / "files" / "multiple-images").iterdir()) == []


class TestUploadRegistry:
    def test_add_get_list(self, tmp_path: Path) -> None:
        placer = UploadPlacer(tmp_path / "files", tmp_path)
        placed = placer.place([_stage(tmp_path, "a.png")], "single-image")
        registry = UploadRegistry()

        registry.add(placed[0].upload)

        assert registry.get(placed[0].upload.id) == placed[0].upload
        assert registry.list_all() == [placed[0].upload]
        assert registry.get("unknown") is None


class TestSelectForProcessing:
    def test_picks_newest_placed_file(self, tmp_path: Path) -> None:
        placer = UploadPlacer(tmp_path / "files", tmp_path)
        placed = placer.place(
            [_stage(tmp_path, f"img{i}.png") for i in range(5)], "multiple-images"
        )
        for i, item in enumerate(placed):
            set_mtime_ms(item.path, 1_000 * (i + 1))
        set_mtime_ms(placed[2].path, 99_000)

        targets = select_for_processing(
            placed, placer.type_folder("multiple-images"), ArtifactLocator()
        )

        assert targets == [placed[2].path]

    def test_falls_back_to_newest_in_folder(self, tmp_path: Path) -> None:
        folder = tmp_path / "files" / "video"
        folder.mkdir(parents=True)
        old = folder / "old.mp4"
        new = folder / "new.mp4"
        for path, ms in ((old, 1_000), (new, 2_000)):
            path.write_bytes(b"v")
            set_mtime_ms(path, ms)

        assert select_for_processing([], folder, ArtifactLocator()) == [new]

    def test_empty_folder_selects_nothing(self, tmp_path: Path) -> None:
        assert select_for_processing([], tmp_path / "missing", ArtifactLocator()) == []
