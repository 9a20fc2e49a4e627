from pathlib import Path

import pytest

from racktrack.uploads.exceptions import (
    FileTooLargeError,
    InvalidFileError,
    InvalidTypeError,
    NoFilesError,
    TooManyFilesError,
    UploadValidationError,
)
from racktrack.uploads.models import ALLOWED_UPLOAD_TYPES, IncomingFile
from racktrack.uploads.validator import UploadValidator


def _stage(tmp_path: Path, name: str, mimetype: str) -> IncomingFile:
    staged = tmp_path / "staging" / f"staged-{name}"
    staged.parent.mkdir(parents=True, exist_ok=True)
    staged.write_bytes(b"data")
    return IncomingFile(original_name=name, mimetype=mimetype, staged_path=staged)


class TestAccepts:
    def test_single_png(self, tmp_path: Path) -> None:
        files = [_stage(tmp_path, "scan.png", "image/png")]

        rule = UploadValidator().validate("single-image", files)

        assert rule is ALLOWED_UPLOAD_TYPES["single-image"]
        assert files[0].staged_path.exists()

    def test_extension_check_is_case_insensitive(self, tmp_path: Path) -> None:
        files = [_stage(tmp_path, "SCAN.JPG", "image/jpeg")]

        UploadValidator().validate("single-image", files)

    def test_twenty_images_for_multiple(self, tmp_path: Path) -> None:
        files = [_stage(tmp_path, f"img{i}.webp", "image/webp") for i in range(20)]

        UploadValidator().validate("multiple-images", files)

    def test_quicktime_video(self, tmp_path: Path) -> None:
        UploadValidator().validate("video", [_stage(tmp_path, "clip.mov", "video/quicktime")])


class TestRejects:
    @pytest.mark.parametrize("upload_type", [None, "", "audio", "SINGLE-IMAGE"])
    def test_unknown_type(self, tmp_path: Path, upload_type: str | None) -> None:
        files = [_stage(tmp_path, "scan.png", "image/png")]

        with pytest.raises(InvalidTypeError):
            UploadValidator().validate(upload_type, files)

        assert not files[0].staged_path.exists()

    def test_empty_batch(self) -> None:
        with pytest.raises(NoFilesError):
            UploadValidator().validate("single-image", [])

    def test_mime_and_extension_must_both_match(self, tmp_path: Path) -> None:
        files = [_stage(tmp_path, "scan.gif", "image/png")]

        with pytest.raises(InvalidFileError):
            UploadValidator().validate("single-image", files)

    def test_one_bad_file_rejects_whole_batch(self, tmp_path: Path) -> None:
        good = [_stage(tmp_path, f"ok{i}.png", "image/png") for i in range(3)]
        bad = _stage(tmp_path, "notes.txt", "text/plain")
        files = [*good, bad]

        with pytest.raises(InvalidFileError):
            UploadValidator().validate("multiple-images", files)

        assert not any(f.staged_path.exists() for f in files)

    def test_video_with_two_files(self, tmp_path: Path) -> None:
        files = [_stage(tmp_path, f"clip{i}.mp4", "video/mp4") for i in range(2)]

        with pytest.raises(TooManyFilesError) as exc_info:
            UploadValidator().validate("video", files)

        assert exc_info.value.max_files == 1
        assert "Maximum 1 allowed for video" in str(exc_info.value)
        assert not any(f.staged_path.exists() for f in files)

    def test_twenty_one_images(self, tmp_path: Path) -> None:
        files = [_stage(tmp_path, f"img{i}.png", "image/png") for i in range(21)]

        with pytest.raises(TooManyFilesError):
            UploadValidator().validate("multiple-images", files)

    def test_invalid_file_reported_before_count(self, tmp_path: Path) -> None:
        files = [
            _stage(tmp_path, "a.png", "image/png"),
            _stage(tmp_path, "b.exe", "application/octet-stream"),
        ]

        with pytest.raises(InvalidFileError):
            UploadValidator().validate("single-image", files)

    def test_oversized_file_rejects_batch(self, tmp_path: Path) -> None:
        small = _stage(tmp_path, "small.png", "image/png")
        large = _stage(tmp_path, "large.png", "image/png")
        large.staged_path.write_bytes(b"x" * 64)

        with pytest.raises(FileTooLargeError) as exc_info:
            UploadValidator(max_file_bytes=32).validate("multiple-images", [small, large])

        assert exc_info.value.file_name == "large.png"
        assert not small.staged_path.exists()
        assert not large.staged_path.exists()

    def test_size_limit_applies_per_file(self, tmp_path: Path) -> None:
        files = [_stage(tmp_path, f"img{i}.png", "image/png") for i in range(20)]

        UploadValidator(max_file_bytes=8).validate("multiple-images", files)

    def test_all_rejections_share_base_class(self) -> None:
        for exc_type in (InvalidTypeError, NoFilesError, InvalidFileError, FileTooLargeError):
            assert issubclass(exc_type, UploadValidationError)
        assert issubclass(TooManyFilesError, UploadValidationError)
