from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class UploadRule:
    """What one upload type accepts."""

    mimes: frozenset[str]
    extensions: frozenset[str]
    max_files: int


IMAGE_RULE_MIMES = frozenset({"image/jpeg", "image/png", "image/jpg", "image/webp"})
IMAGE_RULE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".webp"})

ALLOWED_UPLOAD_TYPES: dict[str, UploadRule] = {
    "single-image": UploadRule(IMAGE_RULE_MIMES, IMAGE_RULE_EXTENSIONS, max_files=1),
    "multiple-images": UploadRule(IMAGE_RULE_MIMES, IMAGE_RULE_EXTENSIONS, max_files=20),
    "video": UploadRule(
        frozenset({"video/mp4", "video/webm", "video/quicktime"}),
        frozenset({".mp4", ".webm", ".mov"}),
        max_files=1,
    ),
}


@dataclass(frozen=True)
class IncomingFile:
    """A received file sitting in the staging directory."""

    original_name: str
    mimetype: str
    staged_path: Path


@dataclass(frozen=True)
class Upload:
    """Record of a file accepted and placed in its upload-type directory."""

    id: str
    file_name: str
    file_type: str
    file_path: str
    upload_type: str
    uploaded_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "fileName": self.file_name,
            "fileType": self.file_type,
            "filePath": self.file_path,
            "uploadType": self.upload_type,
            "uploadedAt": self.uploaded_at,
        }


@dataclass(frozen=True)
class PlacedUpload:
    """An Upload together with its absolute location on disk."""

    upload: Upload
    path: Path
