from collections.abc import Sequence
from pathlib import Path

from racktrack.logging.logger import Log
from racktrack.uploads.exceptions import (
    FileTooLargeError,
    InvalidFileError,
    InvalidTypeError,
    NoFilesError,
    TooManyFilesError,
)
from racktrack.uploads.models import ALLOWED_UPLOAD_TYPES, IncomingFile, UploadRule


def discard_staged(files: Sequence[IncomingFile]) -> None:
    """Delete staged files, ignoring ones already gone."""
    for incoming in files:
        try:
            incoming.staged_path.unlink(missing_ok=True)
        except OSError as exc:
            Log.warning(f"Failed to remove staged file {incoming.staged_path}: {exc}")


class UploadValidator:
    """All-or-nothing validation of an upload batch against the type allow-list."""

    def __init__(
        self,
        rules: dict[str, UploadRule] | None = None,
        max_file_bytes: int | None = None,
    ) -> None:
        self._rules = rules if rules is not None else ALLOWED_UPLOAD_TYPES
        self._max_file_bytes = max_file_bytes

    def validate(self, upload_type: str | None, files: Sequence[IncomingFile]) -> UploadRule:
        """Accept or reject the whole batch. Rejected batches are removed from staging.

        Raises:
            InvalidTypeError: unknown or missing upload type.
            NoFilesError: empty batch.
            InvalidFileError: any file fails its MIME or extension check.
            FileTooLargeError: any file is larger than max_file_bytes.
            TooManyFilesError: batch larger than the type allows.
        """
        try:
            return self._check(upload_type, files)
        except Exception:
            discard_staged(files)
            raise

    def _check(self, upload_type: str | None, files: Sequence[IncomingFile]) -> UploadRule:
        rule = self._rules.get(upload_type or "")
        if rule is None:
            raise InvalidTypeError("Invalid upload type")
        if not files:
            raise NoFilesError("No files uploaded or invalid file types")
        invalid = [f for f in files if not self._is_allowed(f, rule)]
        if invalid:
            names = ", ".join(f.original_name for f in invalid)
            Log.warning(f"Rejected {upload_type} batch, invalid file(s): {names}")
            raise InvalidFileError(
                "Invalid file type(s). Please upload only allowed file formats."
            )
        if self._max_file_bytes is not None:
            for incoming in files:
                if incoming.staged_path.stat().st_size > self._max_file_bytes:
                    raise FileTooLargeError(incoming.original_name, self._max_file_bytes)
        if len(files) > rule.max_files:
            raise TooManyFilesError(upload_type or "", rule.max_files)
        return rule

    @staticmethod
    def _is_allowed(incoming: IncomingFile, rule: UploadRule) -> bool:
        extension = Path(incoming.original_name).suffix.lower()
        return incoming.mimetype in rule.mimes and extension in rule.extensions
