class UploadValidationError(Exception):
    """Base exception for rejected upload batches. User-correctable."""


ValidationError = UploadValidationError


class InvalidTypeError(UploadValidationError):
    """Raised when the upload type is missing or not on the allow-list."""


class NoFilesError(UploadValidationError):
    """Raised when a batch contains no files."""


class InvalidFileError(UploadValidationError):
    """Raised when a file fails the MIME type or extension check."""


class TooManyFilesError(UploadValidationError):
    """Raised when a batch exceeds the upload type's file limit."""

    def __init__(self, upload_type: str, max_files: int) -> None:
        self.upload_type = upload_type
        self.max_files = max_files
        super().__init__(
            f"Too many files. Maximum {max_files} allowed for {upload_type}"
        )


class FileTooLargeError(UploadValidationError):
    """Raised when a single file exceeds the per-file size limit."""

    def __init__(self, file_name: str, max_bytes: int) -> None:
        self.file_name = file_name
        self.max_bytes = max_bytes
        super().__init__(f"File {file_name} exceeds the {max_bytes} byte limit")
