from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from racktrack.logging.logger import Log
from racktrack.reports.exceptions import ReportGenerationError
from racktrack.runner.exceptions import RunnerError
from racktrack.storage.exceptions import StorageError
from racktrack.uploads.exceptions import FileTooLargeError, UploadValidationError


def _failure(message: str, status: int, **extra: object):  # type: ignore[no-untyped-def]
    return jsonify({"success": False, "message": message, **extra}), status


def register_error_handlers(app: Flask) -> None:
    """Map domain exceptions to JSON failure responses."""

    @app.errorhandler(UploadValidationError)
    def handle_validation(exc: UploadValidationError):  # type: ignore[no-untyped-def]
        return _failure(str(exc), 400)

    @app.errorhandler(FileTooLargeError)
    def handle_file_too_large(exc: FileTooLargeError):  # type: ignore[no-untyped-def]
        return _failure(str(exc), 413)

    @app.errorhandler(RunnerError)
    def handle_runner(exc: RunnerError):  # type: ignore[no-untyped-def]
        Log.error(f"External processing failed: {exc}")
        return _failure(f"Processing failed: {exc}", 500)

    @app.errorhandler(ReportGenerationError)
    def handle_generation(exc: ReportGenerationError):  # type: ignore[no-untyped-def]
        Log.error(f"Report generation failed: {exc}")
        return _failure(str(exc), 500, logs=[log.to_dict() for log in exc.logs])

    @app.errorhandler(StorageError)
    def handle_storage(exc: StorageError):  # type: ignore[no-untyped-def]
        Log.error(f"Storage failure: {exc}")
        return _failure("Storage failure", 500)

    @app.errorhandler(HTTPException)
    def handle_http(exc: HTTPException):  # type: ignore[no-untyped-def]
        return _failure(exc.description or exc.name, exc.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):  # type: ignore[no-untyped-def]
        Log.exception(f"Unhandled error: {exc}")
        return _failure("Internal Server Error", 500)
