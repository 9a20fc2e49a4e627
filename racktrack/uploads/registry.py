import threading

from racktrack.uploads.models import Upload


class UploadRegistry:
    """In-memory record of uploads accepted since the process started."""

    def __init__(self) -> None:
        self._uploads: dict[str, Upload] = {}
        self._lock = threading.Lock()

    def add(self, upload: Upload) -> Upload:
        with self._lock:
            self._uploads[upload.id] = upload
        return upload

    def get(self, upload_id: str) -> Upload | None:
        with self._lock:
            return self._uploads.get(upload_id)

    def list_all(self) -> list[Upload]:
        with self._lock:
            return list(self._uploads.values())
