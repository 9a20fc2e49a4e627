import threading
import uuid

from racktrack.sessions.base import BaseSessionStore
from racktrack.sessions.models import Identity


class InMemorySessionStore(BaseSessionStore):
    """Process-lifetime token map. No expiry."""

    def __init__(self) -> None:
        self._sessions: dict[str, Identity] = {}
        self._lock = threading.Lock()

    def create(self, identity: Identity) -> str:
        token = str(uuid.uuid4())
        with self._lock:
            self._sessions[token] = identity
        return token

    def lookup(self, token: str) -> Identity | None:
        with self._lock:
            return self._sessions.get(token)

    def invalidate(self, token: str) -> bool:
        with self._lock:
            return self._sessions.pop(token, None) is not None
