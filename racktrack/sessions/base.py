from abc import ABC, abstractmethod

from racktrack.sessions.models import Identity


class BaseSessionStore(ABC):
    """Contract for session token storage."""

    @abstractmethod
    def create(self, identity: Identity) -> str:
        """Issue a new opaque token for identity."""

    @abstractmethod
    def lookup(self, token: str) -> Identity | None:
        """Return the identity behind token, or None if unknown."""

    @abstractmethod
    def invalidate(self, token: str) -> bool:
        """Forget token. Returns whether it existed."""
