import threading
import uuid
from dataclasses import replace
from pathlib import Path

import bcrypt

from racktrack.logging.logger import Log
from racktrack.storage.exceptions import DuplicateUserError, PersistenceError
from racktrack.storage.json_file import read_json_list, write_json_atomic
from racktrack.storage.models import User, utc_now_iso

BCRYPT_PREFIX = "$2"


class UserStore:
    """Registered accounts persisted to a JSON file."""

    def __init__(self, path: Path, rounds: int = 10) -> None:
        self._path = path
        self._rounds = rounds
        self._lock = threading.RLock()
        self._users: dict[str, User] = {}
        for record in read_json_list(path):
            user = User.from_dict(record)
            self._users[user.id] = user

    def get(self, user_id: str) -> User | None:
        with self._lock:
            return self._users.get(user_id)

    def get_by_username(self, username: str) -> User | None:
        with self._lock:
            return next((u for u in self._users.values() if u.username == username), None)

    def create(self, username: str, password: str) -> User:
        """Register a new user with a bcrypt-hashed password.

        Raises:
            DuplicateUserError: if the username is taken.
        """
        user = User(
            id=str(uuid.uuid4()),
            username=username,
            password=self._hash(password),
            joined_at=utc_now_iso(),
        )
        with self._lock:
            if self.get_by_username(username) is not None:
                raise DuplicateUserError(f"Username '{username}' already exists")
            self._put(user)
        Log.info(f"Registered user {user.id} ({username})")
        return user

    def update_profile(
        self,
        user_id: str,
        *,
        email: str | None = None,
        full_name: str | None = None,
        profile_image: str | None = None,
    ) -> User | None:
        """Apply the supplied profile fields. Fields left as None keep their value."""
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return None
            updated = replace(
                user,
                email=email if email is not None else user.email,
                full_name=full_name if full_name is not None else user.full_name,
                profile_image=profile_image if profile_image is not None else user.profile_image,
            )
            self._put(updated)
        return updated

    def validate_credentials(self, username: str, password: str) -> bool:
        """Check a username/password pair.

        Legacy plaintext passwords are accepted once and upgraded to a bcrypt hash.
        """
        user = self.get_by_username(username)
        if user is None:
            return False
        stored = user.password
        if stored.startswith(BCRYPT_PREFIX):
            return bcrypt.checkpw(password.encode("utf-8"), stored.encode("utf-8"))
        if not stored or stored != password:
            return False
        try:
            with self._lock:
                self._put(replace(user, password=self._hash(password)))
            Log.info(f"Upgraded legacy password hash for user {user.id}")
        except PersistenceError as exc:
            Log.warning(f"Failed to persist upgraded password for user {user.id}: {exc}")
        return True

    def _hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def _put(self, user: User) -> None:
        previous = self._users.get(user.id)
        self._users[user.id] = user
        try:
            write_json_atomic(self._path, [u.to_dict() for u in self._users.values()])
        except PersistenceError:
            if previous is None:
                del self._users[user.id]
            else:
                self._users[user.id] = previous
            raise
