import threading
import uuid
from pathlib import Path
from typing import Any

from racktrack.storage.exceptions import PersistenceError
from racktrack.storage.json_file import read_json_list, write_json_atomic
from racktrack.storage.models import Contact, utc_now_iso


class ContactStore:
    """Contact-form submissions persisted to a JSON file."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._lock = threading.RLock()
        self._contacts: dict[str, Contact] = {}
        for record in read_json_list(path):
            contact = Contact.from_dict(record)
            self._contacts[contact.id] = contact

    def create(self, name: str, email: str, message: str) -> Contact:
        contact = Contact(
            id=str(uuid.uuid4()),
            name=name,
            email=email,
            message=message,
            created_at=utc_now_iso(),
        )
        with self._lock:
            self._put(contact)
        return contact

    def get(self, contact_id: str) -> Contact | None:
        with self._lock:
            return self._contacts.get(contact_id)

    def list_all(self) -> list[Contact]:
        with self._lock:
            return list(self._contacts.values())

    def update(self, contact_id: str, **changes: Any) -> Contact | None:
        with self._lock:
            contact = self._contacts.get(contact_id)
            if contact is None:
                return None
            updated = contact.with_changes(**changes)
            self._put(updated)
        return updated

    def _put(self, contact: Contact) -> None:
        previous = self._contacts.get(contact.id)
        self._contacts[contact.id] = contact
        try:
            write_json_atomic(self._path, [c.to_dict() for c in self._contacts.values()])
        except PersistenceError:
            if previous is None:
                del self._contacts[contact.id]
            else:
                self._contacts[contact.id] = previous
            raise
