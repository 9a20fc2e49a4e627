import json
from pathlib import Path

import httpx

from racktrack.notifications.contact_notifier import RESEND_API_URL, ContactNotifier
from racktrack.storage.contact_store import ContactStore


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


class TestNotify:
    def test_sends_to_every_recipient(self, tmp_path: Path) -> None:
        sent: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            assert str(request.url) == RESEND_API_URL
            assert request.headers["Authorization"] == "Bearer key"
            sent.append(json.loads(request.content))
            return httpx.Response(200, json={"id": "email-1"})

        store = ContactStore(tmp_path / "contacts.json")
        contact = store.create("Alice <admin>", "alice@example.com", "Hello & bye")
        notifier = ContactNotifier(
            store,
            api_key="key",
            sender="no-reply@example.com",
            recipients=["ops@example.com", "sales@example.com"],
            client=_client(handler),
        )

        updated = notifier.notify(contact)

        assert [m["to"] for m in sent] == ["ops@example.com", "sales@example.com"]
        assert "Alice &lt;admin&gt;" in sent[0]["html"]
        assert "Hello &amp; bye" in sent[0]["html"]
        assert updated.email_sent is True
        assert updated.email_attempts == 1
        assert updated.email_last_error is None
        assert updated.email_last_attempt_at
        assert store.get(contact.id) == updated

    def test_provider_error_is_recorded_not_raised(self, tmp_path: Path) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(422, text="invalid from address")

        store = ContactStore(tmp_path / "contacts.json")
        contact = store.create("Alice", "alice@example.com", "Hi")
        notifier = ContactNotifier(
            store, api_key="key", sender="x@example.com", recipients=["ops@example.com"],
            client=_client(handler),
        )

        updated = notifier.notify(contact)

        assert updated.email_sent is False
        assert updated.email_attempts == 1
        assert "422" in (updated.email_last_error or "")

    def test_transport_error_is_recorded(self, tmp_path: Path) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        store = ContactStore(tmp_path / "contacts.json")
        contact = store.create("Alice", "alice@example.com", "Hi")
        notifier = ContactNotifier(
            store, api_key="key", sender="x@example.com", recipients=["ops@example.com"],
            client=_client(handler),
        )

        assert notifier.notify(contact).email_sent is False

    def test_unconfigured_provider_skips_sending(self, tmp_path: Path) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        store = ContactStore(tmp_path / "contacts.json")
        contact = store.create("Alice", "alice@example.com", "Hi")
        notifier = ContactNotifier(
            store, api_key="", sender="x@example.com", recipients=["ops@example.com"],
            client=_client(handler),
        )

        updated = notifier.notify(contact)

        assert updated.email_sent is False
        assert updated.email_last_error == "email provider not configured"

    def test_attempts_accumulate(self, tmp_path: Path) -> None:
        store = ContactStore(tmp_path / "contacts.json")
        contact = store.create("Alice", "alice@example.com", "Hi")
        notifier = ContactNotifier(store, api_key="key", sender="x@example.com", recipients=[])

        first = notifier.notify(contact)
        second = notifier.notify(first)

        assert second.email_attempts == 2
        assert second.email_last_error == "no recipients configured"


class TestContactStore:
    def test_persists_and_reloads(self, tmp_path: Path) -> None:
        path = tmp_path / "contacts.json"
        contact = ContactStore(path).create("Alice", "alice@example.com", "Hi")

        reloaded = ContactStore(path)

        assert reloaded.get(contact.id) == contact
        assert reloaded.list_all() == [contact]

    def test_update_unknown_contact(self, tmp_path: Path) -> None:
        assert ContactStore(tmp_path / "c.json").update("nope", email_sent=True) is None
