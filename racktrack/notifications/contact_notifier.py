import html

import httpx

from racktrack.logging.logger import Log
from racktrack.notifications.exceptions import NotificationError
from racktrack.storage.contact_store import ContactStore
from racktrack.storage.exceptions import PersistenceError
from racktrack.storage.models import Contact, utc_now_iso

RESEND_API_URL = "https://api.resend.com/emails"


class ContactNotifier:
    """Emails contact-form submissions through the Resend HTTP API.

    Delivery is best-effort: failures are logged and recorded on the contact,
    never raised to the caller.
    """

    def __init__(
        self,
        contact_store: ContactStore,
        *,
        api_key: str,
        sender: str,
        recipients: list[str],
        timeout_seconds: int = 15,
        client: httpx.Client | None = None,
    ) -> None:
        self._contact_store = contact_store
        self._api_key = api_key
        self._sender = sender
        self._recipients = recipients
        self._client = client or httpx.Client(timeout=timeout_seconds)

    def notify(self, contact: Contact) -> Contact:
        """Send contact to every recipient and return the updated record."""
        if not self._api_key:
            Log.warning("Resend API key not configured, contact email not sent")
            return self._record_attempt(contact, sent=False, error="email provider not configured")
        if not self._recipients:
            Log.warning("No contact recipients configured, contact email not sent")
            return self._record_attempt(contact, sent=False, error="no recipients configured")

        errors: list[str] = []
        for recipient in self._recipients:
            try:
                self._send(contact, recipient)
            except NotificationError as exc:
                Log.error(f"Contact email to {recipient} failed: {exc}")
                errors.append(str(exc))
        return self._record_attempt(
            contact, sent=not errors, error="; ".join(errors) if errors else None
        )

    def _send(self, contact: Contact, recipient: str) -> None:
        payload = {
            "from": self._sender,
            "to": recipient,
            "subject": f"New Contact Form Message from {contact.name}",
            "html": self._render_html(contact),
            "text": f"Name: {contact.name}\nEmail: {contact.email}\n\n{contact.message}",
        }
        try:
            response = self._client.post(
                RESEND_API_URL,
                json=payload,
                headers={"Authorization": f"Bearer {self._api_key}"},
            )
        except httpx.HTTPError as exc:
            raise NotificationError(f"Resend request error: {exc}") from exc
        if response.is_error:
            raise NotificationError(
                f"Resend send failed: {response.status_code} {response.text}"
            )

    @staticmethod
    def _render_html(contact: Contact) -> str:
        return (
            f"<p><strong>Name:</strong> {html.escape(contact.name)}</p>"
            f"<p><strong>Email:</strong> {html.escape(contact.email)}</p>"
            f"<pre>{html.escape(contact.message)}</pre>"
        )

    def _record_attempt(self, contact: Contact, *, sent: bool, error: str | None) -> Contact:
        try:
            updated = self._contact_store.update(
                contact.id,
                email_sent=sent,
                email_attempts=contact.email_attempts + 1,
                email_last_attempt_at=utc_now_iso(),
                email_last_error=error,
            )
        except PersistenceError as exc:
            Log.error(f"Failed to record email attempt for contact {contact.id}: {exc}")
            return contact
        return updated or contact
