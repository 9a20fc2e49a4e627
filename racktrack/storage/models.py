from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp_ms(value: object) -> float | None:
    """Parse an ISO-8601 timestamp into epoch milliseconds. None if unparsable."""
    if not isinstance(value, str) or not value:
        return None
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp() * 1000


@dataclass(frozen=True)
class ReportDraft:
    """Fields supplied by the caller when creating a report."""

    user_id: str
    title: str
    filename: str
    pdf_path: str
    processed_image: str | None = None


@dataclass(frozen=True)
class Report:
    """An immutable history entry for one generated report."""

    id: str
    user_id: str
    title: str
    filename: str
    pdf_path: str
    created_at: str
    processed_image: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "title": self.title,
            "filename": self.filename,
            "pdfPath": self.pdf_path,
            "processedImage": self.processed_image,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Report":
        return cls(
            id=str(data["id"]),
            user_id=str(data.get("userId", "")),
            title=data.get("title", ""),
            filename=data.get("filename", ""),
            pdf_path=data.get("pdfPath", ""),
            created_at=data.get("createdAt", ""),
            processed_image=data.get("processedImage") or None,
        )


@dataclass(frozen=True)
class User:
    """A registered account. `password` holds a bcrypt hash (or a legacy plaintext value)."""

    id: str
    username: str
    password: str
    joined_at: str
    email: str | None = None
    full_name: str | None = None
    profile_image: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "password": self.password,
            "email": self.email,
            "fullName": self.full_name,
            "profileImage": self.profile_image,
            "joinedAt": self.joined_at,
        }

    def to_public_dict(self) -> dict[str, Any]:
        data = self.to_dict()
        data.pop("password")
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "User":
        return cls(
            id=str(data["id"]),
            username=data["username"],
            password=data.get("password") or "",
            joined_at=data.get("joinedAt", ""),
            email=data.get("email"),
            full_name=data.get("fullName"),
            profile_image=data.get("profileImage"),
        )


@dataclass(frozen=True)
class Contact:
    """A contact-form submission plus its email delivery metadata."""

    id: str
    name: str
    email: str
    message: str
    created_at: str
    email_sent: bool = False
    email_attempts: int = 0
    email_last_attempt_at: str | None = None
    email_last_error: str | None = None

    def with_changes(self, **changes: Any) -> "Contact":
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "message": self.message,
            "createdAt": self.created_at,
            "emailSent": self.email_sent,
            "emailAttempts": self.email_attempts,
            "emailLastAttemptAt": self.email_last_attempt_at,
            "emailLastError": self.email_last_error,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Contact":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            email=data.get("email", ""),
            message=data.get("message", ""),
            created_at=data.get("createdAt", ""),
            email_sent=bool(data.get("emailSent", False)),
            email_attempts=int(data.get("emailAttempts", 0)),
            email_last_attempt_at=data.get("emailLastAttemptAt"),
            email_last_error=data.get("emailLastError"),
        )
