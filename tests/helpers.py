import os
from pathlib import Path

from flask.testing import FlaskClient


def set_mtime_ms(path: Path, mtime_ms: int) -> None:
    """Pin a file's modification time to mtime_ms."""
    ns = mtime_ms * 1_000_000
    os.utime(path, ns=(ns, ns))


def write_script(path: Path, body: str) -> Path:
    """Write a small Python script used as a stand-in external processor."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body, encoding="utf-8")
    return path


def register_and_login(client: FlaskClient, username: str = "alice") -> tuple[str, str]:
    """Return (user id, bearer token) for a fresh account."""
    client.post("/api/register", json={"username": username, "password": "secret"})
    body = client.post("/api/login", json={"username": username, "password": "secret"}).get_json()
    return body["user"]["id"], body["sessionId"]


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
