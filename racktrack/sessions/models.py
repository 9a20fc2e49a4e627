from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    """Who a session belongs to. user_id is None for sessions without an account."""

    username: str
    user_id: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)
