from racktrack.sessions.models import Identity
from racktrack.sessions.store import InMemorySessionStore


class TestInMemorySessionStore:
    def test_create_and_lookup(self) -> None:
        store = InMemorySessionStore()
        identity = Identity("alice", "u1")

        token = store.create(identity)

        assert store.lookup(token) == identity

    def test_tokens_are_unique(self) -> None:
        store = InMemorySessionStore()

        assert store.create(Identity("a")) != store.create(Identity("a"))

    def test_unknown_token(self) -> None:
        assert InMemorySessionStore().lookup("nope") is None

    def test_invalidate(self) -> None:
        store = InMemorySessionStore()
        token = store.create(Identity("alice", "u1"))

        assert store.invalidate(token) is True
        assert store.lookup(token) is None
        assert store.invalidate(token) is False


class TestIdentity:
    def test_authenticated_only_with_user_id(self) -> None:
        assert Identity("alice", "u1").is_authenticated
        assert not Identity("guest").is_authenticated
