"""Persistence for polls and sessions."""

from bookpoll import config
from bookpoll.models import Poll, Session

from .base import StorageError, Store
from .kv import KvStore
from .memory import MemoryStore

POLL_PREFIX = "poll:"
SESSION_PREFIX = "session:"

# Process-wide fallback used when no REST store is configured
_memory_store = MemoryStore()


def get_store() -> Store:
    """Return the configured store.

    Uses the REST store when KV_REST_API_URL and KV_REST_API_TOKEN are set,
    otherwise the in-process memory store.
    """
    if config.kv_configured():
        return KvStore(
            config.KV_REST_API_URL,
            config.KV_REST_API_TOKEN,
            timeout=config.KV_TIMEOUT_SECONDS,
        )
    return _memory_store


def get_poll(store: Store, poll_id: str) -> Poll | None:
    data = store.get(f"{POLL_PREFIX}{poll_id}")
    if data is None:
        return None
    return Poll.from_dict(data)


def save_poll(store: Store, poll: Poll) -> None:
    store.set(f"{POLL_PREFIX}{poll.id}", poll.to_dict())


def delete_poll(store: Store, poll_id: str) -> None:
    store.delete(f"{POLL_PREFIX}{poll_id}")


def get_session(store: Store, session_id: str) -> Session | None:
    data = store.get(f"{SESSION_PREFIX}{session_id}")
    if data is None:
        return None
    return Session.from_dict(data)


def save_session(store: Store, session: Session) -> None:
    store.set(f"{SESSION_PREFIX}{session.id}", session.to_dict())
