"""Abstract base class for key-value stores."""

from abc import ABC, abstractmethod
from typing import Any


class StorageError(RuntimeError):
    """Raised when the backing store cannot be reached or rejects a command."""
    pass


class Store(ABC):
    """A key-value store holding JSON-compatible values.

    Implementations are chosen by get_store() in bookpoll/storage/__init__.py
    and injected into the poll service.
    """

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Return the value stored under key, or None if there is none."""
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous value."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key. Deleting a missing key is not an error."""
        pass

    def close(self) -> None:
        """Release any connections held by the store."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
