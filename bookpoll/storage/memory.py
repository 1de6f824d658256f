"""Process-local store for tests and local development."""

import json
from typing import Any

from .base import Store


class MemoryStore(Store):
    """Keeps values in a dict for the lifetime of the process.

    Values are copied through JSON on the way in and out, so callers
    never share mutable state with the store, and anything that could
    not be saved to the REST store fails here too.
    """

    def __init__(self):
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Any | None:
        raw = self._data.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)
