from __future__ import annotations

from typing import Optional, Protocol


class KeyValueStore(Protocol):
    """Durable string key-value storage provided by the host environment."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError
