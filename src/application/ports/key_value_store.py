"""Port for the scoped local key-value store."""

from typing import Protocol


class KeyValueStorePort(Protocol):
    """Port exposing string values persisted across sessions."""

    def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""

    def set(self, key: str, value: str) -> None:
        """Persist a value for the key."""

    def delete(self, key: str) -> None:
        """Remove the key if present."""


__all__ = ["KeyValueStorePort"]
