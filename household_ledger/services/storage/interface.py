"""
Abstract Key-Value Store Interface

The ledger persists each entity collection as one serialized snapshot
under its own key. The store knows nothing about the entities or the
relationships between collections; it only maps keys to text.

Implementations must make a single set() atomic for its key. There is
no cross-key atomicity.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStoreInterface(ABC):
    """
    Maps collection keys to serialized snapshots.

    Backends: InMemoryKeyValueStore for tests and ephemeral ledgers,
    GoogleSheetsKeyValueStore for persistence.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Read the text stored under a key.

        Args:
            key: Collection key

        Returns:
            The stored text, or None if the key was never written

        Raises:
            StorageError: If the backend could not be read
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> bool:
        """
        Replace the text stored under a key.

        Args:
            key: Collection key
            value: Full serialized snapshot

        Returns:
            True if written, False if the backend refused the write

        Raises:
            StorageError: If the backend failed
        """
        pass


class StorageError(Exception):
    """A key could not be read from or written to the backend."""


class ConnectionError(StorageError):
    """The backend itself is unreachable (bad credentials, missing spreadsheet)."""
