"""
In-Memory Key-Value Store

Process-local store. State is lost when the process exits; used for
tests and for running the ledger without any backend configured.
"""

from typing import Optional

from household_ledger.services.storage.interface import KeyValueStoreInterface


class InMemoryKeyValueStore(KeyValueStoreInterface):
    """Dict-backed store. `fail_writes` makes every set() report failure."""

    def __init__(self, initial: Optional[dict[str, str]] = None, fail_writes: bool = False):
        self._data: dict[str, str] = dict(initial or {})
        self.fail_writes = fail_writes
        self.write_count = 0

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> bool:
        if self.fail_writes:
            return False
        self._data[key] = value
        self.write_count += 1
        return True

    def snapshot(self) -> dict[str, str]:
        """Copy of everything stored, for inspection."""
        return dict(self._data)
