"""
Storage Services Package

Provides the abstract key-value interface and its implementations.
The in-memory store is the default; Google Sheets is the persistent
backend, selected through configuration.
"""

from household_ledger.services.storage.interface import (
    ConnectionError,
    KeyValueStoreInterface,
    StorageError,
)
from household_ledger.services.storage.memory import InMemoryKeyValueStore
from household_ledger.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsKeyValueStore,
)

__all__ = [
    # Interface
    "KeyValueStoreInterface",
    # Exceptions
    "ConnectionError",
    "StorageError",
    # Implementations
    "GoogleSheetsClient",
    "GoogleSheetsKeyValueStore",
    "InMemoryKeyValueStore",
]
