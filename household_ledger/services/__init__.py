"""
Services Package

Persistence for the ledger: the key-value stores and the entity
collections layered on top of them.
"""

from household_ledger.services.collections import COLLECTION_KEYS, LedgerCollections

__all__ = [
    "COLLECTION_KEYS",
    "LedgerCollections",
]
