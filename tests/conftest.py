"""
Shared fixtures for Household Ledger tests.

No external services are used: the in-memory store stands in for the
key-value backend.
"""

import pytest
import pytest_asyncio

from household_ledger.config import LedgerSettings
from household_ledger.orchestrator import LedgerService
from household_ledger.services.storage import InMemoryKeyValueStore

from tests.factories import CATEGORIES


@pytest.fixture
def settings() -> LedgerSettings:
    return LedgerSettings(storage_backend="memory")


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest_asyncio.fixture
async def service(store, settings) -> LedgerService:
    """A loaded ledger seeded with the test categories."""
    ledger = LedgerService(store=store, settings=settings)
    await ledger.load()
    await ledger.ensure_initialized(CATEGORIES)
    return ledger
