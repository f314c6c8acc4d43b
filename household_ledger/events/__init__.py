"""Ledger event logging package."""

from household_ledger.events.logger import LedgerEventLogger, configure_logging, get_event_logger

__all__ = ["LedgerEventLogger", "configure_logging", "get_event_logger"]
