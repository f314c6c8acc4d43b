"""
Ledger Event Logger

Every mutation of the ledger is logged as one structured event.
This provides:
1. Traceability of what changed and when
2. Debugging capability
3. Visibility of refused operations (closed months, invalid input)

The event logger writes to the local structured log only. A failure
to log never interrupts the ledger operation that produced the event.
"""

import logging
from typing import Optional

import structlog

from household_ledger.models.events import LedgerEvent, LedgerEventBuilder, LedgerSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(log_level: str = "INFO") -> None:
    """Route structlog output through stdlib logging at the given level."""
    logging.basicConfig(format="%(message)s", level=log_level.upper())
    logging.getLogger("household_ledger").setLevel(log_level.upper())


class LedgerEventLogger:
    """Central structured logger for ledger events."""

    def __init__(self, logger_name: str = "household_ledger"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: LedgerEvent) -> bool:
        """
        Log a ledger event at the level matching its severity.

        Returns False if the log call itself failed.
        """
        log_dict = event.to_log_dict()

        try:
            if event.severity == LedgerSeverity.ERROR:
                self._logger.error("ledger_event", **log_dict)
            elif event.severity == LedgerSeverity.WARNING:
                self._logger.warning("ledger_event", **log_dict)
            elif event.severity == LedgerSeverity.DEBUG:
                self._logger.debug("ledger_event", **log_dict)
            else:
                self._logger.info("ledger_event", **log_dict)
        except Exception as e:
            logging.getLogger(__name__).warning("ledger event logging failed: %s", e)
            return False

        return True

    def log_validation_failed(self, entity_type: str, field: str, message: str) -> None:
        """Log a rejected input."""
        self.log(LedgerEventBuilder.validation_failed(entity_type, field, message))

    def log_mutation_refused(self, competency: str, operation: str) -> None:
        """Log a transaction mutation refused because its month is closed."""
        self.log(LedgerEventBuilder.mutation_refused(competency, operation))

    def log_persistence_failed(self, key: str, error_message: str) -> None:
        """Log a failed collection write."""
        self.log(LedgerEventBuilder.persistence_failed(key, error_message))

    def log_entity_created(self, entity_type: str, entity_id, description: str) -> None:
        self.log(LedgerEventBuilder.entity_created(entity_type, entity_id, description))

    def log_entity_deleted(self, entity_type: str, entity_id) -> None:
        self.log(LedgerEventBuilder.entity_deleted(entity_type, entity_id))

    def log_entity_updated(self, entity_type: str, entity_id, fields: list[str]) -> None:
        self.log(LedgerEventBuilder.entity_updated(entity_type, entity_id, fields))


_default_logger: Optional[LedgerEventLogger] = None


def get_event_logger() -> LedgerEventLogger:
    """Shared logger instance for callers that don't inject their own."""
    global _default_logger
    if _default_logger is None:
        _default_logger = LedgerEventLogger()
    return _default_logger
