"""
Ledger Configuration

Every tunable of the ledger is read from the environment (or a local
.env file) through pydantic-settings:

    LEDGER_*          storage backend, log level, analytics windows,
                      installment rounding, first-run categories
    GOOGLE_SHEETS_*   service account and spreadsheet for the Sheets store

The Sheets block is only loaded when that backend is selected, so an
in-memory ledger needs no credentials at all.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from household_ledger.models.ledger import InstallmentRemainderPolicy


DEFAULT_CATEGORIES = (
    "Food,Housing,Transport,Health,Education,Leisure,"
    "Subscriptions,Clothing,Salary,Other"
)

_ENV_FILE = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


class GoogleSheetsSettings(BaseSettings):
    """Where the Sheets key-value store lives and how to authenticate."""

    model_config = SettingsConfigDict(env_prefix="GOOGLE_SHEETS_", **_ENV_FILE)

    credentials_path: str = Field(
        ...,
        description="Service account JSON key with access to the ledger spreadsheet"
    )
    spreadsheet_id: str = Field(
        ...,
        description="Key of the spreadsheet holding the ledger"
    )
    store_sheet_name: str = Field(
        default="LedgerStore",
        description="Worksheet holding one row per collection"
    )

    @field_validator('credentials_path')
    @classmethod
    def check_credentials_file(cls, v: str) -> str:
        # Only warn: the key is often mounted after the process starts.
        if not Path(v).is_file():
            import warnings
            warnings.warn(f"Service account key {v} does not exist yet; the Sheets store will fail to connect.")
        return v


class LedgerSettings(BaseSettings):
    """Ledger behaviour, read from LEDGER_* variables."""

    model_config = SettingsConfigDict(env_prefix="LEDGER_", **_ENV_FILE)

    storage_backend: str = Field(
        default="memory",
        pattern="^(memory|google_sheets)$",
        description="Key-value store backing the collections"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for structured ledger logs"
    )

    # Analytics windows
    history_months: int = Field(
        default=6,
        ge=1,
        le=60,
        description="Default number of competencies in historical series"
    )
    savings_window_months: int = Field(
        default=6,
        ge=1,
        le=24,
        description="Trailing months used for savings velocity"
    )
    notification_days_ahead: int = Field(
        default=7,
        ge=0,
        le=31,
        description="Look-ahead window for card and recurring reminders"
    )
    closure_check_months: int = Field(
        default=3,
        ge=1,
        le=12,
        description="Recent competencies checked for an open month reminder"
    )

    installment_remainder_policy: InstallmentRemainderPolicy = Field(
        default=InstallmentRemainderPolicy.LAST_INSTALLMENT,
        description="How the rounding remainder of an installment split is handled"
    )
    default_categories: str = Field(
        default=DEFAULT_CATEGORIES,
        description="Comma-separated categories written on first run"
    )

    @property
    def default_categories_list(self) -> list[str]:
        return [name.strip() for name in self.default_categories.split(",") if name.strip()]


class Settings(BaseSettings):
    """
    Entry point for all ledger configuration.

    Sub-settings are built on access, so a missing GOOGLE_SHEETS_*
    variable only matters to code that asks for the Sheets block.
    """

    model_config = _ENV_FILE

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()


@lru_cache()
def get_settings() -> Settings:
    """Shared Settings instance; tests call get_settings.cache_clear() after changing the environment."""
    return Settings()


def validate_all_settings() -> dict[str, object]:
    """
    Try to load every settings block.

    Returns {block: True/False}, plus a "<block>_error" message for each
    block that failed to load.
    """
    settings = get_settings()
    results: dict[str, object] = {}

    for block in ("ledger", "google_sheets"):
        try:
            getattr(settings, block)
            results[block] = True
        except Exception as e:
            results[block] = False
            results[f"{block}_error"] = str(e)

    return results
