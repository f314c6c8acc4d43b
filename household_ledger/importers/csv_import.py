"""
CSV Transaction Import

Parses a header-based CSV export into transaction drafts. Each row is
created through the normal create path, so it is validated, expanded
into installments and closure-checked like any hand-entered purchase.

Expected header (order free, extra columns ignored):
    date,type,payment_method,person,category,description,value,
    installments,credit_card,competency

Only date, type, payment_method, person, category, description and
value are required; installments defaults to 1 and competency to the
month of the date. A semicolon delimiter is accepted as well.
"""

import csv
import io
import unicodedata
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional, Sequence, Type, TypeVar
from uuid import UUID

from pydantic import BaseModel, Field

from household_ledger.models.ledger import (
    CreditCard,
    PaymentMethod,
    Person,
    TransactionDraft,
    TransactionType,
)


EnumT = TypeVar("EnumT", bound=Enum)

REQUIRED_COLUMNS = (
    "date",
    "type",
    "payment_method",
    "person",
    "category",
    "description",
    "value",
)

DATE_FORMATS = ("%Y-%m-%d", "%d/%m/%Y")

# Extra spellings accepted on top of the enum values themselves
_ALIASES: dict[type, dict[str, Enum]] = {
    TransactionType: {
        "EXPENSE": TransactionType.EXPENSE,
        "INCOME": TransactionType.INCOME,
    },
    PaymentMethod: {
        "CREDIT CARD": PaymentMethod.CREDIT,
        "DEBIT CARD": PaymentMethod.DEBIT,
        "PIX": PaymentMethod.INSTANT_TRANSFER,
        "TRANSFER": PaymentMethod.INSTANT_TRANSFER,
    },
    Person: {},
}


class ImportReport(BaseModel):
    """Outcome of one CSV import. Row numbers count the header as row 1."""

    total: int = 0
    succeeded: int = 0
    failed: int = 0
    errors: list[str] = Field(default_factory=list)

    def record_failure(self, row_number: int, message: str) -> None:
        self.failed += 1
        self.errors.append(f"Row {row_number}: {message}")


def _normalize(label: str) -> str:
    """Upper-case, accents stripped, separators unified."""
    decomposed = unicodedata.normalize("NFD", label.strip())
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return stripped.replace("-", "_").upper()


def parse_enum(enum_cls: Type[EnumT], raw: Optional[str], field: str) -> EnumT:
    """Match a CSV label against an enum's values, names and known aliases."""
    if raw is None or not raw.strip():
        raise ValueError(f"Missing {field}")

    target = _normalize(raw)
    for member in enum_cls:
        if target in (_normalize(member.value), _normalize(member.name)):
            return member

    alias = _ALIASES.get(enum_cls, {}).get(target.replace("_", " "))
    if alias is not None:
        return alias

    choices = ", ".join(m.value for m in enum_cls)
    raise ValueError(f"Invalid {field} '{raw}'. Use one of: {choices}")


def parse_date(raw: Optional[str]) -> date:
    if raw is None or not raw.strip():
        raise ValueError("Missing date")
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(raw.strip(), fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Invalid date '{raw}'. Use YYYY-MM-DD or DD/MM/YYYY")


def parse_value(raw: Optional[str]) -> Decimal:
    """Decimal amount; a comma is read as the decimal separator."""
    if raw is None or not raw.strip():
        raise ValueError("Missing value")
    cleaned = raw.strip().replace(" ", "").replace(",", ".")
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Invalid value '{raw}'")


def parse_installments(raw: Optional[str]) -> int:
    if raw is None or not raw.strip():
        return 1
    try:
        return int(raw.strip())
    except ValueError:
        raise ValueError(f"Invalid installments '{raw}'")


def resolve_credit_card(raw: Optional[str], cards: Sequence[CreditCard]) -> Optional[UUID]:
    """Card column holds a card name (case-insensitive) or id."""
    if raw is None or not raw.strip():
        return None
    wanted = raw.strip()
    for card in cards:
        if card.name.lower() == wanted.lower() or str(card.id) == wanted:
            return card.id
    raise ValueError(f"Credit card not found: {wanted}")


def read_rows(text: str) -> list[tuple[int, dict[str, str]]]:
    """
    Split CSV text into (row_number, row) pairs, skipping blank lines.

    Header names are matched case-insensitively.

    Raises:
        ValueError: If the header lacks a required column
    """
    sample = text.lstrip().split("\n", 1)[0]
    delimiter = ";" if sample.count(";") > sample.count(",") else ","
    reader = csv.DictReader(io.StringIO(text.strip()), delimiter=delimiter)
    if reader.fieldnames is None:
        return []
    reader.fieldnames = [name.strip().lower() for name in reader.fieldnames]

    missing = [c for c in REQUIRED_COLUMNS if c not in reader.fieldnames]
    if missing:
        raise ValueError(f"CSV header is missing columns: {', '.join(missing)}")

    rows = []
    for row in reader:
        if not any((value or "").strip() for value in row.values() if isinstance(value, str)):
            continue
        rows.append((reader.line_num, row))
    return rows


def row_to_draft(row: dict[str, str], cards: Sequence[CreditCard]) -> TransactionDraft:
    """
    Convert one CSV row into a TransactionDraft.

    Raises:
        ValueError: Describing the first unparseable column
    """
    competency = (row.get("competency") or "").strip() or None
    return TransactionDraft(
        date=parse_date(row.get("date")),
        type=parse_enum(TransactionType, row.get("type"), "type"),
        payment_method=parse_enum(PaymentMethod, row.get("payment_method"), "payment method"),
        person=parse_enum(Person, row.get("person"), "person"),
        category=(row.get("category") or "").strip() or None,
        description=(row.get("description") or "").strip() or None,
        value=parse_value(row.get("value")),
        competency=competency,
        credit_card_id=resolve_credit_card(row.get("credit_card"), cards),
        installments=parse_installments(row.get("installments")),
    )
