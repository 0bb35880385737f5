"""
Response normalization for Cost Management query results.

The rows consumed here carry no column names, so each report kind declares its
column layout as a RowLayout. normalize_response() applies the layout to every
row and produces CostItem or CostNamedItem records in provider order.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from ..providers.base import CostItem, CostNamedItem, NormalizationError
from ..providers.query_builder import ReportKind

logger = logging.getLogger(__name__)

# Invariant numeric format: sign, digits, optional fraction and exponent, no grouping
_NUMBER_PATTERN = re.compile(r"^[+-]?\d+(\.\d+)?([eE][+-]?\d+)?$")
_DATE_PATTERN = re.compile(r"^\d{8}$")


@dataclass(frozen=True)
class RowLayout:
    """Column positions of one report kind's rows."""

    amount: int
    currency: int
    width: int = 4
    amount_usd: int | None = None
    date: int | None = None
    label: int | None = None


ROW_LAYOUTS: dict[ReportKind, RowLayout] = {
    ReportKind.TIME_SERIES: RowLayout(amount=0, amount_usd=1, date=2, currency=3),
    # Forecast rows carry a single cost figure; column 2 is not read
    ReportKind.FORECAST: RowLayout(amount=0, date=1, currency=3),
    ReportKind.BY_SERVICE: RowLayout(amount=0, amount_usd=1, label=2, currency=3),
    ReportKind.BY_LOCATION: RowLayout(amount=0, amount_usd=1, label=2, currency=3),
}


def parse_amount(value: Any) -> Decimal:
    """Parse a JSON number or invariant numeric string into a Decimal."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError(f"Cost value must be numeric, got {type(value).__name__}")

    text = str(value).strip() if isinstance(value, str) else repr(value)
    if not _NUMBER_PATTERN.match(text):
        raise ValueError(f"Invalid cost value: {value!r}")

    try:
        return Decimal(text)
    except InvalidOperation as e:
        raise ValueError(f"Invalid cost value: {value!r}") from e


def parse_usage_date(value: Any) -> date:
    """Parse an 8-digit yyyyMMdd token (int or string) into a date."""
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ValueError(f"Usage date must be a yyyyMMdd token, got {type(value).__name__}")

    token = str(value).strip()
    if not _DATE_PATTERN.match(token):
        raise ValueError(f"Invalid usage date: {value!r}")
    return datetime.strptime(token, "%Y%m%d").date()


def _parse_text(value: Any, field: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{field} must be a string, got {type(value).__name__}")
    return value


def normalize_row(kind: ReportKind, row: Any) -> CostItem | CostNamedItem:
    """
    Map a single response row to its record type.

    Raises:
        ValueError: If the row does not match the kind's layout
    """
    layout = ROW_LAYOUTS[kind]

    if not isinstance(row, (list, tuple)):
        raise ValueError(f"Row must be a list, got {type(row).__name__}")
    if len(row) != layout.width:
        raise ValueError(f"Expected {layout.width} columns, got {len(row)}")

    amount = parse_amount(row[layout.amount])
    amount_usd = parse_amount(row[layout.amount_usd]) if layout.amount_usd is not None else amount
    currency = _parse_text(row[layout.currency], "Currency")
    if not currency.strip():
        raise ValueError("Currency must be specified")

    if layout.date is not None:
        return CostItem(
            date=parse_usage_date(row[layout.date]),
            amount=amount,
            amount_usd=amount_usd,
            currency=currency,
        )

    return CostNamedItem(
        name=_parse_text(row[layout.label], "Group label"),
        amount=amount,
        amount_usd=amount_usd,
        currency=currency,
    )


def extract_rows(response: Any) -> list[Any]:
    """Pull ``properties.rows`` out of a raw response body."""
    try:
        rows = response["properties"]["rows"]
    except (KeyError, TypeError) as e:
        raise NormalizationError(f"Response has no properties.rows: {e}") from e

    if rows is None:
        return []
    if not isinstance(rows, list):
        raise NormalizationError(f"properties.rows must be a list, got {type(rows).__name__}")
    return rows


def normalize_response(
    kind: ReportKind, response: dict[str, Any]
) -> tuple[CostItem, ...] | tuple[CostNamedItem, ...]:
    """
    Normalize a raw Cost Management response into typed records.

    Args:
        kind: Report kind the response belongs to
        response: Parsed JSON body of the query or forecast call

    Returns:
        Tuple of records, in the order the provider returned them

    Raises:
        NormalizationError: If any row cannot be parsed
    """
    try:
        rows = extract_rows(response)
    except NormalizationError as e:
        e.kind = kind
        raise

    records = []
    for index, row in enumerate(rows):
        try:
            records.append(normalize_row(kind, row))
        except ValueError as e:
            raise NormalizationError(
                f"Could not normalize {kind.value} row {index}: {e}", kind=kind, row_index=index
            ) from e

    logger.debug(f"Normalized {len(records)} {kind.value} rows")
    return tuple(records)
