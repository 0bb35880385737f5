"""
Core cost record models and error types for Azure cost reporting.

Defines the record shapes every normalized Cost Management response is mapped
into, the immutable report bundle handed to renderers, and the exception
hierarchy shared by the query, transport and normalization layers.
"""

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

logger = logging.getLogger(__name__)


class CostItem(BaseModel):
    """One day's cost in a time series."""

    model_config = ConfigDict(frozen=True)

    date: date
    amount: Decimal
    amount_usd: Decimal
    currency: str

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        """Currency code is kept exactly as the provider returned it."""
        if not v or not v.strip():
            raise ValueError("Currency must be specified")
        return v


class CostNamedItem(BaseModel):
    """One aggregate bucket (service or location) in a grouped breakdown."""

    model_config = ConfigDict(frozen=True)

    name: str
    amount: Decimal
    amount_usd: Decimal
    currency: str

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        """Currency code is kept exactly as the provider returned it."""
        if not v or not v.strip():
            raise ValueError("Currency must be specified")
        return v


class ReportBundle(BaseModel):
    """
    The four normalized result sets of a single report run.

    Built once by the report assembler and handed to exactly one renderer.
    """

    model_config = ConfigDict(frozen=True)

    daily_costs: tuple[CostItem, ...] = ()
    forecasted_costs: tuple[CostItem, ...] = ()
    costs_by_service: tuple[CostNamedItem, ...] = ()
    costs_by_location: tuple[CostNamedItem, ...] = ()

    @property
    def currency(self) -> str | None:
        """Currency of the actual costs, falling back to the forecast."""
        items = self.daily_costs + self.forecasted_costs
        return items[0].currency if items else None

    @property
    def total_cost(self) -> Decimal:
        """Sum of the actual daily costs in the billing currency."""
        return sum((item.amount for item in self.daily_costs), Decimal("0"))

    @property
    def total_cost_usd(self) -> Decimal:
        """Sum of the actual daily costs in USD."""
        return sum((item.amount_usd for item in self.daily_costs), Decimal("0"))

    @property
    def forecast_total(self) -> Decimal:
        """Sum of the forecasted daily costs."""
        return sum((item.amount for item in self.forecasted_costs), Decimal("0"))

    def cost_on(self, day: date) -> Decimal:
        """Actual cost recorded for a single day (zero when absent)."""
        return sum(
            (item.amount for item in self.daily_costs if item.date == day), Decimal("0")
        )

    def cost_between(self, start: date, end: date) -> Decimal:
        """Actual cost for the inclusive range start..end."""
        return sum(
            (item.amount for item in self.daily_costs if start <= item.date <= end),
            Decimal("0"),
        )

    def last_days_cost(self, days: int, today: date | None = None) -> Decimal:
        """Actual cost over the trailing ``days`` days ending today."""
        today = today or date.today()
        return self.cost_between(today - timedelta(days=days - 1), today)


class CostReportError(Exception):
    """Base exception for cost report errors."""

    pass


class ParameterError(CostReportError, ValueError):
    """Invalid report parameters, detected before any network call."""

    pass


class ConfigurationError(CostReportError):
    """Configuration-related errors."""

    pass


class CredentialError(ConfigurationError):
    """No usable identity or subscription could be resolved."""

    pass


class TransportError(CostReportError):
    """The Cost Management API call failed at the HTTP layer."""

    def __init__(self, message: str, status_code: int | None = None, path: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.path = path


class NormalizationError(CostReportError):
    """A response row could not be parsed into the expected record shape."""

    def __init__(self, message: str, kind: Any = None, row_index: int | None = None):
        super().__init__(message)
        self.kind = kind
        self.row_index = row_index
