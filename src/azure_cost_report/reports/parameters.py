"""
Report parameter models.

Holds the validated input of a single report run: which subscription to query,
which timeframe to cover and how the result should be rendered.
"""

from datetime import date
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from ..providers.base import ParameterError


class Timeframe(Enum):
    """Named date ranges understood by the Cost Management query API."""

    BILLING_MONTH_TO_DATE = "BillingMonthToDate"
    MONTH_TO_DATE = "MonthToDate"
    THE_LAST_BILLING_MONTH = "TheLastBillingMonth"
    THE_LAST_MONTH = "TheLastMonth"
    WEEK_TO_DATE = "WeekToDate"
    CUSTOM = "Custom"


class OutputFormat(Enum):
    """Supported report output formats."""

    CONSOLE = "console"
    JSON = "json"


class ReportParameters(BaseModel):
    """Validated, immutable parameters of one report run."""

    model_config = ConfigDict(frozen=True)

    subscription_id: UUID
    timeframe: Timeframe = Timeframe.BILLING_MONTH_TO_DATE
    custom_from: date | None = None
    custom_to: date | None = None
    output: OutputFormat = OutputFormat.CONSOLE

    @field_validator("timeframe", mode="before")
    @classmethod
    def validate_timeframe(cls, v: Any) -> Timeframe:
        return parse_timeframe(v)

    @model_validator(mode="after")
    def check_custom_range(self):
        """A custom timeframe needs both dates, in order."""
        validate_custom_range(self.timeframe, self.custom_from, self.custom_to)
        return self

    @property
    def is_custom(self) -> bool:
        return self.timeframe == Timeframe.CUSTOM

    @classmethod
    def create(cls, **kwargs: Any) -> "ReportParameters":
        """
        Build parameters, turning any validation failure into a ParameterError.

        Raises:
            ParameterError: If the parameters are incomplete or inconsistent
        """
        try:
            return cls(**kwargs)
        except ValidationError as e:
            messages = "; ".join(_format_error(err) for err in e.errors())
            raise ParameterError(messages) from e


def parse_timeframe(value: Any) -> Timeframe:
    """Map a timeframe name (case-insensitive) to a Timeframe."""
    if isinstance(value, Timeframe):
        return value

    for timeframe in Timeframe:
        if timeframe.value.lower() == str(value).strip().lower():
            return timeframe

    available = ", ".join(t.value for t in Timeframe)
    raise ParameterError(f"Unknown timeframe '{value}'. Must be one of: {available}")


def validate_custom_range(timeframe: Timeframe, custom_from: date | None, custom_to: date | None):
    """
    Check the date range of a custom timeframe.

    Raises:
        ParameterError: If a date is missing or from is after to
    """
    if timeframe != Timeframe.CUSTOM:
        return

    if custom_from is None:
        raise ParameterError("The from date must be specified when the timeframe is Custom")
    if custom_to is None:
        raise ParameterError("The to date must be specified when the timeframe is Custom")
    if custom_from > custom_to:
        raise ParameterError("The from date must be before the to date")


def _format_error(error: dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()))
    message = error.get("msg", "invalid value")
    # pydantic prefixes errors raised inside validators
    message = message.removeprefix("Value error, ")
    return f"{location}: {message}" if location else message
