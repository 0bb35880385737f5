"""
Structured JSON output for cost reports.
"""

from datetime import date
from typing import Any, TextIO

import click
import simplejson

from ..providers.base import CostItem, CostNamedItem, ReportBundle
from ..reports.parameters import ReportParameters


def _json_default(value: Any):
    if isinstance(value, date):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _cost_item(item: CostItem) -> dict[str, Any]:
    return {
        "date": item.date,
        "cost": item.amount,
        "costUsd": item.amount_usd,
        "currency": item.currency,
    }


def _named_item(item: CostNamedItem) -> dict[str, Any]:
    return {
        "name": item.name,
        "cost": item.amount,
        "costUsd": item.amount_usd,
        "currency": item.currency,
    }


def report_to_dict(params: ReportParameters, report: ReportBundle) -> dict[str, Any]:
    """Machine-readable representation of a report."""
    return {
        "subscriptionId": str(params.subscription_id),
        "timeframe": params.timeframe.value,
        "from": params.custom_from if params.is_custom else None,
        "to": params.custom_to if params.is_custom else None,
        "totals": {
            "currency": report.currency,
            "cost": report.total_cost,
            "costUsd": report.total_cost_usd,
            "forecast": report.forecast_total,
        },
        "dailyCosts": [_cost_item(item) for item in report.daily_costs],
        "forecastedCosts": [_cost_item(item) for item in report.forecasted_costs],
        "costsByService": [_named_item(item) for item in report.costs_by_service],
        "costsByLocation": [_named_item(item) for item in report.costs_by_location],
    }


class JsonRenderer:
    """Writes the report as an indented JSON document."""

    def __init__(self, stream: TextIO | None = None, indent: int = 2):
        self.stream = stream
        self.indent = indent

    def render_report(self, params: ReportParameters, report: ReportBundle):
        click.echo(
            simplejson.dumps(
                report_to_dict(params, report),
                indent=self.indent,
                default=_json_default,
                use_decimal=True,
            ),
            file=self.stream,
        )
