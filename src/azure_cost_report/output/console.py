"""
Console table output for cost reports.
"""

import logging
import sys
from datetime import date, timedelta
from decimal import Decimal
from typing import TextIO

import click

from ..providers.base import CostNamedItem, ReportBundle
from ..reports.parameters import ReportParameters

logger = logging.getLogger(__name__)


class Color:
    """ANSI color codes for terminal output."""

    BLUE = "\033[94m"
    CYAN = "\033[96m"
    BOLD = "\033[1m"
    END = "\033[0m"


def format_amount(amount: Decimal, currency: str | None) -> str:
    """Format a cost for display with two decimals and grouping."""
    text = f"{amount:,.2f}"
    return f"{text} {currency}" if currency else text


class ConsoleRenderer:
    """Renders a report as summary lines and plain-text tables."""

    def __init__(self, stream: TextIO | None = None, use_colors: bool | None = None, today: date | None = None):
        self.stream = stream
        self.today = today
        if use_colors is None:
            target = stream or sys.stdout
            use_colors = hasattr(target, "isatty") and target.isatty()
        self.use_colors = use_colors

    def _style(self, text: str, *codes: str) -> str:
        if not self.use_colors:
            return text
        return "".join(codes) + text + Color.END

    def _echo(self, text: str = ""):
        click.echo(text, file=self.stream, color=self.use_colors)

    def render_report(self, params: ReportParameters, report: ReportBundle):
        """Write the full report to the console."""
        currency = report.currency
        today = self.today or date.today()

        self._echo(self._style("Azure Cost Overview", Color.BOLD, Color.BLUE))
        self._echo(f"Subscription: {params.subscription_id}")
        self._echo(f"Timeframe:    {self._describe_period(params)}")
        self._echo()

        summary = [
            ("Total in period", report.total_cost),
            ("Today", report.cost_on(today)),
            ("Yesterday", report.cost_on(today - timedelta(days=1))),
            ("Last 7 days", report.last_days_cost(7, today)),
            ("Forecast", report.forecast_total),
        ]
        self._echo(self._style("Summary", Color.BOLD))
        self._render_table(
            ["", "Cost"],
            [[label, format_amount(amount, currency)] for label, amount in summary],
        )

        self._render_named("By service", report.costs_by_service)
        self._render_named("By location", report.costs_by_location)

        self._echo()
        self._echo(self._style("Daily costs", Color.BOLD))
        if not report.daily_costs:
            self._echo("  (no cost data)")
        else:
            self._render_table(
                ["Date", "Cost", "Cost (USD)"],
                [
                    [
                        item.date.isoformat(),
                        format_amount(item.amount, item.currency),
                        format_amount(item.amount_usd, "USD"),
                    ]
                    for item in report.daily_costs
                ],
            )

    def _describe_period(self, params: ReportParameters) -> str:
        if params.is_custom:
            return f"{params.custom_from.isoformat()} to {params.custom_to.isoformat()}"
        return params.timeframe.value

    def _render_named(self, title: str, items: tuple[CostNamedItem, ...]):
        self._echo()
        self._echo(self._style(title, Color.BOLD))
        if not items:
            self._echo("  (no cost data)")
            return

        ordered = sorted(items, key=lambda item: item.amount, reverse=True)
        self._render_table(
            ["Name", "Cost", "Cost (USD)"],
            [
                [
                    item.name or "(unassigned)",
                    format_amount(item.amount, item.currency),
                    format_amount(item.amount_usd, "USD"),
                ]
                for item in ordered
            ],
        )

    def _render_table(self, headers: list[str], rows: list[list[str]]):
        widths = [
            max(len(str(cell)) for cell in column) for column in zip(headers, *rows)
        ]

        # First column left-aligned, amounts right-aligned
        def format_row(cells):
            parts = [str(cells[0]).ljust(widths[0])]
            parts += [str(cell).rjust(width) for cell, width in zip(cells[1:], widths[1:])]
            return "  " + "  ".join(parts)

        self._echo(self._style(format_row(headers), Color.CYAN))
        self._echo("  " + "  ".join("-" * width for width in widths))
        for row in rows:
            self._echo(format_row(row))
