"""
Cost Management query payload construction.

Each report kind is declared once as a QuerySpec; build_query() turns a spec and
a set of report parameters into the JSON body expected by the query and
forecast endpoints. Everything here is pure: no I/O and no error paths, since
parameters are validated before they reach the builder.
"""

import copy
from dataclasses import dataclass
from enum import Enum
from typing import Any
from uuid import UUID

from ..reports.parameters import ReportParameters, Timeframe

QUERY_ENDPOINT = "query"
FORECAST_ENDPOINT = "forecast"

COST_AGGREGATION = {"totalCost": {"name": "Cost", "function": "Sum"}}
COST_USD_AGGREGATION = {"totalCostUSD": {"name": "CostUSD", "function": "Sum"}}

# Restricts results to first-party charges, excluding marketplace items
PUBLISHER_TYPE_FILTER = {
    "Dimensions": {"Name": "PublisherType", "Operator": "In", "Values": ["azure"]}
}

USAGE_DATE_SORTING = [{"direction": "Ascending", "name": "UsageDate"}]


class ReportKind(Enum):
    """The four report shapes assembled into every report."""

    TIME_SERIES = "time_series"
    FORECAST = "forecast"
    BY_SERVICE = "by_service"
    BY_LOCATION = "by_location"


@dataclass(frozen=True)
class QuerySpec:
    """Payload shape of one report kind."""

    endpoint: str
    granularity: str
    include_usd: bool
    grouping_dimension: str | None = None
    publisher_filter: bool = False
    uses_timeframe: bool = True


QUERY_SPECS: dict[ReportKind, QuerySpec] = {
    ReportKind.TIME_SERIES: QuerySpec(
        endpoint=QUERY_ENDPOINT,
        granularity="Daily",
        include_usd=True,
    ),
    ReportKind.FORECAST: QuerySpec(
        endpoint=FORECAST_ENDPOINT,
        granularity="Daily",
        include_usd=False,
        publisher_filter=True,
        uses_timeframe=False,
    ),
    ReportKind.BY_SERVICE: QuerySpec(
        endpoint=QUERY_ENDPOINT,
        granularity="None",
        include_usd=True,
        grouping_dimension="ServiceName",
        publisher_filter=True,
    ),
    ReportKind.BY_LOCATION: QuerySpec(
        endpoint=QUERY_ENDPOINT,
        granularity="None",
        include_usd=True,
        grouping_dimension="ResourceLocation",
        publisher_filter=True,
    ),
}


def resource_path(subscription_id: UUID | str, kind: ReportKind) -> str:
    """Relative API path for a report kind, scoped to the subscription."""
    endpoint = QUERY_SPECS[kind].endpoint
    return f"/subscriptions/{subscription_id}/providers/Microsoft.CostManagement/{endpoint}"


def build_time_period(params: ReportParameters) -> dict[str, str] | None:
    """Explicit from/to block, only for custom timeframes."""
    if params.timeframe != Timeframe.CUSTOM:
        return None
    return {
        "from": params.custom_from.strftime("%Y-%m-%d"),
        "to": params.custom_to.strftime("%Y-%m-%d"),
    }


def build_query(params: ReportParameters, kind: ReportKind) -> dict[str, Any]:
    """
    Build the Cost Management request body for a report kind.

    Args:
        params: Validated report parameters
        kind: Report kind to build the payload for

    Returns:
        JSON-serializable payload dictionary
    """
    spec = QUERY_SPECS[kind]

    aggregation = copy.deepcopy(COST_AGGREGATION)
    if spec.include_usd:
        aggregation.update(copy.deepcopy(COST_USD_AGGREGATION))

    dataset: dict[str, Any] = {
        "granularity": spec.granularity,
        "aggregation": aggregation,
        "sorting": copy.deepcopy(USAGE_DATE_SORTING),
    }
    if spec.grouping_dimension:
        dataset["grouping"] = [{"type": "Dimension", "name": spec.grouping_dimension}]
    if spec.publisher_filter:
        dataset["filter"] = copy.deepcopy(PUBLISHER_TYPE_FILTER)

    payload: dict[str, Any] = {"type": "ActualCost"}
    if spec.uses_timeframe:
        payload["timeframe"] = params.timeframe.value
        time_period = build_time_period(params)
        if time_period is not None:
            payload["timePeriod"] = time_period
    payload["dataSet"] = dataset

    return payload
