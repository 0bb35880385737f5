"""
Pytest configuration and shared fixtures for azure-cost-report tests.

This module provides common fixtures used across all test modules: report
parameters, canned Cost Management responses and a fake HTTP transport.
"""

import json
from collections.abc import Callable
from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from typing import Any
from uuid import UUID

import httpx
import pytest

from azure_cost_report.providers.azure import AzureCostClient
from azure_cost_report.providers.base import CostItem, CostNamedItem, ReportBundle
from azure_cost_report.reports.parameters import ReportParameters, Timeframe

SUBSCRIPTION_ID = UUID("3f2504e0-4f89-11d3-9a0c-0305e82c3301")


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")


class FakeCredential:
    """Stand-in for an azure.identity credential."""

    def __init__(self, token: str = "test-token"):
        self.token = token
        self.calls = 0

    def get_token(self, *scopes, **kwargs):
        self.calls += 1
        return SimpleNamespace(token=self.token, expires_on=0)


@pytest.fixture
def fake_credential() -> FakeCredential:
    return FakeCredential()


@pytest.fixture
def subscription_id() -> UUID:
    return SUBSCRIPTION_ID


@pytest.fixture
def default_params() -> ReportParameters:
    """Parameters using a named timeframe."""
    return ReportParameters(subscription_id=SUBSCRIPTION_ID, timeframe=Timeframe.MONTH_TO_DATE)


@pytest.fixture
def custom_params() -> ReportParameters:
    """Parameters using a custom date range."""
    return ReportParameters(
        subscription_id=SUBSCRIPTION_ID,
        timeframe=Timeframe.CUSTOM,
        custom_from=date(2024, 1, 1),
        custom_to=date(2024, 1, 31),
    )


# Sample response fixtures
@pytest.fixture
def time_series_response() -> dict[str, Any]:
    return {
        "properties": {
            "rows": [
                ["12.5", "10.0", "20240115", "USD"],
                [7.25, 6.5, 20240116, "USD"],
            ]
        }
    }


@pytest.fixture
def forecast_response() -> dict[str, Any]:
    return {
        "properties": {
            "rows": [
                ["7.25", "20240301", "Forecast", "EUR"],
                [8.0, 20240302, "Forecast", "EUR"],
            ]
        }
    }


@pytest.fixture
def service_response() -> dict[str, Any]:
    return {
        "properties": {
            "rows": [
                ["100.0", "90.0", "Storage", "USD"],
                [40.5, 38.25, "Virtual Machines", "USD"],
            ]
        }
    }


@pytest.fixture
def location_response() -> dict[str, Any]:
    return {
        "properties": {
            "rows": [
                [120.0, 110.0, "EU West", "USD"],
                [20.5, 18.25, "US East", "USD"],
            ]
        }
    }


@pytest.fixture
def responses_by_kind(
    time_series_response, forecast_response, service_response, location_response
) -> dict[str, dict[str, Any]]:
    """Canned responses keyed by the report kind a request targets."""
    return {
        "time_series": time_series_response,
        "forecast": forecast_response,
        "by_service": service_response,
        "by_location": location_response,
    }


def classify_request(request: httpx.Request) -> str:
    """Identify the report kind of a captured request."""
    if request.url.path.endswith("/forecast"):
        return "forecast"

    body = json.loads(request.content)
    grouping = body["dataSet"].get("grouping")
    if not grouping:
        return "time_series"
    return "by_service" if grouping[0]["name"] == "ServiceName" else "by_location"


@pytest.fixture
def classify() -> Callable[[httpx.Request], str]:
    """Expose classify_request to tests that build their own handlers."""
    return classify_request


@pytest.fixture
def make_client() -> Callable[..., AzureCostClient]:
    """Factory for clients backed by an httpx.MockTransport."""

    def _make(handler: Callable[[httpx.Request], httpx.Response], **kwargs) -> AzureCostClient:
        return AzureCostClient(FakeCredential(), transport=httpx.MockTransport(handler), **kwargs)

    return _make


@pytest.fixture
def routing_handler(responses_by_kind):
    """MockTransport handler answering each report kind with its canned response."""
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json=responses_by_kind[classify_request(request)])

    handler.captured = captured
    return handler


@pytest.fixture
def sample_bundle() -> ReportBundle:
    """A small, fully populated report bundle."""
    return ReportBundle(
        daily_costs=(
            CostItem(date=date(2024, 1, 14), amount=Decimal("5.00"), amount_usd=Decimal("4.50"), currency="USD"),
            CostItem(date=date(2024, 1, 15), amount=Decimal("12.5"), amount_usd=Decimal("10.0"), currency="USD"),
        ),
        forecasted_costs=(
            CostItem(date=date(2024, 1, 16), amount=Decimal("7.25"), amount_usd=Decimal("7.25"), currency="USD"),
        ),
        costs_by_service=(
            CostNamedItem(name="Storage", amount=Decimal("2.5"), amount_usd=Decimal("2.0"), currency="USD"),
            CostNamedItem(name="Virtual Machines", amount=Decimal("15.0"), amount_usd=Decimal("12.5"), currency="USD"),
        ),
        costs_by_location=(
            CostNamedItem(name="EU West", amount=Decimal("17.5"), amount_usd=Decimal("14.5"), currency="USD"),
        ),
    )
