"""
Report assembly.

Runs the build -> send -> normalize pipeline once per report kind, concurrently,
and joins the four result sets into a single ReportBundle. Assembly is
all-or-nothing: the first failing pipeline cancels the others and its error
propagates unchanged.
"""

import asyncio
import logging
from typing import Any, Protocol

from ..providers.base import CostItem, CostNamedItem, ReportBundle
from ..providers.query_builder import ReportKind, build_query, resource_path
from ..utils.data_normalizer import normalize_response
from .parameters import ReportParameters

logger = logging.getLogger(__name__)

BUNDLE_FIELDS = {
    ReportKind.TIME_SERIES: "daily_costs",
    ReportKind.FORECAST: "forecasted_costs",
    ReportKind.BY_SERVICE: "costs_by_service",
    ReportKind.BY_LOCATION: "costs_by_location",
}


class CostTransport(Protocol):
    """Anything that can post a query payload and return the JSON response."""

    async def send(self, path: str, payload: dict[str, Any]) -> dict[str, Any]: ...


class ReportAssembler:
    """Collects the four report kinds into one ReportBundle."""

    def __init__(self, client: CostTransport):
        self.client = client

    async def fetch(
        self, params: ReportParameters, kind: ReportKind
    ) -> tuple[CostItem, ...] | tuple[CostNamedItem, ...]:
        """Build, send and normalize a single report kind."""
        path = resource_path(params.subscription_id, kind)
        payload = build_query(params, kind)

        response = await self.client.send(path, payload)
        records = normalize_response(kind, response)

        logger.info(f"Fetched {len(records)} {kind.value} records")
        return records

    async def assemble(self, params: ReportParameters) -> ReportBundle:
        """
        Fetch all report kinds and build the bundle.

        Raises:
            TransportError: If any API call fails
            NormalizationError: If any response cannot be parsed
        """
        kinds = list(BUNDLE_FIELDS)
        tasks = [asyncio.create_task(self.fetch(params, kind)) for kind in kinds]

        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                if not task.done():
                    task.cancel()
            # Let cancelled siblings finish unwinding before the error surfaces
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        return ReportBundle(
            **{BUNDLE_FIELDS[kind]: records for kind, records in zip(kinds, results)}
        )
