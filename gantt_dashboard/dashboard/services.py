"""
Dashboard aggregation.

Builds everything the dashboard renders from the record store in one pass:

    Config -> FieldMap -> Milestones / Actions / People / Priorities / Notes
           -> reference maps -> projected milestones and actions

All state is built per call; nothing is cached between requests.
"""

import asyncio
import logging

import sentry_sdk
from asgiref.sync import async_to_sync
from django.conf import settings

from gantt_dashboard.dashboard.field_map import FieldMap, resolve_field_map
from gantt_dashboard.dashboard.models import DashboardData
from gantt_dashboard.dashboard.projection import RecordProjector, References
from gantt_dashboard.dashboard.references import build_reference_map
from gantt_dashboard.record_store.client import RecordStoreClient
from gantt_dashboard.record_store.models import RawRecord

logger = logging.getLogger(__name__)

CONFIG_TABLE = "Config"
MILESTONES_TABLE = "Milestones"
ACTIONS_TABLE = "Actions"


class AggregationError(Exception):
    """A required table could not be fetched; the underlying error is chained as ``__cause__``."""

    def __init__(self, table: str, message: str):
        super().__init__(f"Failed to fetch {table}: {message}")
        self.table = table
        self.message = message


class AggregationTimeout(AggregationError):
    pass


class DashboardAggregator:
    def __init__(self, client: RecordStoreClient, loose_truthy: bool = False, timeout: float | None = None):
        """
        Args:
            client: Record store client; the caller owns its lifecycle
            loose_truthy: Accept "true"/1 as Director View values (see RecordProjector)
            timeout: Seconds allowed for the whole aggregation; None waits indefinitely
        """
        self.client = client
        self.loose_truthy = loose_truthy
        self.timeout = timeout

    async def aggregate(self) -> DashboardData:
        if not self.timeout:
            return await self._aggregate()
        try:
            return await asyncio.wait_for(self._aggregate(), self.timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"Dashboard aggregation timed out after {self.timeout}s")
            raise AggregationTimeout("dashboard", f"timed out after {self.timeout}s") from e

    async def _aggregate(self) -> DashboardData:
        field_map = resolve_field_map(await self._fetch_optional(CONFIG_TABLE))

        required = {"milestones": MILESTONES_TABLE, "actions": ACTIONS_TABLE}
        optional = {
            "people": field_map.people_table,
            "priorities": field_map.priorities_table,
            "notes": field_map.notes_table,
        }
        tables = {**required, **optional}
        results = await asyncio.gather(
            *(self.client.fetch_all(table) for table in tables.values()), return_exceptions=True
        )
        fetched = dict(zip(tables, results))

        for key, table in required.items():
            if isinstance(fetched[key], BaseException):
                self._raise_required(table, fetched[key])
        for key, table in optional.items():
            if isinstance(fetched[key], BaseException):
                fetched[key] = self._degrade_optional(table, fetched[key])

        references = build_references(field_map, fetched["people"], fetched["priorities"], fetched["notes"])
        projector = RecordProjector(field_map, references, loose_truthy=self.loose_truthy)

        return DashboardData(
            config=field_map.asdict(),
            milestones=projector.project_milestones(fetched["milestones"]),
            actions=projector.project_actions(fetched["actions"]),
            people_map=references.people,
            priorities_map=references.priorities,
            notes_map=references.notes,
        )

    async def _fetch_optional(self, table: str) -> list[RawRecord]:
        try:
            return await self.client.fetch_all(table)
        except Exception as e:
            return self._degrade_optional(table, e)

    def _degrade_optional(self, table: str, error: BaseException) -> list[RawRecord]:
        if not isinstance(error, Exception):
            raise error
        logger.warning(f"Optional table {table!r} unavailable, continuing without it: {error}")
        sentry_sdk.capture_exception(error)
        return []

    def _raise_required(self, table: str, error: BaseException):
        if not isinstance(error, Exception):
            raise error
        logger.error(f"Required table {table!r} could not be fetched: {error}", exc_info=error)
        sentry_sdk.capture_exception(error)
        raise AggregationError(table, str(error)) from error


def build_references(
    field_map: FieldMap, people: list[RawRecord], priorities: list[RawRecord], notes: list[RawRecord]
) -> References:
    return References(
        people=build_reference_map(people, field_map.people_name_field),
        priorities=build_reference_map(priorities, field_map.priority_name_field),
        notes=build_reference_map(notes, field_map.notes_text_field),
    )


async def aaggregate_dashboard(client: RecordStoreClient | None = None) -> DashboardData:
    """Aggregate the dashboard using settings for credentials, tolerance and timeout."""
    loose_truthy = settings.DASHBOARD_DIRECTOR_VIEW_LOOSE_TRUTHY
    timeout = settings.DASHBOARD_AGGREGATION_TIMEOUT
    if client is not None:
        return await DashboardAggregator(client, loose_truthy, timeout).aggregate()

    async with RecordStoreClient.from_settings() as client:
        return await DashboardAggregator(client, loose_truthy, timeout).aggregate()


aggregate_dashboard = async_to_sync(aaggregate_dashboard)
