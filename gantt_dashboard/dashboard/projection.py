"""
Projection of raw record store rows into dashboard domain objects.

A single RecordProjector handles both Milestones and Actions; which fields are
read is decided entirely by the FieldMap, so renamed columns only need a row in
the Config table.
"""

import dataclasses
import datetime
import logging
from collections.abc import Iterable

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

from gantt_dashboard.dashboard.field_map import FieldMap
from gantt_dashboard.dashboard.models import CURRENT_ROLE, UNASSIGNED, UNKNOWN, UNTITLED, Action, Milestone
from gantt_dashboard.dashboard.references import display_text, resolve_reference
from gantt_dashboard.record_store.models import RawRecord

logger = logging.getLogger(__name__)

# Look-back used to draw a bar for milestones that have no start date
ESTIMATED_DURATION = relativedelta(months=3)

LOOSE_TRUTHY_VALUES = {"true", "1"}


@dataclasses.dataclass
class References:
    """Reference maps built for one aggregation request."""

    people: dict[str, str] = dataclasses.field(default_factory=dict)
    priorities: dict[str, str] = dataclasses.field(default_factory=dict)
    notes: dict[str, str] = dataclasses.field(default_factory=dict)


class RecordProjector:
    def __init__(self, field_map: FieldMap, references: References | None = None, loose_truthy: bool = False):
        """
        Args:
            field_map: Resolved field names for this request
            references: People / Priorities / Notes id -> display name maps
            loose_truthy: Accept "true" and 1 as well as boolean True for the Director View flag
        """
        self.field_map = field_map
        self.references = references or References()
        self.loose_truthy = loose_truthy

    def project_milestone(self, record: RawRecord) -> Milestone:
        fm = self.field_map
        deadline = parse_date(record.get(fm.milestone_deadline_field), record.id)
        start_date = parse_date(record.get(fm.milestone_start_field), record.id)
        has_start_date = start_date is not None
        if not has_start_date and deadline:
            start_date = deadline - ESTIMATED_DURATION

        return Milestone(
            id=record.id,
            name=display_text(record.get(fm.milestone_name_field)) or UNTITLED,
            priority=self._milestone_priority(record),
            status=display_text(record.get(fm.milestone_status_field)) or UNKNOWN,
            accountable=resolve_reference(
                record.get(fm.milestone_accountable_field), self.references.people, missing=UNASSIGNED
            ),
            deadline=deadline,
            start_date=start_date,
            has_start_date=has_start_date,
            activity_ids=_as_id_tuple(record.get(fm.milestone_activities_field)),
        )

    def project_action(self, record: RawRecord) -> Action | None:
        """Project an action, or return None when it is not in the current Director View."""
        fm = self.field_map
        role = display_text(record.get(fm.action_tpw_role_field))
        director_view = self.is_truthy(record.get(fm.action_director_view_field))
        if role != CURRENT_ROLE or not director_view:
            return None

        return Action(
            id=record.id,
            name=display_text(record.get(fm.action_name_field)) or UNTITLED,
            responsible=resolve_reference(
                record.get(fm.action_responsible_field), self.references.people, missing=UNASSIGNED
            ),
            status=display_text(record.get(fm.action_status_field)) or UNKNOWN,
            role=role,
            director_view=director_view,
            deadline=parse_date(record.get(fm.action_deadline_field), record.id),
            notes=resolve_reference(record.get(fm.action_notes_field), self.references.notes, missing=""),
        )

    def project_milestones(self, records: Iterable[RawRecord]) -> list[Milestone]:
        return [self.project_milestone(record) for record in records]

    def project_actions(self, records: Iterable[RawRecord]) -> list[Action]:
        actions = []
        total = 0
        for record in records:
            total += 1
            action = self.project_action(record)
            if action is not None:
                actions.append(action)
        logger.info(f"{len(actions)} of {total} actions are current and visible in the Director View")
        return actions

    def is_truthy(self, value) -> bool:
        if value is True:
            return True
        if not self.loose_truthy or isinstance(value, bool):
            return False
        if isinstance(value, str):
            return value.strip().lower() in LOOSE_TRUTHY_VALUES
        return isinstance(value, int) and value == 1

    def _milestone_priority(self, record: RawRecord) -> str:
        # The name field is usually a lookup of the linked priority's name, so
        # its values are already display names.
        priority_name = display_text(record.get(self.field_map.milestone_priority_name_field))
        if priority_name:
            return priority_name
        return resolve_reference(record.get(self.field_map.milestone_priority_id_field), self.references.priorities)


def parse_date(value, record_id: str = None) -> datetime.date | None:
    """Parse an ISO date or datetime cell value; anything unparseable is treated as missing."""
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return isoparse(value.strip()).date()
    except ValueError:
        logger.debug(f"Ignoring unparseable date {value!r} on record {record_id}")
        return None


def _as_id_tuple(value) -> tuple[str, ...]:
    if isinstance(value, (list, tuple)):
        return tuple(str(item) for item in value if item)
    if isinstance(value, str) and value:
        return (value,)
    return ()
