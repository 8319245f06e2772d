"""
Field name mapping for record store tables.

Columns in the record store can be renamed by its owners, so every field the
dashboard reads is looked up through a FieldMap. Overrides come from the
store's own ``Config`` table, a list of ``{Key, Value}`` rows:

    Key                    | Value
    -----------------------|------------
    milestone_name_field   | Title
    people_table           | Staff

Keys that are not overridden fall back to DEFAULT_FIELDS.
"""

import logging
from collections.abc import Iterable, Mapping

from gantt_dashboard.record_store.models import RawRecord

logger = logging.getLogger(__name__)

CONFIG_KEY_FIELD = "Key"
CONFIG_VALUE_FIELD = "Value"

DEFAULT_FIELDS = {
    # Milestones table
    "milestone_name_field": "Name",
    "milestone_deadline_field": "Deadline",
    "milestone_priority_id_field": "Priority area",
    "milestone_priority_name_field": "Priority",
    "milestone_activities_field": "Activities",
    "milestone_start_field": "Start Date",
    "milestone_accountable_field": "Accountable",
    "milestone_status_field": "Status",
    # Actions table
    "action_name_field": "Name",
    "action_responsible_field": "Responsible",
    "action_deadline_field": "Deadline",
    "action_status_field": "Status",
    "action_tpw_role_field": "Current Status (TPW Role)",
    "action_director_view_field": "Director View",
    "action_notes_field": "Notes",
    # Reference tables
    "people_table": "People",
    "people_name_field": "Name",
    "priorities_table": "Priorities",
    "priority_name_field": "Name",
    "notes_table": "Notes",
    "notes_text_field": "Notes",
}


class FieldMap(Mapping):
    """Read-only mapping of semantic key to the field label to read.

    Overrides win over DEFAULT_FIELDS. Every key in DEFAULT_FIELDS always resolves.
    """

    def __init__(self, overrides: Mapping[str, str] | None = None):
        self.overrides = dict(overrides or {})
        self._fields = {**DEFAULT_FIELDS, **self.overrides}

    def __getitem__(self, key: str) -> str:
        return self._fields[key]

    def __iter__(self):
        return iter(self._fields)

    def __len__(self):
        return len(self._fields)

    def __getattr__(self, key: str) -> str:
        # only reached when normal attribute lookup fails
        try:
            return self.__dict__["_fields"][key]
        except KeyError:
            raise AttributeError(key) from None

    def is_overridden(self, key: str) -> bool:
        return key in self.overrides

    def asdict(self) -> dict[str, str]:
        return dict(self._fields)

    def __repr__(self):
        return f"FieldMap(overrides={self.overrides!r})"


def resolve_field_map(config_records: Iterable[RawRecord | Mapping] | None) -> FieldMap:
    """Build a FieldMap from the rows of the Config table.

    Rows may be RawRecords or plain ``{Key, Value}`` dicts. Rows missing either
    field are skipped; a missing or empty table gives an all-defaults map.
    """
    overrides = {}
    for record in config_records or []:
        fields = record.fields if isinstance(record, RawRecord) else record
        if not isinstance(fields, Mapping):
            continue
        key = _clean(fields.get(CONFIG_KEY_FIELD))
        value = _clean(fields.get(CONFIG_VALUE_FIELD))
        if not key or not value:
            continue
        if key not in DEFAULT_FIELDS:
            logger.debug(f"Config key {key!r} is not used by the dashboard")
        overrides[key] = value

    if overrides:
        logger.info(f"Resolved field map with {len(overrides)} override(s): {sorted(overrides)}")
    return FieldMap(overrides)


def _clean(value) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
        if value is None:
            return None
    return str(value).strip() or None
