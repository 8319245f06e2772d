from collections.abc import Iterable

from gantt_dashboard.dashboard.models import UNKNOWN
from gantt_dashboard.record_store.models import RawRecord


def build_reference_map(records: Iterable[RawRecord], name_field: str) -> dict[str, str]:
    """Map each record id to the display name held in ``name_field``."""
    return {record.id: display_text(record.get(name_field)) or UNKNOWN for record in records}


def resolve_reference(value, reference_map: dict[str, str], missing: str = UNKNOWN) -> str:
    """Resolve a field that is either a linked record or free text.

    Linked record fields hold a list of record ids; only the first is used and
    an id absent from ``reference_map`` resolves to "Unknown". A plain string is
    used as is. Anything else resolves to ``missing``. A list whose first element
    is not an id (an expanded collaborator object, a nested lookup) resolves to
    "Unknown".
    """
    if isinstance(value, (list, tuple)):
        if not value:
            return missing
        if not isinstance(value[0], str):
            return UNKNOWN
        return reference_map.get(value[0], UNKNOWN)
    if isinstance(value, str) and value.strip():
        return value
    return missing


def display_text(value) -> str:
    """Render a cell value as text; lookup arrays contribute their first element."""
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None or isinstance(value, (dict, bool)):
        return ""
    return str(value).strip()
