import dataclasses
import datetime
from enum import StrEnum

UNKNOWN = "Unknown"
UNASSIGNED = "Unassigned"
UNTITLED = "Untitled"
CURRENT_ROLE = "Current"


class MilestoneStatus(StrEnum):
    not_started = "Not started"
    in_progress = "In progress"
    complete = "Complete"
    on_hold = "On hold"
    cancelled = "Cancelled"


def _isoformat(value: datetime.date | None) -> str | None:
    return value.isoformat() if value else None


@dataclasses.dataclass(frozen=True)
class Milestone:
    id: str
    name: str
    priority: str
    status: str
    accountable: str
    deadline: datetime.date = None
    start_date: datetime.date = None
    has_start_date: bool = False
    activity_ids: tuple[str, ...] = ()

    def timeline_span(self) -> tuple[datetime.date, datetime.date] | None:
        if not self.deadline:
            return None
        return self.start_date or self.deadline, self.deadline

    def asdict(self):
        return {
            "id": self.id,
            "name": self.name,
            "priority": self.priority,
            "status": self.status,
            "accountable": self.accountable,
            "deadline": _isoformat(self.deadline),
            "startDate": _isoformat(self.start_date),
            "hasStartDate": self.has_start_date,
            "activityIds": list(self.activity_ids),
        }


@dataclasses.dataclass(frozen=True)
class Action:
    id: str
    name: str
    responsible: str
    status: str
    role: str = ""
    director_view: bool = False
    deadline: datetime.date = None
    notes: str = ""

    def timeline_span(self) -> tuple[datetime.date, datetime.date] | None:
        if not self.deadline:
            return None
        return self.deadline, self.deadline

    def notes_preview(self, limit: int = 100) -> tuple[str, bool]:
        """Return the notes truncated to ``limit`` characters and whether anything was cut."""
        if len(self.notes) <= limit:
            return self.notes, False
        return self.notes[:limit].rstrip() + "...", True

    def asdict(self):
        preview, truncated = self.notes_preview()
        return {
            "id": self.id,
            "name": self.name,
            "responsible": self.responsible,
            "status": self.status,
            "role": self.role,
            "directorView": self.director_view,
            "deadline": _isoformat(self.deadline),
            "notes": self.notes,
            "notesPreview": preview,
            "notesTruncated": truncated,
        }


@dataclasses.dataclass(frozen=True)
class MonthMarker:
    start: datetime.date
    label: str
    left_percent: float

    def asdict(self):
        return {"start": self.start.isoformat(), "label": self.label, "leftPercent": self.left_percent}


@dataclasses.dataclass(frozen=True)
class TimelineBounds:
    min_date: datetime.date
    max_date: datetime.date
    months: tuple[MonthMarker, ...]

    @property
    def total_days(self) -> int:
        return (self.max_date - self.min_date).days

    def asdict(self):
        return {
            "minDate": self.min_date.isoformat(),
            "maxDate": self.max_date.isoformat(),
            "months": [month.asdict() for month in self.months],
        }


@dataclasses.dataclass(frozen=True)
class BarGeometry:
    left_percent: float
    width_percent: float

    def asdict(self):
        return {"leftPercent": self.left_percent, "widthPercent": self.width_percent}


@dataclasses.dataclass(frozen=True)
class Timeline:
    bounds: TimelineBounds
    bars: dict[str, BarGeometry]
    today_percent: float = None

    def asdict(self):
        return {
            "bounds": self.bounds.asdict(),
            "bars": {item_id: bar.asdict() for item_id, bar in self.bars.items()},
            "todayPercent": self.today_percent,
        }


@dataclasses.dataclass
class DashboardData:
    config: dict[str, str]
    milestones: list[Milestone]
    actions: list[Action]
    people_map: dict[str, str]
    priorities_map: dict[str, str]
    notes_map: dict[str, str] = dataclasses.field(default_factory=dict)

    def asdict(self):
        return {
            "config": self.config,
            "milestones": [milestone.asdict() for milestone in self.milestones],
            "actions": [action.asdict() for action in self.actions],
            "peopleMap": self.people_map,
            "prioritiesMap": self.priorities_map,
        }
