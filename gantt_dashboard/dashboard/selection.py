"""
Filtering, grouping and sorting of projected milestones and actions.

Filter chip options are always taken from the unfiltered items so that a value
the user toggled off can still be offered back.
"""

import datetime
from collections.abc import Collection, Iterable, Sequence
from typing import TypeVar

from gantt_dashboard.dashboard.models import UNKNOWN, Action, Milestone, MilestoneStatus

T = TypeVar("T", Milestone, Action)

MILESTONE_GROUPINGS = ("priority",)
ACTION_GROUPINGS = ("responsible", "status")


def sort_by_deadline(items: Iterable[T]) -> list[T]:
    """Sort by deadline ascending; items without a deadline keep their order at the end."""
    return sorted(items, key=lambda item: (item.deadline is None, item.deadline or datetime.date.min))


def group_by(items: Iterable[T], attribute: str) -> dict[str, list[T]]:
    groups = {}
    for item in items:
        key = getattr(item, attribute) or UNKNOWN
        groups.setdefault(key, []).append(item)
    return groups


def distinct_values(items: Iterable[T], attribute: str) -> list[str]:
    values = {}
    for item in items:
        value = getattr(item, attribute)
        if value:
            values.setdefault(value, None)
    return list(values)


def filter_milestones(
    milestones: Iterable[Milestone],
    priorities: Collection[str] | None = None,
    accountable: Collection[str] | None = None,
    statuses: Collection[str] | None = None,
) -> list[Milestone]:
    """Keep milestones matching every selection; a selection of None means all values."""
    return [
        milestone
        for milestone in milestones
        if _selected(milestone.priority, priorities)
        and _selected(milestone.accountable, accountable)
        and _selected(milestone.status, statuses)
    ]


def filter_actions(
    actions: Iterable[Action],
    responsible: Collection[str] | None = None,
    statuses: Collection[str] | None = None,
) -> list[Action]:
    return [
        action
        for action in actions
        if _selected(action.responsible, responsible) and _selected(action.status, statuses)
    ]


def milestone_filter_options(milestones: Sequence[Milestone]) -> dict[str, list[str]]:
    return {
        "priorities": distinct_values(milestones, "priority"),
        "statuses": distinct_values(milestones, "status"),
        "accountable": distinct_values(milestones, "accountable"),
    }


def action_filter_options(actions: Sequence[Action]) -> dict[str, list[str]]:
    return {
        "responsible": distinct_values(actions, "responsible"),
        "statuses": distinct_values(actions, "status"),
    }


def summarize_milestones(milestones: Sequence[Milestone]) -> dict[str, int]:
    tracked = (MilestoneStatus.complete, MilestoneStatus.in_progress, MilestoneStatus.not_started)
    counts = {status: 0 for status in tracked}
    for milestone in milestones:
        if milestone.status in counts:
            counts[milestone.status] += 1
    return {
        "total": len(milestones),
        "complete": counts[MilestoneStatus.complete],
        "inProgress": counts[MilestoneStatus.in_progress],
        "notStarted": counts[MilestoneStatus.not_started],
    }


def _selected(value: str, selection: Collection[str] | None) -> bool:
    return selection is None or value in selection
