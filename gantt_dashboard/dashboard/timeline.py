"""
Month-based timeline layout for the Gantt chart.

Bounds cover every item's span rounded outward to whole calendar months; each
item with a deadline gets a bar expressed as left offset and width percentages
of the total span, so the renderer only has to position elements.
"""

import datetime
from collections.abc import Iterable
from typing import Protocol

from dateutil.relativedelta import relativedelta

from gantt_dashboard.dashboard.models import BarGeometry, MonthMarker, Timeline, TimelineBounds

DEFAULT_MIN_BAR_WIDTH = 2.0
DEFAULT_EMPTY_WINDOW_MONTHS = 24


class TimelineItem(Protocol):
    id: str

    def timeline_span(self) -> tuple[datetime.date, datetime.date] | None:
        ...


def item_span(item: TimelineItem) -> tuple[datetime.date, datetime.date] | None:
    """Return ``(start, end)`` for an item, or None if it has no deadline."""
    span = item.timeline_span()
    if span is None:
        return None
    start, end = span
    return min(start, end), max(start, end)


def month_start(day: datetime.date) -> datetime.date:
    return day.replace(day=1)


def month_end(day: datetime.date) -> datetime.date:
    return month_start(day) + relativedelta(months=1, days=-1)


def compute_bounds(
    items: Iterable[TimelineItem],
    today: datetime.date = None,
    empty_window_months: int = DEFAULT_EMPTY_WINDOW_MONTHS,
) -> TimelineBounds:
    spans = [span for span in map(item_span, items) if span]
    if spans:
        min_date = month_start(min(start for start, _ in spans))
        max_date = month_end(max(end for _, end in spans))
    else:
        today = today or datetime.date.today()
        months_before = empty_window_months // 2
        min_date = month_start(today) - relativedelta(months=months_before)
        max_date = month_end(min_date + relativedelta(months=max(empty_window_months, 1) - 1))

    return TimelineBounds(min_date, max_date, tuple(_month_markers(min_date, max_date)))


def compute_geometry(
    item: TimelineItem, bounds: TimelineBounds, min_width: float = DEFAULT_MIN_BAR_WIDTH
) -> BarGeometry | None:
    span = item_span(item)
    if span is None:
        return None
    start, end = span
    total_days = bounds.total_days or 1

    left = max(0.0, (start - bounds.min_date).days / total_days * 100)
    # keep room for the minimum width inside the grid
    left = min(left, 100.0 - min_width)
    raw_width = (end - start).days / total_days * 100
    width = max(min_width, min(100.0 - left, raw_width))
    return BarGeometry(left, width)


def build_timeline(
    items: Iterable[TimelineItem],
    today: datetime.date = None,
    min_width: float = DEFAULT_MIN_BAR_WIDTH,
    empty_window_months: int = DEFAULT_EMPTY_WINDOW_MONTHS,
) -> Timeline:
    items = list(items)
    today = today or datetime.date.today()
    bounds = compute_bounds(items, today=today, empty_window_months=empty_window_months)

    bars = {}
    for item in items:
        geometry = compute_geometry(item, bounds, min_width=min_width)
        if geometry is not None:
            bars[item.id] = geometry

    return Timeline(bounds, bars, today_percent=_position(today, bounds.min_date, bounds.max_date))


def _position(day: datetime.date, min_date: datetime.date, max_date: datetime.date) -> float | None:
    if not min_date <= day <= max_date:
        return None
    return round((day - min_date).days / ((max_date - min_date).days or 1) * 100, 4)


def _month_markers(min_date: datetime.date, max_date: datetime.date):
    current = min_date
    while current <= max_date:
        yield MonthMarker(current, current.strftime("%b %Y"), _position(current, min_date, max_date))
        current += relativedelta(months=1)
