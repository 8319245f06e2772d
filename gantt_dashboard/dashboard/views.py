"""
Dashboard JSON endpoint.

Serves the aggregated dashboard plus the timeline layout for the Gantt chart.
Filtering and grouping are driven by query parameters:

    ?priority=...&accountable=...&status=...      milestone filters (repeatable)
    ?responsible=...&action_status=...            action filters (repeatable)
    ?sort=deadline                                sort milestones by deadline
    ?group=priority|none                          milestone grouping (default priority)
    ?action_group=responsible|status|none         action grouping (default responsible)
"""
import logging

from django.conf import settings
from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_GET

from gantt_dashboard.dashboard import selection
from gantt_dashboard.dashboard.services import AggregationError, aggregate_dashboard
from gantt_dashboard.dashboard.timeline import build_timeline
from gantt_dashboard.record_store.client import RecordStoreNotConfigured

logger = logging.getLogger(__name__)


@require_GET
def dashboard_data(request: HttpRequest) -> JsonResponse:
    try:
        data = aggregate_dashboard()
    except RecordStoreNotConfigured:
        return JsonResponse(
            {
                "error": "Missing record store credentials",
                "message": "Please set AIRTABLE_TOKEN and AIRTABLE_BASE_ID environment variables",
            },
            status=500,
        )
    except AggregationError as e:
        return JsonResponse(
            {"error": "Failed to fetch data from the record store", "table": e.table, "message": e.message},
            status=502,
        )

    milestones = selection.filter_milestones(
        data.milestones,
        priorities=_selection(request, "priority"),
        accountable=_selection(request, "accountable"),
        statuses=_selection(request, "status"),
    )
    if request.GET.get("sort") == "deadline":
        milestones = selection.sort_by_deadline(milestones)

    actions = selection.sort_by_deadline(
        selection.filter_actions(
            data.actions,
            responsible=_selection(request, "responsible"),
            statuses=_selection(request, "action_status"),
        )
    )

    timeline = build_timeline(
        milestones,
        min_width=settings.DASHBOARD_MIN_BAR_WIDTH,
        empty_window_months=settings.DASHBOARD_EMPTY_WINDOW_MONTHS,
    )
    logger.info(f"Dashboard data - Milestones: {len(milestones)}/{len(data.milestones)}, Actions: {len(actions)}")

    milestone_grouping = request.GET.get("group", "priority")
    action_grouping = request.GET.get("action_group", "responsible")

    payload = data.asdict()
    payload.update(
        {
            "milestones": [milestone.asdict() for milestone in milestones],
            "actions": [action.asdict() for action in actions],
            "timeline": timeline.asdict(),
            "filters": {
                "milestones": selection.milestone_filter_options(data.milestones),
                "actions": selection.action_filter_options(data.actions),
            },
            "groups": {
                "milestones": _group_ids(milestones, milestone_grouping, selection.MILESTONE_GROUPINGS),
                "actions": _group_ids(actions, action_grouping, selection.ACTION_GROUPINGS),
            },
            "summary": selection.summarize_milestones(milestones),
        }
    )
    return JsonResponse(payload)


def _selection(request: HttpRequest, param: str) -> list[str] | None:
    """Values selected for ``param``; None when the parameter is absent, meaning everything."""
    if param not in request.GET:
        return None
    return [value for value in request.GET.getlist(param) if value]


def _group_ids(items, attribute: str, allowed: tuple[str, ...]) -> dict[str, list[str]] | None:
    if attribute not in allowed:
        return None
    return {key: [item.id for item in group] for key, group in selection.group_by(items, attribute).items()}
