"""
Print the aggregated dashboard from the record store.

Usage:
    python manage.py dashboard_summary
    python manage.py dashboard_summary --sort-deadline
    python manage.py dashboard_summary --json
"""

import json

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from gantt_dashboard.dashboard import selection
from gantt_dashboard.dashboard.services import AggregationError, aggregate_dashboard
from gantt_dashboard.dashboard.timeline import build_timeline
from gantt_dashboard.record_store.client import RecordStoreNotConfigured


class Command(BaseCommand):
    help = "Fetch milestones and actions from the record store and print a summary"

    def add_arguments(self, parser):
        parser.add_argument("--json", action="store_true", help="Output the aggregated dashboard as JSON")
        parser.add_argument("--sort-deadline", action="store_true", help="Sort milestones by deadline")

    def handle(self, *args, **options):
        try:
            data = aggregate_dashboard()
        except RecordStoreNotConfigured as e:
            raise CommandError("Set AIRTABLE_TOKEN and AIRTABLE_BASE_ID to read the record store") from e
        except AggregationError as e:
            raise CommandError(str(e)) from e

        milestones = data.milestones
        if options["sort_deadline"]:
            milestones = selection.sort_by_deadline(milestones)
        timeline = build_timeline(
            milestones,
            min_width=settings.DASHBOARD_MIN_BAR_WIDTH,
            empty_window_months=settings.DASHBOARD_EMPTY_WINDOW_MONTHS,
        )

        if options["json"]:
            payload = data.asdict()
            payload["timeline"] = timeline.asdict()
            self.stdout.write(json.dumps(payload, indent=2))
            return

        months = timeline.bounds.months
        self.stdout.write(f"Timeline: {months[0].label} - {months[-1].label} ({len(months)} months)")

        for priority, group in selection.group_by(milestones, "priority").items():
            self.stdout.write(self.style.MIGRATE_HEADING(priority))
            for milestone in group:
                deadline = milestone.deadline.isoformat() if milestone.deadline else "no deadline"
                estimated = "" if milestone.has_start_date else " (estimated start)"
                self.stdout.write(
                    f"  {milestone.name} [{milestone.status}] {milestone.accountable}, due {deadline}{estimated}"
                )

        summary = selection.summarize_milestones(milestones)
        self.stdout.write(
            self.style.SUCCESS(
                f"{summary['total']} milestones: {summary['complete']} complete, "
                f"{summary['inProgress']} in progress, {summary['notStarted']} not started"
            )
        )

        self.stdout.write(self.style.MIGRATE_HEADING(f"Current actions ({len(data.actions)})"))
        for responsible, group in selection.group_by(selection.sort_by_deadline(data.actions), "responsible").items():
            self.stdout.write(f"  {responsible}")
            for action in group:
                deadline = action.deadline.isoformat() if action.deadline else "no deadline"
                self.stdout.write(f"    - {action.name} [{action.status}] due {deadline}")
