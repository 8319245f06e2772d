import logging

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class DashboardConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "gantt_dashboard.dashboard"
    verbose_name = "Dashboard"

    def ready(self):
        """Validate record store configuration on startup."""
        if not getattr(settings, "RECORD_STORE_TOKEN", None):
            logger.error("AIRTABLE_TOKEN not configured, dashboard data will be unavailable")

        if not getattr(settings, "RECORD_STORE_BASE_ID", None):
            logger.error("AIRTABLE_BASE_ID not configured, dashboard data will be unavailable")
