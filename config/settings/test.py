"""
With these settings, tests run faster.
"""

from .base import *  # noqa
from .base import env

# GENERAL
# ------------------------------------------------------------------------------
SECRET_KEY = env(
    "DJANGO_SECRET_KEY",
    default="G11wtQ0L0YWp13SJhMLlKlFrCsTuNm6s5Q6Q2o0U2E75hf0kRoV5hiK86yye0Tar",
)
TEST_RUNNER = "django.test.runner.DiscoverRunner"
ALLOWED_HOSTS = ["testserver"]

# Gantt Dashboard
# ------------------------------------------------------------------------------
RECORD_STORE_API_URL = "https://records.example.com/v0"
RECORD_STORE_TOKEN = "test-token"
RECORD_STORE_BASE_ID = "appTestBase"
RECORD_STORE_RETRY_DELAY = 0.0
DASHBOARD_AGGREGATION_TIMEOUT = 10.0
DASHBOARD_DIRECTOR_VIEW_LOOSE_TRUTHY = False
