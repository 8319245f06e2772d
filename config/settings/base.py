"""
Base settings to build other settings files upon.
"""
from pathlib import Path

import environ

BASE_DIR = Path(__file__).resolve(strict=True).parent.parent.parent
# gantt_dashboard/
APPS_DIR = BASE_DIR / "gantt_dashboard"

env = environ.Env()

env.read_env(str(BASE_DIR / ".env"))

# GENERAL
# ------------------------------------------------------------------------------
DEBUG = env.bool("DJANGO_DEBUG", False)
TIME_ZONE = "UTC"
LANGUAGE_CODE = "en-us"
USE_I18N = True
USE_TZ = True

# DATABASES
# ------------------------------------------------------------------------------
# The dashboard keeps no state of its own; the database only backs Django's contrib apps.
DATABASES = {
    "default": env.db(
        "DATABASE_URL",
        default=f"sqlite:///{BASE_DIR / 'db.sqlite3'}",
    ),
}
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# URLS
# ------------------------------------------------------------------------------
ROOT_URLCONF = "config.urls"
WSGI_APPLICATION = "config.wsgi.application"

# APPS
# ------------------------------------------------------------------------------
DJANGO_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.staticfiles",
]
THIRD_PARTY_APPS = []

LOCAL_APPS = [
    "gantt_dashboard.dashboard",
]
INSTALLED_APPS = DJANGO_APPS + THIRD_PARTY_APPS + LOCAL_APPS

# MIDDLEWARE
# ------------------------------------------------------------------------------
MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

# STATIC
# ------------------------------------------------------------------------------
STATIC_ROOT = str(BASE_DIR / "staticfiles")
STATIC_URL = "/static/"

# TEMPLATES
# ------------------------------------------------------------------------------
TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
            ],
        },
    }
]

# SECURITY
# ------------------------------------------------------------------------------
X_FRAME_OPTIONS = "DENY"

# LOGGING
# ------------------------------------------------------------------------------
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "%(levelname)s %(asctime)s %(name)s %(message)s",
        },
    },
    "handlers": {
        "console": {
            "level": "DEBUG",
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
        "null": {
            "class": "logging.NullHandler",
        },
    },
    "root": {"level": "INFO", "handlers": ["console"]},
    "loggers": {
        "gantt_dashboard": {
            "handlers": ["console"],
            "level": env("DJANGO_LOG_LEVEL", default="INFO"),
            "propagate": False,
        },
        "django.security.DisallowedHost": {
            "handlers": ["null"],
            "propagate": False,
        },
    },
}

# ------------------------------------------------------------------------------
# Gantt Dashboard Settings...
# ------------------------------------------------------------------------------
# Record store (Airtable-compatible API)
RECORD_STORE_API_URL = env("RECORD_STORE_API_URL", default="https://api.airtable.com/v0")
RECORD_STORE_TOKEN = env("AIRTABLE_TOKEN", default="")
RECORD_STORE_BASE_ID = env("AIRTABLE_BASE_ID", default="")
RECORD_STORE_TIMEOUT = env.float("RECORD_STORE_TIMEOUT", default=30.0)
RECORD_STORE_PAGE_SIZE = env.int("RECORD_STORE_PAGE_SIZE", default=100)
RECORD_STORE_MAX_RETRIES = env.int("RECORD_STORE_MAX_RETRIES", default=1)
RECORD_STORE_RETRY_DELAY = env.float("RECORD_STORE_RETRY_DELAY", default=0.5)

# Aggregation
DASHBOARD_AGGREGATION_TIMEOUT = env.float("DASHBOARD_AGGREGATION_TIMEOUT", default=60.0)
# Also accept "true" / 1 as Director View values, not only checkbox True
DASHBOARD_DIRECTOR_VIEW_LOOSE_TRUTHY = env.bool("DASHBOARD_DIRECTOR_VIEW_LOOSE_TRUTHY", default=False)

# Timeline layout
DASHBOARD_MIN_BAR_WIDTH = env.float("DASHBOARD_MIN_BAR_WIDTH", default=2.0)
DASHBOARD_EMPTY_WINDOW_MONTHS = env.int("DASHBOARD_EMPTY_WINDOW_MONTHS", default=24)
