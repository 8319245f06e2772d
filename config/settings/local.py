from .base import *  # noqa
from .base import env

# GENERAL
# ------------------------------------------------------------------------------
DEBUG = True
SECRET_KEY = env(
    "DJANGO_SECRET_KEY",
    default="5xpjGRDKKXRiO2u1AiwUT6fbl5iM89JkQ9lnMCJEhvW1JQvXdNroF2OMSe60KEcR",
)
ALLOWED_HOSTS = ["localhost", "0.0.0.0", "127.0.0.1"] + env.list("DJANGO_ALLOWED_HOSTS", default=[])

# Gantt Dashboard
# ------------------------------------------------------------------------------
# Fail fast against the record store while developing
RECORD_STORE_RETRY_DELAY = env.float("RECORD_STORE_RETRY_DELAY", default=0.0)
LOGGING["loggers"]["gantt_dashboard"]["level"] = env("DJANGO_LOG_LEVEL", default="DEBUG")  # noqa: F405
