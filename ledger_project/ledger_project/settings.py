"""
Django settings for ledger_project.

Everything environment-specific is read through django-environ,
optionally from a `.env` file next to manage.py (or one level up).
"""

from __future__ import annotations

import sys
from pathlib import Path

import environ

# -----------------------------------------
# BASE DIRECTORY
# -----------------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent

# -----------------------------------------
# TEST MODE DETECTION
# -----------------------------------------
TESTING = "test" in sys.argv or "pytest" in sys.modules

# -----------------------------------------
# ENV (django-environ)
# -----------------------------------------
env = environ.Env(
    DEBUG=(bool, True),
    SECRET_KEY=(str, ""),
    TIME_ZONE=(str, "UTC"),
    ALLOWED_HOSTS=(list, ["localhost", "127.0.0.1"]),
    DATABASE_URL=(str, f"sqlite:///{BASE_DIR / 'db.sqlite3'}"),
    CACHE_URL=(str, "locmemcache://"),
    LOG_LEVEL=(str, "INFO"),
    # Celery
    CELERY_BROKER_URL=(str, "redis://localhost:6379/0"),
    CELERY_RESULT_BACKEND=(str, ""),
    CELERY_TASK_ALWAYS_EAGER=(bool, TESTING),
    # Ledger baseline (frozen go-live snapshot)
    LEDGER_RE_CODE=(str, "4031"),
    LEDGER_RE_THRESHOLD=(int, 4031),
    LEDGER_BASELINE_AS_OF=(str, "2024-12-31"),
    LEDGER_FIRST_FLOW_YEAR=(int, 2025),
    # Report jobs
    LEDGER_REPORT_TIMEOUT=(int, 900),
    LEDGER_STATUS_TTL=(int, 6 * 60 * 60),
    LEDGER_REPORT_DIR=(str, "reports"),
    LEDGER_REPORT_RETENTION_DAYS=(int, 2),
    LEDGER_REPORT_SINK=(str, "ledger_core.services.sinks.JsonReportSink"),
    MEDIA_ROOT=(str, str(BASE_DIR / "storage")),
)

# -----------------------------------------
# LOAD .env
# -----------------------------------------
env_file_1 = BASE_DIR / ".env"
env_file_2 = BASE_DIR.parent / ".env"

if env_file_1.exists():
    env.read_env(str(env_file_1))
elif env_file_2.exists():
    env.read_env(str(env_file_2))

# -----------------------------------------
# CORE SECURITY
# -----------------------------------------
SECRET_KEY = (env("SECRET_KEY") or "dev-insecure-change-me").strip()
DEBUG = env.bool("DEBUG")
ALLOWED_HOSTS = env.list("ALLOWED_HOSTS")

# -----------------------------------------
# I18N / TZ
# -----------------------------------------
LANGUAGE_CODE = "en-us"
TIME_ZONE = (env("TIME_ZONE") or "UTC").strip()
USE_I18N = True
USE_TZ = True

# -----------------------------------------
# INSTALLED APPS
# -----------------------------------------
INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "ledger_core",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "ledger_project.urls"

# required for Django admin
TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    }
]

# -----------------------------------------
# DATABASE / CACHE
# -----------------------------------------
DATABASES = {
    "default": env.db("DATABASE_URL"),
}

# Report progress state lives in the cache (polled by the client)
CACHES = {
    "default": env.cache("CACHE_URL"),
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

STATIC_URL = "static/"
MEDIA_ROOT = env("MEDIA_ROOT")

# -----------------------------------------
# CELERY
# -----------------------------------------
CELERY_BROKER_URL = env("CELERY_BROKER_URL")
CELERY_RESULT_BACKEND = env("CELERY_RESULT_BACKEND") or None
CELERY_TASK_ALWAYS_EAGER = env.bool("CELERY_TASK_ALWAYS_EAGER")
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_TASK_SERIALIZER = "json"
CELERY_ACCEPT_CONTENT = ["json"]

# -----------------------------------------
# LEDGER BASELINE
# -----------------------------------------
# Must match the frozen beginning_balance data loaded at go-live
LEDGER_BASELINE = {
    "RE_CODE": env("LEDGER_RE_CODE"),
    "RE_THRESHOLD": env.int("LEDGER_RE_THRESHOLD"),
    "BASELINE_AS_OF": env("LEDGER_BASELINE_AS_OF"),
    "FIRST_FLOW_YEAR": env.int("LEDGER_FIRST_FLOW_YEAR"),
}

# -----------------------------------------
# REPORT JOBS
# -----------------------------------------
LEDGER_REPORT_TIMEOUT = env.int("LEDGER_REPORT_TIMEOUT")
LEDGER_STATUS_TTL = env.int("LEDGER_STATUS_TTL")
LEDGER_REPORT_DIR = env("LEDGER_REPORT_DIR")
LEDGER_REPORT_RETENTION_DAYS = env.int("LEDGER_REPORT_RETENTION_DAYS")
LEDGER_REPORT_SINK = env("LEDGER_REPORT_SINK")

# -----------------------------------------
# LOGGING
# -----------------------------------------
LOG_LEVEL = (env("LOG_LEVEL") or "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        # propagates to the root console handler
        "ledger_core": {
            "level": LOG_LEVEL,
        },
    },
}
