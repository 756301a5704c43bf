""" When you run Celery workers, "celery -A ledger_project worker -l info"
    The -A ledger_project means:
    Import ledger_project/__init__.py →
    which exposes celery_app →  now Celery knows what to run.
    Old report files are swept by beat: "celery -A ledger_project beat" """
from __future__ import annotations
import os
from celery import Celery
from celery.schedules import crontab

# ensure Django settings are set for Celery
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "ledger_project.settings")

celery_app = Celery("ledger_project")

# read config from Django settings, using CELERY_ prefix
celery_app.config_from_object("django.conf:settings", namespace="CELERY")

# picks up ledger_core.tasks
celery_app.autodiscover_tasks()

# report jobs are long-running; one at a time per worker process
celery_app.conf.worker_prefetch_multiplier = 1

celery_app.conf.beat_schedule = {
    "prune-report-files": {
        "task": "ledger_core.tasks.prune_report_files",
        "schedule": crontab(minute=15, hour=3),
    },
}
