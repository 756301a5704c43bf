# Celery instance is defined in ledger_project/celery.py
# It creates celery_app object and points it to Django settings
# celery_app becomes the singleton task queue app for the whole project
from .celery import celery_app

# 'from ledger_project import *', only exports celery_app
__all__ = ("celery_app",)
