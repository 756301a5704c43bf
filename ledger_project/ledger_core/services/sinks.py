"""
Report sinks: consume finished report data and store a rendered file.

A sink is any class with write(kind, payload, meta) -> dict holding at
least "path" (storage name) and "download_name". The class is chosen by
settings.LEDGER_REPORT_SINK; the default stores JSON.
"""

from __future__ import annotations

import json
import logging
from datetime import timedelta

from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.core.serializers.json import DjangoJSONEncoder
from django.utils import timezone
from django.utils.module_loading import import_string

logger = logging.getLogger(__name__)

DOWNLOAD_PREFIXES = {
    "tb": "TrialBalance",
    "gl": "GeneralLedger",
}


def download_name(kind, meta, extension) -> str:
    prefix = DOWNLOAD_PREFIXES.get(kind, "Report")
    request = meta.get("request", {})
    return (
        f"{prefix}_{request.get('start_account')}-{request.get('end_account')}_"
        f"{request.get('start_date')}_to_{request.get('end_date')}.{extension}"
    )


class JsonReportSink:
    extension = "json"
    content_type = "application/json"

    def __init__(self, storage=None, directory=None, retention_days=None):
        self.storage = storage or default_storage
        self.directory = directory or getattr(settings, "LEDGER_REPORT_DIR", "reports")
        if retention_days is None:
            retention_days = getattr(settings, "LEDGER_REPORT_RETENTION_DAYS", 2)
        self.retention = timedelta(days=retention_days)

    def render(self, kind, payload, meta) -> bytes:
        document = {"kind": kind, "meta": meta, "report": payload}
        return json.dumps(document, cls=DjangoJSONEncoder, indent=2).encode("utf-8")

    def write(self, kind, payload, meta) -> dict:
        # a failed cleanup never blocks the write
        try:
            self.prune()
        except Exception:
            logger.warning("could not prune old reports in %s", self.directory,
                           exc_info=True)
        name = f"{self.directory}/{kind}_{meta.get('ticket', 'report')}.{self.extension}"
        if self.storage.exists(name):
            self.storage.delete(name)
        path = self.storage.save(name, ContentFile(self.render(kind, payload, meta)))
        return {
            "path": path,
            "download_name": download_name(kind, meta, self.extension),
            "content_type": self.content_type,
        }

    def prune(self) -> int:
        """Delete stored reports older than the retention window."""
        if not self.storage.exists(self.directory):
            return 0
        cutoff = timezone.now() - self.retention
        removed = 0
        _, files = self.storage.listdir(self.directory)
        for filename in files:
            name = f"{self.directory}/{filename}"
            if self.storage.get_modified_time(name) < cutoff:
                self.storage.delete(name)
                removed += 1
        if removed:
            logger.info("pruned %s old report file(s) from %s", removed, self.directory)
        return removed


def get_report_sink(path=None):
    path = path or getattr(
        settings, "LEDGER_REPORT_SINK", "ledger_core.services.sinks.JsonReportSink")
    return import_string(path)()
