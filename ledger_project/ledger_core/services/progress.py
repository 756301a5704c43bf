"""
Report job progress, kept in the Django cache and polled by the client.

State per ticket (merged on every update):
    {"status": "queued|running|done|failed", "progress": 0..100,
     "message": "...", ...extra keys such as "file" or "download_name"}
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.core.cache import cache
from django.utils import timezone

logger = logging.getLogger(__name__)

STATUS_QUEUED = "queued"
STATUS_RUNNING = "running"
STATUS_DONE = "done"
STATUS_FAILED = "failed"

KIND_TRIAL_BALANCE = "tb"
KIND_GENERAL_LEDGER = "gl"


def cache_key(kind, ticket) -> str:
    return f"{kind}:{ticket}"


class ProgressReporter:
    def __init__(self, ticket, kind=KIND_TRIAL_BALANCE, timeout=None):
        self.ticket = str(ticket)
        self.kind = kind
        self.timeout = timeout or getattr(settings, "LEDGER_STATUS_TTL", 6 * 60 * 60)

    @property
    def key(self):
        return cache_key(self.kind, self.ticket)

    def get(self):
        return cache.get(self.key)

    def set_status(self, status, progress, message="", **extra) -> None:
        """Merge the new state into the stored one. Never raises."""
        try:
            state = cache.get(self.key) or {}
            state.update(extra)
            state.update({
                "status": status,
                "progress": max(0, min(100, int(progress))),
                "message": message,
                "updated_at": timezone.now().isoformat(),
            })
            cache.set(self.key, state, self.timeout)
        except Exception:
            logger.warning("could not store progress for %s (%s %s%%)",
                           self.key, status, progress, exc_info=True)

    def queued(self, **extra):
        self.set_status(STATUS_QUEUED, 0, "Queued", **extra)

    def report(self, percent, message):
        """Callback handed to the report builders."""
        self.set_status(STATUS_RUNNING, percent, message)

    def done(self, message="Done", **extra):
        self.set_status(STATUS_DONE, 100, message, **extra)

    def failed(self, message, **extra):
        self.set_status(STATUS_FAILED, 100, message, **extra)
