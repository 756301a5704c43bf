import logging

from celery import shared_task
from django.conf import settings

from .exceptions import InputError, NoAccountsInRange
from .services.progress import (KIND_GENERAL_LEDGER, KIND_TRIAL_BALANCE,
                                ProgressReporter)

logger = logging.getLogger(__name__)

# Hard limit per report job (one job per ticket)
REPORT_TIME_LIMIT = getattr(settings, "LEDGER_REPORT_TIMEOUT", 900)
# Soft limit raises inside the job first so the ticket ends as "failed"
REPORT_SOFT_TIME_LIMIT = max(REPORT_TIME_LIMIT - 30, 1)


def company_header(company_id):
    # import models lazily to avoid circular imports at module import time
    from .models import Company

    company = Company.objects.filter(pk=company_id).first() if company_id > 0 else None
    return company.report_header() if company else {}


def run_report(kind, ticket, builder, params):
    """
    Shared job body:
    - progress goes to the cache under <kind>:<ticket>
    - user-facing failures (no accounts, bad input) end as "failed", not raised
    - anything else is logged, marked "failed" and re-raised for the queue
    """
    from .services.sinks import get_report_sink

    progress = ProgressReporter(ticket, kind=kind)
    progress.set_status("running", 1, "Loading")
    try:
        report = builder(report=progress.report, **params)

        progress.set_status("running", 82, "Rendering")
        meta = {
            "ticket": str(ticket),
            "request": report.request.as_dict(),
            "company": company_header(report.request.company_id),
        }
        target = get_report_sink().write(kind, report.as_dict(), meta)

        progress.done(
            "Done",
            file=target["path"],
            download_name=target["download_name"],
            content_type=target.get("content_type"),
        )
        return target["path"]
    except NoAccountsInRange:
        progress.failed("No accounts in range.")
    except InputError as exc:
        progress.failed(str(exc))
    except Exception as exc:
        logger.exception("%s report %s failed", kind, ticket)
        progress.failed(f"Error: {exc}")
        raise
    return None


# register this function as a Celery task
@shared_task(time_limit=REPORT_TIME_LIMIT, soft_time_limit=REPORT_SOFT_TIME_LIMIT)
def build_trial_balance_report(ticket, company_id, start_account, end_account,
                               start_date, end_date, fs="ALL"):
    from .services.trial_balance import build_trial_balance

    return run_report(
        KIND_TRIAL_BALANCE,
        ticket,
        build_trial_balance,
        {
            "company_id": company_id,
            "start_account": start_account,
            "end_account": end_account,
            "start_date": start_date,
            "end_date": end_date,
            "fs": fs,
        },
    )


@shared_task(time_limit=REPORT_TIME_LIMIT, soft_time_limit=REPORT_SOFT_TIME_LIMIT)
def build_general_ledger_report(ticket, company_id, start_account, end_account,
                                start_date, end_date, fs="ALL"):
    from .services.general_ledger import build_general_ledger

    return run_report(
        KIND_GENERAL_LEDGER,
        ticket,
        build_general_ledger,
        {
            "company_id": company_id,
            "start_account": start_account,
            "end_account": end_account,
            "start_date": start_date,
            "end_date": end_date,
            "fs": fs,
        },
    )


@shared_task
def prune_report_files():
    """Periodic cleanup of stored reports past their retention window."""
    from .services.sinks import get_report_sink

    return get_report_sink().prune()
