import uuid

from django.core.files.storage import default_storage
from django.http import FileResponse, JsonResponse
from django.views.decorators.http import require_GET, require_POST

from .forms import AccountListForm, ReportStartForm
from .models import AccountCode
from .services.accounts import FsFilter, filter_fs
from .services.progress import (KIND_GENERAL_LEDGER, KIND_TRIAL_BALANCE,
                                STATUS_DONE, ProgressReporter)
from .services.utils import natural_sort_key
from .tasks import build_general_ledger_report, build_trial_balance_report

REPORT_TASKS = {
    KIND_TRIAL_BALANCE: build_trial_balance_report,
    KIND_GENERAL_LEDGER: build_general_ledger_report,
}


def _start_report(request, kind):
    form = ReportStartForm(request.POST)
    if not form.is_valid():
        return JsonResponse({"ok": False, "errors": form.errors}, status=400)

    data = form.cleaned_data
    ticket = uuid.uuid4().hex
    # Record the ticket before the worker picks it up so polling never 404s
    ProgressReporter(ticket, kind=kind).queued()
    REPORT_TASKS[kind].delay(
        ticket,
        data["company_id"],
        data["start_account"].strip(),
        data["end_account"].strip(),
        data["start_date"].isoformat(),
        data["end_date"].isoformat(),
        data["fs"],
    )
    return JsonResponse({"ticket": ticket}, status=202)


@require_POST
def start_trial_balance_view(request):
    return _start_report(request, KIND_TRIAL_BALANCE)


@require_POST
def start_general_ledger_view(request):
    return _start_report(request, KIND_GENERAL_LEDGER)


@require_GET
def report_status_view(request, kind, ticket):
    if kind not in REPORT_TASKS:
        return JsonResponse({"status": "missing"}, status=404)
    state = ProgressReporter(ticket, kind=kind).get()
    if state is None:
        return JsonResponse({"status": "missing"}, status=404)
    return JsonResponse(state)


@require_GET
def report_download_view(request, kind, ticket):
    if kind not in REPORT_TASKS:
        return JsonResponse({"error": "Unknown report."}, status=404)
    state = ProgressReporter(ticket, kind=kind).get()
    # Only finished reports with a stored file can be downloaded
    if not state or state.get("status") != STATUS_DONE or not state.get("file"):
        return JsonResponse({"error": "Report not ready."}, status=404)
    if not default_storage.exists(state["file"]):
        return JsonResponse({"error": "Report file has expired."}, status=404)
    return FileResponse(
        default_storage.open(state["file"], "rb"),
        as_attachment=True,
        filename=state.get("download_name") or state["file"].rsplit("/", 1)[-1],
        content_type=state.get("content_type") or "application/octet-stream",
    )


@require_GET
def account_list_view(request):
    form = AccountListForm(request.GET)
    if not form.is_valid():
        return JsonResponse({"ok": False, "errors": form.errors}, status=400)

    company_id = form.cleaned_data.get("company_id") or 0
    fs = (form.cleaned_data.get("fs") or FsFilter.ALL).upper()
    qs = filter_fs(AccountCode.objects.active(company_id), fs).values(
        "acct_code", "acct_desc", "fs")
    # Natural order so dropdowns match the report
    accounts = sorted(
        ({**row, "acct_code": row["acct_code"].strip()} for row in qs),
        key=lambda row: natural_sort_key(row["acct_code"]),
    )
    return JsonResponse({"accounts": accounts})
