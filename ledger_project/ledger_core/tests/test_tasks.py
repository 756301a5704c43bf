import datetime
import json
import os
from unittest import mock

import pytest
from celery.exceptions import SoftTimeLimitExceeded
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.utils import timezone

from ledger_core.services.progress import ProgressReporter
from ledger_core.services.sinks import JsonReportSink
from ledger_core.tasks import (build_general_ledger_report,
                               build_trial_balance_report, prune_report_files)

from .helpers import make_account, make_company, post, snapshot


@pytest.fixture
def media(settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path)
    return tmp_path


@pytest.fixture
def ledger(db):
    company = make_company("Acme Trading", "acme")
    make_account(company, "1001", "Cash")
    make_account(company, "5001", "Sales", fs="IS-REV")
    snapshot(company, "1001", "100.00")
    post(company, "general", datetime.date(2025, 3, 2),
         [("1001", "25.00", "0"), ("5001", "0", "25.00")])
    return company


def state(ticket, kind="tb"):
    return ProgressReporter(ticket, kind=kind).get()


def test_trial_balance_job_stores_report(ledger, media):
    path = build_trial_balance_report(
        "t-1", ledger.pk, "1001", "5001", "2025-03-01", "2025-03-31", "ALL")

    result = state("t-1")
    assert result["status"] == "done"
    assert result["progress"] == 100
    assert result["file"] == path
    assert result["download_name"] == "TrialBalance_1001-5001_2025-03-01_to_2025-03-31.json"

    with default_storage.open(path) as fh:
        document = json.load(fh)
    assert document["meta"]["company"]["name"] == "Acme Trading"
    rows = document["report"]["rows"]
    assert [r["acct_code"] for r in rows] == ["1001", "5001"]
    assert rows[0]["ending"] == "125.00"


def test_general_ledger_job_uses_its_own_key(ledger, media):
    build_general_ledger_report(
        "g-1", ledger.pk, "1001", "5001", "2025-03-01", "2025-03-31")
    assert state("g-1", kind="gl")["status"] == "done"
    assert state("g-1", kind="gl")["download_name"].startswith("GeneralLedger_")
    assert state("g-1") is None


def test_no_accounts_marks_failed_without_raising(ledger, media):
    assert build_trial_balance_report(
        "t-2", ledger.pk, "7000", "7999", "2025-03-01", "2025-03-31") is None
    result = state("t-2")
    assert result["status"] == "failed"
    assert result["message"] == "No accounts in range."


def test_invalid_input_marks_failed_without_raising(ledger, media):
    build_trial_balance_report(
        "t-3", ledger.pk, "1001", "5001", "2025-04-01", "2025-03-01")
    result = state("t-3")
    assert result["status"] == "failed"
    assert "after end date" in result["message"]


def test_unexpected_error_is_recorded_and_reraised(ledger, media, caplog):
    with mock.patch("ledger_core.services.trial_balance.build_trial_balance",
                    side_effect=RuntimeError("disk on fire")):
        with pytest.raises(RuntimeError):
            build_trial_balance_report(
                "t-4", ledger.pk, "1001", "5001", "2025-03-01", "2025-03-31")

    result = state("t-4")
    assert result["status"] == "failed"
    assert result["message"] == "Error: disk on fire"
    assert "t-4" in caplog.text


def test_soft_time_limit_marks_job_failed(ledger, media):
    assert build_trial_balance_report.soft_time_limit < build_trial_balance_report.time_limit
    assert build_general_ledger_report.soft_time_limit < build_general_ledger_report.time_limit

    with mock.patch("ledger_core.services.trial_balance.build_trial_balance",
                    side_effect=SoftTimeLimitExceeded()):
        with pytest.raises(SoftTimeLimitExceeded):
            build_trial_balance_report(
                "t-7", ledger.pk, "1001", "5001", "2025-03-01", "2025-03-31")

    result = state("t-7")
    assert result["status"] == "failed"
    assert result["message"].startswith("Error:")


def test_progress_store_failure_never_raises(caplog):
    reporter = ProgressReporter("t-5")
    with mock.patch("ledger_core.services.progress.cache.set",
                    side_effect=ConnectionError("cache down")):
        reporter.set_status("running", 50, "Halfway")
    assert "could not store progress" in caplog.text


def test_progress_state_is_merged():
    reporter = ProgressReporter("t-6")
    reporter.queued(requested_by="alice")
    reporter.report(140, "Overflowing")
    result = reporter.get()
    assert result["status"] == "running"
    assert result["progress"] == 100
    assert result["requested_by"] == "alice"


def test_prune_removes_only_expired_reports(media, settings):
    settings.LEDGER_REPORT_RETENTION_DAYS = 2
    old_path = default_storage.save("reports/tb_old.json", ContentFile(b"{}"))
    fresh_path = default_storage.save("reports/tb_fresh.json", ContentFile(b"{}"))
    three_days_ago = (timezone.now() - datetime.timedelta(days=3)).timestamp()
    os.utime(default_storage.path(old_path), (three_days_ago, three_days_ago))

    assert prune_report_files() == 1
    assert not default_storage.exists(old_path)
    assert default_storage.exists(fresh_path)


def test_prune_without_report_directory_is_a_no_op(media):
    assert prune_report_files() == 0


def test_report_is_written_when_pruning_fails(media, caplog):
    sink = JsonReportSink()
    with mock.patch.object(JsonReportSink, "prune", side_effect=OSError("read-only")):
        target = sink.write("tb", {"rows": []}, {"ticket": "t-8"})

    assert target["path"] == "reports/tb_t-8.json"
    assert default_storage.exists(target["path"])
    assert "could not prune old reports" in caplog.text
