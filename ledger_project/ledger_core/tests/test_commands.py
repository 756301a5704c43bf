from io import StringIO

import pytest
from django.core.management import CommandError, call_command

from ledger_core.models import (AccountCode, BeginningBalance, Company,
                                GeneralAccountingDetail)
from ledger_core.services.sources import FAMILIES, PostingSource
from ledger_core.services.trial_balance import build_trial_balance


@pytest.mark.django_db
def test_seed_ledger_demo_creates_a_balanced_ledger():
    out = StringIO()
    call_command("seed_ledger_demo", company_name="Seed Co", stdout=out)

    company = Company.objects.get(name="Seed Co")
    assert AccountCode.objects.for_company(company).count() == 10
    assert BeginningBalance.objects.for_company(company).count() == 6
    assert "Demo ledger setup complete!" in out.getvalue()

    # every family got exactly one document
    postings = PostingSource(company.pk).postings("2025-01-01", "2025-12-31")
    assert {p.family for p in postings} == {f.key for f in FAMILIES}
    # text-linked details store the header id as a string
    assert GeneralAccountingDetail.objects.first().transaction_id.isdigit()

    report = build_trial_balance(company.pk, "1001", "6101", "2025-01-01", "2025-12-31")
    assert report.totals.balanced
    assert report.totals.debit == report.totals.credit


@pytest.mark.django_db
def test_seed_ledger_demo_is_idempotent():
    call_command("seed_ledger_demo", company_name="Seed Co", stdout=StringIO())
    out = StringIO()
    call_command("seed_ledger_demo", company_name="Seed Co", stdout=out)
    assert "already exists" in out.getvalue()
    assert Company.objects.filter(name="Seed Co").count() == 1


@pytest.mark.django_db
def test_build_trial_balance_command_prints_rows_and_totals():
    call_command("seed_ledger_demo", company_name="Print Co", stdout=StringIO())
    company = Company.objects.get(name="Print Co")

    out = StringIO()
    call_command(
        "build_trial_balance",
        company=company.pk,
        start_account="1001",
        end_account="6101",
        start_date="2025-03-01",
        end_date="2025-03-31",
        stdout=out,
    )
    output = out.getvalue()
    assert "Retained Earnings" in output
    assert "TOTAL" in output
    assert "10 account(s), balanced" in output


@pytest.mark.django_db
def test_build_trial_balance_command_reports_empty_range():
    company = Company.objects.create(name="Empty Co", slug="empty-co")
    with pytest.raises(CommandError, match="No accounts in range"):
        call_command(
            "build_trial_balance",
            company=company.pk,
            start_account="1000",
            end_account="1999",
            start_date="2025-03-01",
            end_date="2025-03-31",
            stdout=StringIO(),
        )
