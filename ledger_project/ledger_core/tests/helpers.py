"""Fixtures shared by the ledger tests (plain functions, no magic)."""

from decimal import Decimal

from ledger_core.models import AccountCode, AccountMain, BeginningBalance, Company
from ledger_core.services.sources import FAMILIES, JOIN_FOREIGN_KEY

FAMILY_BY_KEY = {family.key: family for family in FAMILIES}


def make_company(name="Test Co", slug=None):
    return Company.objects.create(name=name, slug=slug or name.lower().replace(" ", "-"))


def make_account(company, code, desc=None, fs="", exclude=0, active=1,
                 main_acct_code="", main_acct=""):
    return AccountCode.objects.create(
        company=company,
        acct_code=code,
        acct_desc=desc or f"Account {code}",
        fs=fs,
        exclude=exclude,
        active_flag=active,
        main_acct_code=main_acct_code,
        main_acct=main_acct,
    )


def make_main(company, code, name):
    return AccountMain.objects.create(company=company, main_acct_code=code, main_acct=name)


def snapshot(company, code, amount):
    return BeginningBalance.objects.create(
        company=company, account_code=code, amount=Decimal(amount))


def post(company, family_key, when, lines, cancelled=False, number="DOC-1",
         explanation=""):
    """
    Create one header in the given family with (acct_code, debit, credit) lines.
    FK families link the header; the others store its id as text.
    """
    family = FAMILY_BY_KEY[family_key]
    header = family.header_model.objects.create(
        company=company,
        explanation=explanation,
        is_cancel="y" if cancelled else "n",
        **{family.number_field: number, family.date_field: when},
    )
    for code, debit, credit in lines:
        amounts = {"acct_code": code, "debit": Decimal(debit), "credit": Decimal(credit)}
        if family.join == JOIN_FOREIGN_KEY:
            family.detail_model.objects.create(transaction=header, **amounts)
        else:
            family.detail_model.objects.create(transaction_id=str(header.pk), **amounts)
    return header
