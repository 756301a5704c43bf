"""Eligible-account loading for the trial balance and general ledger."""

from __future__ import annotations

from dataclasses import dataclass

from django.db import models
from django.db.models.functions import Trim

from ..models import AccountCode, AccountMain
from .utils import natural_sort_key


class FsFilter(models.TextChoices):
    ALL = "ALL", "All accounts"
    ACT = "ACT", "Active (not excluded)"
    BS = "BS", "Balance sheet"
    IS = "IS", "Income statement"


@dataclass(frozen=True)
class LedgerAccount:
    acct_code: str
    acct_desc: str
    main_acct_code: str
    main_acct: str
    fs: str
    exclude: int | None


def filter_fs(qs, fs):
    """
    ALL: no filter
    ACT: exclude is 0 or NULL
    BS / IS: fs tag prefix
    """
    if fs == FsFilter.ACT:
        return qs.filter(models.Q(exclude=0) | models.Q(exclude__isnull=True))
    if fs == FsFilter.BS:
        return qs.filter(fs__startswith="BS")
    if fs == FsFilter.IS:
        return qs.filter(fs__startswith="IS")
    return qs


def main_account_names(company_id) -> dict[str, str]:
    names = {}
    rows = AccountMain.objects.for_company(company_id).order_by("pk").values_list(
        "main_acct_code", "main_acct")
    for code, name in rows:
        names.setdefault((code or "").strip(), name)
    return names


def load_accounts(company_id, start_account, end_account, fs=FsFilter.ALL):
    """
    Active accounts with trimmed code in [start_account, end_account],
    in natural account-code order. Empty list when nothing matches.
    """
    if start_account > end_account:
        return []

    qs = (
        AccountCode.objects.active(company_id)
        .annotate(code=Trim("acct_code"))
        .filter(code__gte=start_account, code__lte=end_account)
    )
    qs = filter_fs(qs, fs).order_by("code", "pk")

    main_names = main_account_names(company_id)
    accounts = {}
    for account in qs:
        # cross-company runs see the same code once
        if account.code in accounts:
            continue
        main_code = (account.main_acct_code or "").strip()
        accounts[account.code] = LedgerAccount(
            acct_code=account.code,
            acct_desc=account.acct_desc or "",
            main_acct_code=main_code,
            main_acct=main_names.get(main_code) or account.main_acct or "",
            fs=account.fs or "",
            exclude=account.exclude,
        )
    return sorted(accounts.values(), key=lambda a: natural_sort_key(a.acct_code))
