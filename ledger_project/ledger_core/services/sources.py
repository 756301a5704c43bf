"""
TRANSACTION SOURCE ADAPTER

Reads (acct_code, debit, credit) postings out of the five transaction
families. Each family is described by a TransactionFamily record and
queried by the same routine; results are unioned, never joined, so an
account can receive postings from several families in one window.

RULES:
- READ-ONLY: no writes, ever
- header date column within [date_from, date_to] inclusive
- TRIM(detail.acct_code) within [lo, hi] inclusive (lo > hi -> nothing)
- cancelled headers (is_cancel = 'y') are ignored
- company_id <= 0 means "all companies"
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from decimal import Decimal
from typing import NamedTuple

from django.db import DEFAULT_DB_ALIAS, DatabaseError, connections, transaction
from django.db.models import BigIntegerField, Sum
from django.db.models.functions import Cast, Trim

from ..exceptions import DataSourceError
from ..models import (CashDisbursement, CashDisbursementDetail, CashPurchase,
                      CashPurchaseDetail, CashReceipt, CashReceiptDetail,
                      CashSales, CashSalesDetail, GeneralAccounting,
                      GeneralAccountingDetail)
from .utils import q2

logger = logging.getLogger(__name__)

# How a detail row points at its header
JOIN_FOREIGN_KEY = "fk"  # integer FK column -> header.id
JOIN_CAST_TEXT = "cast"  # text column cast to bigint -> header.id


@dataclass(frozen=True)
class TransactionFamily:
    key: str
    label: str
    category: str  # one-letter tag used on general ledger lines
    header_model: type
    detail_model: type
    date_field: str
    number_field: str
    join: str

    def headers(self, company_id, date_from, date_to):
        return (
            self.header_model.objects.for_company(company_id)
            .live()
            .dated_between(self.date_field, date_from, date_to)
        )

    def details(self, headers):
        """Detail rows belonging to `headers`, with a `header_key` annotation."""
        qs = self.detail_model.objects.all()
        if self.join == JOIN_FOREIGN_KEY:
            qs = qs.filter(transaction__in=headers.values("pk"))
            return qs.annotate(header_key=Cast("transaction", BigIntegerField()))
        qs = qs.annotate(header_key=Cast("transaction_id", BigIntegerField()))
        return qs.filter(header_key__in=headers.values("pk"))


FAMILIES = (
    TransactionFamily(
        key="general",
        label="General journal",
        category="G",
        header_model=GeneralAccounting,
        detail_model=GeneralAccountingDetail,
        date_field="gen_acct_date",
        number_field="ga_no",
        join=JOIN_CAST_TEXT,
    ),
    TransactionFamily(
        key="disbursement",
        label="Cash disbursement",
        category="D",
        header_model=CashDisbursement,
        detail_model=CashDisbursementDetail,
        date_field="disburse_date",
        number_field="cd_no",
        join=JOIN_FOREIGN_KEY,
    ),
    TransactionFamily(
        key="receipts",
        label="Cash receipts",
        category="R",
        header_model=CashReceipt,
        detail_model=CashReceiptDetail,
        date_field="receipt_date",
        number_field="cr_no",
        join=JOIN_CAST_TEXT,
    ),
    TransactionFamily(
        key="purchase",
        label="Cash purchase",
        category="P",
        header_model=CashPurchase,
        detail_model=CashPurchaseDetail,
        date_field="purchase_date",
        number_field="cp_no",
        join=JOIN_FOREIGN_KEY,
    ),
    TransactionFamily(
        key="sales",
        label="Cash sales",
        category="S",
        header_model=CashSales,
        detail_model=CashSalesDetail,
        date_field="sales_date",
        number_field="cs_no",
        join=JOIN_CAST_TEXT,
    ),
)


class Posting(NamedTuple):
    acct_code: str
    debit: Decimal
    credit: Decimal
    family: str


class PostingLine(NamedTuple):
    """Per-document postings for one account (general ledger detail)."""
    acct_code: str
    category: str
    batch_no: int
    reference_no: str
    post_date: object
    comment: str
    debit: Decimal
    credit: Decimal


def is_inverted(account_range) -> bool:
    if account_range is None:
        return False
    lo, hi = account_range
    return lo > hi


@contextmanager
def consistent_snapshot(using=DEFAULT_DB_ALIAS):
    """
    Run all report reads in one read-only transaction.
    On PostgreSQL the outermost transaction is switched to REPEATABLE READ
    so every window query sees the same data.
    """
    connection = connections[using]
    outermost = not connection.in_atomic_block
    with transaction.atomic(using=using):
        if outermost and connection.vendor == "postgresql":
            with connection.cursor() as cursor:
                cursor.execute(
                    "SET TRANSACTION ISOLATION LEVEL REPEATABLE READ READ ONLY")
        yield


class PostingSource:
    """Normalized access to the five transaction families for one tenant."""

    def __init__(self, company_id=0, families=FAMILIES):
        self.company_id = int(company_id or 0)
        self.families = tuple(families)

    def _scoped_details(self, family, date_from, date_to, account_range):
        headers = family.headers(self.company_id, date_from, date_to)
        details = family.details(headers).annotate(code=Trim("acct_code"))
        if account_range is not None:
            lo, hi = account_range
            details = details.filter(code__gte=lo, code__lte=hi)
        return details

    def _run(self, family, date_from, date_to, account_range, query):
        try:
            return list(query())
        except DatabaseError as exc:
            logger.error(
                "%s query failed (company=%s, %s..%s, accounts=%s)",
                family.label, self.company_id, date_from, date_to, account_range,
            )
            raise DataSourceError(
                family.label, date_from, date_to, account_range) from exc

    def postings(self, date_from, date_to, account_range=None):
        """
        One Posting per (family, acct_code) with summed debit/credit.
        The same code may appear once per family.
        """
        if is_inverted(account_range):
            return []

        postings = []
        for family in self.families:
            def query(family=family):
                return (
                    self._scoped_details(family, date_from, date_to, account_range)
                    .order_by()
                    .values("code")
                    .annotate(
                        debit_sum=Sum("debit"),
                        credit_sum=Sum("credit"),
                    )
                )

            for row in self._run(family, date_from, date_to, account_range, query):
                postings.append(
                    Posting(
                        acct_code=row["code"],
                        debit=q2(row["debit_sum"]),
                        credit=q2(row["credit_sum"]),
                        family=family.key,
                    )
                )
        return postings

    def lines(self, date_from, date_to, account_range=None):
        """
        Per (document, acct_code) posting lines with the header's date,
        number and explanation, for general ledger detail.
        """
        if is_inverted(account_range):
            return []

        lines = []
        for family in self.families:
            def header_query(family=family):
                return family.headers(self.company_id, date_from, date_to).values_list(
                    "pk", family.date_field, family.number_field, "explanation"
                )

            def detail_query(family=family):
                return (
                    self._scoped_details(family, date_from, date_to, account_range)
                    .order_by()
                    .values("header_key", "code")
                    .annotate(
                        debit_sum=Sum("debit"),
                        credit_sum=Sum("credit"),
                    )
                )

            headers = {
                pk: (post_date, number, explanation)
                for pk, post_date, number, explanation in self._run(
                    family, date_from, date_to, account_range, header_query)
            }
            for row in self._run(family, date_from, date_to, account_range, detail_query):
                header = headers.get(row["header_key"])
                if header is None:
                    continue
                post_date, number, explanation = header
                lines.append(
                    PostingLine(
                        acct_code=row["code"],
                        category=family.category,
                        batch_no=row["header_key"],
                        reference_no=number or "",
                        post_date=post_date,
                        comment=explanation or "",
                        debit=q2(row["debit_sum"]),
                        credit=q2(row["credit_sum"]),
                    )
                )
        return lines
