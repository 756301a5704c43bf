"""
OPENING BALANCE RESOLVER

Beginning balance of an account as of the report start date.

Balance sheet accounts carry forward:
    opening = snapshot(acct) + net(fiscal_year_start .. start - 1)

Profit & loss accounts reset every January 1:
    start == Jan 1                          -> 0.00 (no query at all)
    start in the baseline year, on or
    before the cutover, not in January      -> snapshot(acct) - net(start .. cutover)
    otherwise                               -> net(Jan 1 of start year .. start - 1)

Every window is aggregated once for the whole account range and then
looked up per account; a window nobody asks for is never queried.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from decimal import Decimal

from django.db.models import Sum
from django.db.models.functions import Trim

from ..models import BeginningBalance
from .aggregator import BalanceAggregator
from .baseline import LedgerBaseline
from .utils import ZERO, coerce_date, day_before, is_new_year, q2, start_of_year

logger = logging.getLogger(__name__)


def load_baseline_snapshot(company_id, account_range=None) -> dict[str, Decimal]:
    """
    BeginningBalance amounts keyed by trimmed account code.
    With company_id <= 0 the amounts of every company are added together.
    """
    qs = BeginningBalance.objects.for_company(company_id).annotate(
        code=Trim("account_code"))
    if account_range is not None:
        lo, hi = account_range
        if lo > hi:
            return {}
        qs = qs.filter(code__gte=lo, code__lte=hi)

    snapshot = defaultdict(lambda: ZERO)
    for row in qs.order_by().values("code").annotate(total=Sum("amount")):
        snapshot[row["code"]] += q2(row["total"])
    return dict(snapshot)


class OpeningBalanceResolver:
    def __init__(self, aggregator: BalanceAggregator, baseline: LedgerBaseline,
                 snapshot=None):
        self.aggregator = aggregator
        self.baseline = baseline
        self._snapshot = snapshot
        self._windows = {}

    # ---------- snapshot ----------
    def load_snapshot(self) -> dict[str, Decimal]:
        if self._snapshot is None:
            self._snapshot = load_baseline_snapshot(
                self.aggregator.source.company_id, self.aggregator.account_range)
        return self._snapshot

    @property
    def snapshot(self) -> dict[str, Decimal]:
        return self.load_snapshot()

    def snapshot_amount(self, acct_code) -> Decimal:
        return self.snapshot.get(acct_code.strip(), ZERO)

    # ---------- windows ----------
    def _window(self, date_from, date_to) -> dict[str, Decimal]:
        key = (date_from, date_to)
        if key not in self._windows:
            logger.debug("aggregating net window %s..%s", date_from, date_to)
            self._windows[key] = self.aggregator.net_by_account(date_from, date_to)
        return self._windows[key]

    def needs_pre_movement(self, start_date) -> bool:
        return day_before(start_date) >= self.baseline.fiscal_year_start

    def pre_movement(self, start_date) -> dict[str, Decimal]:
        """B/S net movement from the fiscal-year start up to the day before start."""
        if not self.needs_pre_movement(start_date):
            return {}
        return self._window(self.baseline.fiscal_year_start, day_before(start_date))

    def pnl_pre_movement(self, start_date) -> dict[str, Decimal]:
        """P&L year-to-date net movement before start (empty on January 1)."""
        if is_new_year(start_date):
            return {}
        return self._window(start_of_year(start_date), day_before(start_date))

    def uses_baseline_backout(self, start_date) -> bool:
        cutover = self.baseline.baseline_as_of
        return (
            start_date.year == cutover.year
            and start_date <= cutover
            and start_date.month != 1
        )

    def baseline_backout(self, start_date) -> dict[str, Decimal]:
        """
        Net postings from start through the cutover date (inclusive).
        These are already inside the snapshot but belong after start.
        """
        if not self.uses_baseline_backout(start_date):
            return {}
        return self._window(start_date, self.baseline.baseline_as_of)

    # ---------- bulk loading ----------
    def prefetch(self, start_date, include_bs=True, include_pnl=True, report=None):
        """Aggregate every window the given account mix will need."""
        start_date = coerce_date(start_date)
        notify = report or (lambda percent, message: None)

        if include_bs:
            notify(18, "Calculating YTD pre-movements")
            self.pre_movement(start_date)
        if include_pnl and not is_new_year(start_date):
            if self.uses_baseline_backout(start_date):
                notify(24, "Calculating baseline backout (P&L)")
                self.baseline_backout(start_date)
            else:
                notify(22, "Calculating P&L YTD pre-movements")
                self.pnl_pre_movement(start_date)

    # ---------- per account ----------
    def opening_balance(self, acct_code, is_pnl, start_date) -> Decimal:
        code = acct_code.strip()
        start_date = coerce_date(start_date)

        if is_pnl:
            if is_new_year(start_date):
                return ZERO
            if self.uses_baseline_backout(start_date):
                return q2(
                    self.snapshot_amount(code)
                    - self.baseline_backout(start_date).get(code, ZERO)
                )
            return q2(self.pnl_pre_movement(start_date).get(code, ZERO))

        return q2(
            self.snapshot_amount(code)
            + self.pre_movement(start_date).get(code, ZERO)
        )
