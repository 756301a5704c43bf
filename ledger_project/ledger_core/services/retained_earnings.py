"""
RETAINED EARNINGS ROLL-FORWARD

constant(year) = sum(snapshot amounts for codes >= threshold)
               + sum(net_income_for_year(y) for first_flow_year <= y < year)

net_income_for_year(y) = net (debit - credit) of every account whose numeric
prefix is strictly above the threshold, across the full calendar year y.
The retained earnings account itself is excluded from net income so it is
not counted twice.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from ..exceptions import InputError
from ..models import BeginningBalance
from .aggregator import BalanceAggregator
from .baseline import LedgerBaseline
from .utils import ZERO, end_of_year, numeric_prefix, q2, start_of_year

logger = logging.getLogger(__name__)


class RetainedEarnings:
    def __init__(self, aggregator: BalanceAggregator, baseline: LedgerBaseline):
        # net income spans every account, whatever the report range is
        self.aggregator = aggregator.unbounded()
        self.baseline = baseline
        self._baseline_sum = None
        self._net_income = {}
        self._constants = {}

    @property
    def company_id(self):
        return self.aggregator.source.company_id

    def baseline_sum(self) -> Decimal:
        if self._baseline_sum is None:
            total = ZERO
            rows = BeginningBalance.objects.for_company(self.company_id).values_list(
                "account_code", "amount")
            for code, amount in rows:
                prefix = numeric_prefix(code)
                if prefix is not None and prefix >= self.baseline.re_threshold:
                    total += q2(amount)
            self._baseline_sum = q2(total)
        return self._baseline_sum

    def net_income_for_year(self, year: int) -> Decimal:
        if year not in self._net_income:
            net = self.aggregator.net_by_account(start_of_year(year), end_of_year(year))
            total = ZERO
            for code, amount in net.items():
                prefix = numeric_prefix(code)
                if prefix is not None and prefix > self.baseline.re_threshold:
                    total += amount
            self._net_income[year] = q2(total)
        return self._net_income[year]

    def constant(self, year: int) -> Decimal:
        """Opening retained earnings as of January 1 of `year`."""
        year = int(year)
        if year < self.baseline.first_flow_year:
            raise InputError(
                f"Retained earnings roll-forward starts in "
                f"{self.baseline.first_flow_year}, got {year}"
            )
        if year not in self._constants:
            total = self.baseline_sum()
            for flow_year in range(self.baseline.first_flow_year, year):
                total += self.net_income_for_year(flow_year)
            self._constants[year] = q2(total)
            logger.info(
                "retained earnings constant (company=%s, year=%s, amount=%s)",
                self.company_id, year, self._constants[year],
            )
        return self._constants[year]

    def constant_or_snapshot(self, year: int, snapshot_amount) -> Decimal:
        # before the first flow year the frozen snapshot is the figure
        if year >= self.baseline.first_flow_year:
            return self.constant(year)
        return q2(snapshot_amount)
