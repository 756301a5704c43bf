"""
BALANCE AGGREGATOR

Groups the Posting multiset by acct_code over one date window.
Accounts without postings are simply absent from the result;
callers default to zero on lookup.
"""

from __future__ import annotations

from collections import defaultdict
from decimal import Decimal
from typing import NamedTuple

from .sources import PostingSource
from .utils import ZERO, q2


class Movement(NamedTuple):
    debit: Decimal
    credit: Decimal

    @property
    def net(self) -> Decimal:
        return self.debit - self.credit


NO_MOVEMENT = Movement(ZERO, ZERO)


class BalanceAggregator:
    def __init__(self, source: PostingSource, account_range=None):
        self.source = source
        self.account_range = account_range

    def unbounded(self):
        return BalanceAggregator(self.source, None)

    def split_by_account(self, date_from, date_to) -> dict[str, Movement]:
        debits = defaultdict(lambda: ZERO)
        credits = defaultdict(lambda: ZERO)
        for posting in self.source.postings(date_from, date_to, self.account_range):
            debits[posting.acct_code] += posting.debit
            credits[posting.acct_code] += posting.credit
        return {
            code: Movement(q2(debits[code]), q2(credits[code]))
            for code in debits
        }

    def net_by_account(self, date_from, date_to) -> dict[str, Decimal]:
        # net = debit - credit, derived from the split sums
        return {
            code: movement.net
            for code, movement in self.split_by_account(date_from, date_to).items()
        }
