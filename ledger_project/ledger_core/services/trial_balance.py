"""
TRIAL BALANCE ASSEMBLER

For every eligible account, in natural code order:
    beginning  (OpeningBalanceResolver, or the retained earnings roll-forward)
    debit      (period movement, split)
    credit     (period movement, split)
    ending   = beginning + debit - credit

RULES:
- no account row is ever dropped, zero rows included
- an empty eligible set fails with NoAccountsInRange
- any failure while building a row aborts the whole report
- grand totals must satisfy beginning + debit - credit == ending
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import asdict, dataclass, field
from decimal import Decimal

from ..exceptions import (AggregationError, ComputationInvariantWarning,
                          LedgerError, NoAccountsInRange)
from .accounts import FsFilter, LedgerAccount, load_accounts
from .aggregator import NO_MOVEMENT, BalanceAggregator
from .baseline import LedgerBaseline
from .opening import OpeningBalanceResolver
from .report_request import ReportRequest
from .retained_earnings import RetainedEarnings
from .sources import PostingSource, consistent_snapshot
from .utils import ZERO, q2

logger = logging.getLogger(__name__)

TOTALS_TOLERANCE = Decimal("0.005")


@dataclass(frozen=True)
class TrialBalanceRow:
    acct_code: str
    acct_desc: str
    main_acct_code: str
    main_acct: str
    beginning: Decimal
    debit: Decimal
    credit: Decimal
    ending: Decimal

    @classmethod
    def for_account(cls, account: LedgerAccount, beginning, debit, credit):
        beginning, debit, credit = q2(beginning), q2(debit), q2(credit)
        return cls(
            acct_code=account.acct_code,
            acct_desc=account.acct_desc,
            main_acct_code=account.main_acct_code,
            main_acct=account.main_acct,
            beginning=beginning,
            debit=debit,
            credit=credit,
            ending=q2(beginning + debit - credit),
        )

    def as_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class TrialBalanceTotals:
    beginning: Decimal = ZERO
    debit: Decimal = ZERO
    credit: Decimal = ZERO
    ending: Decimal = ZERO

    @classmethod
    def from_rows(cls, rows):
        beginning = debit = credit = ending = ZERO
        for row in rows:
            beginning += row.beginning
            debit += row.debit
            credit += row.credit
            ending += row.ending
        return cls(q2(beginning), q2(debit), q2(credit), q2(ending))

    @property
    def difference(self) -> Decimal:
        return self.beginning + self.debit - self.credit - self.ending

    @property
    def balanced(self) -> bool:
        return abs(self.difference) <= TOTALS_TOLERANCE

    def as_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class TrialBalance:
    request: ReportRequest
    rows: tuple = field(default_factory=tuple)
    totals: TrialBalanceTotals = field(default_factory=TrialBalanceTotals)

    def as_dict(self):
        return {
            "request": self.request.as_dict(),
            "rows": [row.as_dict() for row in self.rows],
            "totals": self.totals.as_dict(),
        }


def check_totals(totals: TrialBalanceTotals, context="") -> bool:
    """Log and warn (never raise) when the grand total identity does not hold."""
    if totals.balanced:
        return True
    message = (
        f"Grand totals out of balance by {totals.difference} {context}: "
        f"beginning={totals.beginning} debit={totals.debit} "
        f"credit={totals.credit} ending={totals.ending}"
    ).strip()
    logger.error(message)
    warnings.warn(message, ComputationInvariantWarning, stacklevel=2)
    return False


class ReportService:
    """Shared plumbing for the trial balance and general ledger builders."""

    def __init__(self, company_id=0, baseline=None, report=None, families=None):
        self.company_id = int(getattr(company_id, "pk", company_id) or 0)
        self.baseline = baseline or LedgerBaseline.from_settings()
        self.report = report
        self.families = families

    def notify(self, percent, message):
        if self.report is None:
            return
        try:
            self.report(percent, message)
        except Exception:
            # progress is diagnostic only
            logger.warning("progress update failed at %s%% (%s)",
                           percent, message, exc_info=True)

    def source(self):
        if self.families is None:
            return PostingSource(self.company_id)
        return PostingSource(self.company_id, self.families)

    def eligible_accounts(self, request: ReportRequest):
        self.notify(5, "Loading accounts")
        accounts = load_accounts(
            request.company_id, request.start_account, request.end_account, request.fs)
        if not accounts:
            raise NoAccountsInRange(
                request.company_id, request.start_account, request.end_account,
                request.fs,
            )
        return accounts

    def progress_for(self, index, count):
        return 45 + (index * 30) // max(1, count)


class TrialBalanceService(ReportService):
    def build(self, start_account, end_account, start_date, end_date,
              fs=FsFilter.ALL) -> TrialBalance:
        request = ReportRequest.build(
            self.company_id, start_account, end_account, start_date, end_date, fs)
        self.notify(1, "Loading")
        with consistent_snapshot():
            return self.assemble(request)

    def assemble(self, request: ReportRequest) -> TrialBalance:
        accounts = self.eligible_accounts(request)
        baseline = self.baseline

        aggregator = BalanceAggregator(self.source(), request.account_range)
        resolver = OpeningBalanceResolver(aggregator, baseline)
        retained = RetainedEarnings(aggregator, baseline)

        classified = [
            (account, baseline.is_pnl(account.acct_code, account.fs))
            for account in accounts
        ]
        has_re = any(baseline.is_retained_earnings(a.acct_code) for a in accounts)
        has_bs = any(
            not is_pnl and not baseline.is_retained_earnings(account.acct_code)
            for account, is_pnl in classified
        )
        has_pnl = any(is_pnl for _, is_pnl in classified)

        self.notify(12, "Beginning balances")
        resolver.load_snapshot()
        if has_re:
            start_year, end_year = request.start_date.year, request.end_date.year
            if start_year >= baseline.first_flow_year:
                self.notify(14, "Calculating retained earnings (start year)")
                retained.constant(start_year)
            if end_year >= baseline.first_flow_year:
                self.notify(15, "Calculating retained earnings (end year)")
                retained.constant(end_year)

        resolver.prefetch(request.start_date, include_bs=has_bs,
                          include_pnl=has_pnl, report=self.notify)

        self.notify(28, "Summing period movements")
        period = aggregator.split_by_account(request.start_date, request.end_date)

        self.notify(45, "Assembling rows")
        rows = []
        for index, (account, is_pnl) in enumerate(classified, start=1):
            try:
                if baseline.is_retained_earnings(account.acct_code):
                    row = self.retained_earnings_row(account, request, resolver, retained)
                else:
                    beginning = resolver.opening_balance(
                        account.acct_code, is_pnl, request.start_date)
                    movement = period.get(account.acct_code, NO_MOVEMENT)
                    row = TrialBalanceRow.for_account(
                        account, beginning, movement.debit, movement.credit)
            except LedgerError:
                raise
            except Exception as exc:
                logger.error("failed to assemble account %s (%s..%s)",
                             account.acct_code, request.start_date, request.end_date)
                raise AggregationError(
                    account.acct_code, request.start_date, request.end_date) from exc
            rows.append(row)
            self.notify(self.progress_for(index, len(classified)),
                        f"Assembling {account.acct_code}")

        totals = TrialBalanceTotals.from_rows(rows)
        check_totals(totals, context=f"(company={request.company_id}, "
                                     f"{request.start_date}..{request.end_date})")
        return TrialBalance(request=request, rows=tuple(rows), totals=totals)

    def retained_earnings_row(self, account, request, resolver, retained):
        """
        Beginning and ending come from the roll-forward (or the snapshot
        before the first flow year); the difference is shown as movement.
        """
        snapshot = resolver.snapshot_amount(account.acct_code)
        beginning = retained.constant_or_snapshot(request.start_date.year, snapshot)
        ending = retained.constant_or_snapshot(request.end_date.year, snapshot)
        change = ending - beginning
        debit = change if change > 0 else ZERO
        credit = -change if change < 0 else ZERO
        return TrialBalanceRow.for_account(account, beginning, debit, credit)


def build_trial_balance(company_id, start_account, end_account, start_date, end_date,
                        fs=FsFilter.ALL, baseline=None, report=None) -> TrialBalance:
    """
    Build a trial balance for one company (company_id <= 0: all companies).
    Raises InputError, NoAccountsInRange, DataSourceError or AggregationError.
    """
    service = TrialBalanceService(company_id, baseline=baseline, report=report)
    return service.build(start_account, end_account, start_date, end_date, fs)
