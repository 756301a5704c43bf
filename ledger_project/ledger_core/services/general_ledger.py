"""
GENERAL LEDGER DETAIL

Same account selection and opening balances as the trial balance, but
instead of one summary row per account it lists every document that
touched the account, with a running balance:

    Beginning Balances (Cash in Bank)            500.00
    G  12  GA-0001  2025-03-15  Sales accrual    100.00           600.00
    R  40  CR-0007  2025-03-20  Collection               50.00    550.00
"""

from __future__ import annotations

import datetime
import logging
from collections import defaultdict
from dataclasses import asdict, dataclass, field
from decimal import Decimal

from ..exceptions import AggregationError, LedgerError
from .accounts import FsFilter
from .aggregator import BalanceAggregator
from .opening import OpeningBalanceResolver
from .report_request import ReportRequest
from .sources import consistent_snapshot
from .trial_balance import ReportService, TrialBalanceTotals, check_totals
from .utils import ZERO, q2

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneralLedgerLine:
    acct_code: str
    is_opening: bool
    category: str
    batch_no: int | None
    reference_no: str
    post_date: datetime.date | None
    comment: str
    debit: Decimal
    credit: Decimal
    ending: Decimal

    def as_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class GeneralLedgerAccount:
    acct_code: str
    acct_desc: str
    main_acct_code: str
    main_acct: str
    beginning: Decimal
    debit: Decimal
    credit: Decimal
    ending: Decimal
    lines: tuple = field(default_factory=tuple)

    def as_dict(self):
        data = asdict(self)
        data["lines"] = [line.as_dict() for line in self.lines]
        return data


@dataclass(frozen=True)
class GeneralLedger:
    request: ReportRequest
    accounts: tuple = field(default_factory=tuple)
    totals: TrialBalanceTotals = field(default_factory=TrialBalanceTotals)

    def as_dict(self):
        return {
            "request": self.request.as_dict(),
            "accounts": [account.as_dict() for account in self.accounts],
            "totals": self.totals.as_dict(),
        }


def line_sort_key(line):
    return (line.post_date, line.batch_no, line.reference_no, line.category)


class GeneralLedgerService(ReportService):
    def build(self, start_account, end_account, start_date, end_date,
              fs=FsFilter.ALL) -> GeneralLedger:
        request = ReportRequest.build(
            self.company_id, start_account, end_account, start_date, end_date, fs)
        self.notify(1, "Loading")
        with consistent_snapshot():
            return self.assemble(request)

    def assemble(self, request: ReportRequest) -> GeneralLedger:
        accounts = self.eligible_accounts(request)
        baseline = self.baseline

        source = self.source()
        resolver = OpeningBalanceResolver(
            BalanceAggregator(source, request.account_range), baseline)
        classified = [
            (account, baseline.is_pnl(account.acct_code, account.fs))
            for account in accounts
        ]

        self.notify(12, "Beginning balances")
        resolver.load_snapshot()
        resolver.prefetch(
            request.start_date,
            include_bs=any(not is_pnl for _, is_pnl in classified),
            include_pnl=any(is_pnl for _, is_pnl in classified),
            report=self.notify,
        )

        self.notify(28, "Loading ledger lines")
        by_account = defaultdict(list)
        for line in source.lines(request.start_date, request.end_date,
                                 request.account_range):
            by_account[line.acct_code].append(line)

        self.notify(45, "Assembling accounts")
        ledger_accounts = []
        for index, (account, is_pnl) in enumerate(classified, start=1):
            try:
                beginning = resolver.opening_balance(
                    account.acct_code, is_pnl, request.start_date)
                ledger_accounts.append(
                    self.account_detail(account, beginning,
                                        by_account.get(account.acct_code, [])))
            except LedgerError:
                raise
            except Exception as exc:
                logger.error("failed to assemble ledger account %s (%s..%s)",
                             account.acct_code, request.start_date, request.end_date)
                raise AggregationError(
                    account.acct_code, request.start_date, request.end_date) from exc
            self.notify(self.progress_for(index, len(classified)),
                        f"Assembling {account.acct_code}")

        totals = TrialBalanceTotals.from_rows(ledger_accounts)
        check_totals(totals, context=f"(general ledger, company={request.company_id})")
        return GeneralLedger(
            request=request, accounts=tuple(ledger_accounts), totals=totals)

    def account_detail(self, account, beginning, postings):
        running = q2(beginning)
        lines = [
            GeneralLedgerLine(
                acct_code=account.acct_code,
                is_opening=True,
                category="",
                batch_no=None,
                reference_no="",
                post_date=None,
                comment=f"Beginning Balances ({account.acct_desc})",
                debit=ZERO,
                credit=ZERO,
                ending=running,
            )
        ]
        debit_total = credit_total = ZERO
        for posting in sorted(postings, key=line_sort_key):
            running = q2(running + posting.debit - posting.credit)
            debit_total += posting.debit
            credit_total += posting.credit
            lines.append(
                GeneralLedgerLine(
                    acct_code=account.acct_code,
                    is_opening=False,
                    category=posting.category,
                    batch_no=posting.batch_no,
                    reference_no=posting.reference_no,
                    post_date=posting.post_date,
                    comment=posting.comment,
                    debit=posting.debit,
                    credit=posting.credit,
                    ending=running,
                )
            )
        return GeneralLedgerAccount(
            acct_code=account.acct_code,
            acct_desc=account.acct_desc,
            main_acct_code=account.main_acct_code,
            main_acct=account.main_acct,
            beginning=q2(beginning),
            debit=q2(debit_total),
            credit=q2(credit_total),
            ending=running,
            lines=tuple(lines),
        )


def build_general_ledger(company_id, start_account, end_account, start_date, end_date,
                         fs=FsFilter.ALL, baseline=None, report=None) -> GeneralLedger:
    service = GeneralLedgerService(company_id, baseline=baseline, report=report)
    return service.build(start_account, end_account, start_date, end_date, fs)
