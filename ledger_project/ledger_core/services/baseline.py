"""
LEDGER BASELINE

The ledger went live from a frozen snapshot (beginning_balance) taken on
BASELINE_AS_OF. Balances after that date are rolled forward from the
transaction tables; retained earnings flow from FIRST_FLOW_YEAR onwards.
These values must match the loaded snapshot data, so they come from
settings and are passed into every service explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta

from django.conf import settings

from .utils import coerce_date, numeric_prefix


@dataclass(frozen=True)
class LedgerBaseline:
    re_code: str = "4031"
    re_threshold: int = 4031
    baseline_as_of: date = field(default_factory=lambda: date(2024, 12, 31))
    first_flow_year: int = 2025

    @classmethod
    def from_settings(cls):
        conf = getattr(settings, "LEDGER_BASELINE", {}) or {}
        defaults = cls()
        return cls(
            re_code=str(conf.get("RE_CODE", defaults.re_code)).strip(),
            re_threshold=int(conf.get("RE_THRESHOLD", defaults.re_threshold)),
            baseline_as_of=coerce_date(
                conf.get("BASELINE_AS_OF", defaults.baseline_as_of)),
            first_flow_year=int(
                conf.get("FIRST_FLOW_YEAR", defaults.first_flow_year)),
        )

    @property
    def fiscal_year_start(self) -> date:
        # first day the ledger is rebuilt from transactions (2025-01-01)
        return self.baseline_as_of + timedelta(days=1)

    def is_retained_earnings(self, acct_code) -> bool:
        return (acct_code or "").strip() == self.re_code

    def is_pnl(self, acct_code, fs) -> bool:
        """
        P&L when the FS tag starts with "IS" (any case) or the numeric
        prefix is above the retained earnings threshold.
        The retained earnings account itself always carries forward.
        """
        if self.is_retained_earnings(acct_code):
            return False
        if (fs or "").strip().upper().startswith("IS"):
            return True
        prefix = numeric_prefix(acct_code)
        return prefix is not None and prefix > self.re_threshold
