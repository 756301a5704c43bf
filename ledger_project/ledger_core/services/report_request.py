"""Validation of report parameters, done before any query runs."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..exceptions import InputError
from .accounts import FsFilter
from .utils import coerce_date


@dataclass(frozen=True)
class ReportRequest:
    company_id: int
    start_account: str
    end_account: str
    start_date: date
    end_date: date
    fs: str = FsFilter.ALL

    @property
    def account_range(self):
        return (self.start_account, self.end_account)

    @classmethod
    def build(cls, company_id, start_account, end_account, start_date, end_date,
              fs=FsFilter.ALL):
        try:
            company_id = int(getattr(company_id, "pk", company_id) or 0)
        except (TypeError, ValueError):
            raise InputError(f"Invalid company id: {company_id!r}")

        start_account = (start_account or "").strip()
        end_account = (end_account or "").strip()
        if not start_account or not end_account:
            raise InputError("Start and end account are required.")
        if start_account > end_account:
            raise InputError(
                f"Start account {start_account} is after end account {end_account}.")

        try:
            start_date = coerce_date(start_date)
            end_date = coerce_date(end_date)
        except ValueError as exc:
            raise InputError(str(exc)) from exc
        if start_date > end_date:
            raise InputError(f"Start date {start_date} is after end date {end_date}.")

        fs = (fs or FsFilter.ALL).strip().upper()
        if fs not in FsFilter.values:
            raise InputError(f"Unknown FS filter: {fs}")

        return cls(
            company_id=company_id,
            start_account=start_account,
            end_account=end_account,
            start_date=start_date,
            end_date=end_date,
            fs=fs,
        )

    def as_dict(self):
        return {
            "company_id": self.company_id,
            "start_account": self.start_account,
            "end_account": self.end_account,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "fs": self.fs,
        }
