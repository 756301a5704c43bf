class LedgerError(Exception):
    """Base exception for trial balance / general ledger failures."""
    pass


class InputError(LedgerError):
    """Raised when a report request is invalid (before any query runs)."""
    pass


class NoAccountsInRange(LedgerError):
    """Raised when no active account matches the requested range and filter."""

    def __init__(self, company_id, start_account, end_account, fs="ALL"):
        self.company_id = company_id
        self.start_account = start_account
        self.end_account = end_account
        self.fs = fs
        super().__init__(
            f"No accounts in range {start_account}..{end_account} "
            f"(company={company_id}, fs={fs})"
        )


class DataSourceError(LedgerError):
    """Raised when one transaction family query fails."""

    def __init__(self, family, date_from, date_to, account_range=None):
        self.family = family
        self.date_from = date_from
        self.date_to = date_to
        self.account_range = account_range
        super().__init__(
            f"{family} query failed for {date_from}..{date_to} "
            f"(accounts={account_range})"
        )


class AggregationError(LedgerError):
    """Raised when an account row cannot be assembled."""

    def __init__(self, acct_code, date_from, date_to):
        self.acct_code = acct_code
        self.date_from = date_from
        self.date_to = date_to
        super().__init__(
            f"Could not compute account {acct_code} for {date_from}..{date_to}"
        )


class ComputationInvariantWarning(RuntimeWarning):
    """Grand totals do not satisfy beginning + debit - credit == ending."""
    pass
