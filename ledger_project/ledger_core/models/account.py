from django.db import models

from ..managers import AccountCodeManager, TenantManager
from .company import Company


# ---------- Main account grouping ----------
class AccountMain(models.Model):
    # Groups detail accounts under a main heading (e.g. "Cash in Bank")
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    main_acct_code = models.CharField(max_length=32)
    main_acct = models.CharField(max_length=200)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        db_table = "account_main"
        indexes = [
            models.Index(
                fields=["company", "main_acct_code"], name="acct_main_company_code_idx"
            ),
        ]

    def __str__(self):
        return f"{self.main_acct_code} – {self.main_acct}"


# ---------- Chart of Accounts ----------
class AccountCode(models.Model):
    """
    Ledger account in the chart of accounts.
    - acct_code is unique per company, not globally
    - fs: financial statement tag ("BS..." balance sheet, "IS..." income statement)
    - exclude: NULL or 0 means the account is part of the "ACT" filter
    """

    company = models.ForeignKey(  # Each account belongs to one company
        Company,  # All reports must filter by company_id to prevent data leaks
        on_delete=models.CASCADE,
    )
    # Sortable/rangeable code, e.g. "1001", "1001-01", "A-01"
    acct_code = models.CharField(max_length=75)
    acct_desc = models.CharField(max_length=255)
    acct_number = models.IntegerField(null=True, blank=True)

    # Denormalized main account; account_main wins when a row exists
    main_acct_code = models.CharField(max_length=32, blank=True)
    main_acct = models.CharField(max_length=200, blank=True)

    fs = models.CharField(max_length=32, blank=True)
    exclude = models.IntegerField(null=True, blank=True)
    # 1 = active, 0 = hidden from reports (history kept)
    active_flag = models.IntegerField(default=1)

    objects = AccountCodeManager()

    class Meta:
        db_table = "account_code"
        indexes = [
            models.Index(fields=["company", "acct_code"], name="acct_company_code_idx"),
            models.Index(
                fields=["company", "active_flag"], name="acct_company_active_idx"
            ),
        ]
        # Codes repeat across companies but must be unique within one
        constraints = [
            models.UniqueConstraint(
                fields=["company", "acct_code"], name="uq_company_acct_code"
            )
        ]

    def __str__(self):
        return f"{self.acct_code} – {self.acct_desc}"
