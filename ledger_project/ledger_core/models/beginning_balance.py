from decimal import Decimal

from django.db import models

from ..managers import TenantManager
from .company import Company


# ---------- Frozen go-live snapshot ----------
class BeginningBalance(models.Model):
    """
    One row per account per company: the balance as of the baseline
    cutover date (LEDGER_BASELINE["BASELINE_AS_OF"]).
    Loaded once at go-live and never written by the reporting code.
    """

    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    account_code = models.CharField(max_length=75)
    # debit-positive: debit balances > 0, credit balances < 0
    amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )

    objects = TenantManager()

    class Meta:
        db_table = "beginning_balance"
        constraints = [
            models.UniqueConstraint(
                fields=["company", "account_code"],
                name="uq_company_beginning_balance_code",
            )
        ]

    def __str__(self):
        return f"{self.company_id}:{self.account_code} = {self.amount}"
