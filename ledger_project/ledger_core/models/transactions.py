from decimal import Decimal

from django.db import models

from ..managers import TransactionHeaderManager
from .company import Company

CANCEL_FLAGS = [
    ("n", "Live"),
    ("y", "Cancelled"),
]


# ---------- Shared header / detail columns ----------
class TransactionHeader(models.Model):
    """
    One accounting document (journal voucher, check, official receipt...).
    Every family has its own date column and document number column,
    declared on the concrete model.
    """

    # Multi-tenant: every document belongs to a company
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    explanation = models.TextField(blank=True, default="")
    # 'y' documents are voided and ignored by every report
    is_cancel = models.CharField(max_length=1, choices=CANCEL_FLAGS, default="n")
    # Set by data entry: sum(debit) == sum(credit) over the details
    sum_debit = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))
    sum_credit = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))
    is_balanced = models.BooleanField(default=True)

    objects = TransactionHeaderManager()

    class Meta:
        abstract = True


class TransactionDetail(models.Model):
    """A single (acct_code, debit, credit) posting line."""

    acct_code = models.CharField(max_length=75)
    debit = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))
    credit = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))

    class Meta:
        abstract = True

    def __str__(self):
        return f"{self.acct_code}: D {self.debit} / C {self.credit}"


# ---------- General journal ----------
class GeneralAccounting(TransactionHeader):
    ga_no = models.CharField(max_length=50)
    gen_acct_date = models.DateField()

    class Meta:
        db_table = "general_accounting"
        indexes = [
            models.Index(fields=["company", "gen_acct_date"], name="ga_company_date_idx"),
        ]

    def __str__(self):
        return f"GA {self.ga_no} {self.gen_acct_date}"


class GeneralAccountingDetail(TransactionDetail):
    # legacy schema stores the header id as text
    transaction_id = models.CharField(max_length=20, db_index=True)

    class Meta:
        db_table = "general_accounting_details"


# ---------- Cash disbursement ----------
class CashDisbursement(TransactionHeader):
    cd_no = models.CharField(max_length=50)
    disburse_date = models.DateField()

    class Meta:
        db_table = "cash_disbursement"
        indexes = [
            models.Index(fields=["company", "disburse_date"], name="cd_company_date_idx"),
        ]

    def __str__(self):
        return f"CD {self.cd_no} {self.disburse_date}"


class CashDisbursementDetail(TransactionDetail):
    transaction = models.ForeignKey(
        CashDisbursement,
        on_delete=models.CASCADE,
        db_column="transaction_id",
        related_name="details",
    )

    class Meta:
        db_table = "cash_disbursement_details"


# ---------- Cash receipts ----------
class CashReceipt(TransactionHeader):
    cr_no = models.CharField(max_length=50)
    receipt_date = models.DateField()
    # receipts keep their narrative in a column called "details"
    explanation = models.TextField(blank=True, default="", db_column="details")

    class Meta:
        db_table = "cash_receipts"
        indexes = [
            models.Index(fields=["company", "receipt_date"], name="cr_company_date_idx"),
        ]

    def __str__(self):
        return f"CR {self.cr_no} {self.receipt_date}"


class CashReceiptDetail(TransactionDetail):
    # legacy schema stores the header id as text
    transaction_id = models.CharField(max_length=20, db_index=True)

    class Meta:
        db_table = "cash_receipt_details"


# ---------- Cash purchase ----------
class CashPurchase(TransactionHeader):
    cp_no = models.CharField(max_length=50)
    purchase_date = models.DateField()

    class Meta:
        db_table = "cash_purchase"
        indexes = [
            models.Index(fields=["company", "purchase_date"], name="cp_company_date_idx"),
        ]

    def __str__(self):
        return f"CP {self.cp_no} {self.purchase_date}"


class CashPurchaseDetail(TransactionDetail):
    transaction = models.ForeignKey(
        CashPurchase,
        on_delete=models.CASCADE,
        db_column="transaction_id",
        related_name="details",
    )

    class Meta:
        db_table = "cash_purchase_details"


# ---------- Cash sales ----------
class CashSales(TransactionHeader):
    cs_no = models.CharField(max_length=50)
    sales_date = models.DateField()

    class Meta:
        db_table = "cash_sales"
        verbose_name_plural = "cash sales"
        indexes = [
            models.Index(fields=["company", "sales_date"], name="cs_company_date_idx"),
        ]

    def __str__(self):
        return f"CS {self.cs_no} {self.sales_date}"


class CashSalesDetail(TransactionDetail):
    # legacy schema stores the header id as text
    transaction_id = models.CharField(max_length=20, db_index=True)

    class Meta:
        db_table = "cash_sales_details"
