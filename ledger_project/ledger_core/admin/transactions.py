from django.contrib import admin

from ledger_core.models import (CashDisbursement, CashDisbursementDetail,
                                CashPurchase, CashPurchaseDetail, CashReceipt,
                                CashReceiptDetail, CashSales, CashSalesDetail,
                                GeneralAccounting, GeneralAccountingDetail)

from .ReadOnly import ReadOnlyAdmin

HEADER_COLUMNS = ("company", "explanation", "is_cancel", "is_balanced",
                  "sum_debit", "sum_credit")
DETAIL_COLUMNS = ("transaction_id", "acct_code", "debit", "credit")


@admin.register(GeneralAccounting)
class GeneralAccountingAdmin(ReadOnlyAdmin):
    list_display = ("id", "ga_no", "gen_acct_date") + HEADER_COLUMNS
    date_hierarchy = "gen_acct_date"


@admin.register(CashDisbursement)
class CashDisbursementAdmin(ReadOnlyAdmin):
    list_display = ("id", "cd_no", "disburse_date") + HEADER_COLUMNS
    date_hierarchy = "disburse_date"


@admin.register(CashReceipt)
class CashReceiptAdmin(ReadOnlyAdmin):
    list_display = ("id", "cr_no", "receipt_date") + HEADER_COLUMNS
    date_hierarchy = "receipt_date"


@admin.register(CashPurchase)
class CashPurchaseAdmin(ReadOnlyAdmin):
    list_display = ("id", "cp_no", "purchase_date") + HEADER_COLUMNS
    date_hierarchy = "purchase_date"


@admin.register(CashSales)
class CashSalesAdmin(ReadOnlyAdmin):
    list_display = ("id", "cs_no", "sales_date") + HEADER_COLUMNS
    date_hierarchy = "sales_date"


# Detail lines: header id is text on some families, an FK on others
@admin.register(GeneralAccountingDetail)
class GeneralAccountingDetailAdmin(ReadOnlyAdmin):
    list_display = ("id",) + DETAIL_COLUMNS


@admin.register(CashDisbursementDetail)
class CashDisbursementDetailAdmin(ReadOnlyAdmin):
    list_display = ("id",) + DETAIL_COLUMNS


@admin.register(CashReceiptDetail)
class CashReceiptDetailAdmin(ReadOnlyAdmin):
    list_display = ("id",) + DETAIL_COLUMNS


@admin.register(CashPurchaseDetail)
class CashPurchaseDetailAdmin(ReadOnlyAdmin):
    list_display = ("id",) + DETAIL_COLUMNS


@admin.register(CashSalesDetail)
class CashSalesDetailAdmin(ReadOnlyAdmin):
    list_display = ("id",) + DETAIL_COLUMNS
