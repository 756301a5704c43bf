from .account import AccountCode, AccountMain
from .beginning_balance import BeginningBalance
from .company import Company
from .transactions import (CashDisbursement, CashDisbursementDetail,
                           CashPurchase, CashPurchaseDetail, CashReceipt,
                           CashReceiptDetail, CashSales, CashSalesDetail,
                           GeneralAccounting, GeneralAccountingDetail)
