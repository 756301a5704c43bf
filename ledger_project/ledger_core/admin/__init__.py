from .account import (AccountCodeAdmin, AccountMainAdmin,
                      BeginningBalanceAdmin, CompanyAdmin)
from .ReadOnly import ReadOnlyAdmin
from .transactions import (CashDisbursementAdmin, CashDisbursementDetailAdmin,
                           CashPurchaseAdmin, CashPurchaseDetailAdmin,
                           CashReceiptAdmin, CashReceiptDetailAdmin,
                           CashSalesAdmin, CashSalesDetailAdmin,
                           GeneralAccountingAdmin,
                           GeneralAccountingDetailAdmin)
