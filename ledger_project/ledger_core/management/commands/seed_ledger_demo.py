import datetime
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils.text import slugify

from ledger_core.models import (AccountCode, AccountMain, BeginningBalance,
                                CashDisbursement, CashDisbursementDetail,
                                CashPurchase, CashPurchaseDetail, CashReceipt,
                                CashReceiptDetail, CashSales, CashSalesDetail,
                                Company, GeneralAccounting,
                                GeneralAccountingDetail)

# (code, description, main code, fs)
DEMO_CHART = [
    ("1001", "Cash on Hand", "1000", "BS-CA"),
    ("1002", "Cash in Bank", "1000", "BS-CA"),
    ("1201", "Accounts Receivable", "1200", "BS-CA"),
    ("1501", "Inventory", "1500", "BS-CA"),
    ("2001", "Accounts Payable", "2000", "BS-CL"),
    ("3001", "Capital Stock", "3000", "BS-EQ"),
    ("4031", "Retained Earnings", "4000", "BS-EQ"),
    ("5001", "Sales", "5000", "IS-REV"),
    ("6001", "Purchases", "6000", "IS-EXP"),
    ("6101", "Office Supplies", "6100", "IS-EXP"),
]

DEMO_MAIN = {
    "1000": "Cash",
    "1200": "Receivables",
    "1500": "Inventories",
    "2000": "Payables",
    "3000": "Capital",
    "4000": "Retained Earnings",
    "5000": "Revenue",
    "6000": "Cost of Sales",
    "6100": "Operating Expenses",
}

# Balanced as of the baseline cutover (debit-positive)
DEMO_SNAPSHOT = {
    "1001": Decimal("5000.00"),
    "1002": Decimal("45000.00"),
    "1201": Decimal("10000.00"),
    "2001": Decimal("-8000.00"),
    "3001": Decimal("-40000.00"),
    "4031": Decimal("-12000.00"),
}


class Command(BaseCommand):
    help = (
        "Create a demo company with a chart of accounts, a baseline snapshot "
        "and postings in all five transaction families."
    )

    # Define command-line arguments
    def add_arguments(self, parser):
        parser.add_argument(
            "--company-name",
            default="Demo Company",
            help="Name of the demo company to create.",
        )
        parser.add_argument(
            "--year",
            type=int,
            default=2025,
            help="Year the demo postings are dated in (default: 2025).",
        )

    def unique_slug_for_company(self, name, max_tries=100):
        base = slugify(name) or "company"
        slug = base
        i = 1
        # If plain slug is taken, append -1, -2, etc.
        while Company.objects.filter(slug=slug).exists():
            slug = f"{base}-{i}"
            i += 1
            if i > max_tries:
                raise RuntimeError("Couldn't generate unique slug")
        return slug

    @transaction.atomic
    def handle(self, *args, **options):
        company_name = options["company_name"]
        year = options["year"]

        # 1. Company
        company, created = Company.objects.get_or_create(
            name=company_name,
            defaults={"slug": self.unique_slug_for_company(company_name)},
        )
        if not created:
            self.stdout.write(self.style.WARNING(
                f"Company already exists, nothing seeded: {company}"))
            return
        self.stdout.write(self.style.SUCCESS(f"Created company: {company}"))

        # 2. Chart of accounts
        for main_code, main_name in DEMO_MAIN.items():
            AccountMain.objects.create(
                company=company, main_acct_code=main_code, main_acct=main_name)
        for code, desc, main_code, fs in DEMO_CHART:
            AccountCode.objects.create(
                company=company,
                acct_code=code,
                acct_desc=desc,
                main_acct_code=main_code,
                fs=fs,
                exclude=0,
                active_flag=1,
            )
        self.stdout.write(self.style.SUCCESS(f"Created {len(DEMO_CHART)} accounts"))

        # 3. Frozen baseline snapshot
        for code, amount in DEMO_SNAPSHOT.items():
            BeginningBalance.objects.create(
                company=company, account_code=code, amount=amount)
        self.stdout.write(self.style.SUCCESS("Created baseline snapshot"))

        # 4. One balanced document per family
        def lines(*postings):
            return [
                {"acct_code": code, "debit": Decimal(debit), "credit": Decimal(credit)}
                for code, debit, credit in postings
            ]

        documents = [
            (GeneralAccounting, GeneralAccountingDetail, "ga_no", "gen_acct_date",
             "GA-0001", datetime.date(year, 1, 15), "Credit sale",
             lines(("1201", "1500.00", "0"), ("5001", "0", "1500.00"))),
            (CashDisbursement, CashDisbursementDetail, "cd_no", "disburse_date",
             "CD-0001", datetime.date(year, 2, 3), "Office supplies",
             lines(("6101", "250.00", "0"), ("1002", "0", "250.00"))),
            (CashReceipt, CashReceiptDetail, "cr_no", "receipt_date",
             "CR-0001", datetime.date(year, 2, 20), "Collection",
             lines(("1002", "1000.00", "0"), ("1201", "0", "1000.00"))),
            (CashPurchase, CashPurchaseDetail, "cp_no", "purchase_date",
             "CP-0001", datetime.date(year, 3, 5), "Stock purchase",
             lines(("6001", "800.00", "0"), ("1001", "0", "800.00"))),
            (CashSales, CashSalesDetail, "cs_no", "sales_date",
             "CS-0001", datetime.date(year, 3, 18), "Counter sale",
             lines(("1001", "600.00", "0"), ("5001", "0", "600.00"))),
        ]
        for header_model, detail_model, no_field, date_field, number, when, text, rows in documents:
            total = sum(row["debit"] for row in rows)
            header = header_model.objects.create(
                company=company,
                explanation=text,
                sum_debit=total,
                sum_credit=total,
                is_balanced=True,
                **{no_field: number, date_field: when},
            )
            # FK families link the header object; the others store its id as text
            link_field = detail_model._meta.get_field("transaction_id")
            for row in rows:
                if link_field.is_relation:
                    detail_model.objects.create(transaction=header, **row)
                else:
                    detail_model.objects.create(transaction_id=str(header.pk), **row)
            self.stdout.write(self.style.SUCCESS(f"Created {header}"))

        self.stdout.write(self.style.SUCCESS("Demo ledger setup complete!"))
