from decimal import Decimal

import django.db.models.deletion
from django.db import migrations, models

CANCEL_FLAGS = [("n", "Live"), ("y", "Cancelled")]


def money():
    return models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)


def header_fields(number_field, date_field, explanation_column=None):
    explanation = models.TextField(blank=True, default="")
    if explanation_column:
        explanation = models.TextField(blank=True, db_column=explanation_column, default="")
    return [
        ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
        ("explanation", explanation),
        ("is_cancel", models.CharField(choices=CANCEL_FLAGS, default="n", max_length=1)),
        ("sum_debit", money()),
        ("sum_credit", money()),
        ("is_balanced", models.BooleanField(default=True)),
        (number_field, models.CharField(max_length=50)),
        (date_field, models.DateField()),
        ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="ledger_core.company")),
    ]


def detail_fields(header=None):
    if header is None:
        # legacy schema stores the header id as text
        link = models.CharField(db_index=True, max_length=20)
        link_name = "transaction_id"
    else:
        link = models.ForeignKey(
            db_column="transaction_id",
            on_delete=django.db.models.deletion.CASCADE,
            related_name="details",
            to=header,
        )
        link_name = "transaction"
    return [
        ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
        ("acct_code", models.CharField(max_length=75)),
        ("debit", money()),
        ("credit", money()),
        (link_name, link),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Company",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(db_column="company_name", max_length=200)),
                ("slug", models.SlugField(max_length=80, unique=True)),
                ("tin", models.CharField(blank=True, max_length=64)),
                ("address_line1", models.CharField(blank=True, max_length=255)),
                ("address_line2", models.CharField(blank=True, max_length=255)),
            ],
            options={
                "db_table": "companies",
                "verbose_name_plural": "companies",
            },
        ),
        migrations.CreateModel(
            name="AccountMain",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("main_acct_code", models.CharField(max_length=32)),
                ("main_acct", models.CharField(max_length=200)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="ledger_core.company")),
            ],
            options={
                "db_table": "account_main",
                "indexes": [
                    models.Index(fields=["company", "main_acct_code"], name="acct_main_company_code_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="AccountCode",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("acct_code", models.CharField(max_length=75)),
                ("acct_desc", models.CharField(max_length=255)),
                ("acct_number", models.IntegerField(blank=True, null=True)),
                ("main_acct_code", models.CharField(blank=True, max_length=32)),
                ("main_acct", models.CharField(blank=True, max_length=200)),
                ("fs", models.CharField(blank=True, max_length=32)),
                ("exclude", models.IntegerField(blank=True, null=True)),
                ("active_flag", models.IntegerField(default=1)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="ledger_core.company")),
            ],
            options={
                "db_table": "account_code",
                "indexes": [
                    models.Index(fields=["company", "acct_code"], name="acct_company_code_idx"),
                    models.Index(fields=["company", "active_flag"], name="acct_company_active_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("company", "acct_code"), name="uq_company_acct_code"),
                ],
            },
        ),
        migrations.CreateModel(
            name="BeginningBalance",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("account_code", models.CharField(max_length=75)),
                ("amount", money()),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="ledger_core.company")),
            ],
            options={
                "db_table": "beginning_balance",
                "constraints": [
                    models.UniqueConstraint(fields=("company", "account_code"), name="uq_company_beginning_balance_code"),
                ],
            },
        ),
        # ---------- transaction families ----------
        migrations.CreateModel(
            name="GeneralAccounting",
            fields=header_fields("ga_no", "gen_acct_date"),
            options={
                "db_table": "general_accounting",
                "indexes": [
                    models.Index(fields=["company", "gen_acct_date"], name="ga_company_date_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="GeneralAccountingDetail",
            fields=detail_fields(),
            options={"db_table": "general_accounting_details"},
        ),
        migrations.CreateModel(
            name="CashDisbursement",
            fields=header_fields("cd_no", "disburse_date"),
            options={
                "db_table": "cash_disbursement",
                "indexes": [
                    models.Index(fields=["company", "disburse_date"], name="cd_company_date_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="CashDisbursementDetail",
            fields=detail_fields("ledger_core.cashdisbursement"),
            options={"db_table": "cash_disbursement_details"},
        ),
        migrations.CreateModel(
            name="CashReceipt",
            fields=header_fields("cr_no", "receipt_date", explanation_column="details"),
            options={
                "db_table": "cash_receipts",
                "indexes": [
                    models.Index(fields=["company", "receipt_date"], name="cr_company_date_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="CashReceiptDetail",
            fields=detail_fields(),
            options={"db_table": "cash_receipt_details"},
        ),
        migrations.CreateModel(
            name="CashPurchase",
            fields=header_fields("cp_no", "purchase_date"),
            options={
                "db_table": "cash_purchase",
                "indexes": [
                    models.Index(fields=["company", "purchase_date"], name="cp_company_date_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="CashPurchaseDetail",
            fields=detail_fields("ledger_core.cashpurchase"),
            options={"db_table": "cash_purchase_details"},
        ),
        migrations.CreateModel(
            name="CashSales",
            fields=header_fields("cs_no", "sales_date"),
            options={
                "db_table": "cash_sales",
                "verbose_name_plural": "cash sales",
                "indexes": [
                    models.Index(fields=["company", "sales_date"], name="cs_company_date_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="CashSalesDetail",
            fields=detail_fields(),
            options={"db_table": "cash_sales_details"},
        ),
    ]
