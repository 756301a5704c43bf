from django.contrib import admin

from ledger_core.models import AccountCode, AccountMain, BeginningBalance, Company

from .ReadOnly import ReadOnlyAdmin


@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "slug", "tin")
    search_fields = ("name", "slug")
    prepopulated_fields = {"slug": ("name",)}


@admin.register(AccountMain)
class AccountMainAdmin(admin.ModelAdmin):
    list_display = ("id", "company", "main_acct_code", "main_acct")
    list_filter = ("company",)
    search_fields = ("main_acct_code", "main_acct")
    ordering = ("company", "main_acct_code")


# Chart of accounts stays editable (reference data)
@admin.register(AccountCode)
class AccountCodeAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "company",
        "acct_code",
        "acct_desc",
        "main_acct_code",
        "fs",
        "exclude",
        "active_flag",
    )
    list_filter = ("company", "fs", "active_flag")
    search_fields = ("acct_code", "acct_desc")
    # accounts grouped by company, then sorted by code
    ordering = ("company", "acct_code")
    fieldsets = (
        (None, {"fields": ("company", "acct_code", "acct_desc", "acct_number")}),
        ("Grouping", {"fields": ("main_acct_code", "main_acct", "fs")}),
        ("Reporting", {"fields": ("exclude", "active_flag")}),
    )


# Frozen go-live snapshot: never edited after load
@admin.register(BeginningBalance)
class BeginningBalanceAdmin(ReadOnlyAdmin):
    list_display = ("id", "company", "account_code", "amount")
    ordering = ("company", "account_code")
