from django.urls import path

from . import views

app_name = "ledger_core"

urlpatterns = [
    path("accounts/", views.account_list_view, name="account-list"),
    path("trial-balance/", views.start_trial_balance_view, name="trial-balance-start"),
    path("general-ledger/", views.start_general_ledger_view,
         name="general-ledger-start"),
    path("<str:kind>/<str:ticket>/status/", views.report_status_view,
         name="report-status"),
    path("<str:kind>/<str:ticket>/download/", views.report_download_view,
         name="report-download"),
]
