from django.contrib import admin
from django.core.exceptions import PermissionDenied


class ReadOnlyAdmin(admin.ModelAdmin):
    """Admin for ledger tables the reports only ever read.

    Filters and search fields are picked from whichever of the candidate
    columns the model actually has, so one class serves headers, detail
    lines and the beginning-balance snapshot.
    """

    list_per_page = 50  # transaction tables are large
    filter_candidates = ("company", "is_cancel")
    search_candidates = ("acct_code", "account_code", "ga_no", "cd_no",
                         "cr_no", "cp_no", "cs_no", "explanation")

    def _present(self, candidates):
        names = {f.name for f in self.model._meta.fields}
        return tuple(name for name in candidates if name in names)

    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    # change page stays viewable, every field on it is read-only
    def has_change_permission(self, request, obj=None):
        return True

    def save_model(self, request, obj, form, change):
        raise PermissionDenied("Ledger rows cannot be changed via the admin.")

    def get_actions(self, request):
        return {}

    def get_list_filter(self, request):
        return self._present(self.filter_candidates)

    def get_search_fields(self, request):
        return self._present(self.search_candidates)
