from django.db import models


# -----------------------------------------
# Enforce tenant scoping across all models
# that belong to a company
# -----------------------------------------
class TenantQuerySet(models.QuerySet):
    def for_company(self, company_id):
        """
        Scope rows to one company.
        company_id <= 0 means "all companies" (cross-company reports),
        so no filter is applied at all.
        """
        company_id = int(getattr(company_id, "pk", company_id) or 0)
        if company_id <= 0:
            return self
        return self.filter(company_id=company_id)


class TenantManager(models.Manager):
    # ensure every model gets TenantQuerySet (so .for_company() is always available)
    def get_queryset(self):
        return TenantQuerySet(self.model, using=self._db)

    def for_company(self, company_id):
        return self.get_queryset().for_company(company_id)


class AccountCodeQuerySet(TenantQuerySet):
    def active(self, company_id):
        return self.for_company(company_id).filter(active_flag=1)


class AccountCodeManager(TenantManager):
    def get_queryset(self):
        return AccountCodeQuerySet(self.model, using=self._db)

    # Enables query:
    # AccountCode.objects.active(company_id)
    def active(self, company_id):
        return self.get_queryset().active(company_id)


class TransactionHeaderQuerySet(TenantQuerySet):
    def live(self):
        # cancelled documents never contribute postings
        return self.filter(is_cancel="n")

    def dated_between(self, date_field, date_from, date_to):
        return self.filter(**{f"{date_field}__range": (date_from, date_to)})


class TransactionHeaderManager(TenantManager):
    def get_queryset(self):
        return TransactionHeaderQuerySet(self.model, using=self._db)
