from django.db import models


# ---------- Tenant / Company ----------
class Company(models.Model):

    """Tenant / Organization. Every ledger table is scoped by company_id."""
    # Store company's full display name
    name = models.CharField(max_length=200, db_column="company_name")

    slug = models.SlugField(  # A URL-friendly identifier
        max_length=80, unique=True  # no two companies can have the same slug
    )

    # Printed on report headers (passed to the report sink as metadata)
    tin = models.CharField(max_length=64, blank=True)
    address_line1 = models.CharField(max_length=255, blank=True)
    address_line2 = models.CharField(max_length=255, blank=True)

    class Meta:
        db_table = "companies"
        verbose_name_plural = "companies"

    def __str__(self):
        return self.name

    def report_header(self):
        """Company block shown at the top of rendered reports"""
        return {
            "name": self.name,
            "tin": self.tin,
            "addr1": self.address_line1,
            "addr2": self.address_line2,
        }
