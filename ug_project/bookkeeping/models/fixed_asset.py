from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from ..managers import TenantManager
from .company import Company

ASSET_STATUS = [
    ("Active", "Active"),
    ("Sold", "Sold"),
    ("Scrapped", "Scrapped"),
]


class AssetType(models.Model):
    """Grouping used to pick which assets a depreciation run covers."""
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    name = models.CharField(max_length=120)

    objects = TenantManager()

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["company", "name"], name="uq_company_asset_type"
            )
        ]

    def __str__(self):
        return self.name


# ---------- Fixed Assets ----------
class FixedAsset(models.Model):
    """
    Register entry for a long-term asset. Never deleted; the book value
    is derived from its depreciation entries.
    """
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    code = models.CharField(max_length=40)  # used in JV-FA-<code>
    name = models.CharField(max_length=200)
    asset_type = models.ForeignKey(AssetType, on_delete=models.PROTECT, related_name="assets")
    purchase_date = models.DateField()
    purchase_value = models.DecimalField(max_digits=18, decimal_places=2)
    location = models.CharField(max_length=200, blank=True, default="")
    status = models.CharField(max_length=10, choices=ASSET_STATUS, default="Active")

    objects = TenantManager()

    class Meta:
        indexes = [models.Index(fields=["company", "asset_type"], name="asset_company_type_idx")]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "code"], name="uq_company_asset_code"
            )
        ]

    def __str__(self):
        return self.name

    @property
    def accumulated_depreciation(self):
        total = self.depreciation_entries.aggregate(t=models.Sum("amount"))["t"]
        return total or Decimal("0.00")

    @property
    def current_value(self):
        return self.purchase_value - self.accumulated_depreciation

    def clean(self):
        if self.asset_type_id and self.asset_type.company_id != self.company_id:
            raise ValidationError("Asset type must belong to the same company.")
        if self.purchase_value is not None and self.purchase_value <= 0:
            raise ValidationError("Purchase value must be greater than zero.")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)


class DepreciationEntry(models.Model):
    """Per-asset share of a depreciation voucher."""
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    asset = models.ForeignKey(
        FixedAsset, on_delete=models.PROTECT, related_name="depreciation_entries"
    )
    date = models.DateField()
    amount = models.DecimalField(max_digits=18, decimal_places=2)
    description = models.CharField(max_length=200)
    voucher_id = models.CharField(max_length=64)  # JV-DEP-<timestamp>

    objects = TenantManager()

    class Meta:
        verbose_name_plural = "depreciation entries"
        indexes = [models.Index(fields=["company", "voucher_id"], name="dep_company_voucher_idx")]

    def __str__(self):
        return f"{self.voucher_id} {self.asset} {self.amount}"
