from decimal import Decimal

from django.db import models

from ..managers import TenantManager
from .company import Company
from .entity import BusinessEntity

PACKING_UNITS = [
    ("Roll", "Roll"),
    ("Kg", "Kg"),
    ("Box", "Box"),
    ("Pcs", "Pcs"),
]


# ---------- Packing material ----------
class PackingMaterialItem(models.Model):
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    name = models.CharField(max_length=120)
    unit = models.CharField(max_length=4, choices=PACKING_UNITS)
    opening_stock = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0"))

    objects = TenantManager()

    def __str__(self):
        return self.name


class PackingMaterialPurchase(models.Model):
    """
    purchase_id doubles as the voucher id of the entry that books it
    (PMP<n>_<dd>_<mm>_<yy>).
    """
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    purchase_id = models.CharField(max_length=40)
    date = models.DateField()
    vendor = models.ForeignKey(
        BusinessEntity, on_delete=models.PROTECT, related_name="packing_purchases"
    )
    item = models.ForeignKey(
        PackingMaterialItem, on_delete=models.PROTECT, related_name="purchases"
    )
    quantity = models.DecimalField(max_digits=14, decimal_places=2)
    rate = models.DecimalField(max_digits=18, decimal_places=4)
    currency = models.ForeignKey("Currency", on_delete=models.PROTECT, related_name="+")
    conversion_rate = models.DecimalField(max_digits=18, decimal_places=6, default=Decimal("1"))
    total_amount_usd = models.DecimalField(max_digits=18, decimal_places=2)

    objects = TenantManager()

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["company", "purchase_id"], name="uq_company_pmp_id"
            )
        ]

    def __str__(self):
        return self.purchase_id
