from decimal import Decimal

from django.db import models

from ..managers import TenantManager
from .company import Company
from .entity import BusinessEntity

PACKING_TYPES = [
    ("Bales", "Bales"),
    ("Sacks", "Sacks"),
    ("Kg", "Kg"),
    ("Box", "Box"),
    ("Bags", "Bags"),
]

INVOICE_STATUS = [
    ("Unposted", "Unposted"),
    ("Posted", "Posted"),
    ("Shipped", "Shipped"),
]


# ---------- Finished goods ----------
class Item(models.Model):
    """
    Finished-goods catalog item. Quantities are in the item's own unit;
    bale_size converts units to kg unless the item is packed by Kg.
    """
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    code = models.CharField(max_length=40)
    name = models.CharField(max_length=200)
    category = models.CharField(max_length=120, blank=True, default="")
    packing_type = models.CharField(max_length=10, choices=PACKING_TYPES)
    bale_size = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    # weighted average production cost per kg, maintained outside the valuer
    avg_production_price = models.DecimalField(
        max_digits=18, decimal_places=4, default=Decimal("0")
    )
    opening_stock = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0"))

    objects = TenantManager()

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["company", "code"], name="uq_company_item_code")
        ]

    def __str__(self):
        return self.name

    @property
    def unit_weight(self):
        return Decimal("1") if self.packing_type == "Kg" else self.bale_size


class Production(models.Model):
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    date = models.DateField()
    item = models.ForeignKey(Item, on_delete=models.PROTECT, related_name="productions")
    quantity_produced = models.DecimalField(max_digits=14, decimal_places=2)

    objects = TenantManager()

    class Meta:
        indexes = [models.Index(fields=["company", "date"], name="prod_company_date_idx")]


class SalesInvoice(models.Model):
    """Only Posted / Shipped invoices take stock out."""
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    invoice_number = models.CharField(max_length=40)
    date = models.DateField()
    customer = models.ForeignKey(
        BusinessEntity,
        on_delete=models.PROTECT,
        limit_choices_to={"entity_type": "customer"},
    )
    status = models.CharField(max_length=10, choices=INVOICE_STATUS, default="Unposted")

    objects = TenantManager()

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["company", "invoice_number"], name="uq_company_invoice_number"
            )
        ]

    def __str__(self):
        return self.invoice_number


class SalesInvoiceItem(models.Model):
    invoice = models.ForeignKey(SalesInvoice, on_delete=models.CASCADE, related_name="items")
    item = models.ForeignKey(Item, on_delete=models.PROTECT, related_name="sales_lines")
    quantity = models.DecimalField(max_digits=14, decimal_places=2)
    rate = models.DecimalField(max_digits=18, decimal_places=4, null=True, blank=True)


# ---------- Raw material (originals) ----------
class OriginalType(models.Model):
    """Raw-material grade; packing_size is kg per unit unless packed by Kg."""
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    name = models.CharField(max_length=120)
    packing_type = models.CharField(max_length=10, choices=PACKING_TYPES)
    packing_size = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))

    objects = TenantManager()

    def __str__(self):
        return self.name

    def to_kg(self, quantity):
        if self.packing_type == "Kg":
            return quantity
        return quantity * self.packing_size


class OriginalPurchase(models.Model):
    """
    A raw-material purchase. Each cost component is in its own currency
    and carries its own rate to USD.
    """
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    date = models.DateField()
    supplier = models.ForeignKey(BusinessEntity, on_delete=models.PROTECT, related_name="+")
    original_type = models.ForeignKey(OriginalType, on_delete=models.PROTECT, related_name="purchases")
    quantity_purchased = models.DecimalField(max_digits=14, decimal_places=2)
    rate = models.DecimalField(max_digits=18, decimal_places=4)
    currency = models.ForeignKey("Currency", on_delete=models.PROTECT, related_name="+")
    conversion_rate = models.DecimalField(max_digits=18, decimal_places=6, default=Decimal("1"))
    freight_amount = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal("0"))
    freight_conversion_rate = models.DecimalField(max_digits=18, decimal_places=6, default=Decimal("1"))
    clearing_amount = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal("0"))
    clearing_conversion_rate = models.DecimalField(max_digits=18, decimal_places=6, default=Decimal("1"))
    commission_amount = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal("0"))
    commission_conversion_rate = models.DecimalField(max_digits=18, decimal_places=6, default=Decimal("1"))
    discount_surcharge = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0")
    )  # already USD

    objects = TenantManager()

    class Meta:
        indexes = [models.Index(fields=["company", "date"], name="orig_purchase_date_idx")]

    def cost_usd(self):
        """Item value plus landed costs, each converted at its own rate."""
        # a zero rate means "not captured" and is treated as 1
        item_value = self.quantity_purchased * self.rate * (self.conversion_rate or 1)
        freight = self.freight_amount * (self.freight_conversion_rate or 1)
        clearing = self.clearing_amount * (self.clearing_conversion_rate or 1)
        commission = self.commission_amount * (self.commission_conversion_rate or 1)
        return item_value + freight + clearing + commission + self.discount_surcharge


class OriginalOpening(models.Model):
    """Raw material taken out of stock for processing."""
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    date = models.DateField()
    original_type = models.ForeignKey(OriginalType, on_delete=models.PROTECT, related_name="openings")
    opened = models.DecimalField(max_digits=14, decimal_places=2)
    total_kg = models.DecimalField(max_digits=14, decimal_places=2)

    objects = TenantManager()
