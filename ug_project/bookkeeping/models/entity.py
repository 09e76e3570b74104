from django.db import models

from ..managers import TenantManager
from .account import PAYABLE_CODE, RECEIVABLE_CODE
from .company import Company

ENTITY_TYPES = [
    ("customer", "Customer"),
    ("supplier", "Supplier"),
    ("vendor", "Vendor"),
    ("commissionAgent", "Commission Agent"),
    ("freightForwarder", "Freight Forwarder"),
    ("clearingAgent", "Clearing Agent"),
    ("employee", "Employee"),
]


def general_account_code(entity_type):
    """Customers sit under receivables, every other party under payables."""
    return RECEIVABLE_CODE if entity_type == "customer" else PAYABLE_CODE


# ---------- Business entities ----------
class BusinessEntity(models.Model):
    """
    A counterparty. It has no account of its own: its sub-ledger is the
    set of entries on its general account tagged with this entity.
    """
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    code = models.CharField(max_length=32)  # e.g. "C1", "SUP-004"
    name = models.CharField(max_length=200)
    entity_type = models.CharField(max_length=20, choices=ENTITY_TYPES)
    # Ledger can be viewed in this currency (FCY mode)
    default_currency = models.ForeignKey(
        "Currency", null=True, blank=True, on_delete=models.PROTECT
    )
    is_active = models.BooleanField(default=True)

    objects = TenantManager()

    class Meta:
        verbose_name_plural = "business entities"
        indexes = [models.Index(fields=["company", "entity_type"], name="entity_company_type_idx")]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "code"], name="uq_company_entity_code"
            )
        ]

    def __str__(self):
        return f"{self.name} ({self.get_entity_type_display()})"

    @property
    def general_account_code(self):
        return general_account_code(self.entity_type)

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
