from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from ..managers import TenantManager
from .account import Account
from .company import Company
from .entity import BusinessEntity

CADENCES = [
    ("weekly", "Weekly"),
    ("monthly", "Monthly"),
]

PLANNER_GROUPS = [
    ("customers", "Customers"),
    ("suppliers", "Suppliers"),
    ("expense_accounts", "Expense accounts"),
]


def _subject_check(obj):
    """Expense-account rows point at an account, the rest at an entity."""
    if obj.group == "expense_accounts":
        if not obj.account_id or obj.entity_id:
            raise ValidationError("Expense planner rows need an account and no entity.")
        if obj.account.kind != "expense":
            raise ValidationError("Only expense accounts can be planned.")
    else:
        if not obj.entity_id or obj.account_id:
            raise ValidationError("Customer/supplier planner rows need an entity.")
        wanted = "customer" if obj.group == "customers" else "supplier"
        if obj.entity.entity_type != wanted:
            raise ValidationError(f"Entity must be a {wanted}.")


class PlannerMember(models.Model):
    """Membership of a customer, supplier or expense account in the planner."""
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    group = models.CharField(max_length=20, choices=PLANNER_GROUPS)
    entity = models.ForeignKey(BusinessEntity, null=True, blank=True, on_delete=models.CASCADE)
    account = models.ForeignKey(Account, null=True, blank=True, on_delete=models.CASCADE)

    objects = TenantManager()

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["company", "group", "entity", "account"],
                name="uq_planner_member",
            )
        ]

    def __str__(self):
        return f"{self.group}: {self.entity or self.account}"

    @property
    def subject(self):
        return self.entity or self.account

    def clean(self):
        _subject_check(self)

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)


class PlannerData(models.Model):
    """Plan vs. actual figures for one subject and one cadence."""
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    group = models.CharField(max_length=20, choices=PLANNER_GROUPS)
    entity = models.ForeignKey(BusinessEntity, null=True, blank=True, on_delete=models.CASCADE)
    account = models.ForeignKey(Account, null=True, blank=True, on_delete=models.CASCADE)
    cadence = models.CharField(max_length=10, choices=CADENCES)
    current_plan = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal("0.00"))
    last_plan = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal("0.00"))
    last_actual = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal("0.00"))

    objects = TenantManager()

    class Meta:
        verbose_name_plural = "planner data"
        constraints = [
            models.UniqueConstraint(
                fields=["company", "group", "entity", "account", "cadence"],
                name="uq_planner_data",
            )
        ]

    def __str__(self):
        return f"{self.cadence} {self.entity or self.account}"

    def clean(self):
        _subject_check(self)

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
