import hashlib
import json
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from ..managers import JournalEntryManager, TenantManager
from .account import Account
from .company import Company
from .entity import ENTITY_TYPES, BusinessEntity

ENTRY_TYPES = [
    ("Receipt", "Receipt"),
    ("Payment", "Payment"),
    ("Expense", "Expense"),
    ("Journal", "Journal"),
]

REVERSAL_PREFIX = "[REVERSED] "


# ---------- Voucher (header) & JournalEntry (rows) ----------
class Voucher(models.Model):
    """
    A named group of balanced journal entries (RV-001, JV-DEP-..., ...).
    Vouchers and their entries are append-only: corrections are new
    vouchers, never edits.
    """
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    voucher_id = models.CharField(max_length=64)
    date = models.DateField()
    entry_type = models.CharField(max_length=10, choices=ENTRY_TYPES)
    description = models.TextField(blank=True, default="")
    created_by = models.CharField(max_length=150, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    # Re-appending the same voucher id is only allowed with the same payload
    posting_fingerprint = models.CharField(max_length=64)
    # Set on the voucher that undoes another one
    reverses = models.OneToOneField(
        "self",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="reversed_by",
    )

    objects = TenantManager()

    class Meta:
        indexes = [
            models.Index(fields=["company", "date"], name="voucher_company_date_idx"),
            models.Index(fields=["company", "entry_type"], name="voucher_company_type_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "voucher_id"], name="uq_company_voucher_id"
            )
        ]

    def __str__(self):
        return f"{self.voucher_id} {self.date} [{self.entry_type}]"

    def compute_totals(self):
        aggs = self.entries.aggregate(
            total_debit=models.Sum("debit"),
            total_credit=models.Sum("credit"),
        )
        return (
            aggs["total_debit"] or Decimal("0.00"),
            aggs["total_credit"] or Decimal("0.00"),
        )

    def is_balanced(self):
        debit, credit = self.compute_totals()
        return debit == credit

    @property
    def is_reversed(self):
        return Voucher.objects.filter(reverses=self).exists()

    @property
    def is_reversal(self):
        return self.reverses_id is not None


def fingerprint_payload(date, entry_type, lines):
    """
    Deterministic JSON of what matters for a voucher, so an identical
    re-append can be recognised and anything else rejected.
    """
    payload = {
        "date": date.isoformat(),
        "type": entry_type,
        "lines": [
            {
                "acct": line["account"].code,
                "entity": line["entity"].code if line.get("entity") else "",
                "debit": str(line.get("debit") or Decimal("0.00")),
                "credit": str(line.get("credit") or Decimal("0.00")),
                "desc": line.get("description") or "",
            }
            for line in lines
        ],
    }
    encoded = json.dumps(payload, separators=(",", ":"), sort_keys=True)
    return hashlib.sha256(encoded.encode()).hexdigest()


class JournalEntry(models.Model):
    """One debit or credit leg of a voucher."""
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    voucher = models.ForeignKey(
        Voucher, on_delete=models.PROTECT, related_name="entries"
    )
    account = models.ForeignKey(
        Account, on_delete=models.PROTECT, related_name="entries"
    )
    debit = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal("0.00"))
    credit = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal("0.00"))
    description = models.TextField(blank=True, default="")

    # Sub-ledger tag: (account, entity) identifies the party's ledger
    entity = models.ForeignKey(
        BusinessEntity,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="entries",
    )
    entity_type = models.CharField(
        max_length=20, choices=ENTITY_TYPES, blank=True, default=""
    )

    # Amount as transacted when the leg was not in the base currency
    original_amount = models.DecimalField(
        max_digits=18, decimal_places=2, null=True, blank=True
    )
    original_currency = models.ForeignKey(
        "Currency", null=True, blank=True, on_delete=models.PROTECT
    )
    created_by = models.CharField(max_length=150, blank=True, default="")

    objects = JournalEntryManager()

    class Meta:
        verbose_name_plural = "journal entries"
        indexes = [
            models.Index(fields=["company", "account"], name="entry_company_account_idx"),
            models.Index(fields=["account", "entity"], name="entry_account_entity_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(debit__gte=0) & models.Q(credit__gte=0),
                name="ck_entry_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.voucher.voucher_id} {self.account.code} Dr {self.debit} Cr {self.credit}"

    @property
    def date(self):
        return self.voucher.date

    @property
    def entry_type(self):
        return self.voucher.entry_type

    @property
    def amount(self):
        return self.debit - self.credit

    def clean(self):
        if self.account.company_id != self.company_id:
            raise ValidationError("Account must belong to the same company.")
        if self.voucher.company_id != self.company_id:
            raise ValidationError("Voucher must belong to the same company.")
        if self.entity_id and self.entity.company_id != self.company_id:
            raise ValidationError("Entity must belong to the same company.")
        if (self.debit > 0) == (self.credit > 0):
            raise ValidationError(
                "Each entry needs exactly one of debit or credit above zero."
            )
        if (self.original_amount is None) != (self.original_currency_id is None):
            raise ValidationError(
                "Original amount and original currency go together."
            )

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
