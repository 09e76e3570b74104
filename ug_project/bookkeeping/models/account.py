from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from ..managers import TenantManager
from .company import Company

DEBIT = "debit"
CREDIT = "credit"

# Account kinds; the balance sheet and P&L cover every one of them
ACCOUNT_KINDS = [
    ("cash", "Cash"),
    ("bank", "Bank"),
    ("receivable", "Receivable"),
    ("payable", "Payable"),
    ("revenue", "Revenue"),
    ("expense", "Expense"),
    ("inventory", "Inventory"),
    ("packing_inventory", "Packing Material Inventory"),
    ("fixed_asset", "Fixed Asset"),
    ("accumulated_depreciation", "Accumulated Depreciation"),
    ("capital", "Capital"),
    ("loan", "Loan"),
    ("investment", "Investment"),
]

# Side on which each kind normally carries its balance
NORMAL_SIDE = {
    "cash": DEBIT,
    "bank": DEBIT,
    "receivable": DEBIT,
    "inventory": DEBIT,
    "packing_inventory": DEBIT,
    "fixed_asset": DEBIT,
    # contra-asset, shown as a negative asset
    "accumulated_depreciation": DEBIT,
    "investment": DEBIT,
    "expense": DEBIT,
    "payable": CREDIT,
    "loan": CREDIT,
    "capital": CREDIT,
    "revenue": CREDIT,
}

# Stable codes of the system accounts every book starts with
RECEIVABLE_CODE = "AR-001"
PAYABLE_CODE = "AP-001"
CUSTOMS_PAYABLE_CODE = "AP-002"
REVENUE_CODE = "REV-001"
DEPRECIATION_EXPENSE_CODE = "EXP-012"
FINISHED_GOODS_CODE = "INV-FG-001"
PACKING_MATERIAL_CODE = "INV-PM-001"
FIXED_ASSET_CODE = "FA-001"
ACCUMULATED_DEPRECIATION_CODE = "AD-001"
CAPITAL_CODE = "CAP-001"
OPENING_BALANCE_EQUITY_CODE = "CAP-002"
CASH_CODE = "CASH-001"

SYSTEM_ACCOUNTS = [
    (RECEIVABLE_CODE, "Accounts Receivable", "receivable"),
    (PAYABLE_CODE, "Accounts Payable", "payable"),
    (CUSTOMS_PAYABLE_CODE, "Customs Charges Payable", "payable"),
    (REVENUE_CODE, "Sales Revenue", "revenue"),
    (DEPRECIATION_EXPENSE_CODE, "Depreciation Expense", "expense"),
    (FINISHED_GOODS_CODE, "Finished Goods Inventory", "inventory"),
    (PACKING_MATERIAL_CODE, "Packing Material Inventory", "packing_inventory"),
    (FIXED_ASSET_CODE, "Fixed Assets", "fixed_asset"),
    (ACCUMULATED_DEPRECIATION_CODE, "Accumulated Depreciation", "accumulated_depreciation"),
    (CAPITAL_CODE, "Owner's Capital", "capital"),
    (OPENING_BALANCE_EQUITY_CODE, "Opening Balance Equity", "capital"),
    (CASH_CODE, "Cash in Hand", "cash"),
]


def display_balance(kind, raw):
    """Flip a raw (debit - credit) balance for credit-normal kinds."""
    return raw if NORMAL_SIDE[kind] == DEBIT else -raw


class Account(models.Model):
    """
    General ledger account, identified by a stable code such as AR-001.
    - kind decides where the balance lands in the statements
    - currency is set for accounts kept in a foreign currency (FCY ledgers)
    """
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    code = models.CharField(max_length=32)
    name = models.CharField(max_length=200)
    kind = models.CharField(max_length=30, choices=ACCOUNT_KINDS)
    currency = models.ForeignKey(
        "Currency", null=True, blank=True, on_delete=models.PROTECT
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = TenantManager()

    class Meta:
        indexes = [
            models.Index(fields=["company", "kind"], name="acct_company_kind_idx"),
            models.Index(fields=["company", "code"], name="acct_company_code_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "code"], name="uq_company_account_code"
            )
        ]

    def __str__(self):
        return f"{self.code} – {self.name}"

    def clean(self):
        if self.kind not in NORMAL_SIDE:
            raise ValidationError(f"Unknown account kind: {self.kind}")

    def save(self, *args, **kwargs):
        """Accounts that already carry entries cannot be switched off."""
        if self.pk:
            old = Account.objects.filter(pk=self.pk).first()
            if old and old.is_active and not self.is_active:
                if self.entries.exists():
                    raise ValidationError(
                        "Cannot disable an account that has journal entries."
                    )
        self.full_clean()
        return super().save(*args, **kwargs)

    def raw_balance(self, as_of=None):
        """debit - credit over all entries (optionally up to a date)."""
        qs = self.entries.all()
        if as_of is not None:
            qs = qs.up_to(as_of)
        aggs = qs.aggregate(d=models.Sum("debit"), c=models.Sum("credit"))
        return (aggs["d"] or Decimal("0.00")) - (aggs["c"] or Decimal("0.00"))
