from django.db import models

# Counter field per voucher prefix
VOUCHER_COUNTERS = {
    "RV": "next_receipt_voucher_number",
    "PV": "next_payment_voucher_number",
    "EV": "next_expense_voucher_number",
    "JV": "next_journal_voucher_number",
}


# ---------- Company (the book) ----------
class Company(models.Model):
    """
    One set of books. Everything else in the app hangs off a Company,
    and every report is computed for exactly one of them.
    """
    name = models.CharField(max_length=200)
    slug = models.SlugField(max_length=80, unique=True)

    # Reporting currency for all debit/credit amounts
    base_currency = models.ForeignKey(
        "Currency",
        on_delete=models.PROTECT,
        related_name="companies",
    )

    # Monotonic voucher numbering (RV-001, PV-001, ...)
    next_receipt_voucher_number = models.PositiveIntegerField(default=1)
    next_payment_voucher_number = models.PositiveIntegerField(default=1)
    next_expense_voucher_number = models.PositiveIntegerField(default=1)
    next_journal_voucher_number = models.PositiveIntegerField(default=1)
    next_packing_material_purchase_number = models.PositiveIntegerField(default=1)

    # Start of the last weekly / monthly planning period the user acknowledged
    planner_last_weekly_reset = models.DateField(null=True, blank=True)
    planner_last_monthly_reset = models.DateField(null=True, blank=True)

    # Bumped on every append; part of every report cache key
    snapshot_version = models.PositiveBigIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name_plural = "companies"

    def __str__(self):
        return self.name

    def planner_marker(self, cadence):
        if cadence == "weekly":
            return self.planner_last_weekly_reset
        return self.planner_last_monthly_reset

    @staticmethod
    def planner_marker_field(cadence):
        return f"planner_last_{cadence}_reset"
