from django.contrib import admin

from bookkeeping.models import DepreciationEntry, JournalEntry

from .mixins import ReadOnlyAdminMixin


class JournalEntryInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = JournalEntry
    extra = 0
    fields = ("account", "entity", "debit", "credit", "description",
              "original_amount", "original_currency")
    readonly_fields = fields


class DepreciationEntryInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = DepreciationEntry
    extra = 0
    fields = ("date", "amount", "description", "voucher_id")
    readonly_fields = fields
