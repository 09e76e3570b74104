from django.contrib import admin
from django.utils.html import format_html

from bookkeeping.models import AuditLog, Voucher

from .actions import reverse_vouchers
from .inlines import JournalEntryInline
from .mixins import ReadOnlyAdminMixin


@admin.register(Voucher)
class VoucherAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ("voucher_id", "company", "date", "entry_type", "description", "totals")
    list_filter = ("company", "entry_type", "date")
    search_fields = ("voucher_id", "description")
    inlines = [JournalEntryInline]
    actions = [reverse_vouchers]

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("company")

    # Show total debits / total credits for each voucher
    def totals(self, obj):
        d, c = obj.compute_totals()
        return format_html("<b>{}</b> / <small>{}</small>", d, c)

    totals.short_description = "Debits / Credits"


@admin.register(AuditLog)
class AuditLogAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ("created_at", "company", "actor", "action", "object_type", "object_id")
    list_filter = ("company", "action", "object_type")
    search_fields = ("object_id", "actor")
