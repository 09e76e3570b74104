from django.contrib import admin, messages
from django.core.exceptions import ValidationError
from django.utils import timezone

from bookkeeping.services import reverse_voucher


@admin.action(description="Reverse selected vouchers")
def reverse_vouchers(modeladmin, request, queryset):
    done = 0
    for voucher in queryset:
        try:
            reverse_voucher(
                voucher.company,
                voucher.voucher_id,
                date=timezone.localdate(),
                actor=request.user.get_username(),
            )
            done += 1
        except ValidationError as e:
            messages.error(request, f"{voucher.voucher_id}: {'; '.join(e.messages)}")
    if done:
        messages.success(request, f"Reversed {done} voucher(s).")
