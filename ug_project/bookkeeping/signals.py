from django.core.exceptions import ValidationError
from django.db.models.signals import pre_delete
from django.dispatch import receiver

from .models import DepreciationEntry, FixedAsset, JournalEntry, Voucher

""" The journal is append-only: corrections are reversal vouchers."""


@receiver(pre_delete, sender=Voucher)
@receiver(pre_delete, sender=JournalEntry)
def prevent_delete_journal(sender, instance, **kwargs):
    raise ValidationError(
        "Journal entries cannot be deleted; reverse the voucher instead."
    )


"""Assets stay in the register for good; mark them Sold or Scrapped instead."""


@receiver(pre_delete, sender=FixedAsset)
@receiver(pre_delete, sender=DepreciationEntry)
def prevent_delete_asset_records(sender, instance, **kwargs):
    raise ValidationError("Fixed asset records cannot be deleted.")
