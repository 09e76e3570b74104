import logging
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import transaction

from ..models import Company, PackingMaterialPurchase
from ..models.account import PACKING_MATERIAL_CODE, PAYABLE_CODE
from .audit_helper import log_action
from .posting import append_voucher, line, money
from .vouchers import system_account

logger = logging.getLogger(__name__)


def packing_purchase_id(number, date):
    """PMP<n>_<dd>_<mm>_<yy>, e.g. PMP7_05_03_24."""
    return f"PMP{number}_{date:%d}_{date:%m}_{date:%y}"


@transaction.atomic
def record_packing_purchase(company, *, date, vendor, item, quantity, rate,
                            currency, conversion_rate=1, actor=""):
    """
    Buy packing material on credit:
        Dr Packing Material Inventory (INV-PM-001) / Cr AP-001 (vendor)
    The purchase id is also the voucher id.
    """
    quantity = Decimal(str(quantity))
    rate = Decimal(str(rate))
    conversion_rate = Decimal(str(conversion_rate))
    if quantity <= 0 or rate <= 0 or conversion_rate <= 0:
        raise ValidationError("Quantity, rate and conversion rate must be greater than zero.")
    if vendor.entity_type != "vendor":
        raise ValidationError("Packing material is bought from vendors.")

    book = Company.objects.select_for_update().get(pk=company.pk)
    purchase_id = packing_purchase_id(book.next_packing_material_purchase_number, date)
    total = money(quantity * rate * conversion_rate)

    purchase = PackingMaterialPurchase.objects.create(
        company=book,
        purchase_id=purchase_id,
        date=date,
        vendor=vendor,
        item=item,
        quantity=quantity,
        rate=rate,
        currency_id=getattr(currency, "code", currency),
        conversion_rate=conversion_rate,
        total_amount_usd=total,
    )
    description = f"Packing Material Purchase: {item.name} from {vendor.name}"
    append_voucher(
        book,
        voucher_id=purchase_id,
        date=date,
        entry_type="Journal",
        description=description,
        created_by=actor,
        lines=[
            line(system_account(book, PACKING_MATERIAL_CODE), debit=total, description=description),
            line(system_account(book, PAYABLE_CODE), credit=total, description=description, entity=vendor),
        ],
    )

    book.next_packing_material_purchase_number += 1
    book.save(update_fields=["next_packing_material_purchase_number"])
    log_action(
        action="purchase",
        instance=purchase,
        actor=actor,
        changes={"quantity": str(quantity), "total_amount_usd": str(total)},
    )
    logger.info("Recorded packing purchase %s (%s USD)", purchase_id, total)
    company.refresh_from_db()
    return purchase
