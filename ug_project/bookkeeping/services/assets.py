import logging
import time
from decimal import ROUND_HALF_UP, Decimal

from django.core.exceptions import ValidationError
from django.db import transaction

from ..models import DepreciationEntry, FixedAsset
from ..models.account import (ACCUMULATED_DEPRECIATION_CODE,
                              DEPRECIATION_EXPENSE_CODE, FIXED_ASSET_CODE,
                              OPENING_BALANCE_EQUITY_CODE)
from .audit_helper import log_action
from .posting import append_voucher, line
from .vouchers import system_account

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
HUNDRED = Decimal("100")


# ----------------------------
# Fixed Asset workflows
# ----------------------------
@transaction.atomic
def acquire_asset(company, *, code, name, asset_type, purchase_date,
                  purchase_value, location="", actor=""):
    """
    Register an asset and book it in one go:
        Dr Fixed Assets (FA-001) / Cr Opening Balance Equity (CAP-002)
    under voucher JV-FA-<code>.
    """
    asset = FixedAsset.objects.create(
        company=company,
        code=code,
        name=name,
        asset_type=asset_type,
        purchase_date=purchase_date,
        purchase_value=Decimal(str(purchase_value)),
        location=location,
    )
    description = f"Acquisition of asset: {name}"
    append_voucher(
        company,
        voucher_id=f"JV-FA-{asset.code}",
        date=purchase_date,
        entry_type="Journal",
        description=description,
        created_by=actor,
        lines=[
            line(system_account(company, FIXED_ASSET_CODE),
                 debit=asset.purchase_value, description=description),
            line(system_account(company, OPENING_BALANCE_EQUITY_CODE),
                 credit=asset.purchase_value, description=description),
        ],
    )
    log_action(
        action="acquire",
        instance=asset,
        actor=actor,
        changes={"purchase_value": str(asset.purchase_value)},
    )
    return asset


def depreciation_voucher_id():
    # millisecond timestamp, like the original batch ids
    return f"JV-DEP-{int(time.time() * 1000)}"


def post_depreciation(company, *, asset_types, rate, start, end, date=None,
                      actor="", voucher_id=None):
    """
    Depreciate every Active asset of the chosen types by `rate` percent
    of its purchase value.

    Writes one DepreciationEntry per asset and a single consolidated
    voucher (Dr EXP-012 / Cr AD-001 for the total), all or nothing.
    Returns (voucher, [DepreciationEntry, ...]).
    """
    rate = Decimal(str(rate))
    if rate <= 0 or rate > HUNDRED:
        raise ValidationError("Depreciation rate must be greater than 0 and at most 100.")
    if not asset_types:
        raise ValidationError("Select at least one asset type to depreciate.")

    date = date or end
    assets = list(
        FixedAsset.objects.for_company(company)
        .filter(asset_type__in=asset_types, status="Active")
        .order_by("code")
    )
    if not assets:
        raise ValidationError("No active assets found for the selected types.")

    amounts = [
        (asset, (asset.purchase_value * rate / HUNDRED).quantize(CENT, rounding=ROUND_HALF_UP))
        for asset in assets
    ]
    total = sum((amount for _, amount in amounts), Decimal("0.00"))
    voucher_id = voucher_id or depreciation_voucher_id()
    description = f"Depreciation for period {start} to {end}"

    with transaction.atomic():
        voucher = append_voucher(
            company,
            voucher_id=voucher_id,
            date=date,
            entry_type="Journal",
            description=description,
            created_by=actor,
            lines=[
                line(system_account(company, DEPRECIATION_EXPENSE_CODE),
                     debit=total, description=description),
                line(system_account(company, ACCUMULATED_DEPRECIATION_CODE),
                     credit=total, description=description),
            ],
        )
        entries = [
            DepreciationEntry.objects.create(
                company=company,
                asset=asset,
                date=date,
                amount=amount,
                description=f"Periodic depreciation ({rate.normalize():f}%)",
                voucher_id=voucher.voucher_id,
            )
            for asset, amount in amounts
        ]
        log_action(
            action="depreciate",
            instance=voucher,
            actor=actor,
            changes={"rate": str(rate), "assets": len(entries), "total": str(total)},
        )

    logger.info("Posted %s: %s across %d assets", voucher.voucher_id, total, len(entries))
    return voucher, entries
