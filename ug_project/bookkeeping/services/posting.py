import logging
from decimal import ROUND_HALF_UP, Decimal

from django.core.exceptions import ValidationError
from django.db import transaction

from ..exceptions import AlreadyPostedDifferentPayload, UnbalancedVoucherError
from ..models import Company, JournalEntry, Voucher
from ..models.company import VOUCHER_COUNTERS
from ..models.journal import fingerprint_payload
from .audit_helper import log_action

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

# Voucher prefix for each entry type
PREFIXES = {
    "Receipt": "RV",
    "Payment": "PV",
    "Expense": "EV",
    "Journal": "JV",
}


def money(value):
    """Quantize to cents the way every stored amount is."""
    if value is None:
        return ZERO
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def format_voucher_id(prefix, number):
    # RV-001 ... RV-999, RV-1000
    return f"{prefix}-{number:03d}"


def _free_number(company, prefix, number):
    # skip numbers already taken by explicit or imported ids
    while Voucher.objects.filter(
        company=company, voucher_id=format_voucher_id(prefix, number)
    ).exists():
        number += 1
    return number


def next_voucher_id(company, entry_type):
    """
    Preview the id the next numbered voucher of this type will get.
    The number is only consumed when the voucher is appended.
    """
    prefix = PREFIXES[entry_type]
    company.refresh_from_db(fields=[VOUCHER_COUNTERS[prefix]])
    number = _free_number(company, prefix, getattr(company, VOUCHER_COUNTERS[prefix]))
    return format_voucher_id(prefix, number)


def line(account, *, debit=ZERO, credit=ZERO, description="", entity=None,
         original_amount=None, original_currency=None):
    """Build one voucher leg in the shape append_voucher expects."""
    return {
        "account": account,
        "debit": money(debit),
        "credit": money(credit),
        "description": description,
        "entity": entity,
        "original_amount": original_amount,
        "original_currency": original_currency,
    }


def check_lines(lines):
    """
    Validate legs before anything is written.
    Returns (total_debit, total_credit).
    """
    if len(lines) < 2:
        raise ValidationError("A voucher needs at least two entries.")

    total_debit = ZERO
    total_credit = ZERO
    for leg in lines:
        debit = money(leg.get("debit"))
        credit = money(leg.get("credit"))
        if debit < 0 or credit < 0:
            raise ValidationError("Debit and credit amounts cannot be negative.")
        if (debit > 0) == (credit > 0):
            raise ValidationError(
                f"Entry on {leg['account'].code} needs exactly one of debit or credit."
            )
        total_debit += debit
        total_credit += credit

    if total_debit != total_credit:
        raise UnbalancedVoucherError(
            f"Voucher not balanced: debits={total_debit}, credits={total_credit}"
        )
    return total_debit, total_credit


@transaction.atomic
def append_voucher(company, *, date, entry_type, lines, voucher_id=None,
                   description="", created_by="", reverses=None):
    """
    Append one voucher and all its legs as a single unit.

    - voucher_id=None takes the next free number for the entry type
      (RV-###, ...) and advances that counter; explicit ids leave the
      counters alone.
    - Appending an existing id with identical legs returns the stored
      voucher; different legs raise AlreadyPostedDifferentPayload.
    """
    # Serialize writers on the book row (counters + snapshot version)
    book = Company.objects.select_for_update().get(pk=company.pk)

    try:
        check_lines(lines)
    except (ValidationError, UnbalancedVoucherError) as exc:
        logger.warning("Rejected voucher %s for %s: %s", voucher_id or entry_type, book, exc)
        raise

    counter = None
    if voucher_id is None:
        prefix = PREFIXES[entry_type]
        counter = VOUCHER_COUNTERS[prefix]
        number = _free_number(book, prefix, getattr(book, counter))
        setattr(book, counter, number)
        voucher_id = format_voucher_id(prefix, number)

    fp = fingerprint_payload(date, entry_type, lines)

    """ Idempotency & immutability """
    existing = Voucher.objects.filter(company=book, voucher_id=voucher_id).first()
    if existing:
        if existing.posting_fingerprint == fp:
            return existing
        raise AlreadyPostedDifferentPayload(
            f"Voucher {voucher_id} already exists with different entries."
        )

    voucher = Voucher.objects.create(
        company=book,
        voucher_id=voucher_id,
        date=date,
        entry_type=entry_type,
        description=description,
        created_by=created_by,
        posting_fingerprint=fp,
        reverses=reverses,
    )
    for leg in lines:
        entity = leg.get("entity")
        JournalEntry.objects.create(
            company=book,
            voucher=voucher,
            account=leg["account"],
            debit=money(leg.get("debit")),
            credit=money(leg.get("credit")),
            description=leg.get("description") or description,
            entity=entity,
            entity_type=entity.entity_type if entity else "",
            original_amount=leg.get("original_amount"),
            original_currency=leg.get("original_currency"),
            created_by=created_by,
        )

    update_fields = ["snapshot_version"]
    if counter:
        setattr(book, counter, getattr(book, counter) + 1)
        update_fields.append(counter)
    book.snapshot_version += 1
    book.save(update_fields=update_fields)

    log_action(
        action="append",
        instance=voucher,
        actor=created_by,
        company=book,
        changes={"voucher_id": voucher_id, "entries": len(lines)},
    )
    logger.info("Appended %s (%s, %d entries) to %s", voucher_id, entry_type, len(lines), book)

    # keep the caller's instance in step with the locked row
    company.refresh_from_db()
    return voucher


@transaction.atomic
def batch_append(company, vouchers, extra=None):
    """
    All-or-nothing append of several vouchers. `extra` runs inside the
    same transaction with the appended vouchers, for rows that must land
    together with them (depreciation entries, purchases).
    """
    appended = [append_voucher(company, **spec) for spec in vouchers]
    if extra is not None:
        extra(appended)
    return appended
