import logging
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import transaction

from ..conf import get_setting
from ..models import Account, Currency, Voucher
from ..models.account import RECEIVABLE_CODE
from ..models.journal import REVERSAL_PREFIX
from .audit_helper import log_action
from .posting import ZERO, append_voucher, line, money

logger = logging.getLogger(__name__)

CASH_KINDS = ("cash", "bank")


def system_account(company, code):
    """Fetch one of the fixed-code accounts (AR-001, FA-001, ...)."""
    try:
        return Account.objects.for_company(company).get(code=code)
    except Account.DoesNotExist:
        raise ValidationError(f"Account {code} is not set up for {company}")


def find_voucher(company, voucher_id):
    """Return the voucher, or None when the id is unknown."""
    return (
        Voucher.objects.for_company(company)
        .filter(voucher_id=voucher_id)
        .prefetch_related("entries__account", "entries__entity")
        .first()
    )


def _convert(company, amount, currency, rate):
    """
    Turn an entered amount into (usd, original_amount, original_currency).
    Base-currency amounts carry no original amount.
    """
    amount = Decimal(str(amount))
    if amount <= 0:
        raise ValidationError("Amount must be greater than zero.")
    code = getattr(currency, "code", currency) or company.base_currency_id
    if code == company.base_currency_id:
        return money(amount), None, None
    rate = Decimal(str(rate or 0))
    if rate <= 0:
        raise ValidationError("A conversion rate is required for foreign currency amounts.")
    return money(amount * rate), money(amount), code


def _currency(code):
    if code is None:
        return None
    return Currency.objects.get(pk=code)


def _cash_account(account):
    if account.kind not in CASH_KINDS:
        raise ValidationError(f"{account.code} is not a cash or bank account.")
    return account


def _simple_voucher(company, *, entry_type, date, debit_account, credit_account,
                    amount, currency, rate, description, debit_entity=None,
                    credit_entity=None, actor=""):
    """Two-legged voucher; both legs keep the original amount when FCY."""
    usd, original, original_currency = _convert(company, amount, currency, rate)
    original_currency = _currency(original_currency)
    lines = [
        line(debit_account, debit=usd, description=description, entity=debit_entity,
             original_amount=original,
             original_currency=original_currency),
        line(credit_account, credit=usd, description=description, entity=credit_entity,
             original_amount=original,
             original_currency=original_currency),
    ]
    return append_voucher(
        company,
        date=date,
        entry_type=entry_type,
        lines=lines,
        description=description,
        created_by=actor,
    )


def record_receipt(company, *, date, customer, account, amount, currency=None,
                   rate=1, description="", actor=""):
    """RV: money in from a customer. Dr cash/bank, Cr AR-001 (customer)."""
    if customer.entity_type != "customer":
        raise ValidationError("Receipts are taken from customers.")
    return _simple_voucher(
        company,
        entry_type="Receipt",
        date=date,
        debit_account=_cash_account(account),
        credit_account=system_account(company, RECEIVABLE_CODE),
        credit_entity=customer,
        amount=amount,
        currency=currency,
        rate=rate,
        description=description or f"Receipt from {customer.name}",
        actor=actor,
    )


def record_payment(company, *, date, entity, account, amount, currency=None,
                   rate=1, description="", actor=""):
    """PV: money out to a party. Dr its general account (entity), Cr cash/bank."""
    return _simple_voucher(
        company,
        entry_type="Payment",
        date=date,
        debit_account=system_account(company, entity.general_account_code),
        debit_entity=entity,
        credit_account=_cash_account(account),
        amount=amount,
        currency=currency,
        rate=rate,
        description=description or f"Payment to {entity.name}",
        actor=actor,
    )


def record_expense(company, *, date, expense_account, account, amount,
                   currency=None, rate=1, description="", actor=""):
    """EV: Dr the expense account, Cr cash/bank."""
    if expense_account.kind != "expense":
        raise ValidationError(f"{expense_account.code} is not an expense account.")
    return _simple_voucher(
        company,
        entry_type="Expense",
        date=date,
        debit_account=expense_account,
        credit_account=_cash_account(account),
        amount=amount,
        currency=currency,
        rate=rate,
        description=description or expense_account.name,
        actor=actor,
    )


def _book_rounding_difference(lines, difference):
    """
    Cents lost to rounding each converted leg go on the largest leg of
    the short side, so the stored voucher balances exactly.
    """
    side = "credit" if difference > 0 else "debit"
    largest = max(lines, key=lambda leg: leg[side])
    largest[side] += abs(difference)


def record_journal(company, *, date, description, items, actor=""):
    """
    JV from free-form items. Each item is a dict with `debit` or `credit`,
    either `account` or `entity`, and optionally `currency`, `rate` and
    `description`. Entity items post to the entity's general account.
    """
    if not (description or "").strip():
        raise ValidationError("A journal voucher needs a description.")

    tolerance = get_setting("JOURNAL_BALANCE_TOLERANCE")
    lines = []
    raw_total = Decimal("0")
    for item in items:
        entity = item.get("entity")
        account = item.get("account")
        if entity is not None:
            account = system_account(company, entity.general_account_code)
        if account is None:
            raise ValidationError("Every journal line needs an account or an entity.")

        raw_debit = Decimal(str(item.get("debit") or 0))
        raw_credit = Decimal(str(item.get("credit") or 0))
        currency = item.get("currency")
        code = getattr(currency, "code", currency) or company.base_currency_id
        rate = Decimal(str(item.get("rate") or 1))
        original = None
        if code != company.base_currency_id:
            original = money(raw_debit or raw_credit)
            raw_debit *= rate
            raw_credit *= rate
        raw_total += raw_debit - raw_credit
        lines.append(
            line(
                account,
                debit=raw_debit,
                credit=raw_credit,
                description=item.get("description") or description,
                entity=entity,
                original_amount=original,
                original_currency=_currency(code) if original is not None else None,
            )
        )

    total_debit = sum((leg["debit"] for leg in lines), ZERO)
    total_credit = sum((leg["credit"] for leg in lines), ZERO)
    if abs(raw_total) > tolerance:
        raise ValidationError(
            f"Journal voucher is not balanced: debits={total_debit}, credits={total_credit}"
        )
    if total_debit == 0:
        raise ValidationError("Journal voucher total cannot be zero.")
    if total_debit != total_credit:
        _book_rounding_difference(lines, total_debit - total_credit)

    return append_voucher(
        company,
        date=date,
        entry_type="Journal",
        lines=lines,
        description=description,
        created_by=actor,
    )


@transaction.atomic
def reverse_voucher(company, voucher_id, *, date, actor=""):
    """
    Undo a voucher by appending its mirror image as a new JV.
    The original stays untouched; each mirrored leg is marked [REVERSED].
    """
    original = find_voucher(company, voucher_id)
    if original is None:
        raise ValidationError(f"Voucher {voucher_id} not found.")
    if original.is_reversal:
        raise ValidationError(f"{voucher_id} is itself a reversal.")
    if original.is_reversed:
        raise ValidationError(f"{voucher_id} has already been reversed.")

    lines = [
        line(
            entry.account,
            debit=entry.credit,
            credit=entry.debit,
            description=f"{REVERSAL_PREFIX}{entry.description}",
            entity=entry.entity,
            original_amount=entry.original_amount,
            original_currency=entry.original_currency,
        )
        for entry in original.entries.order_by("pk")
    ]
    reversal = append_voucher(
        company,
        date=date,
        entry_type="Journal",
        lines=lines,
        description=f"{REVERSAL_PREFIX}{original.description}",
        created_by=actor,
        reverses=original,
    )
    log_action(
        action="reverse",
        instance=original,
        actor=actor,
        changes={"reversed_by": reversal.voucher_id},
    )
    logger.info("Reversed %s with %s", voucher_id, reversal.voucher_id)
    return reversal
