"""
Ledger aggregation over the journal.

Every figure here is recomputed from the stored entries; nothing is
kept in running totals. Balances are raw (debit - credit): positive
reads "Dr", negative reads "Cr".
"""
import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from django.core.cache import cache
from django.db.models import Sum

from ..conf import get_setting
from ..models import Account, BusinessEntity, Company, JournalEntry
from ..models.account import ACCOUNT_KINDS, PAYABLE_CODE, RECEIVABLE_CODE
from ..models.entity import ENTITY_TYPES, general_account_code

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")
CENT = Decimal("0.01")
ROLLUP_THRESHOLD = Decimal("0.01")

ENTITY_LABELS = dict(ENTITY_TYPES)
KIND_LABELS = dict(ACCOUNT_KINDS)


def balance_suffix(value):
    return "Dr" if value >= 0 else "Cr"


@dataclass
class LedgerRow:
    voucher_id: str
    date: object
    entry_type: str
    description: str
    debit: Decimal
    credit: Decimal
    balance: Decimal
    entity: str = ""

    @property
    def suffix(self):
        return balance_suffix(self.balance)


@dataclass
class Ledger:
    opening: Decimal = ZERO
    rows: list = field(default_factory=list)
    closing: Decimal = ZERO
    currency: str = "USD"

    @property
    def period_debit(self):
        return sum((r.debit for r in self.rows), ZERO)

    @property
    def period_credit(self):
        return sum((r.credit for r in self.rows), ZERO)


@dataclass
class SummaryRow:
    id: str
    name: str
    type: str
    opening: Decimal = ZERO
    debit: Decimal = ZERO
    credit: Decimal = ZERO
    closing: Decimal = ZERO


def _resolve(model, company, value):
    """Accept an instance or a code; unknown codes resolve to None."""
    if value is None or isinstance(value, model):
        return value
    return model.objects.for_company(company).filter(code=value).first()


def _select_entries(company, account, entity, general_account):
    qs = JournalEntry.objects.for_company(company).select_related("voucher", "entity")
    if entity is not None:
        if general_account is None:
            general_account = _resolve(
                Account, company, general_account_code(entity.entity_type)
            )
        if general_account is None:
            return None
        return qs.for_subledger(general_account, entity).in_order()
    if account is not None:
        return qs.filter(account=account).in_order()
    return None


def carried_rate_amounts(entries):
    """
    Re-express entries in the transaction currency.

    Legs with an original amount use it directly and update the rate
    (USD per unit of foreign currency). Legs without one are divided by
    the last rate seen; before any rate is known they count as zero.
    This is an approximation, not a stored rate history.
    """
    rate = Decimal("0")
    for entry in entries:
        if entry.original_amount:
            debit = entry.original_amount if entry.debit > 0 else ZERO
            credit = entry.original_amount if entry.credit > 0 else ZERO
            if entry.original_amount > 0:
                rate = (entry.debit + entry.credit) / entry.original_amount
        elif rate > 0:
            debit = (entry.debit / rate).quantize(CENT, rounding=ROUND_HALF_UP)
            credit = (entry.credit / rate).quantize(CENT, rounding=ROUND_HALF_UP)
        else:
            debit = credit = ZERO
        yield entry, debit, credit


def _cache_key(company, account, entity, general_account, start, end, currency):
    # created_at guards against a recycled primary key
    version, created = (
        Company.objects.filter(pk=company.pk)
        .values_list("snapshot_version", "created_at")
        .get()
    )
    return ":".join(
        str(part)
        for part in (
            "ledger", company.pk, created.timestamp(),
            getattr(account, "pk", ""), getattr(entity, "pk", ""),
            getattr(general_account, "pk", ""),
            start, end, currency, version,
        )
    )


def compute_ledger(company, *, account=None, entity=None, general_account=None,
                   start, end, display_currency=None, use_cache=True):
    """
    Opening balance, period rows with running balance, and closing
    balance for an account or for an entity's sub-ledger.

    - entity ledgers read (general_account, entity); general_account
      defaults to AR-001 for customers and AP-001 for everybody else
      when not given
    - display_currency other than the base currency switches to the
      ledger's own currency when it has one (FCY mode)
    - unknown accounts / entities give an empty ledger
    """
    base = company.base_currency_id
    account = _resolve(Account, company, account)
    entity = _resolve(BusinessEntity, company, entity)
    requested_general = general_account
    general_account = _resolve(Account, company, general_account)

    own_currency = None
    if entity is not None:
        own_currency = entity.default_currency_id
    elif account is not None:
        own_currency = account.currency_id
    use_fcy = bool(
        display_currency
        and display_currency != base
        and own_currency
        and own_currency != base
    )
    currency = own_currency if use_fcy else base

    # an unknown general account is not the same as none given
    if requested_general is not None and general_account is None:
        return Ledger(currency=currency)

    key = None
    if use_cache:
        key = _cache_key(company, account, entity, general_account, start, end, currency)
        cached = cache.get(key)
        if cached is not None:
            return cached

    entries = _select_entries(company, account, entity, general_account)
    if entries is None:
        return Ledger(currency=currency)

    if use_fcy:
        amounts = carried_rate_amounts(entries)
    else:
        amounts = ((e, e.debit, e.credit) for e in entries)

    ledger = Ledger(currency=currency)
    running = ZERO
    for entry, debit, credit in amounts:
        entry_date = entry.voucher.date
        if entry_date > end:
            break
        if entry_date < start:
            ledger.opening += debit - credit
            running = ledger.opening
            continue
        running += debit - credit
        ledger.rows.append(
            LedgerRow(
                voucher_id=entry.voucher.voucher_id,
                date=entry_date,
                entry_type=entry.voucher.entry_type,
                description=entry.description,
                debit=debit,
                credit=credit,
                balance=running,
                entity=entry.entity.code if entry.entity_id else "",
            )
        )
    ledger.closing = running

    if key is not None:
        cache.set(key, ledger, get_setting("LEDGER_CACHE_TIMEOUT"))
    return ledger


def kind_balance(company, kind, as_of=None):
    """Raw balance summed over every account of a kind."""
    qs = JournalEntry.objects.for_company(company).filter(account__kind=kind)
    if as_of is not None:
        qs = qs.up_to(as_of)
    return _net(qs)


def _net(qs):
    aggs = qs.aggregate(d=Sum("debit"), c=Sum("credit"))
    return (aggs["d"] or ZERO) - (aggs["c"] or ZERO)


def _summarize(rows_by_key, entries, start):
    for key, entry_date, debit, credit in entries:
        row = rows_by_key.get(key)
        if row is None:
            continue
        if entry_date < start:
            row.opening += debit - credit
        else:
            row.debit += debit
            row.credit += credit
    for row in rows_by_key.values():
        row.closing = row.opening + row.debit - row.credit
    return list(rows_by_key.values())


def summarize_by_type(company, type_key, start, end):
    """
    Opening / period debit / period credit / closing per member of a class.

    type_key is an entity type ("customer", "supplier", ...), in which case
    each row is that entity's sub-ledger on its general account, or an
    account kind ("bank", "expense", ...), in which case each row is one
    account. Unknown keys give no rows.
    """
    qs = JournalEntry.objects.for_company(company).up_to(end)

    if type_key in ENTITY_LABELS:
        members = BusinessEntity.objects.for_company(company).filter(
            entity_type=type_key
        ).order_by("name")
        rows = {
            m.pk: SummaryRow(id=m.code, name=m.name, type=ENTITY_LABELS[type_key])
            for m in members
        }
        values = qs.filter(
            account__code=general_account_code(type_key), entity__in=members
        ).values_list("entity_id", "voucher__date", "debit", "credit")
    elif type_key in KIND_LABELS:
        members = Account.objects.for_company(company).filter(kind=type_key).order_by("code")
        rows = {
            m.pk: SummaryRow(id=m.code, name=m.name, type=KIND_LABELS[type_key])
            for m in members
        }
        values = qs.filter(account__in=members).values_list(
            "account_id", "voucher__date", "debit", "credit"
        )
    else:
        return []

    return _summarize(rows, values, start)


def all_accounts_rollup(company, end):
    """
    Every entity and account with a closing balance beyond one cent as
    of `end`, sorted by type label and then name.

    The shared AR-001 / AP-001 accounts are represented by their
    entities' sub-ledgers rather than as single lines.
    """
    qs = JournalEntry.objects.for_company(company).up_to(end)
    results = []

    used = qs.filter(entity__isnull=False).values_list("entity_id", flat=True)
    for entity in BusinessEntity.objects.for_company(company).filter(pk__in=used):
        # only the entity's own general account counts towards its balance
        balance = _net(
            qs.filter(entity=entity, account__code=entity.general_account_code)
        )
        if abs(balance) > ROLLUP_THRESHOLD:
            results.append(
                SummaryRow(
                    id=entity.code,
                    name=entity.name,
                    type=ENTITY_LABELS[entity.entity_type],
                    closing=balance,
                )
            )

    shared = (RECEIVABLE_CODE, PAYABLE_CODE)
    for account in Account.objects.for_company(company).exclude(code__in=shared):
        balance = _net(qs.filter(account=account))
        if abs(balance) > ROLLUP_THRESHOLD:
            results.append(
                SummaryRow(
                    id=account.code,
                    name=account.name,
                    type=KIND_LABELS[account.kind],
                    closing=balance,
                )
            )

    return sorted(results, key=lambda r: (r.type, r.name))
