"""
Balance Sheet and Profit & Loss.

Each account kind lands in exactly one place, so the statements cover
every entry in the journal and the balance sheet identity holds for
any date:

    total assets == total liabilities + total equity
"""
import logging
from dataclasses import dataclass, field
from decimal import Decimal

from django.db.models import Sum

from ..conf import get_setting
from ..models import Account, JournalEntry
from ..models.account import OPENING_BALANCE_EQUITY_CODE, display_balance
from .inventory import finished_goods_value, raw_material_value
from .ledger import kind_balance

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


@dataclass
class ProfitAndLoss:
    start: object
    end: object
    revenue: Decimal = ZERO
    revenue_lines: list = field(default_factory=list)
    expenses: list = field(default_factory=list)

    @property
    def total_expenses(self):
        return sum((amount for _, _, amount in self.expenses), ZERO)

    @property
    def net_income(self):
        return self.revenue - self.total_expenses


@dataclass
class BalanceSheet:
    as_of: object
    assets: dict
    liabilities: dict
    equity: dict

    @property
    def total_assets(self):
        return sum(self.assets.values(), ZERO)

    @property
    def total_liabilities(self):
        return sum(self.liabilities.values(), ZERO)

    @property
    def total_equity(self):
        return sum(self.equity.values(), ZERO)

    @property
    def difference(self):
        return self.total_assets - (self.total_liabilities + self.total_equity)

    @property
    def is_balanced(self):
        return abs(self.difference) <= get_setting("REPORT_BALANCE_EPSILON")


def _per_account(company, kind, entries):
    """(code, name, debit - credit) for each account of a kind with activity."""
    totals = (
        entries.filter(account__kind=kind)
        .values("account_id")
        .annotate(d=Sum("debit"), c=Sum("credit"))
        .values_list("account_id", "d", "c")
    )
    accounts = Account.objects.for_company(company).in_bulk(
        [account_id for account_id, _, _ in totals]
    )
    lines = []
    for account_id, debit, credit in totals:
        account = accounts[account_id]
        lines.append((account.code, account.name, (debit or ZERO) - (credit or ZERO)))
    return sorted(lines)


def _income(company, entries):
    revenue_lines = [
        (code, name, display_balance("revenue", raw))
        for code, name, raw in _per_account(company, "revenue", entries)
    ]
    expenses = [
        (code, name, raw)
        for code, name, raw in _per_account(company, "expense", entries)
        if raw != 0
    ]
    return revenue_lines, expenses


def build_profit_and_loss(company, start, end):
    """Revenue and per-account expenses for entries dated within [start, end]."""
    entries = JournalEntry.objects.for_company(company).between(start, end)
    revenue_lines, expenses = _income(company, entries)
    return ProfitAndLoss(
        start=start,
        end=end,
        revenue=sum((amount for _, _, amount in revenue_lines), ZERO),
        revenue_lines=revenue_lines,
        expenses=expenses,
    )


def net_income_to_date(company, as_of):
    """Revenue less expenses from the first entry up to `as_of`."""
    entries = JournalEntry.objects.for_company(company).up_to(as_of)
    revenue_lines, expenses = _income(company, entries)
    revenue = sum((amount for _, _, amount in revenue_lines), ZERO)
    return revenue - sum((amount for _, _, amount in expenses), ZERO)


def build_balance_sheet(company, as_of):
    """
    Assets, liabilities and equity as of a date.

    Finished goods and raw material are carried at their computed stock
    worth rather than at the inventory account's book balance; the
    inventory adjustment in equity absorbs the difference.
    """
    def bal(kind):
        return kind_balance(company, kind, as_of)

    finished_goods = finished_goods_value(company, as_of)
    raw_material = raw_material_value(company, as_of)

    assets = {
        "cash": bal("cash"),
        "bank": bal("bank"),
        "receivables": bal("receivable"),
        "finished_goods_inventory": finished_goods,
        "raw_material_inventory": raw_material,
        "packing_material_inventory": bal("packing_inventory"),
        "investments": bal("investment"),
        "fixed_assets": bal("fixed_asset"),
        # contra-asset: stays negative
        "accumulated_depreciation": bal("accumulated_depreciation"),
    }

    liabilities = {
        "payables": display_balance("payable", bal("payable")),
        "loans": display_balance("loan", bal("loan")),
    }

    opening_equity = Account.objects.for_company(company).filter(
        code=OPENING_BALANCE_EQUITY_CODE
    ).first()
    opening_equity_raw = opening_equity.raw_balance(as_of) if opening_equity else ZERO
    equity = {
        "capital": display_balance("capital", bal("capital") - opening_equity_raw),
        "opening_balance_equity": display_balance("capital", opening_equity_raw),
        "net_income": net_income_to_date(company, as_of),
        "inventory_adjustment": (raw_material + finished_goods) - bal("inventory"),
    }

    sheet = BalanceSheet(as_of=as_of, assets=assets, liabilities=liabilities, equity=equity)
    if not sheet.is_balanced:
        # only possible if entries were written around append_voucher
        logger.error(
            "Balance sheet for %s as of %s is off by %s", company, as_of, sheet.difference
        )
    return sheet
