"""
Stock quantities and stock worth for finished goods, raw material
(originals) and packing material.

Quantities come straight from production, sales, purchase and opening
records; negative stock is reported as a number, never as an error.
"""
from collections import defaultdict
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from django.db.models import Sum

from ..models import (Item, OriginalOpening, OriginalPurchase,
                      PackingMaterialItem, PackingMaterialPurchase,
                      Production, SalesInvoiceItem)

ZERO = Decimal("0")
CENT = Decimal("0.01")


def _cents(value):
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass
class StockRow:
    code: str
    name: str
    opening: Decimal
    production: Decimal
    sales: Decimal
    closing: Decimal
    unit_weight: Decimal
    closing_kg: Decimal
    stock_worth: Decimal


@dataclass
class RawMaterialRow:
    original_type: str
    purchased_kg: Decimal
    opened_kg: Decimal
    in_hand_kg: Decimal
    avg_cost_per_kg: Decimal
    value: Decimal


@dataclass
class PackingStockRow:
    name: str
    unit: str
    opening: Decimal
    purchased: Decimal
    in_hand: Decimal


def _sum_by_item(qs, item_field, qty_field):
    totals = defaultdict(lambda: ZERO)
    for item_id, qty in qs.values(item_field).annotate(q=Sum(qty_field)).values_list(item_field, "q"):
        totals[item_id] = qty or ZERO
    return totals


def _production(company, **date_filter):
    return _sum_by_item(
        Production.objects.for_company(company).filter(**date_filter),
        "item_id",
        "quantity_produced",
    )


def _sales(company, **date_filter):
    # Unposted invoices have not left the warehouse yet
    filters = {f"invoice__{k}": v for k, v in date_filter.items()}
    qs = SalesInvoiceItem.objects.filter(invoice__company=company, **filters).exclude(
        invoice__status="Unposted"
    )
    return _sum_by_item(qs, "item_id", "quantity")


def finished_goods_stock(company, start, end, item=None):
    """
    Per item: opening (setup stock + production - sales before `start`),
    movements inside [start, end], closing units, closing kg and worth
    at the item's average production price.
    """
    items = Item.objects.for_company(company).order_by("code")
    if item is not None:
        items = items.filter(pk=getattr(item, "pk", item))

    produced_before = _production(company, date__lt=start)
    sold_before = _sales(company, date__lt=start)
    produced = _production(company, date__gte=start, date__lte=end)
    sold = _sales(company, date__gte=start, date__lte=end)

    rows = []
    for it in items:
        opening = it.opening_stock + produced_before[it.pk] - sold_before[it.pk]
        closing = opening + produced[it.pk] - sold[it.pk]
        closing_kg = closing * it.unit_weight
        rows.append(
            StockRow(
                code=it.code,
                name=it.name,
                opening=opening,
                production=produced[it.pk],
                sales=sold[it.pk],
                closing=closing,
                unit_weight=it.unit_weight,
                closing_kg=closing_kg,
                stock_worth=_cents(closing_kg * it.avg_production_price),
            )
        )
    return rows


def finished_goods_value(company, as_of):
    """Worth of all finished goods on hand at `as_of`; items at or below zero add nothing."""
    produced = _production(company, date__lte=as_of)
    sold = _sales(company, date__lte=as_of)
    total = ZERO
    for it in Item.objects.for_company(company):
        units = it.opening_stock + produced[it.pk] - sold[it.pk]
        if units > 0:
            total += units * it.unit_weight * it.avg_production_price
    return _cents(total)


def raw_material_stock(company, as_of):
    """
    Per original type: kg purchased, kg opened, kg in hand and the
    weighted average landed cost per kg of everything purchased so far.
    """
    purchased_kg = defaultdict(lambda: ZERO)
    costed_kg = defaultdict(lambda: ZERO)
    cost = defaultdict(lambda: ZERO)
    types = {}

    purchases = OriginalPurchase.objects.for_company(company).filter(
        date__lte=as_of
    ).select_related("original_type")
    for purchase in purchases:
        otype = purchase.original_type
        types[otype.pk] = otype
        kg = otype.to_kg(purchase.quantity_purchased)
        purchased_kg[otype.pk] += kg
        if kg > 0:
            costed_kg[otype.pk] += kg
            cost[otype.pk] += purchase.cost_usd()

    opened = _sum_by_item(
        OriginalOpening.objects.for_company(company).filter(date__lte=as_of),
        "original_type_id",
        "total_kg",
    )

    rows = []
    for type_id, otype in sorted(types.items(), key=lambda kv: kv[1].name):
        avg = cost[type_id] / costed_kg[type_id] if costed_kg[type_id] > 0 else ZERO
        in_hand = purchased_kg[type_id] - opened[type_id]
        rows.append(
            RawMaterialRow(
                original_type=otype.name,
                purchased_kg=purchased_kg[type_id],
                opened_kg=opened[type_id],
                in_hand_kg=in_hand,
                avg_cost_per_kg=avg,
                value=in_hand * avg,
            )
        )
    return rows


def raw_material_value(company, as_of):
    return _cents(sum((row.value for row in raw_material_stock(company, as_of)), ZERO))


def packing_material_stock(company, as_of=None):
    """
    Opening stock plus purchases. Consumption is not recorded anywhere
    yet, so in-hand figures overstate stock by whatever was used.
    """
    purchases = PackingMaterialPurchase.objects.for_company(company)
    if as_of is not None:
        purchases = purchases.filter(date__lte=as_of)
    bought = _sum_by_item(purchases, "item_id", "quantity")

    return [
        PackingStockRow(
            name=it.name,
            unit=it.unit,
            opening=it.opening_stock,
            purchased=bought[it.pk],
            in_hand=it.opening_stock + bought[it.pk],
        )
        for it in PackingMaterialItem.objects.for_company(company).order_by("name")
    ]
