from decimal import Decimal

from bookkeeping.models import (Item, OriginalOpening, OriginalPurchase,
                                OriginalType, PackingMaterialItem, Production,
                                SalesInvoice, SalesInvoiceItem)
from bookkeeping.services import (finished_goods_stock, finished_goods_value,
                                  packing_material_stock, raw_material_stock,
                                  raw_material_value)

from .base import BookTestCase, d


def sell(company, number, date, customer, item, quantity, status="Posted"):
    invoice = SalesInvoice.objects.create(
        company=company, invoice_number=number, date=date,
        customer=customer, status=status,
    )
    SalesInvoiceItem.objects.create(invoice=invoice, item=item, quantity=quantity)
    return invoice


""" Finished goods """
class FinishedGoodsTests(BookTestCase):

    def setUp(self):
        super().setUp()
        self.bales = Item.objects.create(
            company=self.company, code="ITM-1", name="Cotton Rags", packing_type="Bales",
            bale_size=Decimal("45"), avg_production_price=Decimal("0.80"),
            opening_stock=Decimal("10"),
        )
        self.loose = Item.objects.create(
            company=self.company, code="ITM-2", name="Loose Wipers", packing_type="Kg",
            bale_size=Decimal("0"), avg_production_price=Decimal("1.50"),
        )
        Production.objects.create(
            company=self.company, date=d("2024-01-10"), item=self.bales,
            quantity_produced=Decimal("5"),
        )
        sell(self.company, "INV-1", d("2024-01-15"), self.customer, self.bales, Decimal("3"))
        sell(self.company, "INV-2", d("2024-01-20"), self.customer, self.bales, Decimal("100"),
             status="Unposted")
        sell(self.company, "INV-3", d("2024-01-21"), self.customer, self.loose, Decimal("7"),
             status="Shipped")

    def test_stock_movements_per_item(self):
        rows = {r.code: r for r in finished_goods_stock(self.company, d("2024-01-12"), d("2024-01-31"))}
        bales = rows["ITM-1"]

        self.assertEqual(bales.opening, Decimal("15"))
        self.assertEqual(bales.production, Decimal("0"))
        self.assertEqual(bales.sales, Decimal("3"))
        self.assertEqual(bales.closing, Decimal("12"))
        self.assertEqual(bales.closing_kg, Decimal("540"))
        self.assertEqual(bales.stock_worth, Decimal("432.00"))

    def test_negative_stock_is_reported_as_a_number(self):
        loose = finished_goods_stock(self.company, d("2024-01-01"), d("2024-01-31"), item=self.loose)[0]

        self.assertEqual(loose.closing, Decimal("-7"))
        self.assertEqual(loose.unit_weight, Decimal("1"))
        self.assertEqual(loose.stock_worth, Decimal("-10.50"))

    def test_value_skips_items_out_of_stock(self):
        self.assertEqual(finished_goods_value(self.company, d("2024-01-31")), Decimal("432.00"))
        # before any production or sale only the opening stock counts
        self.assertEqual(finished_goods_value(self.company, d("2024-01-01")), Decimal("360.00"))


""" Raw material """
class RawMaterialTests(BookTestCase):

    def setUp(self):
        super().setUp()
        self.mixed = OriginalType.objects.create(
            company=self.company, name="Mixed", packing_type="Bales", packing_size=Decimal("50")
        )
        OriginalPurchase.objects.create(
            company=self.company, date=d("2024-01-02"), supplier=self.supplier,
            original_type=self.mixed, quantity_purchased=Decimal("10"), rate=Decimal("20"),
            currency=self.eur, conversion_rate=Decimal("1.1"),
            freight_amount=Decimal("50"), freight_conversion_rate=Decimal("1"),
        )
        OriginalPurchase.objects.create(
            company=self.company, date=d("2024-01-05"), supplier=self.supplier,
            original_type=self.mixed, quantity_purchased=Decimal("10"), rate=Decimal("25"),
            currency=self.usd,
        )
        OriginalOpening.objects.create(
            company=self.company, date=d("2024-01-20"), original_type=self.mixed,
            opened=Decimal("8"), total_kg=Decimal("400"),
        )

    def test_weighted_average_cost(self):
        row = raw_material_stock(self.company, d("2024-01-31"))[0]

        self.assertEqual(row.purchased_kg, Decimal("1000"))
        self.assertEqual(row.opened_kg, Decimal("400"))
        self.assertEqual(row.in_hand_kg, Decimal("600"))
        # (10 * 20 * 1.1 + 50 + 10 * 25) / 1000 kg
        self.assertEqual(row.avg_cost_per_kg, Decimal("0.52"))
        self.assertEqual(raw_material_value(self.company, d("2024-01-31")), Decimal("312.00"))

    def test_value_as_of_earlier_date(self):
        self.assertEqual(raw_material_value(self.company, d("2024-01-10")), Decimal("520.00"))
        self.assertEqual(raw_material_value(self.company, d("2024-01-01")), Decimal("0.00"))


""" Packing material """
class PackingStockTests(BookTestCase):

    def test_in_hand_is_opening_plus_purchases(self):
        PackingMaterialItem.objects.create(
            company=self.company, name="Strapping", unit="Roll", opening_stock=Decimal("5")
        )
        row = packing_material_stock(self.company)[0]

        self.assertEqual(row.opening, Decimal("5"))
        self.assertEqual(row.purchased, Decimal("0"))
        self.assertEqual(row.in_hand, Decimal("5"))
