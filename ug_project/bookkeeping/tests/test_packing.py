from decimal import Decimal

from django.core.exceptions import ValidationError

from bookkeeping.models import BusinessEntity, PackingMaterialItem
from bookkeeping.services import (find_voucher, packing_material_stock,
                                  record_packing_purchase)
from bookkeeping.services.packing import packing_purchase_id

from .base import BookTestCase, d


class PackingPurchaseTests(BookTestCase):

    def setUp(self):
        super().setUp()
        self.vendor = BusinessEntity.objects.create(
            company=self.company, code="V1", name="Strap Co", entity_type="vendor"
        )
        self.strapping = PackingMaterialItem.objects.create(
            company=self.company, name="Strapping", unit="Roll", opening_stock=Decimal("5")
        )

    def test_purchase_id_format(self):
        self.assertEqual(packing_purchase_id(7, d("2024-03-05")), "PMP7_05_03_24")

    def test_purchase_is_booked_under_its_own_id(self):
        purchase = record_packing_purchase(
            self.company, date=d("2024-03-05"), vendor=self.vendor, item=self.strapping,
            quantity=20, rate="3.5", currency="USD",
        )

        self.assertEqual(purchase.purchase_id, "PMP1_05_03_24")
        self.assertEqual(purchase.total_amount_usd, Decimal("70.00"))
        voucher = find_voucher(self.company, "PMP1_05_03_24")
        self.assertEqual(voucher.entries.get(account__code="INV-PM-001").debit, Decimal("70.00"))
        credit = voucher.entries.get(account__code="AP-001")
        self.assertEqual(credit.credit, Decimal("70.00"))
        self.assertEqual(credit.entity, self.vendor)
        self.assertEqual(self.company.next_packing_material_purchase_number, 2)

    def test_numbers_keep_counting(self):
        record_packing_purchase(
            self.company, date=d("2024-03-05"), vendor=self.vendor, item=self.strapping,
            quantity=1, rate=1, currency="USD",
        )
        second = record_packing_purchase(
            self.company, date=d("2024-04-11"), vendor=self.vendor, item=self.strapping,
            quantity=20, rate=2, currency=self.eur, conversion_rate="1.1",
        )

        self.assertEqual(second.purchase_id, "PMP2_11_04_24")
        self.assertEqual(second.total_amount_usd, Decimal("44.00"))
        self.assertEqual(packing_material_stock(self.company)[0].in_hand, Decimal("26"))
        self.assertEqual(
            packing_material_stock(self.company, as_of=d("2024-03-31"))[0].in_hand, Decimal("6")
        )

    def test_only_vendors_supply_packing_material(self):
        with self.assertRaises(ValidationError):
            record_packing_purchase(
                self.company, date=d("2024-03-05"), vendor=self.supplier, item=self.strapping,
                quantity=20, rate=1, currency="USD",
            )
        self.assertEqual(self.strapping.purchases.count(), 0)
