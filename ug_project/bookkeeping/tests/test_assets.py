from decimal import Decimal

from django.core.exceptions import ValidationError

from bookkeeping.exceptions import AlreadyPostedDifferentPayload
from bookkeeping.models import AssetType, DepreciationEntry
from bookkeeping.services import (acquire_asset, compute_ledger, find_voucher,
                                  post_depreciation)
from bookkeeping.tasks import post_depreciation_batch

from .base import BookTestCase, d


class FixedAssetTests(BookTestCase):

    def setUp(self):
        super().setUp()
        self.machinery = AssetType.objects.create(company=self.company, name="Machinery")
        self.vehicles = AssetType.objects.create(company=self.company, name="Vehicles")
        self.furniture = AssetType.objects.create(company=self.company, name="Furniture")
        self.loom = acquire_asset(
            self.company, code="A1", name="Loom", asset_type=self.machinery,
            purchase_date=d("2024-01-01"), purchase_value=1000,
        )
        self.truck = acquire_asset(
            self.company, code="A2", name="Truck", asset_type=self.vehicles,
            purchase_date=d("2024-01-01"), purchase_value=2000,
        )
        self.desk = acquire_asset(
            self.company, code="A3", name="Desk", asset_type=self.furniture,
            purchase_date=d("2024-01-01"), purchase_value=5000,
        )

    """ Acquisition """
    def test_acquisition_books_fixed_assets_against_opening_equity(self):
        voucher = find_voucher(self.company, "JV-FA-A1")

        self.assertEqual(voucher.description, "Acquisition of asset: Loom")
        self.assertEqual(voucher.entries.get(debit__gt=0).account.code, "FA-001")
        self.assertEqual(voucher.entries.get(credit__gt=0).account.code, "CAP-002")
        self.assertEqual(voucher.compute_totals(), (Decimal("1000.00"), Decimal("1000.00")))

    def test_asset_needs_positive_value(self):
        with self.assertRaises(ValidationError):
            acquire_asset(
                self.company, code="A4", name="Broken", asset_type=self.machinery,
                purchase_date=d("2024-01-01"), purchase_value=0,
            )
        self.assertIsNone(find_voucher(self.company, "JV-FA-A4"))

    """ Depreciation """
    def test_depreciation_batch(self):
        voucher, entries = post_depreciation(
            self.company, asset_types=[self.machinery, self.vehicles], rate=10,
            start=d("2024-01-01"), end=d("2024-12-31"),
        )

        self.assertTrue(voucher.voucher_id.startswith("JV-DEP-"))
        self.assertEqual(voucher.date, d("2024-12-31"))
        self.assertEqual(voucher.description, "Depreciation for period 2024-01-01 to 2024-12-31")
        self.assertEqual(sorted(e.amount for e in entries), [Decimal("100.00"), Decimal("200.00")])
        self.assertEqual(entries[0].description, "Periodic depreciation (10%)")
        self.assertTrue(all(e.voucher_id == voucher.voucher_id for e in entries))

        self.assertEqual(voucher.entries.get(account__code="EXP-012").debit, Decimal("300.00"))
        self.assertEqual(voucher.entries.get(account__code="AD-001").credit, Decimal("300.00"))

        self.assertEqual(self.loom.current_value, Decimal("900.00"))
        self.assertEqual(self.truck.current_value, Decimal("1800.00"))
        self.assertEqual(self.desk.current_value, Decimal("5000.00"))

    def test_only_active_assets_depreciate(self):
        self.truck.status = "Sold"
        self.truck.save()

        _, entries = post_depreciation(
            self.company, asset_types=[self.machinery, self.vehicles], rate="12.5",
            start=d("2024-01-01"), end=d("2024-06-30"),
        )

        self.assertEqual([e.asset for e in entries], [self.loom])
        self.assertEqual(entries[0].amount, Decimal("125.00"))
        self.assertEqual(entries[0].description, "Periodic depreciation (12.5%)")

    def test_rate_must_be_within_bounds(self):
        for rate in (0, -5, 101):
            with self.assertRaises(ValidationError):
                post_depreciation(
                    self.company, asset_types=[self.machinery], rate=rate,
                    start=d("2024-01-01"), end=d("2024-12-31"),
                )
        _, entries = post_depreciation(
            self.company, asset_types=[self.machinery], rate=100,
            start=d("2024-01-01"), end=d("2024-12-31"),
        )
        self.assertEqual(entries[0].amount, Decimal("1000.00"))

    def test_asset_types_are_required(self):
        with self.assertRaises(ValidationError):
            post_depreciation(
                self.company, asset_types=[], rate=10,
                start=d("2024-01-01"), end=d("2024-12-31"),
            )

    def test_failed_batch_leaves_nothing_behind(self):
        # the id is taken by the loom's acquisition voucher
        with self.assertRaises(AlreadyPostedDifferentPayload):
            post_depreciation(
                self.company, asset_types=[self.machinery], rate=10,
                start=d("2024-01-01"), end=d("2024-12-31"), voucher_id="JV-FA-A1",
            )
        self.assertFalse(DepreciationEntry.objects.exists())
        ledger = compute_ledger(
            self.company, account="AD-001", start=d("2024-01-01"), end=d("2024-12-31")
        )
        self.assertEqual(ledger.rows, [])

    def test_background_batch(self):
        result = post_depreciation_batch(
            self.company.pk, [self.furniture.pk], "10", "2024-01-01", "2024-12-31"
        )

        self.assertEqual(result["assets"], 1)
        self.assertEqual(self.desk.current_value, Decimal("4500.00"))
        self.assertEqual(find_voucher(self.company, result["voucher_id"]).created_by, "system")
