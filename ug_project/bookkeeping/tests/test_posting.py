from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import ProtectedError

from bookkeeping.exceptions import (AlreadyPostedDifferentPayload,
                                    UnbalancedVoucherError)
from bookkeeping.models import AuditLog, JournalEntry, Voucher
from bookkeeping.services import (append_voucher, batch_append,
                                  next_voucher_id, record_receipt)
from bookkeeping.services.posting import line

from .base import BookTestCase, d


""" Appending vouchers """
class AppendVoucherTests(BookTestCase):

    def _lines(self, amount="100.00"):
        return [
            line(self.cash, debit=Decimal(amount), description="cash in"),
            line(self.account("REV-001"), credit=Decimal(amount), description="sale"),
        ]

    def test_balanced_voucher_is_appended_with_all_entries(self):
        voucher = append_voucher(
            self.company, date=d("2024-03-01"), entry_type="Journal",
            lines=self._lines(), description="Cash sale",
        )

        self.assertEqual(voucher.voucher_id, "JV-001")
        self.assertEqual(voucher.entries.count(), 2)
        self.assertTrue(voucher.is_balanced())
        self.assertEqual(self.company.next_journal_voucher_number, 2)
        self.assertEqual(self.company.snapshot_version, 1)
        self.assertTrue(
            AuditLog.objects.filter(action="append", object_id=str(voucher.pk)).exists()
        )

    def test_unbalanced_voucher_writes_nothing(self):
        lines = [
            line(self.cash, debit=Decimal("100.00")),
            line(self.account("REV-001"), credit=Decimal("99.00")),
        ]
        with self.assertRaises(UnbalancedVoucherError) as cm:
            append_voucher(self.company, date=d("2024-03-01"), entry_type="Journal", lines=lines)

        self.assertIn("Voucher not balanced", str(cm.exception))
        self.assertEqual(Voucher.objects.count(), 0)
        self.assertEqual(JournalEntry.objects.count(), 0)
        self.company.refresh_from_db()
        self.assertEqual(self.company.next_journal_voucher_number, 1)

    def test_leg_with_both_sides_is_rejected(self):
        lines = [
            {"account": self.cash, "debit": Decimal("5"), "credit": Decimal("5")},
            line(self.account("REV-001"), credit=Decimal("0.00")),
        ]
        with self.assertRaises(ValidationError):
            append_voucher(self.company, date=d("2024-03-01"), entry_type="Journal", lines=lines)

    def test_reappending_same_payload_is_idempotent(self):
        first = append_voucher(
            self.company, voucher_id="JV-IMPORT-1", date=d("2024-03-01"),
            entry_type="Journal", lines=self._lines(),
        )
        second = append_voucher(
            self.company, voucher_id="JV-IMPORT-1", date=d("2024-03-01"),
            entry_type="Journal", lines=self._lines(),
        )

        self.assertEqual(first.pk, second.pk)
        self.assertEqual(JournalEntry.objects.count(), 2)
        self.company.refresh_from_db()
        self.assertEqual(self.company.snapshot_version, 1)

    def test_reappending_different_payload_is_rejected(self):
        append_voucher(
            self.company, voucher_id="JV-IMPORT-1", date=d("2024-03-01"),
            entry_type="Journal", lines=self._lines(),
        )
        with self.assertRaises(AlreadyPostedDifferentPayload):
            append_voucher(
                self.company, voucher_id="JV-IMPORT-1", date=d("2024-03-01"),
                entry_type="Journal", lines=self._lines("250.00"),
            )
        self.assertEqual(JournalEntry.objects.count(), 2)


""" Voucher numbering """
class VoucherNumberingTests(BookTestCase):

    def test_numbers_are_zero_padded_per_type(self):
        self.assertEqual(next_voucher_id(self.company, "Receipt"), "RV-001")
        first = record_receipt(
            self.company, date=d("2024-03-01"), customer=self.customer,
            account=self.cash, amount=10,
        )
        second = record_receipt(
            self.company, date=d("2024-03-02"), customer=self.customer,
            account=self.cash, amount=20,
        )

        self.assertEqual(first.voucher_id, "RV-001")
        self.assertEqual(second.voucher_id, "RV-002")
        self.assertEqual(next_voucher_id(self.company, "Receipt"), "RV-003")
        # other prefixes keep their own counters
        self.assertEqual(next_voucher_id(self.company, "Payment"), "PV-001")

    def test_explicit_ids_do_not_consume_numbers(self):
        append_voucher(
            self.company, voucher_id="JV-FA-X", date=d("2024-03-01"), entry_type="Journal",
            lines=[
                line(self.account("FA-001"), debit=Decimal("10")),
                line(self.account("CAP-002"), credit=Decimal("10")),
            ],
        )
        self.assertEqual(next_voucher_id(self.company, "Journal"), "JV-001")

    def test_numbering_skips_ids_taken_explicitly(self):
        append_voucher(
            self.company, voucher_id="RV-001", date=d("2024-03-01"), entry_type="Receipt",
            lines=[
                line(self.cash, debit=Decimal("10")),
                line(self.account("AR-001"), credit=Decimal("10"), entity=self.customer),
            ],
        )
        first = record_receipt(
            self.company, date=d("2024-03-02"), customer=self.customer,
            account=self.cash, amount=10,
        )
        second = record_receipt(
            self.company, date=d("2024-03-03"), customer=self.customer,
            account=self.cash, amount=10,
        )

        self.assertEqual(first.voucher_id, "RV-002")
        self.assertEqual(second.voucher_id, "RV-003")
        self.assertEqual(Voucher.objects.count(), 3)
        self.assertEqual(next_voucher_id(self.company, "Receipt"), "RV-004")

    def test_numbers_beyond_999_keep_growing(self):
        self.company.next_expense_voucher_number = 1000
        self.company.save()
        self.assertEqual(next_voucher_id(self.company, "Expense"), "EV-1000")


""" Batches are all or nothing """
class BatchAppendTests(BookTestCase):

    def test_failed_voucher_rolls_back_the_whole_batch(self):
        good = {
            "date": d("2024-03-01"),
            "entry_type": "Journal",
            "lines": [
                line(self.cash, debit=Decimal("10")),
                line(self.account("CAP-001"), credit=Decimal("10")),
            ],
        }
        bad = {
            "date": d("2024-03-01"),
            "entry_type": "Journal",
            "lines": [
                line(self.cash, debit=Decimal("10")),
                line(self.account("CAP-001"), credit=Decimal("9")),
            ],
        }
        with self.assertRaises(UnbalancedVoucherError):
            batch_append(self.company, [good, bad])

        self.assertEqual(Voucher.objects.count(), 0)
        self.company.refresh_from_db()
        self.assertEqual(self.company.next_journal_voucher_number, 1)
        self.assertEqual(self.company.snapshot_version, 0)

    def test_extra_runs_with_the_appended_vouchers(self):
        seen = []
        spec = {
            "date": d("2024-03-01"),
            "entry_type": "Journal",
            "lines": [
                line(self.cash, debit=Decimal("10")),
                line(self.account("CAP-001"), credit=Decimal("10")),
            ],
        }
        batch_append(self.company, [spec, dict(spec)], extra=lambda vs: seen.extend(v.voucher_id for v in vs))

        self.assertEqual(seen, ["JV-001", "JV-002"])

    def test_extra_failure_rolls_back_vouchers(self):
        spec = {
            "date": d("2024-03-01"),
            "entry_type": "Journal",
            "lines": [
                line(self.cash, debit=Decimal("10")),
                line(self.account("CAP-001"), credit=Decimal("10")),
            ],
        }

        def boom(vouchers):
            raise ValidationError("extra rows failed")

        with self.assertRaises(ValidationError):
            batch_append(self.company, [spec], extra=boom)
        self.assertFalse(Voucher.objects.exists())


""" Append-only journal """
class JournalImmutabilityTests(BookTestCase):

    def test_vouchers_and_entries_cannot_be_deleted(self):
        voucher = record_receipt(
            self.company, date=d("2024-03-01"), customer=self.customer,
            account=self.cash, amount=10,
        )
        entry = voucher.entries.first()
        with self.assertRaises(ValidationError), transaction.atomic():
            entry.delete()
        # entries hold a protected reference to their voucher
        with self.assertRaises(ProtectedError):
            voucher.delete()

    def test_used_account_cannot_be_deleted_or_disabled(self):
        record_receipt(
            self.company, date=d("2024-03-01"), customer=self.customer,
            account=self.cash, amount=10,
        )
        with self.assertRaises(ProtectedError):
            self.cash.delete()
        self.cash.is_active = False
        with self.assertRaises(ValidationError):
            self.cash.save()
