from io import StringIO

from django.core.management import call_command
from django.test import Client, TestCase
from django.urls import reverse

from bookkeeping.models import Company, JournalEntry, Voucher
from bookkeeping.services import compute_ledger, create_book, record_receipt

from .base import BookTestCase, d


class ReportViewTests(BookTestCase):

    def setUp(self):
        super().setUp()
        self.client = Client()
        self.slug = self.company.slug
        record_receipt(
            self.company, date=d("2024-03-01"), customer=self.customer,
            account=self.cash, amount=500,
        )

    def url(self, name, *args):
        return reverse(f"bookkeeping:{name}", args=[self.slug, *args])

    def test_account_ledger(self):
        response = self.client.get(
            self.url("ledger"), {"account": "CASH-1", "start": "2024-03-01", "end": "2024-03-31"}
        )
        data = response.json()

        self.assertEqual(response.status_code, 200)
        self.assertEqual(data["closing"], "500.00")
        self.assertEqual(data["rows"][0]["voucher_id"], "RV-001")
        self.assertEqual(data["rows"][0]["suffix"], "Dr")

    def test_entity_ledger(self):
        response = self.client.get(
            self.url("ledger"), {"entity": "C1", "start": "2024-03-01", "end": "2024-03-31"}
        )
        self.assertEqual(response.json()["closing"], "-500.00")

    def test_missing_dates_are_a_bad_request(self):
        response = self.client.get(self.url("ledger"), {"account": "CASH-1", "start": "2024-03-01"})

        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()["ok"])

    def test_ledger_csv(self):
        response = self.client.get(
            self.url("ledger-csv"), {"account": "CASH-1", "start": "2024-03-01", "end": "2024-03-31"}
        )

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response["Content-Type"].startswith("text/csv"))
        self.assertTrue(response.content.decode().startswith("Date,Voucher,Description"))

    def test_summary_and_rollup(self):
        summary = self.client.get(
            self.url("summary", "customer"), {"start": "2024-03-01", "end": "2024-03-31"}
        ).json()
        rollup = self.client.get(self.url("rollup"), {"end": "2024-03-31"}).json()

        self.assertEqual(summary["rows"][0]["closing"], "-500.00")
        self.assertEqual([r["id"] for r in rollup["rows"]], ["CASH-1", "C1"])

    def test_statements(self):
        sheet = self.client.get(self.url("balance-sheet"), {"as_of": "2024-03-31"}).json()
        pl = self.client.get(
            self.url("profit-and-loss"), {"start": "2024-03-01", "end": "2024-03-31"}
        ).json()

        self.assertTrue(sheet["is_balanced"])
        self.assertEqual(sheet["assets"]["cash"], "500.00")
        self.assertEqual(pl["expenses"], [])

    def test_voucher_lookup(self):
        found = self.client.get(self.url("voucher", "RV-001"))
        missing = self.client.get(self.url("voucher", "RV-404"))

        self.assertEqual(found.status_code, 200)
        self.assertEqual(len(found.json()["entries"]), 2)
        self.assertEqual(missing.status_code, 404)
        self.assertEqual(missing.json(), {"found": False, "voucher_id": "RV-404"})

    def test_planner_resolution(self):
        state = self.client.get(self.url("planner", "weekly"), {"today": "2024-03-06"}).json()
        self.assertEqual(state["state"], "idle")

        bad = self.client.post(self.url("planner-resolve", "weekly"), {"action": "reset"})
        self.assertEqual(bad.status_code, 400)

        nothing_pending = self.client.post(
            self.url("planner-resolve", "weekly"), {"action": "continue", "today": "2024-03-07"}
        )
        self.assertEqual(nothing_pending.status_code, 400)

        resolved = self.client.post(
            self.url("planner-resolve", "weekly"), {"action": "start_new", "today": "2024-03-13"}
        )
        self.assertEqual(resolved.json(), {"ok": True, "period_start": "2024-03-11"})

    def test_unknown_book_is_404(self):
        response = self.client.get(
            reverse("bookkeeping:rollup", args=["no-such-book"]), {"end": "2024-03-31"}
        )
        self.assertEqual(response.status_code, 404)


class BookIsolationTests(BookTestCase):

    def test_books_do_not_share_entries(self):
        other = create_book("Other Books")
        record_receipt(
            self.company, date=d("2024-03-01"), customer=self.customer,
            account=self.cash, amount=500,
        )

        self.assertEqual(other.slug, "other-books")
        self.assertFalse(JournalEntry.objects.for_company(other).exists())
        # same code, different book
        ledger = compute_ledger(other, account="CASH-1", start=d("2024-03-01"), end=d("2024-03-31"))
        self.assertEqual(ledger.rows, [])

    def test_slugs_are_unique(self):
        again = create_book("Test Books")
        self.assertEqual(again.slug, "test-books-1")


class DemoBookCommandTests(TestCase):

    def test_command_creates_a_balanced_book(self):
        out = StringIO()
        call_command("create_demo_book", "--date", "2024-03-01", stdout=out)

        company = Company.objects.get(slug="usman-global")
        self.assertIn("Demo book setup complete!", out.getvalue())
        self.assertEqual(
            sorted(Voucher.objects.for_company(company).values_list("voucher_id", flat=True)),
            ["EV-001", "JV-FA-FA-0001", "PMP1_01_03_24", "RV-001"],
        )
        for voucher in Voucher.objects.for_company(company):
            self.assertTrue(voucher.is_balanced(), voucher.voucher_id)
