from bookkeeping.services import (compute_ledger, export_csv, ledger_csv_rows,
                                  record_receipt)
from bookkeeping.services.export import LEDGER_HEADERS

from .base import BookTestCase, d


class ExportTests(BookTestCase):

    def test_values_are_quoted_and_escaped(self):
        rows = [
            {"a": 'He said "hi"', "b": None},
            {"a": 1, "b": "x,y", "ignored": "z"},
        ]
        headers = [{"label": "A", "key": "a"}, {"label": "B", "key": "b"}]

        self.assertEqual(
            export_csv(rows, headers),
            'A,B\n"He said ""hi""",""\n"1","x,y"',
        )

    def test_no_rows_gives_header_only(self):
        self.assertEqual(export_csv([], [{"label": "Date", "key": "date"}]), "Date")

    def test_ledger_export(self):
        record_receipt(
            self.company, date=d("2024-03-01"), customer=self.customer,
            account=self.cash, amount=500,
        )
        start, end = d("2024-03-01"), d("2024-03-31")
        ledger = compute_ledger(self.company, account=self.cash, start=start, end=end)

        self.assertEqual(
            export_csv(ledger_csv_rows(ledger, start, end), LEDGER_HEADERS).split("\n"),
            [
                "Date,Voucher,Description,Debit,Credit,Balance",
                '"2024-03-01","","Opening Balance","","","0.00 Dr"',
                '"2024-03-01","RV-001","Receipt from Customer One","500.00","","500.00 Dr"',
                '"2024-03-31","","Closing Balance","","","500.00 Dr"',
            ],
        )

    def test_credit_balances_are_unsigned_with_cr(self):
        record_receipt(
            self.company, date=d("2024-03-01"), customer=self.customer,
            account=self.cash, amount=500,
        )
        start, end = d("2024-03-01"), d("2024-03-31")
        ledger = compute_ledger(self.company, entity=self.customer, start=start, end=end)

        self.assertEqual(
            export_csv(ledger_csv_rows(ledger, start, end), LEDGER_HEADERS).split("\n")[2:],
            [
                '"2024-03-01","RV-001","Receipt from Customer One","","500.00","500.00 Cr"',
                '"2024-03-31","","Closing Balance","","","500.00 Cr"',
            ],
        )
