import csv
import io

from .ledger import balance_suffix

LEDGER_HEADERS = [
    {"label": "Date", "key": "date"},
    {"label": "Voucher", "key": "voucher_id"},
    {"label": "Description", "key": "description"},
    {"label": "Debit", "key": "debit"},
    {"label": "Credit", "key": "credit"},
    {"label": "Balance", "key": "balance"},
]


def export_csv(rows, headers):
    """
    Project rows onto {label, key} headers: a plain label line, then one
    line per row with every value quoted ("" inside values), None as an
    empty string. Lines are joined with a bare newline, no trailing one.
    """
    header = ",".join(h["label"] for h in headers)
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows([row.get(h["key"]) for h in headers] for row in rows)
    body = buf.getvalue()[:-1]
    return f"{header}\n{body}" if body else header


def _balance(value):
    # the suffix carries the side, so the amount is unsigned
    return f"{abs(value)} {balance_suffix(value)}"


def ledger_csv_rows(ledger, start, end):
    """
    Opening line, the period's transactions, closing line. Zero debit or
    credit cells are left blank.
    """
    rows = [{
        "date": start,
        "description": "Opening Balance",
        "balance": _balance(ledger.opening),
    }]
    for r in ledger.rows:
        rows.append({
            "date": r.date,
            "voucher_id": r.voucher_id,
            "description": r.description,
            "debit": r.debit or None,
            "credit": r.credit or None,
            "balance": _balance(r.balance),
        })
    rows.append({
        "date": end,
        "description": "Closing Balance",
        "balance": _balance(ledger.closing),
    })
    return rows
