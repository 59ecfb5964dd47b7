import csv
import io

import pandas as pd

from expense_tracker.integration.report_export import (
    CSV_COLUMNS,
    clipboard_text,
    export_csv,
    export_filename,
)
from expense_tracker.models import Expense


def make_expense(expense_id, vendor, amount, notes=None):
    return Expense(
        id=expense_id,
        date="2025-01-15",
        vendor=vendor,
        amount=amount,
        currency="USD",
        category="Meals",
        payment_method="Credit Card",
        confidence="medium",
        notes=notes,
        created_at="2025-01-15T10:00:00.000Z",
    )


EXPENSES = [
    make_expense("1", "Joe's Diner", 12.5, notes="Lunch, with client"),
    make_expense("2", "Acme", 3),
    make_expense("3", 'The "Best" Cafe', 1234.567),
]


def test_header_and_quoting():
    lines = export_csv(EXPENSES).splitlines()

    assert lines[0] == ",".join(f'"{c}"' for c in CSV_COLUMNS)
    assert lines[1] == '"2025-01-15","Joe\'s Diner","Meals","12.50","USD","Credit Card","Lunch, with client"'
    assert lines[2] == '"2025-01-15","Acme","Meals","3.00","USD","Credit Card",""'
    assert len(lines) == 1 + len(EXPENSES)


def test_round_trip_matches_source_records():
    content = export_csv(EXPENSES)

    with io.StringIO(content) as fh:
        rows = list(csv.DictReader(fh))

    assert len(rows) == len(EXPENSES)
    for row, expense in zip(rows, EXPENSES):
        assert (row["Date"], row["Vendor"], row["Category"], row["Amount"]) == (
            expense.date, expense.vendor, expense.category, f"{expense.amount:.2f}",
        )
    assert rows[2]["Amount"] == "1234.57"


def test_pandas_can_read_export():
    df = pd.read_csv(io.StringIO(export_csv(EXPENSES)), dtype=str, keep_default_na=False)
    assert list(df.columns) == CSV_COLUMNS
    assert df["Notes"].tolist() == ["Lunch, with client", "", ""]


def test_empty_export_has_header_only():
    assert export_csv([]).splitlines() == [",".join(f'"{c}"' for c in CSV_COLUMNS)]


def test_export_filename():
    assert export_filename("2025-01-01", "2025-01-31") == "expenses-2025-01-01-to-2025-01-31.csv"


def test_clipboard_text():
    assert clipboard_text(EXPENSES[:2]) == (
        "2025-01-15\tJoe's Diner\tMeals\t$12.50\tCredit Card\n"
        "2025-01-15\tAcme\tMeals\t$3.00\tCredit Card"
    )
