import csv
import sys
from typing import Iterable, List

import pandas as pd

from expense_tracker.logger import get_logger
from expense_tracker.exception import CustomException
from expense_tracker.models import Expense

logger = get_logger(__name__)

CSV_COLUMNS = ["Date", "Vendor", "Category", "Amount", "Currency", "Payment Method", "Notes"]


def expenses_to_df(expenses: Iterable[Expense]) -> pd.DataFrame:
    """One row per expense in export column order; every cell is a string."""
    rows: List[dict] = [
        {
            "Date": e.date,
            "Vendor": e.vendor,
            "Category": e.category,
            "Amount": f"{e.amount:.2f}",
            "Currency": e.currency,
            "Payment Method": e.payment_method,
            "Notes": e.notes or "",
        }
        for e in expenses
    ]
    return pd.DataFrame(rows, columns=CSV_COLUMNS)


def export_csv(expenses: Iterable[Expense]) -> str:
    """
    Render expenses as CSV: header row, comma delimited, every field quoted.
    """
    try:
        df = expenses_to_df(expenses)
        content = df.to_csv(index=False, quoting=csv.QUOTE_ALL, lineterminator="\n")
        logger.info(f"Exported {len(df)} expenses to CSV")
        return content
    except Exception as e:
        logger.error(f"CSV export failed: {e}")
        raise CustomException(e, sys)


def export_filename(date_from: str, date_to: str) -> str:
    return f"expenses-{date_from}-to-{date_to}.csv"


def clipboard_text(expenses: Iterable[Expense]) -> str:
    """Tab separated lines ready to paste into an expense form."""
    return "\n".join(
        f"{e.date}\t{e.vendor}\t{e.category}\t${e.amount:.2f}\t{e.payment_method}"
        for e in expenses
    )
