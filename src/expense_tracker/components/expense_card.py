from datetime import date
from typing import Optional

import streamlit as st

from expense_tracker.models import CATEGORIES, Expense

PAYMENT_METHODS = ["Credit Card", "Debit", "Cash", "Unknown"]

CONFIDENCE_BADGES = {
    "high": "🟢 high confidence",
    "medium": "🟡 medium confidence",
    "low": "🔴 low confidence",
}


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        return date.today()


def render_expense_form(expense: Expense, key: str, submit_label: str = "Save Expense") -> Optional[Expense]:
    """
    Editable form for one expense. Returns the edited expense when the form
    is submitted, otherwise None.
    """
    st.caption(CONFIDENCE_BADGES.get(expense.confidence, expense.confidence))

    with st.form(key=f"form_{key}"):
        col1, col2 = st.columns(2)
        with col1:
            vendor = st.text_input("Vendor", value=expense.vendor)
            amount = st.number_input("Amount", value=float(expense.amount), min_value=0.0, step=0.01, format="%.2f")
            category = st.selectbox(
                "Category", CATEGORIES,
                index=CATEGORIES.index(expense.category) if expense.category in CATEGORIES else len(CATEGORIES) - 1,
            )
            project_code = st.text_input("Project Code", value=expense.project_code or "")
        with col2:
            expense_date = st.date_input("Date", value=_parse_date(expense.date))
            currency = st.text_input("Currency", value=expense.currency)
            methods = PAYMENT_METHODS if expense.payment_method in PAYMENT_METHODS else PAYMENT_METHODS + [expense.payment_method]
            payment_method = st.selectbox("Payment Method", methods, index=methods.index(expense.payment_method))
            notes = st.text_area("Notes", value=expense.notes or "", height=68)

        submitted = st.form_submit_button(submit_label, type="primary")

    if not submitted:
        return None

    return expense.with_updates(
        vendor=vendor.strip() or "Unknown Vendor",
        amount=round(amount, 2),
        category=category,
        date=expense_date.isoformat(),
        currency=currency.strip().upper() or "USD",
        payment_method=payment_method,
        project_code=project_code.strip() or None,
        notes=notes.strip() or None,
    )
