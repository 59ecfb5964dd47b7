from datetime import date

import streamlit as st

from expense_tracker.components.app_state import get_store
from expense_tracker.components.expense_views import (
    ALL,
    UNGROUPED,
    category_totals,
    default_report_range,
    filter_by_date_range,
    total_amount,
)
from expense_tracker.components.navbar import render_navbar
from expense_tracker.integration.report_export import clipboard_text, export_csv, export_filename
from expense_tracker.utils.load_config import load_config_file

st.set_page_config(page_title="Reports", layout="wide")
render_navbar(current_page=3)

config = load_config_file()
store = get_store()
groups = store.list_groups()
group_names = {g.id: g.name for g in groups}

st.title("📊 Reports")

default_from, default_to = default_report_range(days=config.get("reports", {}).get("default_range_days", 30))

c1, c2, c3 = st.columns(3)
date_from = c1.date_input("From", value=date.fromisoformat(default_from)).isoformat()
date_to = c2.date_input("To", value=date.fromisoformat(default_to)).isoformat()
group = c3.selectbox(
    "Group", [ALL, UNGROUPED] + list(group_names),
    format_func=lambda g: {ALL: "All Groups", UNGROUPED: "Ungrouped"}.get(g, group_names.get(g, g)),
)

expenses = filter_by_date_range(store.list_expenses(), date_from, date_to, group)

st.metric("Total", f"${total_amount(expenses):,.2f}", f"{len(expenses)} expenses", delta_color="off")

if not expenses:
    st.info("No expenses in this range.")
    st.stop()

st.subheader("By Category")
for category, totals in category_totals(expenses).items():
    st.write(f"**{category}**: {totals['count']} · ${totals['amount']:,.2f}")

st.download_button(
    "Export CSV",
    data=export_csv(expenses),
    file_name=export_filename(date_from, date_to),
    mime="text/csv",
    type="primary",
)

st.subheader("Copy for Expense Forms")
st.caption("Use the copy icon to put all expenses on your clipboard.")
st.code(clipboard_text(expenses), language=None)

st.subheader("Line Items")
for e in expenses:
    with st.expander(f"{e.date} · {e.vendor} · ${e.amount:.2f}"):
        for label, value in [
            ("Date", e.date),
            ("Vendor", e.vendor),
            ("Amount", f"{e.amount:.2f}"),
            ("Category", e.category),
            ("Payment Method", e.payment_method),
            ("Project Code", e.project_code or ""),
            ("Notes", e.notes or ""),
        ]:
            st.text(label)
            st.code(value, language=None)
