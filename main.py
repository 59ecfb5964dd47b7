import streamlit as st

from expense_tracker.components.app_state import check_env, get_store
from expense_tracker.components.navbar import render_navbar
from expense_tracker.components.expense_views import (
    category_breakdown,
    recent_expenses,
    this_month,
    total_amount,
)

check_env()

# Set page config once at the entry point
st.set_page_config(page_title="Expense Tracker - Dashboard", layout="wide")

st.title("💸 Expense Tracker")
st.write("Upload receipts, track expenses, and export them for reporting.")

render_navbar(current_page=0)

store = get_store()
expenses = store.list_expenses()

month_expenses = this_month(expenses)
col1, col2, col3 = st.columns(3)
col1.metric("Total Expenses", f"${total_amount(expenses):,.2f}", f"{len(expenses)} receipts", delta_color="off")
col2.metric("This Month", f"${total_amount(month_expenses):,.2f}", f"{len(month_expenses)} receipts", delta_color="off")
col3.metric("Groups", len(store.list_groups()))

if not expenses:
    st.info("No expenses yet. Upload your first receipt to get started.")
    if st.button("Upload Receipts", type="primary"):
        st.switch_page("pages/page1_upload.py")
    st.stop()

st.divider()
left, right = st.columns(2)

with left:
    st.subheader("By Category")
    for category, amount in sorted(category_breakdown(expenses).items(), key=lambda kv: kv[1], reverse=True):
        st.write(f"**{category}**: ${amount:,.2f}")

with right:
    st.subheader("Recent Expenses")
    for e in recent_expenses(expenses):
        st.write(f"{e.date} · **{e.vendor}** · {e.category} · ${e.amount:,.2f}")
