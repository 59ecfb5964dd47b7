import pandas as pd
import streamlit as st

from expense_tracker.components.app_state import get_store
from expense_tracker.components.expense_card import render_expense_form
from expense_tracker.components.expense_views import (
    ALL,
    UNGROUPED,
    create_group,
    delete_group,
    filter_expenses,
    total_amount,
)
from expense_tracker.components.navbar import render_navbar
from expense_tracker.models import CATEGORIES

st.set_page_config(page_title="Expenses", layout="wide")
render_navbar(current_page=2)

store = get_store()
expenses = store.list_expenses()
groups = store.list_groups()
group_names = {g.id: g.name for g in groups}

st.title("🧾 Expenses")

if not expenses:
    st.warning("No expenses yet. Please go to the Upload page.")
    st.stop()

# --- Filters ---
f1, f2, f3, f4, f5 = st.columns([3, 2, 2, 2, 1])
search = f1.text_input("Search expenses...", placeholder="Vendor, notes or date")
category = f2.selectbox("Category", [ALL] + CATEGORIES, format_func=lambda c: "All Categories" if c == ALL else c)
group_options = [ALL, UNGROUPED] + list(group_names)
group = f3.selectbox(
    "Group", group_options,
    format_func=lambda g: {ALL: "All Groups", UNGROUPED: "Ungrouped"}.get(g, group_names.get(g, g)),
)
sort_by = f4.selectbox("Sort by", ["date", "amount", "vendor"], format_func=str.title)
sort_order = "asc" if f5.toggle("Asc") else "desc"

filtered = filter_expenses(expenses, search, category, group, sort_by, sort_order)
st.caption(
    f"{len(filtered)} expense{'s' if len(filtered) != 1 else ''}"
    + (f" totaling ${total_amount(filtered):.2f}" if filtered else "")
)

# --- Table ---
df = pd.DataFrame([
    {
        "Select": False,
        "Date": e.date,
        "Vendor": e.vendor,
        "Category": e.category,
        "Amount": e.amount,
        "Payment Method": e.payment_method,
        "Group": group_names.get(e.group_id, "") if e.group_id else "",
        "Notes": e.notes or "",
        "id": e.id,
    }
    for e in filtered
])

edited_df = st.data_editor(
    df,
    column_config={
        "Amount": st.column_config.NumberColumn("Amount", format="$%.2f"),
        "id": None,
    },
    disabled=[c for c in df.columns if c != "Select"],
    hide_index=True,
    use_container_width=True,
    key="expenses_table",
)
selected_ids = edited_df.loc[edited_df["Select"], "id"].tolist() if not edited_df.empty else []

# --- Group selected ---
if selected_ids:
    with st.form("new_group"):
        st.markdown(f"**Group {len(selected_ids)} selected expenses**")
        name = st.text_input("Group name")
        description = st.text_input("Description (optional)")
        if st.form_submit_button("Create Group", type="primary"):
            try:
                group_obj = create_group(store, name, selected_ids, description)
                st.toast(f"Created group: {group_obj.name}")
                st.rerun()
            except ValueError as e:
                st.error(str(e))

# --- Edit / delete ---
st.divider()
by_id = {e.id: e for e in filtered}
if by_id:
    chosen = st.selectbox(
        "Edit or delete an expense", list(by_id),
        format_func=lambda i: f"{by_id[i].date} · {by_id[i].vendor} · ${by_id[i].amount:.2f}",
    )
    expense = by_id[chosen]

    col1, col2 = st.columns([1, 2])
    with col1:
        if expense.receipt_url:
            st.image(expense.receipt_url, width="stretch")
        if st.button("Delete Expense", key=f"delete_{expense.id}"):
            st.session_state['confirm_delete'] = expense.id
        if st.session_state.get('confirm_delete') == expense.id:
            st.warning("Delete this expense? This cannot be undone.")
            if st.button("Confirm Delete", type="primary"):
                store.delete_expense(expense.id)
                st.session_state.pop('confirm_delete')
                st.toast("Expense deleted")
                st.rerun()
    with col2:
        updated = render_expense_form(expense, key=f"edit_{expense.id}", submit_label="Update Expense")
        if updated is not None:
            store.upsert_expense(updated)
            st.toast("Expense updated")
            st.rerun()

# --- Groups ---
if groups:
    st.divider()
    st.subheader("Groups")
    for g in groups:
        c1, c2 = st.columns([4, 1])
        c1.write(f"**{g.name}**" + (f" · {g.description}" if g.description else ""))
        if c2.button("Delete", key=f"delete_group_{g.id}"):
            delete_group(store, g.id)
            st.toast(f"Deleted group: {g.name}")
            st.rerun()
