import streamlit as st

from expense_tracker.components.app_state import get_llm_client, get_store
from expense_tracker.components.expense_card import render_expense_form
from expense_tracker.components.image_uploader import upload_images
from expense_tracker.components.navbar import render_navbar
from expense_tracker.components.receipt_processor import process_receipts
from expense_tracker.logger import get_logger

logger = get_logger(__name__)

st.set_page_config(page_title="Upload Receipts", layout="wide")
render_navbar(current_page=1)

st.title("📤 Upload Receipts")
st.write("Upload receipt images and let AI extract the expense data.")

uploads = upload_images()

# 1. Batch Processing Trigger
pending = [fid for fid, u in uploads.items() if u["status"] == "uploaded"]
if pending:
    if st.button(f"⚡ Parse {len(pending)} Receipts", type="primary"):
        with st.spinner("Parsing receipts..."):
            outcomes = process_receipts([uploads[fid]["raw"] for fid in pending], get_llm_client())

        for fid, outcome in zip(pending, outcomes):
            if outcome.success:
                uploads[fid]["status"] = "done"
                st.session_state['parsed'][fid] = outcome.expense
                st.toast(f"Parsed: {outcome.expense.vendor} - ${outcome.expense.amount:.2f}")
            else:
                uploads[fid]["status"] = "error"
                uploads[fid]["error"] = outcome.error
                uploads[fid]["raw_text"] = outcome.raw_text
        st.rerun()

# 2. Upload status
for fid, u in uploads.items():
    if u["status"] == "error":
        st.error(f"Failed to parse {u['raw'].file_name}: {u['error']}")
        if u.get("raw_text"):
            with st.expander("Model reply"):
                st.code(u["raw_text"], language=None)

# 3. Review Section
parsed = st.session_state.get('parsed', {})
if parsed:
    st.divider()
    st.subheader(f"📋 Review ({len(parsed)})")

for fid, expense in list(parsed.items()):
    with st.expander(f"{expense.vendor} - ${expense.amount:.2f}", expanded=True):
        col1, col2 = st.columns([1, 2])
        with col1:
            st.image(expense.receipt_url, width="stretch")
            if st.button("Discard", key=f"discard_{fid}"):
                parsed.pop(fid)
                st.rerun()
        with col2:
            edited = render_expense_form(expense, key=fid)
            if edited is not None:
                get_store().upsert_expense(edited)
                parsed.pop(fid)
                st.session_state['saved_count'] = st.session_state.get('saved_count', 0) + 1
                st.toast(f"Saved: {edited.vendor}")
                st.rerun()

saved = st.session_state.get('saved_count', 0)
if saved and not parsed:
    st.success(f"{saved} expense{'s' if saved != 1 else ''} saved.")
    if st.button("View Expenses"):
        st.switch_page("pages/page2_expenses.py")
