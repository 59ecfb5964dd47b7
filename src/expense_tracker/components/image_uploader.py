import streamlit as st

from expense_tracker.models import RawReceipt
from expense_tracker.logger import get_logger

logger = get_logger(__name__)


def initialize_session():
    """Ensures session state keys exist."""
    if 'uploads' not in st.session_state:
        # file_id -> {"raw": RawReceipt, "status": str, "error": str | None}
        st.session_state['uploads'] = {}
    if 'parsed' not in st.session_state:
        # file_id -> Expense awaiting review
        st.session_state['parsed'] = {}


def upload_images():
    """
    Streamlit uploader that keeps each uploaded receipt in session state
    as a RawReceipt, and forgets receipts removed from the widget.
    """
    st.subheader("📤 Upload Receipt Images")
    initialize_session()

    uploaded_files = st.file_uploader(
        "Upload receipt images (JPEG, PNG, GIF, WEBP)",
        type=["png", "jpg", "jpeg", "gif", "webp"],
        accept_multiple_files=True,
        key="receipt_uploader"
    )

    uploaded_files = uploaded_files or []
    current_file_ids = {f.file_id for f in uploaded_files}
    removed_ids = [fid for fid in st.session_state['uploads'] if fid not in current_file_ids]
    for fid in removed_ids:
        st.session_state['uploads'].pop(fid)
        st.session_state['parsed'].pop(fid, None)
        logger.info("Removed file_id %s from session", fid)

    for f in uploaded_files:
        if f.file_id in st.session_state['uploads']:
            continue

        raw = RawReceipt(file_name=f.name, content=bytes(f.getbuffer()), content_type=f.type)
        st.session_state['uploads'][f.file_id] = {"raw": raw, "status": "uploaded", "error": None, "raw_text": None}
        logger.info("Received upload: %s (%s, %d bytes)", f.name, f.type, f.size)

    return st.session_state['uploads']
