import streamlit as st

PAGES = [
    {"name": "Dashboard", "path": "main.py", "icon": "🏠"},
    {"name": "Upload", "path": "pages/page1_upload.py", "icon": "📤"},
    {"name": "Expenses", "path": "pages/page2_expenses.py", "icon": "🧾"},
    {"name": "Reports", "path": "pages/page3_reports.py", "icon": "📊"},
]


def render_navbar(current_page: int):
    LINE_COLOR = "#ff5c5c"
    LINE_BG = "#dddddd"

    html = f"""
    <style>
        .navbar-container {{
            display: flex;
            gap: 12px;
            margin-bottom: 24px;
            border-bottom: 3px solid {LINE_BG};
            padding-bottom: 8px;
        }}

        .nav-item {{
            padding: 4px 14px;
            border-radius: 16px;
            border: 2px solid {LINE_COLOR};
            color: {LINE_COLOR};
            font-weight: bold;
            user-select: none;
        }}

        .nav-item.active {{
            background-color: {LINE_COLOR};
            color: white;
        }}
    </style>

    <div class="navbar-container">
    """

    for index, page in enumerate(PAGES):
        active_class = "nav-item active" if index == current_page else "nav-item"
        html += f'<div class="{active_class}">{page["icon"]} {page["name"]}</div>'

    html += """
    </div>
    """

    st.markdown(html, unsafe_allow_html=True)

    cols = st.columns(len(PAGES))
    for col, page in zip(cols, PAGES):
        with col:
            st.page_link(page["path"], label=page["name"], icon=page["icon"])
