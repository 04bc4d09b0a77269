"""
White Wine Quality EDA
Homepage - Main navigation and introduction
"""

import os

import streamlit as st

import config
import univariate_page
import bivariate_page
import multivariate_page
import eda_page
import report_page
from session_state_keys import SESSION_CURRENT_PAGE, get_data
from workspace_utils import (
    load_dataset_into_workspace,
    display_dataset_overview,
    display_workspace_summary,
    render_chapter,
)

# Page name -> (sidebar label, renderer)
PAGES = {
    "Home":                        ("🏠 Home", None),
    "Univariate":                  ("📉 Univariate", univariate_page.show),
    "Bivariate":                   ("🔗 Bivariate", bivariate_page.show),
    "Multivariate":                ("🧊 Multivariate", multivariate_page.show),
    "EDA Summary":                 ("📊 EDA Summary", eda_page.show),
    "Final Plots & Reflection":    ("🏁 Final Plots & Reflection", report_page.show),
}


def show_home():
    """Show the main homepage"""

    st.markdown("""
    <h1 style='text-align: center; font-size: 3.2rem; margin: 1rem 0 0.5rem 0;
               background: linear-gradient(90deg, #7b1e3a, #c0392b, #e6b34a);
               -webkit-background-clip: text; -webkit-text-fill-color: transparent; font-weight: 700;'>
        White Wine Quality
    </h1>
    <p style='text-align: center; font-size: 1.3rem; color: #444; max-width: 900px; margin: 0 auto;'>
        An exploratory look at which chemical properties go with better rated white wines
    </p>
    """, unsafe_allow_html=True)

    st.markdown("---")

    df = get_data(st.session_state)
    if df is None:
        st.info("📂 Load the wine table from the sidebar to start")
        return

    display_dataset_overview(df)
    render_chapter('overview')

    st.info("""
    ### Chapters

    📉 **Univariate**: quality scores and the distribution of each attribute
    🔗 **Bivariate**: correlations, attributes by quality, pH and the acids
    🧊 **Multivariate**: quality grades across attribute pairs, 3-D view, linear models
    📊 **EDA Summary**: Minitab-style summary report per attribute
    🏁 **Final Plots & Reflection**: the three key charts, downloads
    """)

    col1, col2, col3 = st.columns([1, 2, 1])
    with col2:
        if st.button("📉 Start with Univariate Analysis", use_container_width=True, key="cta_univariate"):
            st.session_state[SESSION_CURRENT_PAGE] = "Univariate"
            st.rerun()


def _sidebar_loader():
    st.markdown("### 📂 Dataset")

    if get_data(st.session_state) is None and os.path.exists(config.DATA_PATH):
        load_dataset_into_workspace(config.DATA_PATH)

    uploaded = st.file_uploader(
        "Upload wine table (CSV)",
        type=['csv', 'txt'],
        key="sidebar_upload",
        help="Comma or semicolon delimited, with or without an identifier column",
    )
    if uploaded is not None and st.session_state.get('_last_upload') != uploaded.name:
        if load_dataset_into_workspace(uploaded):
            st.session_state['_last_upload'] = uploaded.name

    display_workspace_summary()


def main_content():
    if SESSION_CURRENT_PAGE not in st.session_state:
        st.session_state[SESSION_CURRENT_PAGE] = "Home"

    st.sidebar.markdown("## 🍷 Wine Quality EDA")
    st.sidebar.markdown("---")

    for page, (label, _) in PAGES.items():
        if st.sidebar.button(label, use_container_width=True, key=f"nav_{page}"):
            st.session_state[SESSION_CURRENT_PAGE] = page
            st.rerun()

    st.sidebar.markdown("---")
    with st.sidebar:
        _sidebar_loader()

    # Routing
    current = st.session_state[SESSION_CURRENT_PAGE]
    if current == "Home":
        show_home()
    elif current in PAGES:
        PAGES[current][1]()
    else:
        st.error(f"Page '{current}' not found")
        st.session_state[SESSION_CURRENT_PAGE] = "Home"
        st.rerun()
