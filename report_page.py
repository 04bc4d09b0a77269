"""
Final Plots & Reflection Page

The closing chapters of the report and the downloads: the whole report as a
standalone HTML document and the per-attribute statistics as Excel.
"""

from datetime import datetime

import streamlit as st

import config
from eda_utils import run_eda_for_all_columns
from eda_utils.eda_workspace import (
    export_eda_results_to_excel,
    load_eda_results_from_session,
    save_eda_results_to_session,
)
from report_utils import render_html_report
from session_state_keys import SESSION_REPORT_HTML
from workspace_utils import get_wine_data, get_report_sections, render_chapter


def show():
    """Main function - Final Plots & Reflection Page"""

    st.title("🏁 Final Plots & Reflection")

    df = get_wine_data()
    if df is None:
        return

    render_chapter('final')
    render_chapter('reflection')

    st.markdown("## 💾 Downloads")
    col1, col2 = st.columns(2)

    with col1:
        offline = st.checkbox(
            "Embed plotly.js (works offline, larger file)", value=False, key="report_offline",
        )
        if st.button("📝 Prepare HTML report", use_container_width=True, key="report_prepare_html"):
            with st.spinner("Rendering report..."):
                st.session_state[SESSION_REPORT_HTML] = render_html_report(
                    get_report_sections(df),
                    include_plotlyjs=True if offline else 'cdn',
                )
        if SESSION_REPORT_HTML in st.session_state:
            st.download_button(
                label="📥 Download HTML Report",
                data=st.session_state[SESSION_REPORT_HTML],
                file_name=config.REPORT_FILENAME,
                mime="text/html",
                use_container_width=True,
                key="report_download_html",
            )

    with col2:
        all_stats = load_eda_results_from_session()
        if all_stats is None:
            with st.spinner("Computing statistics..."):
                all_stats = run_eda_for_all_columns(df)
            save_eda_results_to_session(all_stats)
        st.download_button(
            label="📥 Download Statistics (Excel)",
            data=export_eda_results_to_excel(all_stats, df),
            file_name=f"wine_eda_statistics_{datetime.now().strftime('%Y%m%d_%H%M%S')}.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            use_container_width=True,
            key="report_download_excel",
        )
