"""
EDA Workspace Module
====================

Session-state caching, export helpers, and the Streamlit tab renderer
for the per-attribute Summary Reports.

Key public functions
--------------------
render_eda_tab(dataframe, key_prefix)   → renders the full Streamlit tab
export_eda_results_to_excel(results)    → BytesIO Excel workbook
"""

import io
import pandas as pd
import streamlit as st
from datetime import datetime
from typing import Dict, Any, Optional

import config
from session_state_keys import SESSION_EDA_EXCEL, SESSION_EDA_RESULTS, SESSION_EDA_STATS_CACHE
from utils.data_exporters import stats_to_excel
from .eda_calculations import descriptive_statistics, run_eda_for_all_columns
from .eda_plots import plot_summary_report


# ─────────────────────────────────────────────────────────────
#  STREAMLIT TAB RENDERER
# ─────────────────────────────────────────────────────────────

def render_eda_tab(
    dataframe: pd.DataFrame,
    key_prefix: str = "eda",
) -> None:
    """
    Render the Summary Report tab.

    Layout
    ------
    - Controls: view mode, bin count, confidence level
    - Main area: Summary Report (histogram, boxplot, CI, stats)
    - Expandable statistics table
    - Excel export of every attribute
    """
    st.subheader("📊 Summary Reports")
    st.caption(
        "One report per attribute: Anderson-Darling normality test, "
        "descriptive statistics and confidence intervals."
    )

    columns = [c for c in config.ATTRIBUTES + [config.QUALITY_COL] if c in dataframe.columns]

    col_ctrl1, col_ctrl2, col_ctrl3 = st.columns([2, 1, 1])
    with col_ctrl1:
        view_mode = st.radio(
            "View mode",
            options=["Single variable", "All variables (scroll)"],
            horizontal=True,
            key=f"{key_prefix}_view_mode",
        )
    with col_ctrl2:
        n_bins = st.slider(
            "Histogram bins",
            min_value=5, max_value=100, value=20, step=5,
            key=f"{key_prefix}_bins",
        )
    with col_ctrl3:
        confidence = st.selectbox(
            "Confidence level",
            options=[0.90, 0.95, 0.99],
            index=1,
            format_func=lambda x: f"{int(x * 100)} %",
            key=f"{key_prefix}_conf",
        )

    st.divider()

    if view_mode == "Single variable":
        selected_cols = [st.selectbox(
            "Select variable",
            options=columns,
            key=f"{key_prefix}_col_select",
        )]
    else:
        selected_cols = st.multiselect(
            "Filter variables (leave empty = show all)",
            options=columns,
            default=[],
            key=f"{key_prefix}_multi_select",
        ) or columns

    for col in selected_cols:
        with st.spinner(f"Computing statistics for **{col}**…"):
            stats_dict = _get_or_compute_stats(dataframe, col, confidence, key_prefix)

        fig = plot_summary_report(
            dataframe[col],
            column_name=col,
            stats_dict=stats_dict,
            confidence=confidence,
            n_bins=n_bins,
            height=640,
            width=None,
        )
        st.plotly_chart(fig, use_container_width=True)

        if view_mode == "Single variable":
            with st.expander("📋 Full statistics table", expanded=False):
                st.dataframe(
                    _stats_to_dataframe(stats_dict, confidence),
                    use_container_width=True,
                    hide_index=True,
                )
        else:
            st.divider()

    st.markdown("---")
    st.markdown("#### 💾 Export")
    if st.button("Generate Excel report", key=f"{key_prefix}_gen_excel"):
        with st.spinner("Computing statistics for all variables…"):
            all_stats = run_eda_for_all_columns(dataframe)
            save_eda_results_to_session(all_stats)
        workbooks = st.session_state.setdefault(SESSION_EDA_EXCEL, {})
        workbooks[key_prefix] = export_eda_results_to_excel(all_stats, dataframe)

    workbook = st.session_state.get(SESSION_EDA_EXCEL, {}).get(key_prefix)
    if workbook is not None:
        st.download_button(
            label="⬇️  Download Excel report",
            data=workbook,
            file_name=f"Wine_EDA_Summary_{datetime.now().strftime('%Y%m%d_%H%M%S')}.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            key=f"{key_prefix}_dl_excel",
        )


# ─────────────────────────────────────────────────────────────
#  EXPORT / SESSION HELPERS
# ─────────────────────────────────────────────────────────────

def export_eda_results_to_excel(
    all_stats: Dict[str, Dict[str, Any]],
    dataframe: Optional[pd.DataFrame] = None,
) -> io.BytesIO:
    """Workbook of all per-attribute statistics (see ``utils.stats_to_excel``)."""
    return stats_to_excel(all_stats, dataframe)


def save_eda_results_to_session(
    results: Dict[str, Dict[str, Any]],
    session_key: str = SESSION_EDA_RESULTS,
) -> None:
    """Store EDA results dict in Streamlit session state."""
    st.session_state[session_key] = {
        'data': results,
        'timestamp': datetime.now().isoformat(),
    }


def load_eda_results_from_session(
    session_key: str = SESSION_EDA_RESULTS,
) -> Optional[Dict[str, Dict[str, Any]]]:
    """Retrieve EDA results from Streamlit session state."""
    entry = st.session_state.get(session_key)
    return entry['data'] if entry else None


# ─────────────────────────────────────────────────────────────
#  INTERNAL HELPERS
# ─────────────────────────────────────────────────────────────

def _get_or_compute_stats(
    dataframe: pd.DataFrame,
    col: str,
    confidence: float,
    key_prefix: str,
) -> Dict[str, Any]:
    """Return cached stats or compute and cache them.

    The cache lives under SESSION_EDA_STATS_CACHE, which is dropped
    whenever a new table is loaded.
    """
    cache = st.session_state.setdefault(SESSION_EDA_STATS_CACHE, {})
    cache_key = (key_prefix, col, confidence)
    if cache_key not in cache:
        cache[cache_key] = descriptive_statistics(dataframe[col], confidence)
    return cache[cache_key]


def _stats_to_dataframe(s: Dict[str, Any], confidence: float) -> pd.DataFrame:
    """Statistics dict as a tidy display table."""
    ci_pct = int(confidence * 100)
    rows = [
        ('Normality',     'Anderson-Darling A²',      s['ad_statistic']),
        ('Normality',     'Anderson-Darling P-Value', s['ad_p_label']),
        ('Normality',     'Normal distribution?',     'No' if s['ad_reject'] else 'Yes'),
        ('Descriptive',   'N',                        s['n']),
        ('Descriptive',   'Mean',                     s['mean']),
        ('Descriptive',   'StDev',                    s['stdev']),
        ('Descriptive',   'Skewness',                 s['skewness']),
        ('Descriptive',   'Kurtosis',                 s['kurtosis']),
        ('5-Number',      'Minimum',                  s['minimum']),
        ('5-Number',      '1st Quartile (Q1)',        s['q1']),
        ('5-Number',      'Median',                   s['median']),
        ('5-Number',      '3rd Quartile (Q3)',        s['q3']),
        ('5-Number',      'Maximum',                  s['maximum']),
        (f'{ci_pct}% CI', 'Mean',                     f"{s['ci_mean'][0]} – {s['ci_mean'][1]}"),
        (f'{ci_pct}% CI', 'Median',                   f"{s['ci_median'][0]} – {s['ci_median'][1]}"),
        (f'{ci_pct}% CI', 'StDev',                    f"{s['ci_stdev'][0]} – {s['ci_stdev'][1]}"),
    ]
    return pd.DataFrame(rows, columns=['Category', 'Statistic', 'Value']).astype({'Value': str})
