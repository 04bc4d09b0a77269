"""
Univariate Analysis Page - Streamlit Interface

The univariate chapter of the report plus an explorer for any attribute:
- Report: quality scores, grades and one histogram per attribute
- Attribute explorer: bins, log scale and trimming chosen by the reader
- Export: summary table and outlier counts as CSV
"""

import streamlit as st
import pandas as pd

import config
from eda_utils import (
    summary_table,
    outlier_counts,
    descriptive_statistics,
    plot_histogram,
    plot_attribute_histograms,
)
from utils import summary_to_csv
from workspace_utils import get_wine_data, render_chapter


def show():
    """Main function - Univariate Analysis Page"""

    st.markdown("""
    # 📉 Univariate Analysis

    Each variable on its own: how the quality scores are spread and what
    the distribution of every physiochemical attribute looks like.
    """)

    df = get_wine_data()
    if df is None:
        return

    st.markdown("---")
    tab1, tab2, tab3 = st.tabs([
        "📖 Report",
        "📈 Attribute Explorer",
        "💾 Export",
    ])

    # ========== TAB 1: REPORT CHAPTER ==========
    with tab1:
        render_chapter('univariate')

    # ========== TAB 2: ATTRIBUTE EXPLORER ==========
    with tab2:
        st.markdown("## 📈 Attribute Explorer")

        col1, col2, col3, col4 = st.columns([3, 2, 1, 1])
        with col1:
            selected_column = st.selectbox(
                "📈 Select attribute:",
                config.ATTRIBUTES + [config.QUALITY_COL],
                key="uni_explorer_col",
            )
        with col2:
            n_bins = st.slider("Bins", min_value=5, max_value=100, value=config.HIST_BINS, key="uni_bins")
        with col3:
            log_x = st.checkbox("log10 x", value=False, key="uni_log_x")
        with col4:
            trim = st.checkbox(
                "Trim top 1%", value=False, key="uni_trim",
                help=f"Leave out values above the {config.TRIM_QUANTILE:.0%} quantile",
            )

        if log_x and (df[selected_column] <= 0).any():
            st.warning("⚠️ Non-positive values are left out on a log scale")

        fig = plot_histogram(
            df, selected_column, bins=n_bins, log_x=log_x,
            trim_quantile=config.TRIM_QUANTILE if trim else None,
        )
        st.plotly_chart(fig, use_container_width=True, key="uni_explorer_hist")

        st.markdown("### 📊 Statistics")
        s = descriptive_statistics(df[selected_column])
        cs1, cs2 = st.columns(2)
        with cs1:
            st.write("**Descriptive**")
            st.dataframe(pd.DataFrame({
                'Statistic': ['N', 'Mean', 'StDev', 'Variance', 'Skewness', 'Kurtosis'],
                'Value': [s['n'], s['mean'], s['stdev'], s['variance'], s['skewness'], s['kurtosis']],
            }), use_container_width=True, hide_index=True)
        with cs2:
            st.write("**Five-number summary**")
            st.dataframe(pd.DataFrame({
                'Statistic': ['Minimum', '1st Quartile', 'Median', '3rd Quartile', 'Maximum'],
                'Value': [s['minimum'], s['q1'], s['median'], s['q3'], s['maximum']],
            }), use_container_width=True, hide_index=True)

        with st.expander("🔍 All attributes at a glance"):
            st.plotly_chart(
                plot_attribute_histograms(df),
                use_container_width=True,
                key="uni_all_hist",
            )

    # ========== TAB 3: EXPORT ==========
    with tab3:
        st.markdown("## 💾 Export")

        summary = summary_table(df)
        st.dataframe(summary, use_container_width=True)
        st.download_button(
            label="📥 Download Summary Table (CSV)",
            data=summary_to_csv(summary),
            file_name="wine_summary_table.csv",
            mime="text/csv",
            key="uni_summary_csv",
        )

        outliers = outlier_counts(df)
        st.dataframe(outliers, use_container_width=True)
        st.download_button(
            label="📥 Download Outlier Counts (CSV)",
            data=summary_to_csv(outliers),
            file_name="wine_outlier_counts.csv",
            mime="text/csv",
            key="uni_outliers_csv",
        )
