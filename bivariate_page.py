"""
Bivariate Analysis Page

The bivariate chapter of the report plus interactive views of pairs of
variables: scatter explorer, correlation matrix, pairs plot, covariance.
"""

import streamlit as st
import numpy as np

import config
from utils import with_derived_columns
from bivariate_utils import (
    compute_correlation_matrix,
    compute_covariance_matrix,
    get_correlation_summary,
    correlations_with,
    create_scatter_plot,
    create_pairs_plot,
    create_correlation_heatmap,
)
from workspace_utils import get_wine_data, render_chapter

NUMERIC_COLUMNS = config.ATTRIBUTES + [config.QUALITY_COL]


def _strength_marker(abs_r: float) -> str:
    return "🔴" if abs_r > 0.8 else "🟠" if abs_r > 0.6 else "🟡" if abs_r > 0.4 else "🟢"


def show():
    """
    Main function to display the Bivariate Analysis page
    """
    # Keyed selectboxes read their value from session state; the ranking
    # buttons below write the chosen pair to the same keys.
    st.session_state.setdefault('bi_x_var', 'alcohol')
    st.session_state.setdefault('bi_y_var', 'density')

    st.title("🔗 Bivariate Analysis")
    st.markdown("""
    Relationships between pairs of variables through correlation analysis,
    scatter plots and quality-grouped comparisons.
    """)

    df = get_wine_data()
    if df is None:
        return
    data = with_derived_columns(df)

    st.markdown("---")
    tab1, tab2, tab3, tab4, tab5 = st.tabs([
        "📖 Report",
        "📊 Scatter Plot Analysis",
        "📊 Correlation Matrix",
        "📑 Pairs Plot",
        "📋 Covariance & Summary",
    ])

    # =========================================================================
    # TAB 1: REPORT CHAPTER
    # =========================================================================
    with tab1:
        render_chapter('bivariate')

    # =========================================================================
    # TAB 2: SCATTER PLOT ANALYSIS - Ranking + Plot Together
    # =========================================================================
    with tab2:
        st.markdown("### 📈 Correlation Ranking - Select Variable Pair")

        corr, pvals = compute_correlation_matrix(data[NUMERIC_COLUMNS])
        ranking = get_correlation_summary(corr, pvals)

        col_left, col_right = st.columns([2, 1])
        with col_left:
            for idx, row in ranking.head(10).iterrows():
                var1, var2, r_value = row['Variable 1'], row['Variable 2'], row['Correlation']
                col_rank, col_vars, col_r, col_button = st.columns([0.5, 2, 1, 0.8])
                with col_rank:
                    st.markdown(f"**{idx + 1}.**")
                with col_vars:
                    st.markdown(f"`{var1}` → `{var2}`")
                with col_r:
                    st.markdown(f"{_strength_marker(abs(r_value))} r = {r_value:.4f}")
                with col_button:
                    if st.button("Select", key=f"select_pair_{idx}"):
                        st.session_state['bi_x_var'] = var1
                        st.session_state['bi_y_var'] = var2
                        st.rerun()
        with col_right:
            st.markdown("**Strength Legend:**")
            st.markdown("🔴 |r| > 0.8: Very Strong")
            st.markdown("🟠 0.6 < |r| ≤ 0.8: Strong")
            st.markdown("🟡 0.4 < |r| ≤ 0.6: Moderate")
            st.markdown("🟢 |r| ≤ 0.4: Weak")

        st.markdown("---")
        st.markdown("### 🎨 Scatter Plot Visualization")

        col1, col2, col3 = st.columns(3)
        with col1:
            x_var = st.selectbox(
                "X variable:", NUMERIC_COLUMNS,
                key="bi_x_var",
            )
        with col2:
            y_var = st.selectbox(
                "Y variable:", NUMERIC_COLUMNS,
                key="bi_y_var",
            )
        with col3:
            color_choice = st.selectbox(
                "Color by:", ["None", config.QUALITY_COL, config.GRADE_COL] + config.ATTRIBUTES,
                key="bi_color",
            )

        col4, col5, col6, col7 = st.columns(4)
        with col4:
            opacity = st.slider("Opacity", 0.05, 1.0, 0.3, 0.05, key="bi_opacity")
        with col5:
            jitter = st.slider(
                "X jitter", 0.0, 0.5, 0.3 if x_var == config.QUALITY_COL else 0.0, 0.05,
                key="bi_jitter", help="Spreads overlapping points of a discrete x such as quality",
            )
        with col6:
            trendline = st.checkbox("Linear fit", value=True, key="bi_trend")
        with col7:
            trim = st.checkbox("Trim top 1%", value=False, key="bi_trim")

        if x_var == y_var:
            st.warning("⚠️ Choose two different variables")
        else:
            fig = create_scatter_plot(
                data, x_var, y_var,
                color_by=None if color_choice == "None" else color_choice,
                jitter=jitter,
                opacity=opacity,
                trendline=trendline,
                trim_quantile=config.TRIM_QUANTILE if trim else None,
            )
            st.plotly_chart(fig, use_container_width=True, key="bi_scatter")
            st.metric("Pearson r", f"{corr.loc[x_var, y_var]:.4f}")

    # =========================================================================
    # TAB 3: CORRELATION MATRIX
    # =========================================================================
    with tab3:
        st.markdown("## 📊 Correlation Matrix")
        method = st.radio(
            "Method:", ['pearson', 'spearman', 'kendall'], horizontal=True, key="bi_corr_method",
        )
        corr_m, pvals_m = compute_correlation_matrix(data[NUMERIC_COLUMNS], method=method)
        st.plotly_chart(
            create_correlation_heatmap(corr_m, pvals_m, title=f"Correlation Matrix ({method.title()})"),
            use_container_width=True,
            key="bi_heatmap",
        )

        st.markdown("### Correlations with quality")
        st.dataframe(
            correlations_with(data, method=method).round(4),
            use_container_width=True,
            hide_index=True,
        )

    # =========================================================================
    # TAB 4: PAIRS PLOT
    # =========================================================================
    with tab4:
        st.markdown("## 📑 Pairs Plot")
        variables = st.multiselect(
            "Variables (2 to 6):",
            NUMERIC_COLUMNS,
            default=['alcohol', 'density', 'residual_sugar', config.QUALITY_COL],
            max_selections=6,
            key="bi_pairs_vars",
        )
        color_pairs = st.checkbox("Color by quality grade", value=True, key="bi_pairs_color")
        if len(variables) < 2:
            st.info("Select at least 2 variables")
        else:
            st.plotly_chart(
                create_pairs_plot(
                    data, variables,
                    color_by=config.GRADE_COL if color_pairs else None,
                ),
                use_container_width=True,
                key="bi_pairs",
            )

    # =========================================================================
    # TAB 5: COVARIANCE & SUMMARY
    # =========================================================================
    with tab5:
        st.markdown("## 📋 Covariance Matrix")
        cov = compute_covariance_matrix(data[NUMERIC_COLUMNS])
        st.dataframe(cov.round(6), use_container_width=True)

        st.markdown("## 📋 All Pairs")
        display_df = ranking.copy()
        display_df['|r|'] = np.abs(display_df['Correlation'])
        st.dataframe(display_df.round(4), use_container_width=True, hide_index=True)
        st.download_button(
            label="📥 Download Correlation Pairs (CSV)",
            data=display_df.to_csv(index=False),
            file_name="wine_correlation_pairs.csv",
            mime="text/csv",
            key="bi_pairs_csv",
        )
