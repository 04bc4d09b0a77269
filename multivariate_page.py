"""
Multivariate Analysis Page

The multivariate chapter of the report plus explorers that bring quality
into attribute pairs: grade-colored scatter, per-grade facets and a 3-D view.
"""

import streamlit as st

import config
from utils import with_derived_columns
from multivariate_utils import (
    create_grade_scatter,
    create_scatter_3d,
    create_grade_facets,
)
from model_utils import fit_ols, coefficient_table
from workspace_utils import get_wine_data, render_chapter


def show():
    """Main function - Multivariate Analysis Page"""

    st.title("🧊 Multivariate Analysis")
    st.markdown("""
    Attribute pairs with quality as a third dimension, the 3-D view of
    alcohol, sugar and density, and linear models of quality.
    """)

    df = get_wine_data()
    if df is None:
        return
    data = with_derived_columns(df)

    st.markdown("---")
    tab1, tab2, tab3, tab4 = st.tabs([
        "📖 Report",
        "🎨 Grade Scatter",
        "🧊 3-D Scatter",
        "📐 Linear Model",
    ])

    with tab1:
        render_chapter('multivariate')

    # ========== GRADE SCATTER ==========
    with tab2:
        col1, col2, col3 = st.columns(3)
        with col1:
            x_var = st.selectbox(
                "X variable:", config.ATTRIBUTES,
                index=config.ATTRIBUTES.index('alcohol'), key="multi_x",
            )
        with col2:
            y_var = st.selectbox(
                "Y variable:", config.ATTRIBUTES,
                index=config.ATTRIBUTES.index('density'), key="multi_y",
            )
        with col3:
            layout = st.radio("Layout:", ["Overlay", "Facets"], horizontal=True, key="multi_layout")

        trim = st.checkbox("Trim top 1%", value=True, key="multi_trim")
        trim_quantile = config.TRIM_QUANTILE if trim else None

        if x_var == y_var:
            st.warning("⚠️ Choose two different attributes")
        elif layout == "Overlay":
            st.plotly_chart(
                create_grade_scatter(data, x_var, y_var, trim_quantile=trim_quantile),
                use_container_width=True,
                key="multi_grade_scatter",
            )
        else:
            st.plotly_chart(
                create_grade_facets(data, x_var, y_var, trim_quantile=trim_quantile),
                use_container_width=True,
                key="multi_grade_facets",
            )

    # ========== 3-D SCATTER ==========
    with tab3:
        col1, col2, col3, col4 = st.columns(4)
        with col1:
            x3 = st.selectbox("X:", config.ATTRIBUTES, index=config.ATTRIBUTES.index('alcohol'), key="multi_x3")
        with col2:
            y3 = st.selectbox("Y:", config.ATTRIBUTES, index=config.ATTRIBUTES.index('residual_sugar'), key="multi_y3")
        with col3:
            z3 = st.selectbox("Z:", config.ATTRIBUTES, index=config.ATTRIBUTES.index('density'), key="multi_z3")
        with col4:
            color_3d = st.selectbox("Color by:", [config.GRADE_COL, config.QUALITY_COL], key="multi_color3")

        if len({x3, y3, z3}) < 3:
            st.warning("⚠️ Choose three different attributes")
        else:
            st.plotly_chart(
                create_scatter_3d(
                    data, x3, y3, z3, color_by=color_3d, trim_quantile=config.TRIM_QUANTILE,
                ),
                use_container_width=True,
                key="multi_3d",
            )

    # ========== LINEAR MODEL ==========
    with tab4:
        predictors = st.multiselect(
            "Predictors of quality:",
            config.ATTRIBUTES,
            default=['alcohol', 'volatile_acidity', 'residual_sugar'],
            key="multi_predictors",
        )
        if not predictors:
            st.info("Select at least one predictor")
        else:
            try:
                fit = fit_ols(data, predictors)
            except ValueError as e:
                st.error(f"❌ {e}")
            else:
                col1, col2, col3 = st.columns(3)
                col1.metric("R²", f"{fit['r_squared']:.4f}")
                col2.metric("Adjusted R²", f"{fit['r_squared_adj']:.4f}")
                col3.metric("Residual SE", f"{fit['residual_se']:.4f}")
                st.dataframe(coefficient_table(fit), use_container_width=True)
