"""
EDA Page - Exploratory Data Analysis
=====================================

Streamlit page module for the EDA Summary Report feature.
Follows the same pattern as all other page modules (show() entry point).

Renders Minitab-style Summary Reports for each wine attribute:
  - Histogram with fitted normal curve
  - Boxplot
  - 95% Confidence Interval plot (Mean & Median)
  - Statistics panel (Anderson-Darling test, descriptives, 5-number summary, CIs)
"""

import streamlit as st

from eda_utils.eda_workspace import render_eda_tab
from workspace_utils import get_wine_data


def show():
    """
    Main entry point called by homepage.py router.
    """
    st.title("📊 EDA Summary")
    st.markdown(
        "Minitab-style **Summary Reports** for each attribute: "
        "histogram, boxplot, confidence intervals and the Anderson-Darling normality test."
    )

    dataframe = get_wine_data()
    if dataframe is None:
        return

    st.divider()

    render_eda_tab(dataframe=dataframe, key_prefix="eda_wine")
