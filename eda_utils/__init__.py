"""
eda_utils: univariate analysis for the wine quality report
===========================================================

Package Structure
-----------------
eda_calculations  :  Overview, summary table, quality distributions,
                     trimming, outliers, Minitab-style statistics
eda_plots         :  Plotly figures (quality bar, histograms, summary report)
eda_workspace     :  Streamlit tab renderer, session state, Excel export

Quick Start: standalone (no Streamlit)
-----------------------------------------
>>> from utils import load_wine_data
>>> from eda_utils import summary_table, plot_histogram
>>>
>>> df = load_wine_data("wineQualityWhites.csv")
>>> summary_table(df)
>>> plot_histogram(df, "residual_sugar", log_x=True).show()
"""

# ── Calculations ──────────────────────────────────────────────
from .eda_calculations import (
    dataset_overview,
    summary_table,
    quality_distribution,
    grade_distribution,
    trim_upper_quantile,
    outlier_counts,
    anderson_darling_test,
    ci_for_mean,
    ci_for_median,
    ci_for_stdev,
    descriptive_statistics,
    run_eda_for_all_columns,
)

# ── Plots ─────────────────────────────────────────────────────
from .eda_plots import (
    plot_quality_bar,
    plot_histogram,
    plot_attribute_histograms,
    plot_summary_report,
)

# ── Public API ────────────────────────────────────────────────
__all__ = [
    # calculations
    "dataset_overview",
    "summary_table",
    "quality_distribution",
    "grade_distribution",
    "trim_upper_quantile",
    "outlier_counts",
    "anderson_darling_test",
    "ci_for_mean",
    "ci_for_median",
    "ci_for_stdev",
    "descriptive_statistics",
    "run_eda_for_all_columns",
    # plots
    "plot_quality_bar",
    "plot_histogram",
    "plot_attribute_histograms",
    "plot_summary_report",
]

__version__     = "1.0.0"
__description__ = "Univariate statistics and charts for the wine quality EDA"
