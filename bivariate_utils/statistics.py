"""
Bivariate Statistical Analysis
Correlation, covariance and per-quality group statistics for the wine table
"""

import numpy as np
import pandas as pd
from scipy import stats
from typing import Tuple, Optional, List
import streamlit as st

import config

_CORRELATION_FUNCS = {
    'pearson': stats.pearsonr,
    'spearman': stats.spearmanr,
    'kendall': stats.kendalltau,
}


def _correlate(x: pd.Series, y: pd.Series, method: str) -> Tuple[float, float]:
    """r and p-value for one pair; unknown method raises ValueError."""
    if method not in _CORRELATION_FUNCS:
        raise ValueError(f"Unknown correlation method: {method}")
    result = _CORRELATION_FUNCS[method](x, y)
    return float(result[0]), float(result[1])


@st.cache_data
def compute_correlation_matrix(
    data: pd.DataFrame,
    method: str = 'pearson'
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Compute correlation matrix with p-values

    Parameters
    ----------
    data : pd.DataFrame
        Numeric columns to correlate
    method : str
        'pearson', 'spearman', or 'kendall'

    Returns
    -------
    tuple
        (correlation_matrix, pvalue_matrix)
    """
    if method not in _CORRELATION_FUNCS:
        raise ValueError(f"Unknown correlation method: {method}")

    data_clean = data.dropna()
    if len(data_clean) < 2:
        raise ValueError("Need at least 2 complete observations for correlation")

    cols = data_clean.columns
    corr_matrix = pd.DataFrame(np.eye(len(cols)), index=cols, columns=cols)
    pval_matrix = pd.DataFrame(np.zeros((len(cols), len(cols))), index=cols, columns=cols)

    # Symmetric: compute the upper triangle and mirror it
    for i, col_i in enumerate(cols):
        for j in range(i + 1, len(cols)):
            col_j = cols[j]
            corr, pval = _correlate(data_clean[col_i], data_clean[col_j], method)
            corr_matrix.iloc[i, j] = corr_matrix.iloc[j, i] = corr
            pval_matrix.iloc[i, j] = pval_matrix.iloc[j, i] = pval

    return corr_matrix, pval_matrix


@st.cache_data
def compute_covariance_matrix(data: pd.DataFrame) -> pd.DataFrame:
    """Sample covariance matrix of the complete rows."""
    data_clean = data.dropna()
    if len(data_clean) < 2:
        raise ValueError("Need at least 2 complete observations for covariance")
    return data_clean.cov()


def get_correlation_summary(
    corr_matrix: pd.DataFrame,
    pval_matrix: pd.DataFrame,
    threshold: float = 0.05
) -> pd.DataFrame:
    """
    Every unique variable pair, strongest |r| first

    Returns
    -------
    pd.DataFrame
        Columns: Variable 1, Variable 2, Correlation, P-value, Significant
    """
    results = []
    n_vars = len(corr_matrix)
    for i in range(n_vars):
        for j in range(i + 1, n_vars):
            pval = pval_matrix.iloc[i, j]
            results.append({
                'Variable 1': corr_matrix.index[i],
                'Variable 2': corr_matrix.columns[j],
                'Correlation': corr_matrix.iloc[i, j],
                'P-value': pval,
                'Significant': 'Yes' if pval < threshold else 'No'
            })

    summary_df = pd.DataFrame(
        results, columns=['Variable 1', 'Variable 2', 'Correlation', 'P-value', 'Significant']
    )
    return summary_df.sort_values('Correlation', key=abs, ascending=False).reset_index(drop=True)


def correlations_with(
    data: pd.DataFrame,
    target: str = config.QUALITY_COL,
    columns: Optional[List[str]] = None,
    method: str = 'pearson'
) -> pd.DataFrame:
    """
    Correlation of each attribute with one target column

    Returns
    -------
    pd.DataFrame
        Columns: variable, r, p_value, abs_r, sorted by abs_r descending
    """
    if columns is None:
        columns = [c for c in config.ATTRIBUTES if c in data.columns and c != target]

    rows = []
    for col in columns:
        pair = data[[col, target]].dropna()
        if len(pair) < 3:
            continue
        r, p = _correlate(pair[col], pair[target], method)
        rows.append({'variable': col, 'r': r, 'p_value': p, 'abs_r': abs(r)})

    result = pd.DataFrame(rows, columns=['variable', 'r', 'p_value', 'abs_r'])
    return result.sort_values('abs_r', ascending=False).reset_index(drop=True)


def grouped_statistics(
    data: pd.DataFrame,
    column: str,
    by: str = config.QUALITY_COL
) -> pd.DataFrame:
    """
    Count, mean, median, stdev and IQR of ``column`` per group of ``by``

    Returns
    -------
    pd.DataFrame
        Index = group (sorted); columns: count, mean, median, stdev, iqr
    """
    grouped = data.groupby(by, observed=True)[column]
    result = pd.DataFrame({
        'count': grouped.count(),
        'mean': grouped.mean(),
        'median': grouped.median(),
        'stdev': grouped.std(ddof=1),
        'iqr': grouped.quantile(0.75) - grouped.quantile(0.25),
    })
    return result.sort_index().round(4)
