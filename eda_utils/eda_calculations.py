"""
EDA Calculations Module
=======================

Univariate statistics for the wine quality report.

Provides:
- Dataset overview (size, quality range, duplicated measurements)
- R-style summary table (Min, 1st Qu., Median, Mean, 3rd Qu., Max)
- Quality score and quality grade distributions
- Upper-quantile trimming and Tukey-fence outlier counts
- Minitab-style per-variable statistics (Anderson-Darling test, CIs)
"""

import numpy as np
import pandas as pd
from scipy import stats
from typing import Dict, Any, List, Optional, Tuple, Union

import config


# ──────────────────────────────────────────────
#  DATASET LEVEL
# ──────────────────────────────────────────────

def dataset_overview(df: pd.DataFrame) -> Dict[str, Any]:
    """
    Size and shape of the wine table.

    Returns
    -------
    dict
        Keys: n_rows, n_columns, n_attributes, quality_min, quality_max,
        quality_median, quality_mean, n_duplicated_measurements
    """
    quality = df[config.QUALITY_COL]
    measured = [c for c in config.ATTRIBUTES + [config.QUALITY_COL] if c in df.columns]

    return {
        'n_rows':         int(len(df)),
        'n_columns':      int(df.shape[1]),
        'n_attributes':   len([c for c in config.ATTRIBUTES if c in df.columns]),
        'quality_min':    int(quality.min()),
        'quality_max':    int(quality.max()),
        'quality_median': float(quality.median()),
        'quality_mean':   round(float(quality.mean()), 4),
        # Identical on every measurement; the identifier is ignored
        'n_duplicated_measurements': int(df.duplicated(subset=measured).sum()),
    }


def summary_table(
    df: pd.DataFrame,
    columns: Optional[List[str]] = None
) -> pd.DataFrame:
    """
    Six-number summary per column, one row per column.

    Columns: Min, 1st Qu., Median, Mean, 3rd Qu., Max
    """
    if columns is None:
        columns = [c for c in config.ATTRIBUTES + [config.QUALITY_COL] if c in df.columns]

    rows = {}
    for col in columns:
        s = df[col]
        rows[col] = {
            'Min':     s.min(),
            '1st Qu.': s.quantile(0.25),
            'Median':  s.median(),
            'Mean':    s.mean(),
            '3rd Qu.': s.quantile(0.75),
            'Max':     s.max(),
        }

    return pd.DataFrame.from_dict(rows, orient='index').round(4)


def quality_distribution(df: pd.DataFrame) -> pd.DataFrame:
    """
    Count and share of wines per observed quality score.

    Returns
    -------
    pd.DataFrame
        Columns: quality, count, share (sorted by quality)
    """
    counts = df[config.QUALITY_COL].value_counts().sort_index()
    return pd.DataFrame({
        config.QUALITY_COL: counts.index.astype(int),
        'count': counts.values.astype(int),
        'share': (counts.values / counts.values.sum()).round(4),
    })


def grade_distribution(df: pd.DataFrame) -> pd.DataFrame:
    """
    Count and share of wines per quality grade (low / medium / high).

    ``df`` must carry the ``quality_grade`` column from
    ``utils.with_derived_columns``. Grades with no wines are kept with a
    zero count.
    """
    counts = df[config.GRADE_COL].value_counts(sort=False)
    counts = counts.reindex(list(config.QUALITY_GRADES.keys()), fill_value=0)
    total = counts.sum()
    ranges = [
        f"{lo}-{hi}" if lo != hi else f"{lo}"
        for lo, hi in config.QUALITY_GRADES.values()
    ]
    return pd.DataFrame({
        config.GRADE_COL: counts.index,
        'scores': ranges,
        'count': counts.values.astype(int),
        'share': (counts.values / total).round(4) if total else 0.0,
    })


def trim_upper_quantile(
    df: pd.DataFrame,
    column: str,
    quantile: float = config.TRIM_QUANTILE
) -> pd.DataFrame:
    """Copy of ``df`` without the rows above ``column``'s ``quantile``."""
    if not 0 < quantile <= 1:
        raise ValueError(f"quantile must be in (0, 1], got {quantile}")
    cutoff = df[column].quantile(quantile)
    return df[df[column] <= cutoff].copy()


def outlier_counts(
    df: pd.DataFrame,
    columns: Optional[List[str]] = None,
    k: float = 1.5
) -> pd.DataFrame:
    """
    Tukey-fence outliers per column.

    Returns
    -------
    pd.DataFrame
        Index = column; columns: lower_fence, upper_fence, n_low, n_high,
        n_outliers, share
    """
    if columns is None:
        columns = [c for c in config.ATTRIBUTES if c in df.columns]

    rows = {}
    for col in columns:
        s = df[col]
        q1, q3 = s.quantile(0.25), s.quantile(0.75)
        iqr = q3 - q1
        lower, upper = q1 - k * iqr, q3 + k * iqr
        n_low = int((s < lower).sum())
        n_high = int((s > upper).sum())
        rows[col] = {
            'lower_fence': round(lower, 4),
            'upper_fence': round(upper, 4),
            'n_low':       n_low,
            'n_high':      n_high,
            'n_outliers':  n_low + n_high,
            'share':       round((n_low + n_high) / len(s), 4) if len(s) else 0.0,
        }

    return pd.DataFrame.from_dict(rows, orient='index')


# ──────────────────────────────────────────────
#  NORMALITY TEST
# ──────────────────────────────────────────────

def anderson_darling_test(data: Union[np.ndarray, pd.Series]) -> Dict[str, Any]:
    """
    Anderson-Darling normality test.

    A-Squared is computed against a normal with the sample mean and
    standard deviation. The p-value uses the small-sample adjusted
    statistic A*² = A²(1 + 0.75/n + 2.25/n²) and the D'Agostino-Stephens
    approximation, as Minitab reports it.

    Returns
    -------
    dict
        Keys: 'statistic' (A-Squared), 'p_value', 'p_label', 'reject_h0'
    """
    data_clean = np.sort(_clean(data))
    n = len(data_clean)
    if n < 3:
        raise ValueError("Need at least 3 observations for the Anderson-Darling test")

    sd = data_clean.std(ddof=1)
    if sd == 0:
        raise ValueError("Anderson-Darling test is undefined for constant data")

    z = (data_clean - data_clean.mean()) / sd
    i = np.arange(1, n + 1)
    a_sq = float(
        -n - np.sum((2 * i - 1) * (stats.norm.logcdf(z) + stats.norm.logsf(z[::-1]))) / n
    )

    adj = a_sq * (1 + 0.75 / n + 2.25 / n ** 2)
    if adj >= 0.6:
        p_value = np.exp(1.2937 - 5.709 * adj + 0.0186 * adj ** 2)
    elif adj >= 0.34:
        p_value = np.exp(0.9177 - 4.279 * adj - 1.38 * adj ** 2)
    elif adj >= 0.2:
        p_value = 1 - np.exp(-8.318 + 42.796 * adj - 59.938 * adj ** 2)
    else:
        p_value = 1 - np.exp(-13.436 + 101.14 * adj - 223.73 * adj ** 2)
    p_value = float(np.clip(p_value, 0.0, 1.0))

    p_label = "<0.005" if p_value < 0.005 else f"{p_value:.3f}"

    return {
        'statistic': round(a_sq, 4),
        'p_value': p_value,
        'p_label': p_label,
        'reject_h0': p_value <= 0.05,
    }


# ──────────────────────────────────────────────
#  CONFIDENCE INTERVALS
# ──────────────────────────────────────────────

def ci_for_mean(
    data: Union[np.ndarray, pd.Series],
    confidence: float = config.CONFIDENCE
) -> Tuple[float, float]:
    """t-interval for the mean."""
    data_clean = _clean(data)
    n = len(data_clean)
    mean = np.mean(data_clean)
    margin = stats.t.ppf(1 - (1 - confidence) / 2, df=n - 1) * stats.sem(data_clean)
    return (round(mean - margin, 4), round(mean + margin, 4))


def ci_for_median(
    data: Union[np.ndarray, pd.Series],
    confidence: float = config.CONFIDENCE,
    n_bootstrap: int = 1000,
    random_state: int = config.RANDOM_STATE
) -> Tuple[float, float]:
    """Percentile bootstrap interval for the median."""
    data_clean = _clean(data)
    rng = np.random.default_rng(random_state)
    boot_medians = np.array([
        np.median(rng.choice(data_clean, size=len(data_clean), replace=True))
        for _ in range(n_bootstrap)
    ])
    alpha = 1 - confidence
    lower = float(np.percentile(boot_medians, 100 * alpha / 2))
    upper = float(np.percentile(boot_medians, 100 * (1 - alpha / 2)))
    return (round(lower, 4), round(upper, 4))


def ci_for_stdev(
    data: Union[np.ndarray, pd.Series],
    confidence: float = config.CONFIDENCE
) -> Tuple[float, float]:
    """Chi-squared interval for the standard deviation."""
    data_clean = _clean(data)
    n = len(data_clean)
    var = np.var(data_clean, ddof=1)
    alpha = 1 - confidence
    chi2_lower = stats.chi2.ppf(alpha / 2, df=n - 1)
    chi2_upper = stats.chi2.ppf(1 - alpha / 2, df=n - 1)
    lower = np.sqrt((n - 1) * var / chi2_upper)
    upper = np.sqrt((n - 1) * var / chi2_lower)
    return (round(lower, 4), round(upper, 4))


# ──────────────────────────────────────────────
#  PER-VARIABLE STATISTICS
# ──────────────────────────────────────────────

def descriptive_statistics(
    data: Union[np.ndarray, pd.Series],
    confidence: float = config.CONFIDENCE
) -> Dict[str, Any]:
    """
    Descriptive statistics for one variable (Minitab Summary Report).

    Returns
    -------
    dict with keys:
        n, mean, stdev, variance, skewness, kurtosis,
        minimum, q1, median, q3, maximum,
        ci_mean, ci_median, ci_stdev,
        ad_statistic, ad_p_label, ad_reject
    """
    data_clean = _clean(data)
    if len(data_clean) < 3:
        raise ValueError("Need at least 3 observations for descriptive statistics")

    ad = anderson_darling_test(data_clean)

    return {
        'n':          int(len(data_clean)),
        'mean':       round(float(np.mean(data_clean)), 4),
        'stdev':      round(float(np.std(data_clean, ddof=1)), 4),
        'variance':   round(float(np.var(data_clean, ddof=1)), 4),
        'skewness':   round(float(stats.skew(data_clean)), 6),
        'kurtosis':   round(float(stats.kurtosis(data_clean)), 6),   # excess
        'minimum':    round(float(np.min(data_clean)), 4),
        'q1':         round(float(np.percentile(data_clean, 25)), 4),
        'median':     round(float(np.median(data_clean)), 4),
        'q3':         round(float(np.percentile(data_clean, 75)), 4),
        'maximum':    round(float(np.max(data_clean)), 4),
        'ci_mean':    ci_for_mean(data_clean, confidence),
        'ci_median':  ci_for_median(data_clean, confidence),
        'ci_stdev':   ci_for_stdev(data_clean, confidence),
        'ad_statistic': ad['statistic'],
        'ad_p_label':   ad['p_label'],
        'ad_reject':    ad['reject_h0'],
    }


def run_eda_for_all_columns(
    dataframe: pd.DataFrame,
    columns: Optional[List[str]] = None
) -> Dict[str, Dict[str, Any]]:
    """
    ``descriptive_statistics`` for every attribute plus quality.

    Returns
    -------
    dict  {column_name: descriptive_statistics_dict}
    """
    if columns is None:
        columns = [c for c in config.ATTRIBUTES + [config.QUALITY_COL]
                   if c in dataframe.columns]

    results = {}
    for col in columns:
        try:
            results[col] = descriptive_statistics(dataframe[col])
        except ValueError as e:
            results[col] = {'error': str(e)}

    return results


# ──────────────────────────────────────────────
#  HELPERS
# ──────────────────────────────────────────────

def _clean(data: Union[np.ndarray, pd.Series]) -> np.ndarray:
    """Return a 1-D float array with NaN values removed."""
    arr = np.asarray(data).flatten().astype(float)
    return arr[~np.isnan(arr)]
