"""
Linear Models of Quality
Ordinary least squares of the quality score on the physiochemical attributes
"""

import numpy as np
import pandas as pd
from scipy import stats
from typing import Dict, List

import config


def fit_ols(
    data: pd.DataFrame,
    predictors: List[str],
    target: str = config.QUALITY_COL,
) -> Dict:
    """
    OLS fit with coefficient tests, R² and overall F-test (numpy/scipy).

    Parameters
    ----------
    data : pd.DataFrame
    predictors : list of str
    target : str

    Returns
    -------
    dict
        coefficients (pd.Series, 'Constant' first), se, t_values, p_values,
        r_squared, r_squared_adj, f_statistic, f_p_value, residual_se,
        residuals, fitted, n, p
    """
    if not predictors:
        raise ValueError("At least one predictor is required")

    subset = data[predictors + [target]].dropna()
    X = subset[predictors].to_numpy(dtype=float)
    y = subset[target].to_numpy(dtype=float)
    n, p = X.shape
    k = p + 1  # parameters including intercept

    if n <= k:
        raise ValueError(
            f"Not enough observations ({n}) for {p} predictors. "
            f"Need at least {p + 2} observations."
        )

    X_design = np.column_stack([np.ones(n), X])
    beta, _, _, _ = np.linalg.lstsq(X_design, y, rcond=None)
    fitted = X_design @ beta
    residuals = y - fitted

    ss_res = float(np.sum(residuals ** 2))
    ss_tot = float(np.sum((y - y.mean()) ** 2))
    ss_reg = ss_tot - ss_res

    r_sq = 1.0 - ss_res / ss_tot if ss_tot > 0 else 0.0
    r_sq_adj = 1.0 - (1.0 - r_sq) * (n - 1) / (n - k)
    mse = ss_res / (n - k)

    # pinv keeps collinear designs (e.g. density ~ sugar + alcohol) from failing
    cov = mse * np.linalg.pinv(X_design.T @ X_design)
    se = np.sqrt(np.abs(np.diag(cov)))
    with np.errstate(divide='ignore', invalid='ignore'):
        t_vals = np.where(se > 0, beta / se, np.nan)
    p_vals = 2.0 * stats.t.sf(np.abs(t_vals), n - k)

    if mse > 0:
        f_stat = (ss_reg / p) / mse
        f_p = float(stats.f.sf(f_stat, p, n - k))
    else:
        f_stat, f_p = float('inf'), 0.0

    names = ['Constant'] + list(predictors)
    return {
        'coefficients': pd.Series(beta, index=names),
        'se': pd.Series(se, index=names),
        't_values': pd.Series(t_vals, index=names),
        'p_values': pd.Series(p_vals, index=names),
        'r_squared': r_sq,
        'r_squared_adj': r_sq_adj,
        'f_statistic': f_stat,
        'f_p_value': f_p,
        'residual_se': float(np.sqrt(mse)),
        'residuals': residuals,
        'fitted': fitted,
        'n': n,
        'p': p,
    }


def fit_nested_models(
    data: pd.DataFrame,
    predictor_sequence: List[str],
    target: str = config.QUALITY_COL,
) -> pd.DataFrame:
    """
    Nested model table: m1 uses the first predictor, each next model adds one.

    Returns
    -------
    pd.DataFrame
        Index m1..mK; columns: added, predictors, r_squared, r_squared_adj,
        residual_se, f_p_value, n
    """
    rows = []
    for i in range(1, len(predictor_sequence) + 1):
        used = predictor_sequence[:i]
        fit = fit_ols(data, used, target)
        rows.append({
            'model': f'm{i}',
            'added': used[-1],
            'predictors': ' + '.join(used),
            'r_squared': round(fit['r_squared'], 4),
            'r_squared_adj': round(fit['r_squared_adj'], 4),
            'residual_se': round(fit['residual_se'], 4),
            'f_p_value': fit['f_p_value'],
            'n': fit['n'],
        })

    return pd.DataFrame(rows).set_index('model')


def coefficient_table(fit: Dict) -> pd.DataFrame:
    """Coefficients, standard errors, t and p values of one fit as a table."""
    return pd.DataFrame({
        'estimate': fit['coefficients'],
        'std_error': fit['se'],
        't_value': fit['t_values'],
        'p_value': fit['p_values'],
    }).round(6)
