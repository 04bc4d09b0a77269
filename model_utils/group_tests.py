"""
Two-sample comparison of one attribute between quality grades
"""

import numpy as np
import pandas as pd
from scipy import stats
from typing import Dict

import config


def compare_grades(
    data: pd.DataFrame,
    column: str,
    high_grade: str = 'high',
    grade_col: str = config.GRADE_COL,
    conf_level: float = config.CONFIDENCE,
) -> Dict:
    """
    Welch two-sample t-test of ``column``: ``high_grade`` wines vs all others.

    Returns
    -------
    dict
        groups, descriptive (N, Mean, StDev, SE Mean per group), difference
        (estimate, ci_lower, ci_upper, confidence), test (t_value, df,
        p_value), conclusion
    """
    is_high = data[grade_col] == high_grade
    sample1 = pd.to_numeric(data.loc[is_high, column], errors='coerce').dropna()
    sample2 = pd.to_numeric(data.loc[~is_high, column], errors='coerce').dropna()
    name1, name2 = high_grade, f"not {high_grade}"

    if len(sample1) < 2 or len(sample2) < 2:
        raise ValueError(f"Each group needs at least 2 wines to compare {column}")

    result = stats.ttest_ind(sample1, sample2, equal_var=False)
    ci = result.confidence_interval(confidence_level=conf_level)

    def desc(s: pd.Series) -> Dict:
        return {
            'N': len(s),
            'Mean': s.mean(),
            'StDev': s.std(ddof=1),
            'SE Mean': s.std(ddof=1) / np.sqrt(len(s)),
        }

    significant = result.pvalue < (1 - conf_level)
    return {
        'groups': [name1, name2],
        'descriptive': {name1: desc(sample1), name2: desc(sample2)},
        'difference': {
            'estimate': sample1.mean() - sample2.mean(),
            'ci_lower': ci.low,
            'ci_upper': ci.high,
            'confidence': conf_level * 100,
        },
        'test': {
            't_value': result.statistic,
            'df': result.df,
            'p_value': result.pvalue,
        },
        'conclusion': (
            "Reject H₀ – Significant difference" if significant
            else "Fail to reject H₀ – No significant difference"
        ),
    }
