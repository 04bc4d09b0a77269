"""
Data export functions
Excel workbook of per-attribute statistics and CSV summary tables
"""

import io
from datetime import datetime
from typing import Any, Dict, Optional

import pandas as pd


def stats_to_excel(
    all_stats: Dict[str, Dict[str, Any]],
    dataframe: Optional[pd.DataFrame] = None,
) -> io.BytesIO:
    """
    Export per-attribute statistics to a multi-sheet Excel workbook.

    Sheets
    ------
    - ``Summary``  : one row per variable, all statistics as columns
    - ``Raw Data`` : the wine table (if provided)
    - ``Metadata`` : generation timestamp

    Parameters
    ----------
    all_stats : dict
        Output of ``eda_utils.run_eda_for_all_columns``
    dataframe : pd.DataFrame, optional
        Table to include as raw data sheet

    Returns
    -------
    BytesIO
        In-memory workbook, positioned at the start
    """
    summary_rows = []
    for col, s in all_stats.items():
        if 'error' in s:
            summary_rows.append({'Variable': col, 'Error': s['error']})
            continue
        summary_rows.append({
            'Variable':        col,
            'N':               s['n'],
            'Mean':            s['mean'],
            'StDev':           s['stdev'],
            'Skewness':        s['skewness'],
            'Kurtosis':        s['kurtosis'],
            'Minimum':         s['minimum'],
            'Q1':              s['q1'],
            'Median':          s['median'],
            'Q3':              s['q3'],
            'Maximum':         s['maximum'],
            'CI_Mean_Lower':   s['ci_mean'][0],
            'CI_Mean_Upper':   s['ci_mean'][1],
            'CI_Median_Lower': s['ci_median'][0],
            'CI_Median_Upper': s['ci_median'][1],
            'AD_Statistic':    s['ad_statistic'],
            'AD_P':            s['ad_p_label'],
        })

    summary_df = pd.DataFrame(summary_rows)

    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine='openpyxl') as writer:
        summary_df.to_excel(writer, sheet_name='Summary', index=False)

        if dataframe is not None:
            dataframe.to_excel(writer, sheet_name='Raw Data', index=False)

        meta_df = pd.DataFrame({
            'Property': ['Report Type', 'Generated', 'Variables Analysed'],
            'Value': [
                'Wine Quality EDA',
                datetime.now().strftime('%Y-%m-%d %H:%M:%S'),
                len(all_stats),
            ],
        })
        meta_df.to_excel(writer, sheet_name='Metadata', index=False)

    buf.seek(0)
    return buf


def summary_to_csv(summary_df: pd.DataFrame) -> str:
    """Summary table as CSV text, row labels kept as the first column."""
    return summary_df.to_csv(index=True)
