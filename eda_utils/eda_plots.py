"""
EDA Plots Module
================

Univariate figures for the wine quality report.

Main functions
--------------
plot_quality_bar(df)                    -> count of wines per quality score
plot_histogram(df, column, ...)         -> one attribute, optional log10 / trim
plot_attribute_histograms(df, ...)      -> grid, one histogram per attribute
plot_summary_report(data, column_name)  -> Minitab-style summary report

Summary report layout
---------------------
  ┌──────────────────┬────────────────────┐
  │  Histogram +     │  Statistics panel  │
  │  Normal curve    │  (AD test, means,  │
  ├──────────────────┤   quartiles, CIs)  │
  │  Boxplot         │                    │
  ├──────────────────┤                    │
  │  CI plot         │                    │
  │  (Mean & Median) │                    │
  └──────────────────┴────────────────────┘
"""

import numpy as np
import pandas as pd
import plotly.graph_objects as go
from plotly.subplots import make_subplots
from scipy import stats as sp_stats
from typing import Optional, Dict, Any, Union, List

import config
from color_utils import get_unified_color_schemes, create_quality_color_map
from .eda_calculations import descriptive_statistics, trim_upper_quantile, _clean


# ──────────────────────────────────────────────
#  COLOUR PALETTE
# ──────────────────────────────────────────────
_HIST_BAR   = 'rgba(123, 50, 148, 0.65)'
_HIST_LINE  = 'rgba(123, 50, 148, 1.00)'
_NORM_CURVE = 'rgba(192, 57, 43, 0.90)'
_BOX_COLOR  = 'rgba(123, 50, 148, 0.45)'
_CI_DOT     = '#1f4e79'
_CI_LINE    = '#2e75b6'


# ──────────────────────────────────────────────
#  REPORT CHARTS
# ──────────────────────────────────────────────

def plot_quality_bar(df: pd.DataFrame, title: Optional[str] = None) -> go.Figure:
    """
    Bar chart of the number of wines per quality score.

    Every integer score between the observed minimum and maximum gets a bar,
    so gaps in the scale stay visible.
    """
    counts = df[config.QUALITY_COL].value_counts()
    scores = list(range(int(counts.index.min()), int(counts.index.max()) + 1))
    counts = counts.reindex(scores, fill_value=0)
    color_map = create_quality_color_map(scores)
    total = counts.sum()

    fig = go.Figure(go.Bar(
        x=scores,
        y=counts.values,
        marker_color=[color_map[s] for s in scores],
        text=counts.values,
        textposition='outside',
        customdata=(counts.values / total * 100).round(1),
        hovertemplate='Quality %{x}<br>Wines: %{y}<br>Share: %{customdata}%<extra></extra>',
        name='Wines',
    ))

    color_scheme = get_unified_color_schemes()
    fig.update_layout(
        title=title or "Number of Wines per Quality Score",
        xaxis=dict(title='quality (score between 0 and 10)', tickmode='linear', dtick=1),
        yaxis=dict(title='number of wines', gridcolor=color_scheme['grid']),
        template='plotly_white',
        showlegend=False,
        bargap=0.15,
    )
    return fig


def plot_histogram(
    df: pd.DataFrame,
    column: str,
    bins: int = config.HIST_BINS,
    log_x: bool = False,
    trim_quantile: Optional[float] = None,
    title: Optional[str] = None,
) -> go.Figure:
    """
    Histogram of one attribute with median and mean reference lines.

    Parameters
    ----------
    df : pd.DataFrame
    column : str
    bins : int
        Number of bins (on the transformed scale when ``log_x``)
    log_x : bool
        Bin and display on a log10 axis
    trim_quantile : float, optional
        Drop rows above this quantile of ``column`` before plotting
    title : str, optional
    """
    plot_df = trim_upper_quantile(df, column, trim_quantile) if trim_quantile else df
    values = plot_df[column].dropna()
    color_scheme = get_unified_color_schemes()
    ref_colors = color_scheme['reference_lines']

    if log_x:
        values = values[values > 0]
        edges = np.linspace(np.log10(values.min()), np.log10(values.max()), bins + 1)
        counts, edges = np.histogram(np.log10(values), bins=edges)
        edges = 10 ** edges
    else:
        counts, edges = np.histogram(values, bins=bins)

    fig = go.Figure(go.Bar(
        x=(edges[:-1] + edges[1:]) / 2,
        y=counts,
        width=edges[1:] - edges[:-1],
        marker_color=_HIST_BAR,
        marker_line=dict(color=_HIST_LINE, width=0.5),
        hovertemplate=f'{column}: %{{x:.4g}}<br>Count: %{{y}}<extra></extra>',
        name=column,
        showlegend=False,
    ))
    if log_x:
        fig.update_xaxes(type='log')

    # Reference lines drawn as traces so they follow a log axis too
    y_top = counts.max() * 1.05 if len(counts) else 1
    for label, value, dash in [
        ('median', float(values.median()), 'dash'),
        ('mean', float(values.mean()), 'dot'),
    ]:
        fig.add_trace(go.Scatter(
            x=[value, value],
            y=[0, y_top],
            mode='lines',
            line=dict(color=ref_colors[label], dash=dash, width=2),
            name=f"{label} = {value:.4g}",
            hoverinfo='name',
        ))

    suffix = []
    if log_x:
        suffix.append("log10 scale")
    if trim_quantile:
        suffix.append(f"top {100 * (1 - trim_quantile):g}% removed")
    default_title = f"Distribution of {config.attribute_label(column)}"
    if suffix:
        default_title += f" ({', '.join(suffix)})"

    fig.update_layout(
        title=title or default_title,
        xaxis_title=config.attribute_label(column),
        yaxis_title='number of wines',
        template='plotly_white',
        legend=dict(x=0.99, xanchor='right', y=0.99),
    )
    fig.update_yaxes(gridcolor=color_scheme['grid'])
    return fig


def plot_attribute_histograms(
    df: pd.DataFrame,
    columns: Optional[List[str]] = None,
    bins: int = config.HIST_BINS,
    n_cols: int = 3,
) -> go.Figure:
    """Grid of histograms, one panel per attribute."""
    if columns is None:
        columns = [c for c in config.ATTRIBUTES if c in df.columns]

    n_rows = (len(columns) + n_cols - 1) // n_cols
    fig = make_subplots(
        rows=n_rows,
        cols=n_cols,
        subplot_titles=[c.replace('_', ' ') for c in columns],
        vertical_spacing=min(0.08, 0.5 / max(1, n_rows - 1)),
        horizontal_spacing=0.07,
    )

    for idx, col in enumerate(columns):
        fig.add_trace(go.Histogram(
            x=df[col],
            nbinsx=bins,
            marker_color=_HIST_BAR,
            marker_line=dict(color=_HIST_LINE, width=0.3),
            name=col,
            hovertemplate=f'{col}: %{{x}}<br>Count: %{{y}}<extra></extra>',
        ), row=idx // n_cols + 1, col=idx % n_cols + 1)

    fig.update_layout(
        title="Distributions of the Physiochemical Attributes",
        height=260 * n_rows + 80,
        template='plotly_white',
        showlegend=False,
    )
    return fig


# ──────────────────────────────────────────────
#  SUMMARY REPORT
# ──────────────────────────────────────────────

def plot_summary_report(
    data: Union[np.ndarray, pd.Series],
    column_name: str = "Variable",
    stats_dict: Optional[Dict[str, Any]] = None,
    confidence: float = config.CONFIDENCE,
    n_bins: int = 20,
    height: int = 620,
    width: Optional[int] = 900,
) -> go.Figure:
    """
    Minitab-style Summary Report for a single variable.

    Panels (left column, top → bottom): histogram with fitted normal curve,
    boxplot, confidence interval plot (mean & median). Right column:
    statistics panel.

    Parameters
    ----------
    data : array-like
    column_name : str
    stats_dict : dict, optional
        Pre-computed ``descriptive_statistics``; computed here when None.
    confidence : float
    n_bins : int
    height, width : int

    Returns
    -------
    go.Figure
    """
    data_clean = _clean(data)

    if stats_dict is None:
        stats_dict = descriptive_statistics(data_clean, confidence)

    fig = make_subplots(
        rows=3, cols=2,
        column_widths=[0.55, 0.45],
        row_heights=[0.50, 0.20, 0.30],
        specs=[
            [{"type": "xy"}, {"type": "xy", "rowspan": 3}],
            [{"type": "xy"}, None],
            [{"type": "xy"}, None],
        ],
        vertical_spacing=0.08,
        horizontal_spacing=0.06,
    )

    _add_histogram(fig, data_clean, column_name, n_bins, stats_dict, row=1, col=1)
    _add_boxplot(fig, data_clean, column_name, row=2, col=1)
    _add_ci_plot(fig, stats_dict, confidence, row=3, col=1)
    _add_stats_panel(fig, stats_dict, confidence, row=1, col=2)

    fig.update_layout(
        title=dict(
            text=f"<b>Summary Report for {column_name}</b>",
            x=0.5,
            xanchor='center',
            font=dict(size=16)
        ),
        height=height,
        width=width,
        template='plotly_white',
        showlegend=False,
        margin=dict(l=50, r=30, t=55, b=40),
    )

    return fig


# ──────────────────────────────────────────────
#  PRIVATE HELPERS
# ──────────────────────────────────────────────

def _add_histogram(fig, data_clean, col_name, n_bins, stats_dict, row, col):
    """Density histogram + fitted normal curve."""
    fig.add_trace(go.Histogram(
        x=data_clean,
        nbinsx=n_bins,
        marker_color=_HIST_BAR,
        marker_line=dict(color=_HIST_LINE, width=0.5),
        name='Data',
        histnorm='probability density',
        hovertemplate='Density: %{y:.4f}<extra></extra>',
    ), row=row, col=col)

    x_fit = np.linspace(data_clean.min(), data_clean.max(), 300)
    y_fit = sp_stats.norm.pdf(x_fit, stats_dict['mean'], stats_dict['stdev'])
    fig.add_trace(go.Scatter(
        x=x_fit,
        y=y_fit,
        mode='lines',
        line=dict(color=_NORM_CURVE, width=2.5),
        name='Normal fit',
    ), row=row, col=col)

    fig.update_xaxes(title_text=col_name, row=row, col=col, tickfont=dict(size=10))
    fig.update_yaxes(title_text='Density', row=row, col=col, tickfont=dict(size=10))


def _add_boxplot(fig, data_clean, col_name, row, col):
    """Horizontal boxplot with mean marker."""
    fig.add_trace(go.Box(
        x=data_clean,
        orientation='h',
        marker_color=_BOX_COLOR,
        line_color=_CI_DOT,
        boxmean=True,
        name=col_name,
    ), row=row, col=col)

    fig.update_xaxes(title_text=col_name, row=row, col=col, tickfont=dict(size=10))
    fig.update_yaxes(showticklabels=False, row=row, col=col)


def _add_ci_plot(fig, stats_dict, confidence, row, col):
    """Horizontal CI bars for Mean (top) and Median (bottom)."""
    entries = [
        (1, 'Mean',   stats_dict['ci_mean'],   stats_dict['mean']),
        (0, 'Median', stats_dict['ci_median'], stats_dict['median']),
    ]

    for y_pos, label, (lo, hi), point in entries:
        fig.add_trace(go.Scatter(
            x=[lo, hi],
            y=[y_pos, y_pos],
            mode='lines',
            line=dict(color=_CI_LINE, width=2.5),
            name=label,
            hovertemplate=f'{label} CI: [{lo:.4f}, {hi:.4f}]<extra></extra>',
        ), row=row, col=col)

        fig.add_trace(go.Scatter(
            x=[point],
            y=[y_pos],
            mode='markers',
            marker=dict(symbol='circle', size=10, color=_CI_DOT),
            name=f'{label} estimate',
            hovertemplate=f'{label}: {point:.4f}<extra></extra>',
        ), row=row, col=col)

    fig.update_xaxes(
        title_text=f'{int(confidence * 100)}% Confidence Intervals',
        row=row, col=col,
        tickfont=dict(size=10),
    )
    fig.update_yaxes(
        tickvals=[0, 1],
        ticktext=['Median', 'Mean'],
        range=[-0.6, 1.6],
        row=row, col=col,
        tickfont=dict(size=10),
    )


def _add_stats_panel(fig, s, confidence, row, col):
    """Statistics table in the right column, drawn as paper annotations."""
    ci_pct = int(confidence * 100)
    ad_color = 'red' if s['ad_reject'] else '#1a6b1a'

    lines = [
        ("<b>Anderson-Darling Normality Test</b>", None),
        (f"    A-Squared       {s['ad_statistic']:.4f}", None),
        (f"    P-Value         {s['ad_p_label']}", ad_color),
        (f"    Conclusion      {'Not normal' if s['ad_reject'] else 'Normal'}", ad_color),
        ("", None),
        ("<b>Descriptive Statistics</b>", None),
        (f"    Mean            {s['mean']:.4f}", None),
        (f"    StDev           {s['stdev']:.4f}", None),
        (f"    Skewness        {s['skewness']:.4f}", None),
        (f"    Kurtosis        {s['kurtosis']:.4f}", None),
        (f"    N               {s['n']}", None),
        ("", None),
        ("<b>5-Number Summary</b>", None),
        (f"    Minimum         {s['minimum']:.4f}", None),
        (f"    1st Quartile    {s['q1']:.4f}", None),
        (f"    Median          {s['median']:.4f}", None),
        (f"    3rd Quartile    {s['q3']:.4f}", None),
        (f"    Maximum         {s['maximum']:.4f}", None),
        ("", None),
        (f"<b>{ci_pct}% Confidence Intervals</b>", None),
        (f"    Mean    [{s['ci_mean'][0]:.3f}, {s['ci_mean'][1]:.3f}]", None),
        (f"    Median  [{s['ci_median'][0]:.3f}, {s['ci_median'][1]:.3f}]", None),
        (f"    StDev   [{s['ci_stdev'][0]:.3f}, {s['ci_stdev'][1]:.3f}]", None),
    ]

    # Invisible anchor so the panel keeps its subplot slot
    fig.add_trace(go.Scatter(
        x=[0], y=[0],
        mode='markers',
        marker=dict(opacity=0),
        showlegend=False,
        hoverinfo='skip',
    ), row=row, col=col)
    fig.update_xaxes(visible=False, row=row, col=col)
    fig.update_yaxes(visible=False, row=row, col=col)

    line_height = 0.041
    annotations = []
    for i, (text, color) in enumerate(lines):
        if not text:
            continue
        annotations.append(dict(
            text=(
                "<span style='font-family:Courier New,monospace; font-size:11px; "
                f"color:{color or '#222222'}'>{text}</span>"
            ),
            x=0.595,
            y=0.97 - i * line_height,
            xref='paper',
            yref='paper',
            showarrow=False,
            xanchor='left',
            yanchor='top',
            align='left',
        ))

    fig.update_layout(annotations=annotations)
