"""
Multivariate Plotting Utilities
Charts that bring quality in as a third (or fourth) dimension
"""

import numpy as np
import pandas as pd
import plotly.graph_objects as go
from plotly.subplots import make_subplots
from typing import Optional, List

import config
from color_utils import (
    create_categorical_color_map,
    create_quality_color_map,
    get_unified_color_schemes,
)


def _ordered_groups(data: pd.DataFrame, column: str) -> List:
    """Groups present in ``column``, in category order when it is categorical."""
    present = set(data[column].dropna().unique())
    if isinstance(data[column].dtype, pd.CategoricalDtype):
        return [g for g in data[column].cat.categories if g in present]
    return sorted(present)


def _group_color_map(data: pd.DataFrame, column: str, groups: List) -> dict:
    if column == config.QUALITY_COL:
        return create_quality_color_map(groups)
    return create_categorical_color_map(groups)


def _trim_upper(data: pd.DataFrame, columns: List[str], quantile: Optional[float]) -> pd.DataFrame:
    if not quantile:
        return data
    mask = pd.Series(True, index=data.index)
    for col in columns:
        mask &= data[col] <= data[col].quantile(quantile)
    return data[mask]


def create_grade_scatter(
    data: pd.DataFrame,
    x_var: str,
    y_var: str,
    grade_col: str = config.GRADE_COL,
    trendline: bool = True,
    trim_quantile: Optional[float] = None,
    opacity: float = 0.35,
    title: Optional[str] = None
) -> go.Figure:
    """
    Scatter of y against x colored by quality grade, one least-squares line per grade

    Parameters
    ----------
    data : pd.DataFrame
        Must carry ``grade_col`` (see ``utils.with_derived_columns``)
    x_var, y_var : str
    grade_col : str
    trendline : bool
    trim_quantile : float, optional
        Drop rows above this quantile of x or y
    opacity : float
    title : str, optional

    Returns
    -------
    go.Figure
    """
    plot_data = _trim_upper(data[[x_var, y_var, grade_col]].dropna(), [x_var, y_var], trim_quantile)
    groups = _ordered_groups(plot_data, grade_col)
    color_map = _group_color_map(plot_data, grade_col, groups)

    fig = go.Figure()
    for group in groups:
        subset = plot_data[plot_data[grade_col] == group]
        fig.add_trace(go.Scattergl(
            x=subset[x_var],
            y=subset[y_var],
            mode='markers',
            marker=dict(size=5, color=color_map[group], opacity=opacity),
            name=f"{group} (n={len(subset)})",
            legendgroup=str(group),
            hovertemplate=f'{x_var}: %{{x:.3f}}<br>{y_var}: %{{y:.4f}}<extra>{group}</extra>',
        ))

        if trendline and len(subset) >= 2 and subset[x_var].nunique() > 1:
            slope, intercept = np.polyfit(subset[x_var], subset[y_var], 1)
            x_line = np.array([subset[x_var].min(), subset[x_var].max()])
            fig.add_trace(go.Scatter(
                x=x_line,
                y=slope * x_line + intercept,
                mode='lines',
                line=dict(color=color_map[group], width=3),
                name=f"{group} fit",
                legendgroup=str(group),
                showlegend=False,
                hovertemplate=f'{group}: slope {slope:.4g}<extra></extra>',
            ))

    color_scheme = get_unified_color_schemes()
    fig.update_layout(
        title=title or (
            f"{y_var.replace('_', ' ')} vs {x_var.replace('_', ' ')} by {grade_col.replace('_', ' ')}"
        ),
        xaxis_title=config.attribute_label(x_var),
        yaxis_title=config.attribute_label(y_var),
        legend_title_text=grade_col.replace('_', ' '),
        legend=dict(itemsizing='constant'),
        template='plotly_white',
    )
    fig.update_xaxes(gridcolor=color_scheme['grid'])
    fig.update_yaxes(gridcolor=color_scheme['grid'])
    return fig


def create_scatter_3d(
    data: pd.DataFrame,
    x_var: str,
    y_var: str,
    z_var: str,
    color_by: str = config.GRADE_COL,
    trim_quantile: Optional[float] = None,
    opacity: float = 0.5,
    title: Optional[str] = None
) -> go.Figure:
    """
    3-D scatter of three attributes, one trace per group of ``color_by``

    Returns
    -------
    go.Figure
    """
    cols = [x_var, y_var, z_var, color_by]
    plot_data = _trim_upper(data[cols].dropna(), [x_var, y_var, z_var], trim_quantile)
    groups = _ordered_groups(plot_data, color_by)
    color_map = _group_color_map(plot_data, color_by, groups)

    fig = go.Figure()
    for group in groups:
        subset = plot_data[plot_data[color_by] == group]
        fig.add_trace(go.Scatter3d(
            x=subset[x_var],
            y=subset[y_var],
            z=subset[z_var],
            mode='markers',
            marker=dict(size=2.5, color=color_map[group], opacity=opacity),
            name=str(group),
            hovertemplate=(
                f'{x_var}: %{{x:.3f}}<br>{y_var}: %{{y:.3f}}<br>{z_var}: %{{z:.4f}}'
                f'<extra>{group}</extra>'
            ),
        ))

    fig.update_layout(
        title=title or (
            f"{x_var.replace('_', ' ')}, {y_var.replace('_', ' ')} and "
            f"{z_var.replace('_', ' ')} by {color_by.replace('_', ' ')}"
        ),
        scene=dict(
            xaxis_title=x_var.replace('_', ' '),
            yaxis_title=y_var.replace('_', ' '),
            zaxis_title=z_var.replace('_', ' '),
        ),
        legend=dict(itemsizing='constant', title=color_by.replace('_', ' ')),
        height=700,
        template='plotly_white',
    )
    return fig


def create_grade_facets(
    data: pd.DataFrame,
    x_var: str,
    y_var: str,
    grade_col: str = config.GRADE_COL,
    trim_quantile: Optional[float] = None,
    opacity: float = 0.35,
    title: Optional[str] = None
) -> go.Figure:
    """One scatter panel per grade, shared axes so the panels compare directly."""
    plot_data = _trim_upper(data[[x_var, y_var, grade_col]].dropna(), [x_var, y_var], trim_quantile)
    groups = _ordered_groups(plot_data, grade_col)
    color_map = _group_color_map(plot_data, grade_col, groups)

    fig = make_subplots(
        rows=1,
        cols=max(1, len(groups)),
        shared_xaxes=True,
        shared_yaxes=True,
        subplot_titles=[f"{g} (n={(plot_data[grade_col] == g).sum()})" for g in groups],
        horizontal_spacing=0.03,
    )

    for idx, group in enumerate(groups):
        subset = plot_data[plot_data[grade_col] == group]
        fig.add_trace(go.Scattergl(
            x=subset[x_var],
            y=subset[y_var],
            mode='markers',
            marker=dict(size=4, color=color_map[group], opacity=opacity),
            name=str(group),
            showlegend=False,
        ), row=1, col=idx + 1)
        fig.update_xaxes(title_text=x_var.replace('_', ' '), row=1, col=idx + 1)

    fig.update_yaxes(title_text=config.attribute_label(y_var), row=1, col=1)
    fig.update_layout(
        title=title or f"{y_var.replace('_', ' ')} vs {x_var.replace('_', ' ')}, one panel per grade",
        template='plotly_white',
        height=450,
    )
    return fig


def create_grade_density(
    data: pd.DataFrame,
    column: str,
    grade_col: str = config.GRADE_COL,
    bins: int = config.HIST_BINS,
    trim_quantile: Optional[float] = None,
    title: Optional[str] = None
) -> go.Figure:
    """Overlaid histograms of ``column`` per grade, each normalized to a density."""
    plot_data = _trim_upper(data[[column, grade_col]].dropna(), [column], trim_quantile)
    groups = _ordered_groups(plot_data, grade_col)
    color_map = _group_color_map(plot_data, grade_col, groups)

    # Common bin edges so the densities line up
    edges = np.histogram_bin_edges(plot_data[column], bins=bins)

    fig = go.Figure()
    for group in groups:
        fig.add_trace(go.Histogram(
            x=plot_data.loc[plot_data[grade_col] == group, column],
            xbins=dict(start=edges[0], end=edges[-1], size=edges[1] - edges[0]),
            histnorm='probability density',
            marker_color=color_map[group],
            opacity=0.5,
            name=str(group),
        ))

    fig.update_layout(
        barmode='overlay',
        title=title or f"{column.replace('_', ' ')} density by {grade_col.replace('_', ' ')}",
        xaxis_title=config.attribute_label(column),
        yaxis_title='density',
        template='plotly_white',
    )
    return fig
