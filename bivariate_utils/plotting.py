"""
Bivariate Plotting Utilities
Scatter plots, per-quality boxplots, correlation heatmap and pairs plot (Plotly)
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
    is_quantitative_variable,
)


def _trim(data: pd.DataFrame, columns: List[str], quantile: Optional[float]) -> pd.DataFrame:
    """Drop rows above ``quantile`` in any of ``columns``."""
    if not quantile:
        return data
    mask = pd.Series(True, index=data.index)
    for col in columns:
        mask &= data[col] <= data[col].quantile(quantile)
    return data[mask]


def _ols_line(x: pd.Series, y: pd.Series):
    """Endpoints of the least-squares line through (x, y)."""
    slope, intercept = np.polyfit(x, y, 1)
    x_line = np.array([x.min(), x.max()])
    return x_line, slope * x_line + intercept, slope


def create_scatter_plot(
    data: pd.DataFrame,
    x_var: str,
    y_var: str,
    color_by: Optional[str] = None,
    jitter: float = 0.0,
    opacity: float = 0.3,
    point_size: int = 5,
    trendline: bool = False,
    trim_quantile: Optional[float] = None,
    title: Optional[str] = None,
    random_state: int = config.RANDOM_STATE
) -> go.Figure:
    """
    Scatter plot that stays readable with thousands of overlapping wines

    Parameters
    ----------
    data : pd.DataFrame
    x_var, y_var : str
    color_by : str, optional
        Column coloring the points. Quality scores and grades get one trace
        per group, continuous attributes a color scale.
    jitter : float
        Uniform noise half-width added to x. Use with discrete x such as quality.
    opacity : float
        Point opacity (0-1)
    point_size : int
    trendline : bool
        Overlay the least-squares line of y on x
    trim_quantile : float, optional
        Drop rows above this quantile of x or y before plotting
    title : str, optional
    random_state : int
        Seed for the jitter

    Returns
    -------
    go.Figure
    """
    cols = [x_var, y_var] + ([color_by] if color_by and color_by not in (x_var, y_var) else [])
    plot_data = _trim(data[cols].dropna(), [x_var, y_var], trim_quantile)

    if len(plot_data) == 0:
        fig = go.Figure()
        fig.add_annotation(
            text="No data available after removing missing values",
            xref="paper", yref="paper",
            x=0.5, y=0.5, showarrow=False
        )
        return fig

    x_values = plot_data[x_var].astype(float)
    if jitter:
        rng = np.random.default_rng(random_state)
        x_values = x_values + rng.uniform(-jitter, jitter, size=len(x_values))

    color_scheme = get_unified_color_schemes()
    hovertemplate = f'{x_var}: %{{x:.3f}}<br>{y_var}: %{{y:.3f}}<extra>%{{fullData.name}}</extra>'
    fig = go.Figure()

    if color_by and is_quantitative_variable(plot_data[color_by]):
        fig.add_trace(go.Scattergl(
            x=x_values,
            y=plot_data[y_var],
            mode='markers',
            marker=dict(
                size=point_size,
                color=plot_data[color_by],
                colorscale='Viridis',
                opacity=opacity,
                colorbar=dict(title=color_by.replace('_', ' ')),
            ),
            name='Wines',
            showlegend=False,
            hovertemplate=hovertemplate,
        ))
    elif color_by:
        categories = plot_data[color_by].dropna().unique()
        if color_by == config.QUALITY_COL:
            color_map = create_quality_color_map(categories)
        else:
            color_map = create_categorical_color_map(categories)
        if isinstance(plot_data[color_by].dtype, pd.CategoricalDtype):
            categories = [c for c in plot_data[color_by].cat.categories if c in set(categories)]
        else:
            categories = sorted(categories)

        for category in categories:
            mask = (plot_data[color_by] == category).values
            fig.add_trace(go.Scattergl(
                x=x_values[mask],
                y=plot_data.loc[mask, y_var],
                mode='markers',
                marker=dict(size=point_size, color=color_map.get(category, 'gray'), opacity=opacity),
                name=str(category),
                legendgroup=str(category),
                hovertemplate=hovertemplate,
            ))
    else:
        fig.add_trace(go.Scattergl(
            x=x_values,
            y=plot_data[y_var],
            mode='markers',
            marker=dict(size=point_size, color=color_scheme['point_color'], opacity=opacity),
            name='Wines',
            showlegend=False,
            hovertemplate=hovertemplate,
        ))

    if trendline and len(plot_data) >= 2:
        x_line, y_line, slope = _ols_line(plot_data[x_var], plot_data[y_var])
        fig.add_trace(go.Scatter(
            x=x_line,
            y=y_line,
            mode='lines',
            line=dict(color=color_scheme['line_colors'][1], width=2.5),
            name=f'linear fit (slope {slope:.3g})',
        ))

    if title is None:
        title = f"{y_var.replace('_', ' ')} vs {x_var.replace('_', ' ')}"
        if color_by:
            title += f" | colored by {color_by.replace('_', ' ')}"

    fig.update_layout(
        title=title,
        xaxis_title=config.attribute_label(x_var),
        yaxis_title=config.attribute_label(y_var),
        template='plotly_white',
        hovermode='closest',
        legend=dict(itemsizing='constant'),
    )
    fig.update_xaxes(showgrid=True, gridcolor=color_scheme['grid'])
    fig.update_yaxes(showgrid=True, gridcolor=color_scheme['grid'])

    return fig


def create_quality_boxplot(
    data: pd.DataFrame,
    column: str,
    by: str = config.QUALITY_COL,
    trim_quantile: Optional[float] = None,
    show_points: bool = False,
    title: Optional[str] = None
) -> go.Figure:
    """
    One box of ``column`` per quality score (or grade), mean marked as a diamond

    Parameters
    ----------
    data : pd.DataFrame
    column : str
    by : str
        Grouping column, ``quality`` or ``quality_grade``
    trim_quantile : float, optional
        Drop rows above this quantile of ``column``
    show_points : bool
        Draw the jittered wines beside each box
    title : str, optional
    """
    plot_data = _trim(data[[column, by]].dropna(), [column], trim_quantile)

    if isinstance(plot_data[by].dtype, pd.CategoricalDtype):
        groups = [g for g in plot_data[by].cat.categories if (plot_data[by] == g).any()]
        color_map = create_categorical_color_map(groups)
    else:
        groups = sorted(plot_data[by].unique())
        color_map = create_quality_color_map(groups)

    fig = go.Figure()
    for group in groups:
        values = plot_data.loc[plot_data[by] == group, column]
        fig.add_trace(go.Box(
            y=values,
            name=str(group),
            marker_color=color_map.get(group, 'gray'),
            boxmean=True,
            boxpoints='all' if show_points else 'outliers',
            jitter=0.4 if show_points else 0,
            pointpos=0 if show_points else None,
            marker=dict(size=3, opacity=0.3 if show_points else 0.6),
        ))

    fig.update_layout(
        title=title or f"{column.replace('_', ' ')} by {by.replace('_', ' ')}",
        xaxis_title=by.replace('_', ' '),
        yaxis_title=config.attribute_label(column),
        template='plotly_white',
        showlegend=False,
    )
    fig.update_yaxes(gridcolor=get_unified_color_schemes()['grid'])
    return fig


def create_pairs_plot(
    data: pd.DataFrame,
    variables: List[str],
    color_by: Optional[str] = None,
    opacity: float = 0.3
) -> go.Figure:
    """
    Scatter plot matrix with histograms on the diagonal

    Parameters
    ----------
    data : pd.DataFrame
    variables : List[str]
        At least two columns
    color_by : str, optional
    opacity : float

    Returns
    -------
    go.Figure
    """
    n_vars = len(variables)
    if n_vars < 2:
        raise ValueError("Need at least 2 variables for pairs plot")

    cols = variables + ([color_by] if color_by else [])
    plot_data = data[cols].dropna()
    color_scheme = get_unified_color_schemes()

    if color_by:
        categories = plot_data[color_by].unique()
        if color_by == config.QUALITY_COL:
            color_map = create_quality_color_map(categories)
        else:
            color_map = create_categorical_color_map(categories)
    else:
        categories, color_map = [None], None

    fig = make_subplots(
        rows=n_vars,
        cols=n_vars,
        vertical_spacing=0.02,
        horizontal_spacing=0.02
    )

    for i, var_y in enumerate(variables):
        for j, var_x in enumerate(variables):
            if i == j:
                fig.add_trace(go.Histogram(
                    x=plot_data[var_x],
                    marker_color=color_scheme['bar_color'],
                    showlegend=False,
                ), row=i + 1, col=j + 1)
            else:
                for category in categories:
                    mask = plot_data[color_by] == category if color_by else slice(None)
                    fig.add_trace(go.Scattergl(
                        x=plot_data.loc[mask, var_x],
                        y=plot_data.loc[mask, var_y],
                        mode='markers',
                        name=str(category) if color_by else 'Wines',
                        legendgroup=str(category),
                        marker=dict(
                            color=color_map[category] if color_by else color_scheme['point_color'],
                            size=3,
                            opacity=opacity
                        ),
                        showlegend=bool(color_by) and i == 0 and j == 1,
                        hovertemplate=f'{var_x}: %{{x:.3f}}<br>{var_y}: %{{y:.3f}}<extra></extra>'
                    ), row=i + 1, col=j + 1)

            if j == 0:
                fig.update_yaxes(title_text=var_y.replace('_', ' '), row=i + 1, col=j + 1)
            if i == n_vars - 1:
                fig.update_xaxes(title_text=var_x.replace('_', ' '), row=i + 1, col=j + 1)

    fig.update_layout(
        title="Pairs Plot",
        template='plotly_white',
        height=170 * n_vars,
        width=170 * n_vars,
    )
    return fig


def create_correlation_heatmap(
    corr_matrix: pd.DataFrame,
    pval_matrix: Optional[pd.DataFrame] = None,
    significance_level: float = 0.05,
    title: str = "Correlation Matrix"
) -> go.Figure:
    """
    Annotated correlation heatmap; ``*`` marks p < significance_level

    Returns
    -------
    go.Figure
    """
    labels = [c.replace('_', ' ') for c in corr_matrix.columns]
    annotations = []
    for i in range(len(corr_matrix.index)):
        for j in range(len(corr_matrix.columns)):
            corr_val = corr_matrix.iloc[i, j]
            text = f"{corr_val:.2f}"
            if pval_matrix is not None and i != j and pval_matrix.iloc[i, j] < significance_level:
                text += "*"
            annotations.append(dict(
                x=labels[j],
                y=labels[i],
                text=text,
                showarrow=False,
                font=dict(size=10, color='black' if abs(corr_val) < 0.5 else 'white')
            ))

    fig = go.Figure(data=go.Heatmap(
        z=corr_matrix.values,
        x=labels,
        y=labels,
        colorscale='RdBu_r',
        zmid=0,
        zmin=-1,
        zmax=1,
        colorbar=dict(title="r"),
        hovertemplate='%{y} vs %{x}<br>r = %{z:.3f}<extra></extra>'
    ))

    fig.update_layout(
        title=title,
        annotations=annotations,
        xaxis=dict(side='bottom', tickangle=-45),
        yaxis=dict(autorange='reversed'),
        width=max(600, 60 * len(labels)),
        height=max(600, 60 * len(labels)),
        template='plotly_white',
    )
    return fig
