"""
Unified Color Mapping for the Wine Quality Report
Light theme only - quality scores and quality grades share one palette
"""

import pandas as pd

import config


def get_unified_color_schemes():
    """
    Unified color scheme for light theme

    Returns:
        dict: Plot styling colors plus the quality and grade palettes
    """

    # Sequential purple-to-gold ramp, one color per possible quality score
    quality_colors = [
        '#3b0f70', '#4c1d7d', '#5e2a89', '#7b3294', '#9e4a8f', '#c2668a',
        '#e0867a', '#f0a45c', '#f7c242', '#f2de3a', '#e8f032'
    ]

    return {
        # Plot styling colors
        'background': 'white',
        'paper': 'white',
        'text': 'black',
        'grid': '#e6e6e6',
        'point_color': '#7b3294',
        'bar_color': 'rgba(123, 50, 148, 0.75)',
        'line_colors': ['#1f4e79', '#c0392b'],
        'reference_lines': {'median': '#c0392b', 'mean': '#1f4e79'},

        # Quality score -> color
        'quality_colors': {score: color for score, color in enumerate(quality_colors)},

        # Quality grade -> color
        'grade_colors': {
            'low': '#c0392b',
            'medium': '#95a5a6',
            'high': '#1f77b4',
        },

        # Theme identifier
        'theme': 'light'
    }


def create_quality_color_map(unique_values):
    """
    Color mapping for quality scores

    Args:
        unique_values (list): Observed quality scores

    Returns:
        dict: Mapping of score to color (scores outside 0-10 fall back to gray)
    """
    colors = get_unified_color_schemes()['quality_colors']
    return {
        val: colors.get(int(val), 'gray')
        for val in sorted(unique_values)
    }


def create_categorical_color_map(unique_values):
    """
    Color mapping for a categorical variable

    Quality grades get their fixed colors; any other value gets an
    HSL color spaced around the wheel.
    """
    grade_colors = get_unified_color_schemes()['grade_colors']
    color_map = {}
    for i, val in enumerate(sorted(unique_values, key=str)):
        if val in grade_colors:
            color_map[val] = grade_colors[val]
        else:
            color_map[val] = f'hsl({(i * 137) % 360}, 70%, 50%)'
    return color_map


def is_quantitative_variable(data):
    """True when the values should be colored on a continuous scale."""
    series = pd.Series(data).dropna()
    if isinstance(series.dtype, pd.CategoricalDtype):
        return False
    if not pd.api.types.is_numeric_dtype(series):
        return False
    # Quality scores are numeric but discrete
    return series.nunique() > config.QUALITY_MAX - config.QUALITY_MIN + 1
