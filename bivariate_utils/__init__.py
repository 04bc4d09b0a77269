"""
Bivariate Analysis Utilities
Pairwise statistics and charts relating the wine attributes to each other and to quality
"""

from .statistics import (
    compute_correlation_matrix,
    compute_covariance_matrix,
    get_correlation_summary,
    correlations_with,
    grouped_statistics
)

from .plotting import (
    create_scatter_plot,
    create_quality_boxplot,
    create_pairs_plot,
    create_correlation_heatmap
)

__all__ = [
    'compute_correlation_matrix',
    'compute_covariance_matrix',
    'get_correlation_summary',
    'correlations_with',
    'grouped_statistics',
    'create_scatter_plot',
    'create_quality_boxplot',
    'create_pairs_plot',
    'create_correlation_heatmap'
]
