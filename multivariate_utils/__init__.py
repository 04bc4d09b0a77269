"""
Multivariate Analysis Utilities
Quality-grade colored scatter plots, facets, densities and the 3-D scatter
"""

from .plotting import (
    create_grade_scatter,
    create_scatter_3d,
    create_grade_facets,
    create_grade_density
)

__all__ = [
    'create_grade_scatter',
    'create_scatter_3d',
    'create_grade_facets',
    'create_grade_density'
]
