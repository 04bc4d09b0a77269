"""
Model Utilities
Linear models of quality and two-sample grade comparisons
"""

from .quality_model import (
    fit_ols,
    fit_nested_models,
    coefficient_table
)

from .group_tests import (
    compare_grades
)

__all__ = [
    'fit_ols',
    'fit_nested_models',
    'coefficient_table',
    'compare_grades'
]
