"""
Data handling utility modules for the wine quality report
"""

from .data_loaders import (
    normalize_column_name,
    load_wine_csv,
    validate_wine_data,
    load_wine_data,
    assign_quality_grade,
    with_derived_columns
)

from .data_exporters import (
    stats_to_excel,
    summary_to_csv
)

__all__ = [
    # Loaders
    'normalize_column_name',
    'load_wine_csv',
    'validate_wine_data',
    'load_wine_data',
    'assign_quality_grade',
    'with_derived_columns',
    # Exporters
    'stats_to_excel',
    'summary_to_csv'
]
