"""
Report Configuration
====================

Paths, column names and plotting defaults for the white wine EDA report.

Two environment variables override the default locations:

    WINE_EDA_DATA_PATH    input table (comma or semicolon delimited)
    WINE_EDA_OUTPUT_DIR   directory for the rendered HTML document
"""

import os

# Project root
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# ============================================================================
# PATHS
# ============================================================================

DATA_PATH = os.environ.get(
    'WINE_EDA_DATA_PATH',
    os.path.join(BASE_DIR, 'data', 'wineQualityWhites.csv')
)

OUTPUT_DIR = os.environ.get(
    'WINE_EDA_OUTPUT_DIR',
    os.path.join(BASE_DIR, 'reports')
)

REPORT_TITLE = "White Wine Quality: Exploratory Data Analysis"
REPORT_FILENAME = "wine_quality_eda.html"

# ============================================================================
# DATA MODEL
# ============================================================================

ID_COL = 'wine_id'
QUALITY_COL = 'quality'
GRADE_COL = 'quality_grade'

ATTRIBUTES = [
    'fixed_acidity',
    'volatile_acidity',
    'citric_acid',
    'residual_sugar',
    'chlorides',
    'free_sulfur_dioxide',
    'total_sulfur_dioxide',
    'density',
    'pH',
    'sulphates',
    'alcohol',
]

ATTRIBUTE_UNITS = {
    'fixed_acidity':        'tartaric acid, g/dm³',
    'volatile_acidity':     'acetic acid, g/dm³',
    'citric_acid':          'g/dm³',
    'residual_sugar':       'g/dm³',
    'chlorides':            'sodium chloride, g/dm³',
    'free_sulfur_dioxide':  'mg/dm³',
    'total_sulfur_dioxide': 'mg/dm³',
    'density':              'g/cm³',
    'pH':                   'pH',
    'sulphates':            'potassium sulphate, g/dm³',
    'alcohol':              '% by volume',
}

# Rating scale the tasters used
QUALITY_MIN = 0
QUALITY_MAX = 10

# Inclusive score ranges, ordered from worst to best
QUALITY_GRADES = {
    'low':    (QUALITY_MIN, 5),
    'medium': (6, 6),
    'high':   (7, QUALITY_MAX),
}

# First acid-dissociation constant (pK_a1) of the acids found in wine
ACID_PKA1 = {
    'tartaric': 2.98,
    'citric':   3.13,
    'malic':    3.40,
    'acetic':   4.76,
}

# ============================================================================
# ANALYSIS DEFAULTS
# ============================================================================

HIST_BINS = 30
TRIM_QUANTILE = 0.99
CONFIDENCE = 0.95
RANDOM_STATE = 42


def attribute_label(column: str) -> str:
    """Axis label with units, e.g. ``"residual sugar (g/dm³)"``."""
    name = column if column == 'pH' else column.replace('_', ' ')
    unit = ATTRIBUTE_UNITS.get(column)
    if unit is None or unit == column:
        return name
    return f"{name} ({unit})"
