"""
Synthetic wine tables for the tests

The published table is not shipped with the repository, so the tests use a
small deterministic table with the same columns and the same broad
relationships (alcohol lowers density, sugar raises it, alcohol goes with
quality).
"""

import numpy as np
import pandas as pd

import config

# Header spellings of the two published layouts
UCI_HEADERS = {
    'fixed_acidity':        'fixed acidity',
    'volatile_acidity':     'volatile acidity',
    'citric_acid':          'citric acid',
    'residual_sugar':       'residual sugar',
    'chlorides':            'chlorides',
    'free_sulfur_dioxide':  'free sulfur dioxide',
    'total_sulfur_dioxide': 'total sulfur dioxide',
    'density':              'density',
    'pH':                   'pH',
    'sulphates':            'sulphates',
    'alcohol':              'alcohol',
    'quality':              'quality',
}
DOTTED_HEADERS = {col: name.replace(' ', '.') for col, name in UCI_HEADERS.items()}


def make_wine_table(n: int = 300, seed: int = 0) -> pd.DataFrame:
    """Validated-shape wine table with ``n`` rows and identifiers 1..n."""
    rng = np.random.default_rng(seed)

    alcohol = rng.uniform(8.0, 14.0, n)
    residual_sugar = np.exp(rng.normal(1.5, 0.8, n))
    fixed_acidity = rng.normal(6.8, 0.8, n)
    volatile_acidity = np.abs(rng.normal(0.28, 0.1, n)) + 0.08
    citric_acid = np.abs(rng.normal(0.33, 0.12, n))
    chlorides = np.abs(rng.normal(0.045, 0.02, n)) + 0.009
    free_so2 = np.abs(rng.normal(35.0, 15.0, n)) + 2.0
    total_so2 = free_so2 + np.abs(rng.normal(100.0, 35.0, n))
    density = (
        0.9940
        - 0.0012 * (alcohol - 10.5)
        + 0.00035 * (residual_sugar - 6.0)
        + rng.normal(0.0, 0.0004, n)
    )
    pH = 3.9 - 0.1 * fixed_acidity + rng.normal(0.0, 0.1, n)
    sulphates = np.abs(rng.normal(0.49, 0.11, n)) + 0.22

    score = 1.5 + 0.55 * alcohol - 2.0 * volatile_acidity + rng.normal(0.0, 0.6, n)
    quality = np.clip(np.round(score), 3, 9).astype(int)

    return pd.DataFrame({
        config.ID_COL:          np.arange(1, n + 1),
        'fixed_acidity':        fixed_acidity.round(1),
        'volatile_acidity':     volatile_acidity.round(3),
        'citric_acid':          citric_acid.round(2),
        'residual_sugar':       residual_sugar.round(2),
        'chlorides':            chlorides.round(3),
        'free_sulfur_dioxide':  free_so2.round(0),
        'total_sulfur_dioxide': total_so2.round(0),
        'density':              density.round(5),
        'pH':                   pH.round(2),
        'sulphates':            sulphates.round(2),
        'alcohol':              alcohol.round(1),
        config.QUALITY_COL:     quality,
    })


def write_semicolon_csv(df: pd.DataFrame, path) -> None:
    """UCI layout: semicolon separated, spaced headers, no identifier column."""
    out = df.drop(columns=[config.ID_COL]).rename(columns=UCI_HEADERS)
    out.to_csv(path, sep=';', index=False)


def write_comma_csv(df: pd.DataFrame, path, index_label: str = '') -> None:
    """Comma layout: first column holding the identifier, dotted headers.

    R's ``write.csv`` leaves the identifier header empty; tables read back
    into R and saved again carry it as ``"X"``.
    """
    out = df.set_index(config.ID_COL).rename(columns=DOTTED_HEADERS)
    out.to_csv(path, sep=',', index=True, index_label=index_label)
