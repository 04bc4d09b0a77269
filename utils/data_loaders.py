"""
Data loaders for the wine quality table
Handles the UCI semicolon file and the comma file with a row identifier
"""

import io
import logging
import os
from typing import List, Optional, Union

import numpy as np
import pandas as pd

import config

logger = logging.getLogger(__name__)

_SEPARATORS = [';', ',']
_ENCODINGS = ['utf-8', 'latin-1', 'cp1252']

# Normalized header spellings of the row identifier in published copies
_ID_ALIASES = {'', 'x', 'unnamed:_0', 'id', 'wine_id'}


def normalize_column_name(name: str) -> str:
    """
    Map a published header spelling to the snake_case column name.

    ``"fixed acidity"``, ``"fixed.acidity"`` and ``"Fixed Acidity"`` all become
    ``"fixed_acidity"``. ``pH`` keeps its spelling.
    """
    cleaned = str(name).strip().strip('"').strip("'").strip()
    if cleaned.lower() == 'ph':
        return 'pH'
    for ch in ['.', ' ', '-']:
        cleaned = cleaned.replace(ch, '_')
    while '__' in cleaned:
        cleaned = cleaned.replace('__', '_')
    return cleaned.strip('_').lower()


def load_wine_csv(
    source: Union[str, os.PathLike, io.IOBase],
    encoding: str = 'utf-8'
) -> pd.DataFrame:
    """
    Read the wine table from a delimited file.

    Parameters
    ----------
    source : path or file-like
        CSV file. Both the semicolon layout (no identifier) and the comma
        layout (first column is the row identifier) are accepted.
    encoding : str
        Preferred encoding, tried before the fallbacks.

    Returns
    -------
    pd.DataFrame
        Columns ``wine_id``, the eleven attributes, ``quality``.

    Raises
    ------
    ValueError
        If no separator/encoding combination yields the expected columns.
    """
    encodings = [encoding] + [e for e in _ENCODINGS if e != encoding]
    expected = config.ATTRIBUTES + [config.QUALITY_COL]
    data = None

    for sep in _SEPARATORS:
        for enc in encodings:
            if hasattr(source, 'seek'):
                source.seek(0)
            try:
                candidate = pd.read_csv(source, sep=sep, encoding=enc)
            except (UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError):
                continue

            candidate = candidate.rename(columns=normalize_column_name)
            if all(col in candidate.columns for col in expected):
                logger.debug("Parsed wine table with sep=%r encoding=%s", sep, enc)
                data = candidate
                break
        if data is not None:
            break

    if data is None:
        raise ValueError(
            "Unable to parse wine table: expected columns "
            f"{', '.join(expected)} with ';' or ',' separator"
        )

    data = _attach_identifier(data)

    quality = data[config.QUALITY_COL]
    if quality.notna().all() and pd.api.types.is_numeric_dtype(quality) \
            and np.all(np.mod(quality, 1) == 0):
        data[config.QUALITY_COL] = quality.astype(int)

    return data[[config.ID_COL] + expected].reset_index(drop=True)


def _attach_identifier(data: pd.DataFrame) -> pd.DataFrame:
    """Rename the identifier column to ``wine_id`` or number the rows from 1."""
    known = set(config.ATTRIBUTES + [config.QUALITY_COL])
    candidates = [
        col for col in data.columns
        if col not in known and str(col).lower() in _ID_ALIASES
    ]
    if candidates:
        data = data.rename(columns={candidates[0]: config.ID_COL})
        logger.debug("Using column %r as %s", candidates[0], config.ID_COL)
    else:
        data = data.copy()
        data[config.ID_COL] = np.arange(1, len(data) + 1)
    return data


def validate_wine_data(df: pd.DataFrame) -> pd.DataFrame:
    """
    Check the table invariants and return the frame unchanged.

    - every expected column is present
    - no missing values
    - attributes are numeric
    - ``wine_id`` is unique
    - ``quality`` is an integer score within the rating scale

    Raises
    ------
    ValueError
        On the first violated invariant.
    """
    expected = [config.ID_COL] + config.ATTRIBUTES + [config.QUALITY_COL]
    missing = [col for col in expected if col not in df.columns]
    if missing:
        raise ValueError(f"Missing column(s): {', '.join(missing)}")

    null_counts = df[expected].isna().sum()
    null_counts = null_counts[null_counts > 0]
    if len(null_counts) > 0:
        detail = ', '.join(f"{col}={n}" for col, n in null_counts.items())
        raise ValueError(f"Missing values found: {detail}")

    non_numeric = [
        col for col in config.ATTRIBUTES + [config.QUALITY_COL]
        if not pd.api.types.is_numeric_dtype(df[col])
    ]
    if non_numeric:
        raise ValueError(f"Non-numeric column(s): {', '.join(non_numeric)}")

    n_dup_ids = int(df[config.ID_COL].duplicated().sum())
    if n_dup_ids > 0:
        raise ValueError(f"{config.ID_COL} is not unique: {n_dup_ids} duplicated identifier(s)")

    quality = df[config.QUALITY_COL]
    if not np.all(np.mod(quality, 1) == 0):
        raise ValueError("quality must contain integer scores")
    if quality.min() < config.QUALITY_MIN or quality.max() > config.QUALITY_MAX:
        raise ValueError(
            f"quality outside {config.QUALITY_MIN}-{config.QUALITY_MAX}: "
            f"observed {quality.min()}-{quality.max()}"
        )

    return df


def load_wine_data(path: Optional[Union[str, os.PathLike]] = None) -> pd.DataFrame:
    """
    Load and validate the wine table (one-time read at the start of the report).

    Parameters
    ----------
    path : str, optional
        Input file. Defaults to ``config.DATA_PATH``.

    Returns
    -------
    pd.DataFrame
        Validated table with integer ``quality``.
    """
    path = path if path is not None else config.DATA_PATH
    if not os.path.exists(path):
        raise FileNotFoundError(f"Wine data file not found: {path}")

    logger.info("Loading wine data from %s", path)
    data = validate_wine_data(load_wine_csv(path))
    data = data.astype({config.QUALITY_COL: int})
    logger.info("Loaded %d samples x %d columns", data.shape[0], data.shape[1])
    return data


def assign_quality_grade(quality: pd.Series) -> pd.Series:
    """Ordered categorical grade (low / medium / high) for each quality score."""
    labels: List[str] = list(config.QUALITY_GRADES.keys())
    grades = pd.Series(pd.NA, index=quality.index, dtype='object')
    for label, (lo, hi) in config.QUALITY_GRADES.items():
        grades[(quality >= lo) & (quality <= hi)] = label
    return pd.Series(
        pd.Categorical(grades, categories=labels, ordered=True),
        index=quality.index,
        name=config.GRADE_COL,
    )


def with_derived_columns(df: pd.DataFrame) -> pd.DataFrame:
    """
    Return a copy with the columns derived for the charts.

    Added columns
    -------------
    quality_grade          ordered categorical (low / medium / high)
    total_acidity          fixed + volatile + citric acid
    bound_sulfur_dioxide   total - free sulfur dioxide
    log10_residual_sugar   log10 of residual sugar
    """
    derived = df.copy()
    derived[config.GRADE_COL] = assign_quality_grade(derived[config.QUALITY_COL])
    derived['total_acidity'] = (
        derived['fixed_acidity'] + derived['volatile_acidity'] + derived['citric_acid']
    )
    derived['bound_sulfur_dioxide'] = (
        derived['total_sulfur_dioxide'] - derived['free_sulfur_dioxide']
    )
    # Residual sugar is strictly positive in the published data
    derived['log10_residual_sugar'] = np.log10(derived['residual_sugar'].clip(lower=1e-6))
    return derived
