"""
Cleaning steps: drop rows with a missing value in one column, and rewrite
category labels through an explicit mapping.

Both return new DataFrames; the input is never modified.
"""

from __future__ import annotations

from typing import Dict, Mapping, Tuple

import pandas as pd

from ml.errors import require_column


def drop_missing(df: pd.DataFrame, column: str) -> Tuple[pd.DataFrame, int]:
    """
    Keep only rows where `column` is present, in their original order.

    Returns (clean_df, rows_removed). Running it again on the result
    removes nothing.
    """
    require_column(df, column)

    missing = df[column].isna()
    removed = int(missing.sum())
    print(f"Rows with missing '{column}' (will drop): {removed}")

    clean = df.loc[~missing].reset_index(drop=True)
    return clean, removed


def normalize_category(
    df: pd.DataFrame,
    column: str,
    mapping: Mapping[str, str],
    new_column: str,
) -> pd.DataFrame:
    """
    Add `new_column` = mapping[value] (or the value itself when it is not a
    key) and drop `column`. Unknown values pass through unchanged, missing
    values stay missing. One output row per input row.
    """
    require_column(df, column)

    out = df.copy()
    out[new_column] = out[column].map(lambda value: mapping.get(value, value))
    if new_column != column:
        out = out.drop(columns=[column])
    return out


def unmapped_values(
    df: pd.DataFrame, column: str, mapping: Mapping[str, str]
) -> Dict[str, int]:
    """
    Count values of `column` that are neither a mapping key nor a mapping
    target, i.e. labels normalize_category() leaves as stragglers.
    """
    require_column(df, column)

    known = set(mapping.keys()) | set(mapping.values())
    values = df[column].dropna()
    stragglers = values[~values.isin(known)]
    counts = stragglers.value_counts(sort=True)
    return {str(k): int(v) for k, v in counts.items()}
