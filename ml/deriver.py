"""Derived columns: ordinal label -> integer, and a threshold flag on top of it."""

from __future__ import annotations

from typing import Mapping

import pandas as pd

from ml.errors import NonNumericColumnError, require_column


def map_ordinal(
    df: pd.DataFrame,
    column: str,
    mapping: Mapping[str, int],
    new_column: str,
) -> pd.DataFrame:
    """
    Add `new_column` (nullable Int64) by looking each value of `column` up in
    `mapping`. Labels with no entry, and missing labels, become <NA>.
    """
    require_column(df, column)

    out = df.copy()
    out[new_column] = out[column].map(dict(mapping)).astype("Int64")

    unmapped = int(out[new_column].isna().sum() - out[column].isna().sum())
    if unmapped:
        print(f"'{column}': {unmapped} labels had no entry in the ordinal mapping")
    return out


def derive_boolean(
    df: pd.DataFrame,
    source_column: str,
    threshold,
    new_column: str,
) -> pd.DataFrame:
    """
    Add `new_column` = source_column >= threshold as a nullable boolean.

    Rows whose source value is missing get <NA> (the flag is unknown, not
    False).
    """
    source = require_column(df, source_column)
    if not pd.api.types.is_numeric_dtype(source) or pd.api.types.is_bool_dtype(source):
        raise NonNumericColumnError(source_column)

    out = df.copy()
    out[new_column] = (source >= threshold).astype("boolean").mask(source.isna())
    return out
