"""
Group-by aggregates over the sales table.

Results are pandas Series indexed by the group key, in the order each key
first appears in the table. Sorting descending is stable, so equal values
keep that first-seen order.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Tuple, Union

import pandas as pd

from ml.errors import NonNumericColumnError, require_column


def count_by(df: pd.DataFrame, key: str, descending: bool = False) -> pd.Series:
    """Frequency table of `key` (number of rows per distinct value)."""
    require_column(df, key)

    counts = df.groupby(key, sort=False, dropna=False, observed=True).size().rename("count")
    if descending:
        counts = counts.sort_values(ascending=False, kind="stable")
    return counts


def sum_by(
    df: pd.DataFrame, key: str, value: str, descending: bool = False
) -> pd.Series:
    """Sum of `value` per distinct `key`. Only keys present in df appear."""
    require_column(df, key)
    require_column(df, value)
    if not pd.api.types.is_numeric_dtype(df[value]):
        raise NonNumericColumnError(value)

    totals = df.groupby(key, sort=False, dropna=False, observed=True)[value].sum()
    if descending:
        totals = totals.sort_values(ascending=False, kind="stable")
    return totals


def sort_descending(
    result: Union[pd.Series, Mapping[Any, Any]]
) -> List[Tuple[Any, Any]]:
    """(key, value) pairs by value, largest first; ties keep first-seen order."""
    if not isinstance(result, pd.Series):
        result = pd.Series(dict(result), dtype="float64" if not result else None)

    ranked = result.sort_values(ascending=False, kind="stable")
    return list(zip(ranked.index.tolist(), ranked.tolist()))
