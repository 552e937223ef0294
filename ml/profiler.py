"""
Read-only diagnostics over a sales DataFrame.

Nothing here modifies the input; the functions are used to inspect the data
before cleaning and are not needed by the later stages.

Run as a script to print a QA profile of the configured sales file:

    python -m ml.profiler
"""

from __future__ import annotations

from typing import Any, Dict, Set, Tuple

import numpy as np
import pandas as pd

from ml.errors import NonNumericColumnError, require_column


def shape(df: pd.DataFrame) -> Tuple[int, int]:
    return int(df.shape[0]), int(df.shape[1])


def column_type(df: pd.DataFrame, name: str) -> str:
    """Return "numeric" or "text"."""
    s = require_column(df, name)
    if pd.api.types.is_bool_dtype(s):
        return "text"
    return "numeric" if pd.api.types.is_numeric_dtype(s) else "text"


def unique_values(df: pd.DataFrame, name: str) -> Set[Any]:
    """Distinct non-missing values of a column."""
    return set(require_column(df, name).dropna().unique().tolist())


def has_missing(df: pd.DataFrame, name: str) -> bool:
    """True if any cell is null, or an empty string in a text column."""
    s = require_column(df, name)
    if s.isna().any():
        return True
    if column_type(df, name) == "text":
        return bool((s.astype(str) == "").any())
    return False


def summary_stats(df: pd.DataFrame, name: str) -> Dict[str, float]:
    """count/mean/std/min/quartiles/max of a numeric column."""
    if column_type(df, name) != "numeric":
        raise NonNumericColumnError(name)
    desc = df[name].describe()
    return {str(k): float(v) for k, v in desc.items()}


def missing_counts(df: pd.DataFrame) -> Dict[str, int]:
    return {str(col): int(n) for col, n in df.isna().sum().items()}


def profile(df: pd.DataFrame) -> Dict[str, Any]:
    """
    JSON-friendly profile of every column:
        type, missing count, number of distinct values,
        plus descriptive stats for numeric columns (NaN -> None).
    """
    rows, cols = shape(df)
    nulls = missing_counts(df)

    columns: Dict[str, Any] = {}
    for name in df.columns:
        entry: Dict[str, Any] = {
            "type": column_type(df, name),
            "missing": nulls[str(name)],
            "n_unique": int(df[name].nunique(dropna=True)),
        }
        if entry["type"] == "numeric":
            entry["stats"] = {
                k: (None if np.isnan(v) else v)
                for k, v in summary_stats(df, name).items()
            }
        columns[str(name)] = entry

    return {"rows": rows, "columns": cols, "column_profiles": columns}


def main():
    from ml.loader import load_sales

    df = load_sales()

    rows, cols = shape(df)
    print("Rows:", rows)
    print("Columns:", list(df.columns), f"({cols})")

    # Missing values per column
    print("\nMissing values per column:")
    for col, n in missing_counts(df).items():
        pct = (n / rows * 100) if rows else 0.0
        print(f"  {col}: {n} ({pct:.2f}%)")

    for col in df.columns:
        kind = column_type(df, col)
        if kind == "numeric":
            print(f"\n{col} ({kind}) stats:")
            print(df[col].describe())
        else:
            values = sorted(unique_values(df, col), key=str)
            print(f"\n{col} ({kind}): {len(values)} distinct values")
            print(" ", values[:20])

    print("\nExact duplicate rows:", int(df.duplicated().sum()))


if __name__ == "__main__":
    main()
