"""
Load the book sales CSV into a DataFrame.

- Every data row must have exactly as many fields as the header.
- Empty cells become missing values (NA), not empty strings.
- A column whose non-missing cells all parse as numbers becomes float64,
  every other column stays text.

load_sales() additionally checks the sales record layout once, so the
later stages can rely on it.
"""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import List, Optional

import numpy as np
import pandas as pd

from ml.config import BOOK_COL, PRICE_COL, REVIEW_COL, SALES_PATH, STATE_COL
from ml.errors import LoadError, MalformedRowError

# Cell values treated as missing (same spirit as pandas' default na_values)
NA_VALUES = {"", "NA", "N/A", "NaN", "nan", "null", "NULL"}

# Sales record layout: column -> kind
SALES_COLUMNS = {
    BOOK_COL: "text",
    REVIEW_COL: "text",
    STATE_COL: "text",
    PRICE_COL: "numeric",
}


def _infer_column(values: List[Optional[str]]) -> pd.Series:
    """Parse a column as float64 if every present cell is a number, else keep text."""
    raw = pd.Series(values, dtype="object")
    present = raw.dropna()
    if present.empty:
        return raw

    numbers = pd.to_numeric(present, errors="coerce")
    if numbers.notna().all():
        return pd.to_numeric(raw, errors="coerce").astype(np.float64)
    return raw


def parse_table(text: str, source: str = "<memory>") -> pd.DataFrame:
    """
    Parse comma-delimited text with a header row into a DataFrame.

    Raises LoadError for an empty input or unusable header and
    MalformedRowError for the first row whose field count is off.
    """
    reader = csv.reader(io.StringIO(text))

    try:
        header = next(reader)
    except StopIteration:
        raise LoadError(source, "file is empty (no header row)")
    except csv.Error as e:
        raise LoadError(source, f"header could not be parsed: {e}")

    header = [name.strip() for name in header]
    if not header or any(name == "" for name in header):
        raise LoadError(source, f"header has blank column names: {header}")

    duplicated = sorted({name for name in header if header.count(name) > 1})
    if duplicated:
        raise LoadError(source, f"header has duplicate column names: {duplicated}")

    rows = []
    try:
        for fields in reader:
            if not fields:
                # blank line
                continue
            if len(fields) != len(header):
                raise MalformedRowError(
                    source,
                    row_index=len(rows),
                    expected=len(header),
                    found=len(fields),
                    line=reader.line_num,
                )
            rows.append([None if cell in NA_VALUES else cell for cell in fields])
    except csv.Error as e:
        raise LoadError(source, f"line {reader.line_num} could not be parsed: {e}")

    columns = {}
    for i, name in enumerate(header):
        columns[name] = _infer_column([row[i] for row in rows])

    return pd.DataFrame(columns, columns=header)


def load_table(path) -> pd.DataFrame:
    """Read a UTF-8 CSV file from disk and parse it with parse_table()."""
    path = Path(path)

    if not path.exists():
        raise LoadError(path, "file does not exist")
    if not path.is_file():
        raise LoadError(path, "path is not a regular file")

    try:
        # utf-8-sig drops a BOM written by spreadsheet exports
        text = path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as e:
        raise LoadError(path, f"file is not valid UTF-8: {e}")
    except OSError as e:
        raise LoadError(path, f"file could not be read: {e}")

    return parse_table(text, source=str(path))


def validate_sales(df: pd.DataFrame, source: str = "<memory>") -> pd.DataFrame:
    """
    Check the sales layout: required columns present, price numeric,
    never missing and never negative. Returns the DataFrame (an empty
    table gets a float64 price column so it aggregates like any other).
    """
    missing_cols = [c for c in SALES_COLUMNS if c not in df.columns]
    if missing_cols:
        raise LoadError(
            source,
            f"missing required columns: {missing_cols}. Found: {list(df.columns)}",
        )

    if df.empty:
        return df.astype({PRICE_COL: np.float64})

    null_price = df[PRICE_COL].isna()
    if null_price.any():
        first = int(np.flatnonzero(null_price.to_numpy())[0])
        raise LoadError(source, f"column '{PRICE_COL}' is missing at row {first}")

    if not pd.api.types.is_numeric_dtype(df[PRICE_COL]):
        bad = pd.to_numeric(df[PRICE_COL], errors="coerce").isna()
        first = int(np.flatnonzero(bad.to_numpy())[0])
        raise LoadError(
            source,
            f"column '{PRICE_COL}' is not numeric (row {first}: {df[PRICE_COL].iloc[first]!r})",
        )

    negative = df[PRICE_COL] < 0
    if negative.any():
        first = int(np.flatnonzero(negative.to_numpy())[0])
        raise LoadError(
            source,
            f"column '{PRICE_COL}' is negative at row {first}: {df[PRICE_COL].iloc[first]}",
        )

    return df


def load_sales(path=None) -> pd.DataFrame:
    """Load the book sales CSV (defaults to SALES_PATH) and check its layout."""
    path = Path(path) if path is not None else SALES_PATH
    df = validate_sales(load_table(path), source=str(path))
    print(f"Loaded {path.name}: {df.shape[0]:,} rows, {df.shape[1]} columns")
    return df
