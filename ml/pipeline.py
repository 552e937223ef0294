"""
End-to-end book sales analysis:

1. Load the CSV and check its layout (loader).
2. Drop rows with a missing review (cleaner).
3. Normalize state codes to full names: state -> states (cleaner).
4. Derive review_num (1..5) and is_high_review (deriver).
5. Purchases per book and revenue per book, both sorted descending
   (aggregator).

Run as a script to analyse the configured file and write the summary JSON:

    python -m ml.pipeline
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pandas as pd

from ml.aggregator import count_by, sort_descending, sum_by
from ml.cleaner import drop_missing, normalize_category, unmapped_values
from ml.config import (
    BOOK_COL,
    HIGH_REVIEW_COL,
    HIGH_REVIEW_THRESHOLD,
    PRICE_COL,
    REVIEW_COL,
    REVIEW_NUM_COL,
    REVIEW_SCALE,
    SALES_PATH,
    STATE_COL,
    STATE_NAMES,
    STATES_COL,
    SUMMARY_PATH,
)
from ml.deriver import derive_boolean, map_ordinal
from ml.loader import load_sales


@dataclass(frozen=True, eq=False)
class AnalysisResult:
    source: str
    table: pd.DataFrame = field(repr=False)
    rows_loaded: int
    rows_dropped: int
    unmapped_states: Dict[str, int]
    purchases: List[Tuple[str, int]]
    revenue: List[Tuple[str, float]]

    @property
    def rows_analysed(self) -> int:
        return int(len(self.table))

    def summary(self) -> Dict[str, Any]:
        """JSON-friendly summary (no table rows)."""
        high = self.table[HIGH_REVIEW_COL]
        return {
            "source": self.source,
            "rows_loaded": self.rows_loaded,
            "rows_dropped": self.rows_dropped,
            "rows_analysed": self.rows_analysed,
            "high_review_rows": int(high.sum()),
            "unmapped_states": dict(self.unmapped_states),
            "purchases_by_book": [
                {"book": str(book), "purchases": int(n)} for book, n in self.purchases
            ],
            "revenue_by_book": [
                {"book": str(book), "revenue": round(float(total), 2)}
                for book, total in self.revenue
            ],
        }


def clean_sales(
    df: pd.DataFrame, state_mapping: Mapping[str, str] = STATE_NAMES
) -> Tuple[pd.DataFrame, int]:
    """Drop missing reviews, then normalize state labels into `states`."""
    cleaned, removed = drop_missing(df, REVIEW_COL)
    cleaned = normalize_category(cleaned, STATE_COL, state_mapping, STATES_COL)
    return cleaned, removed


def derive_review_columns(
    df: pd.DataFrame,
    review_mapping: Mapping[str, int] = REVIEW_SCALE,
    threshold: int = HIGH_REVIEW_THRESHOLD,
) -> pd.DataFrame:
    out = map_ordinal(df, REVIEW_COL, review_mapping, REVIEW_NUM_COL)
    return derive_boolean(out, REVIEW_NUM_COL, threshold, HIGH_REVIEW_COL)


def aggregate_sales(df: pd.DataFrame):
    """(purchases, revenue) per book as sorted (book, value) lists."""
    purchases = sort_descending(count_by(df, BOOK_COL))
    revenue = sort_descending(sum_by(df, BOOK_COL, PRICE_COL))
    return purchases, revenue


def analyse(
    df: pd.DataFrame,
    source: str = "<memory>",
    state_mapping: Mapping[str, str] = STATE_NAMES,
    review_mapping: Mapping[str, int] = REVIEW_SCALE,
    threshold: int = HIGH_REVIEW_THRESHOLD,
) -> AnalysisResult:
    """Run clean -> derive -> aggregate on an already loaded sales table."""
    rows_loaded = int(len(df))

    # Diagnostic only: state labels the mapping does not cover
    stragglers = unmapped_values(df, STATE_COL, state_mapping)
    if stragglers:
        print(f"State labels not covered by the mapping: {stragglers}")

    cleaned, removed = clean_sales(df, state_mapping)
    derived = derive_review_columns(cleaned, review_mapping, threshold)
    purchases, revenue = aggregate_sales(derived)

    return AnalysisResult(
        source=source,
        table=derived,
        rows_loaded=rows_loaded,
        rows_dropped=removed,
        unmapped_states=stragglers,
        purchases=purchases,
        revenue=revenue,
    )


def run_analysis(
    path=None,
    state_mapping: Mapping[str, str] = STATE_NAMES,
    review_mapping: Mapping[str, int] = REVIEW_SCALE,
    threshold: int = HIGH_REVIEW_THRESHOLD,
) -> AnalysisResult:
    """Load the sales CSV (defaults to SALES_PATH) and analyse it."""
    path = Path(path) if path is not None else SALES_PATH
    df = load_sales(path)
    return analyse(df, str(path), state_mapping, review_mapping, threshold)


def save_summary(result: AnalysisResult, path: Optional[Path] = None) -> Path:
    """Write result.summary() as JSON (tmp file + replace)."""
    path = Path(path) if path is not None else SUMMARY_PATH
    path.parent.mkdir(parents=True, exist_ok=True)

    tmp = path.with_suffix(".tmp.json")
    tmp.write_text(json.dumps(result.summary(), indent=2), encoding="utf-8")
    tmp.replace(path)
    return path


def main():
    print("=== Book sales analysis ===")
    print("Input:", SALES_PATH)

    result = run_analysis()

    print(f"\nRows loaded:   {result.rows_loaded:,}")
    print(f"Rows dropped:  {result.rows_dropped:,} (missing review)")
    print(f"Rows analysed: {result.rows_analysed:,}")

    print("\nPurchases per book:")
    for book, n in result.purchases:
        print(f"  {book}: {n}")

    print("\nRevenue per book:")
    for book, total in result.revenue:
        print(f"  {book}: ${total:,.2f}")

    out = save_summary(result)
    print(f"\nSaved summary to: {out}")


if __name__ == "__main__":
    main()
