from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Optional

import apprise
import pandas as pd
from prefect import flow, task, get_run_logger

from ml.cleaner import unmapped_values
from ml.config import SALES_PATH, STATE_COL, STATE_NAMES, SUMMARY_PATH
from ml.loader import load_sales
from ml.pipeline import (
    AnalysisResult,
    aggregate_sales,
    clean_sales,
    derive_review_columns,
    save_summary,
)
from ml.profiler import profile


@task
def load_data(csv_path: Path) -> pd.DataFrame:
    logger = get_run_logger()
    logger.info(f"Loading sales data from {csv_path}...")
    df = load_sales(csv_path)
    logger.info(f"Loaded {len(df):,} rows.")
    return df


@task
def profile_data(df: pd.DataFrame) -> Dict[str, int]:
    """Log a read-only QA snapshot of the raw table; returns the unmapped state labels."""
    logger = get_run_logger()
    report = profile(df)
    for name, col in report["column_profiles"].items():
        logger.info(
            f"{name}: type={col['type']} missing={col['missing']} distinct={col['n_unique']}"
        )
    stragglers = unmapped_values(df, STATE_COL, STATE_NAMES)
    if stragglers:
        logger.warning(f"State labels left unnormalized: {stragglers}")
    return stragglers


@task
def clean_data(df: pd.DataFrame):
    logger = get_run_logger()
    cleaned, removed = clean_sales(df)
    logger.info(f"Dropped {removed} rows with missing review; {len(cleaned):,} remain.")
    return cleaned, removed


@task
def derive_features(df: pd.DataFrame) -> pd.DataFrame:
    return derive_review_columns(df)


@task
def aggregate(df: pd.DataFrame):
    logger = get_run_logger()
    purchases, revenue = aggregate_sales(df)
    if purchases:
        logger.info(f"Most purchased: {purchases[0][0]} ({purchases[0][1]})")
    if revenue:
        logger.info(f"Highest revenue: {revenue[0][0]} (${revenue[0][1]:,.2f})")
    return purchases, revenue


@task
def write_summary(result: AnalysisResult, path: Path) -> Path:
    logger = get_run_logger()
    out = save_summary(result, path)
    logger.info(f"Saved summary to: {out}")
    return out


def send_run_report(status: str, message: str, url: str) -> bool:
    """Push a run status to the Apprise target `url`; True if it was delivered."""
    channel = apprise.Apprise()
    if not channel.add(url):
        return False
    return bool(channel.notify(title=f"Book sales analysis: {status}", body=message))


@task
def notify(status: str, message: str) -> None:
    """Log the run status and, when APPRISE_URL is set, push it there too."""
    logger = get_run_logger()
    logger.info(f"Run {status}: {message}")

    url = os.getenv("APPRISE_URL", "").strip()
    if not url:
        return

    # a failed push never changes the run outcome
    try:
        delivered = send_run_report(status, message, url)
    except Exception as e:
        logger.warning(f"Apprise push raised: {e}")
        return
    if not delivered:
        logger.warning(f"Apprise could not deliver the {status} report to {url}")


@flow(name="book_sales_pipeline")
def book_sales_pipeline(
    csv_path: Optional[str] = None, summary_path: Optional[str] = None
) -> Path:
    """
    Full analysis run:
      - load + profile
      - clean (drop missing reviews, normalize states)
      - derive review_num / is_high_review
      - aggregate purchases + revenue per book
      - save summary JSON, notify success/failure
    """
    logger = get_run_logger()
    source = Path(csv_path) if csv_path else SALES_PATH
    target = Path(summary_path) if summary_path else SUMMARY_PATH

    try:
        raw = load_data(source)
        stragglers = profile_data(raw)
        cleaned, removed = clean_data(raw)
        derived = derive_features(cleaned)
        purchases, revenue = aggregate(derived)

        result = AnalysisResult(
            source=str(source),
            table=derived,
            rows_loaded=int(len(raw)),
            rows_dropped=removed,
            unmapped_states=stragglers,
            purchases=purchases,
            revenue=revenue,
        )
        out = write_summary(result, target)
        notify("SUCCESS", f"Analysed {result.rows_analysed:,} rows. Summary saved to {out}")
        return out

    except Exception as e:
        logger.exception("Pipeline failed.")
        notify("FAILED", str(e))
        raise


if __name__ == "__main__":
    # Local run
    book_sales_pipeline()
