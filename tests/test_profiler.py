import json

import pandas as pd
import pytest

from ml.errors import ColumnNotFoundError, NonNumericColumnError
from ml.profiler import (
    column_type,
    has_missing,
    missing_counts,
    profile,
    shape,
    summary_stats,
    unique_values,
)


def test_shape(sales_df):
    assert shape(sales_df) == (6, 4)


def test_column_type(sales_df):
    assert column_type(sales_df, "price") == "numeric"
    assert column_type(sales_df, "book") == "text"
    assert column_type(sales_df, "review") == "text"


def test_unique_values_excludes_missing(sales_df):
    assert unique_values(sales_df, "book") == {"A", "B", "C"}
    assert unique_values(sales_df, "review") == {"Excellent", "Poor", "Great", "Good"}


def test_has_missing(sales_df):
    assert has_missing(sales_df, "review") is True
    assert has_missing(sales_df, "price") is False


def test_summary_stats(sales_df):
    stats = summary_stats(sales_df, "price")
    assert stats["min"] == 5.0
    assert stats["max"] == 50.0
    assert stats["mean"] == pytest.approx(104.5 / 6)
    assert stats["count"] == 6.0
    assert {"std", "25%", "50%", "75%"} <= set(stats)


def test_summary_stats_rejects_text(sales_df):
    with pytest.raises(NonNumericColumnError):
        summary_stats(sales_df, "book")


def test_unknown_column(sales_df):
    with pytest.raises(ColumnNotFoundError):
        has_missing(sales_df, "author")
    # also usable as a plain KeyError
    with pytest.raises(KeyError):
        column_type(sales_df, "author")


def test_profile_is_read_only_and_json_friendly(sales_df):
    before = sales_df.copy()
    report = profile(sales_df)

    pd.testing.assert_frame_equal(sales_df, before)
    assert report["rows"] == 6
    assert report["columns"] == 4
    assert report["column_profiles"]["review"]["missing"] == 2
    assert report["column_profiles"]["book"]["n_unique"] == 3
    assert report["column_profiles"]["price"]["stats"]["max"] == 50.0
    assert "stats" not in report["column_profiles"]["state"]
    json.dumps(report)


def test_profile_empty_numeric_column_has_no_nan():
    df = pd.DataFrame({"price": pd.Series([], dtype="float64")})
    report = profile(df)
    stats = report["column_profiles"]["price"]["stats"]
    assert stats["count"] == 0.0
    assert stats["mean"] is None
    json.dumps(report, allow_nan=False)


def test_missing_counts(sales_df):
    assert missing_counts(sales_df) == {"book": 0, "review": 2, "state": 0, "price": 0}


def test_has_missing_counts_empty_strings():
    df = pd.DataFrame({"review": ["Good", ""], "price": [1.0, 2.0]})
    assert has_missing(df, "review") is True
    assert has_missing(df, "price") is False


def test_require_column_shared_by_every_stage(sales_df):
    from ml.aggregator import count_by
    from ml.cleaner import drop_missing
    from ml.deriver import map_ordinal
    from ml.errors import require_column

    pd.testing.assert_series_equal(require_column(sales_df, "price"), sales_df["price"])
    for call in (
        lambda: require_column(sales_df, "author"),
        lambda: count_by(sales_df, "author"),
        lambda: drop_missing(sales_df, "author"),
        lambda: map_ordinal(sales_df, "author", {}, "n"),
    ):
        with pytest.raises(ColumnNotFoundError, match="'author' not found"):
            call()
