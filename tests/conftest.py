from pathlib import Path
import sys

import pandas as pd
import pytest

# Project root = one level above /tests
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))


@pytest.fixture
def write_csv(tmp_path):
    """Write CSV text to a temp file and return its path."""

    def _write(text: str, name: str = "sales.csv") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sales_df():
    """Small sales table as load_sales() would return it."""
    return pd.DataFrame(
        {
            "book": ["A", "B", "A", "C", "B", "A"],
            "review": ["Excellent", None, "Poor", "Great", "Good", None],
            "state": ["TX", "NY", "Ohio", "California", "FL", "CA"],
            "price": [10.0, 50.0, 20.0, 5.0, 7.5, 12.0],
        }
    )
