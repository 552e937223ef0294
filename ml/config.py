import os
from pathlib import Path

# -------------------------------------------------
# PATHS – project root is ONE level above "ml"
# -------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parents[1]

DATA_DIR = PROJECT_ROOT / "data"
RAW_DATA_DIR = DATA_DIR / "raw"
REPORTS_DIR = PROJECT_ROOT / "reports"

# Input CSV (book,review,state,price). Override with BOOK_SALES_CSV.
DEFAULT_SALES_PATH = RAW_DATA_DIR / "book_sales.csv"
SALES_PATH = Path(os.getenv("BOOK_SALES_CSV", str(DEFAULT_SALES_PATH)))

SUMMARY_PATH = REPORTS_DIR / "book_sales_summary.json"

# -------------------------------------------------
# MAPPING TABLES
# -------------------------------------------------
STATE_NAMES = {
    "TX": "Texas",
    "NY": "New York",
    "FL": "Florida",
    "CA": "California",
}

REVIEW_SCALE = {
    "Poor": 1,
    "Fair": 2,
    "Good": 3,
    "Great": 4,
    "Excellent": 5,
}

HIGH_REVIEW_THRESHOLD = 4

# Column names used throughout the pipeline
BOOK_COL = "book"
REVIEW_COL = "review"
STATE_COL = "state"
PRICE_COL = "price"
STATES_COL = "states"
REVIEW_NUM_COL = "review_num"
HIGH_REVIEW_COL = "is_high_review"
