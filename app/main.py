from pathlib import Path
from typing import List, Dict, Any, Optional

import pandas as pd
from fastapi import FastAPI, UploadFile, File, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel

from ml.config import SALES_PATH
from ml.errors import AnalysisError
from ml.loader import load_sales, parse_table, validate_sales
from ml.pipeline import AnalysisResult, analyse
from ml.profiler import profile


# -------------------------------------------------
# SAFE STARTUP LOADS (CI-safe: never crash at import)
# -------------------------------------------------
DATA_PATH: Path = SALES_PATH
RAW_DF: Optional[pd.DataFrame] = None
RESULT: Optional[AnalysisResult] = None
LOAD_ERROR: Optional[str] = None


def load_dataset(path=SALES_PATH) -> None:
    """(Re)load the sales CSV into module state; keeps the error message on failure."""
    global DATA_PATH, RAW_DF, RESULT, LOAD_ERROR

    path = Path(path)
    DATA_PATH = path

    if not path.exists():
        RAW_DF, RESULT, LOAD_ERROR = None, None, f"{path} does not exist"
        return

    try:
        RAW_DF = load_sales(path)
        RESULT = analyse(RAW_DF, source=str(path))
        LOAD_ERROR = None
    except AnalysisError as e:
        RAW_DF, RESULT, LOAD_ERROR = None, None, str(e)


load_dataset()


# -------------------------------------------------
# GUARDS (only error when endpoint is called)
# -------------------------------------------------
def require_data():
    if RESULT is None:
        raise HTTPException(
            status_code=503,
            detail=f"Sales data not available ({LOAD_ERROR}). Put the CSV at {DATA_PATH} or set BOOK_SALES_CSV.",
        )


# -------------------------------------------------
# Pydantic models
# -------------------------------------------------
class BookCount(BaseModel):
    book: str
    purchases: int


class BookRevenue(BaseModel):
    book: str
    revenue: float


class SummaryResponse(BaseModel):
    source: str
    rows_loaded: int
    rows_dropped: int
    rows_analysed: int
    high_review_rows: int
    unmapped_states: Dict[str, int]
    purchases_by_book: List[BookCount]
    revenue_by_book: List[BookRevenue]


# -------------------------------------------------
# FastAPI app
# -------------------------------------------------
app = FastAPI(
    title="Book Sales Analysis API",
    description="Profile, clean and summarize book sales (purchases + revenue per book).",
    version="1.0.0",
)
from app.routes_reports import router as reports_router
app.include_router(reports_router)


@app.get("/health")
def health():
    return {
        "status": "ok",
        "data_loaded": RESULT is not None,
        "data_path": str(DATA_PATH),
        "data_file_present": DATA_PATH.exists(),
        "rows_loaded": RESULT.rows_loaded if RESULT is not None else 0,
        "load_error": LOAD_ERROR,
    }


@app.get("/favicon.ico")
def favicon():
    return Response(status_code=204)


@app.get("/profile")
def get_profile() -> Dict[str, Any]:
    require_data()
    return profile(RAW_DF)


@app.get("/summary", response_model=SummaryResponse)
def get_summary():
    require_data()
    return SummaryResponse(**RESULT.summary())  # type: ignore[union-attr]


@app.post("/analyze/from-file", response_model=SummaryResponse)
async def analyze_from_file(file: UploadFile = File(...)):
    contents = await file.read()
    source = file.filename or "<upload>"

    try:
        text = contents.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise HTTPException(status_code=400, detail=f"Could not read CSV file: not UTF-8 ({e})")

    try:
        df = validate_sales(parse_table(text, source=source), source=source)
        result = analyse(df, source=source)
    except AnalysisError as e:
        raise HTTPException(status_code=400, detail=f"Could not read CSV file: {e}")

    return SummaryResponse(**result.summary())
