import json
from fastapi import APIRouter, HTTPException

from ml.config import SUMMARY_PATH

router = APIRouter()


@router.get("/reports/latest")
def get_latest_summary():
    if not SUMMARY_PATH.exists():
        raise HTTPException(
            status_code=404,
            detail="Summary file not found. Run the analysis pipeline first."
        )
    return json.loads(SUMMARY_PATH.read_text(encoding="utf-8-sig"))
