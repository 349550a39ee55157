from fastapi import APIRouter

from db import SessionLocal
from schemas.stats import StatisticsOut
from stats import dashboard_summary, refresh_statistics

router = APIRouter(prefix="/statistics", tags=["statistics"])


@router.get("")
def get_statistics():
    with SessionLocal() as db:
        return {"ok": True, "data": dashboard_summary(db)}


@router.post("/refresh", response_model=StatisticsOut)
def refresh():
    with SessionLocal() as db:
        return StatisticsOut.model_validate(refresh_statistics(db))
