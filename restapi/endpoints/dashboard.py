"""Dashboard endpoints for the API."""

from typing import Optional
from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.config import get_settings
from components.core.init_db import get_db
from components.dashboard import schemas
from components.dashboard.repository import DashboardRepository

router = APIRouter(
    prefix="/dashboard",
    tags=["dashboard"],
)


def months_back_param(
    months_back: Optional[int] = Query(None, ge=0, le=120, description="Months before the current one to include")
) -> int:
    if months_back is None:
        return get_settings().DEFAULT_MONTHS_BACK
    return months_back


@router.get("/summary", response_model=schemas.FinancialSummary)
async def get_summary(db: AsyncSession = Depends(get_db)):
    """
    Get dashboard totals.

    Returns:
    - Total unpaid debts and unreceived credits
    - Number of pending checks
    - Installment amounts due in the current Jalali month
    """
    return await DashboardRepository(db).get_summary()


@router.get("/trends", response_model=schemas.MonthlyTrends)
async def get_trends(
    months_back: int = Depends(months_back_param),
    db: AsyncSession = Depends(get_db)
):
    """Monthly series aligned on the same Jalali month labels, oldest first."""
    return await DashboardRepository(db).get_trends(months_back)


@router.get("/trends.csv")
async def get_trends_csv(
    months_back: int = Depends(months_back_param),
    db: AsyncSession = Depends(get_db)
):
    """The trend series as CSV, one row per month."""
    frame = await DashboardRepository(db).get_trends_frame(months_back)
    return Response(
        content=frame.to_csv(),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="trends.csv"'},
    )
