from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter

from signage import crud
from signage.api.deps import CurrentUser, SessionDep
from signage.models.schemas.analytics import AnalyticsSummary, DashboardStats
from signage.services import analytics

router = APIRouter()


@router.get("/summary", response_model=AnalyticsSummary)
def read_summary(session: SessionDep, current_user: CurrentUser) -> Any:
    """
    Totals, click-through rate and breakdowns by ad, hour, device and day.
    """
    interactions = crud.get_interactions(session=session)
    return analytics.summarize(
        interactions,
        crud.get_ad_titles(session=session),
        today=datetime.now(timezone.utc).date(),
    )


@router.get("/dashboard", response_model=DashboardStats)
def read_dashboard(session: SessionDep, current_user: CurrentUser) -> Any:
    return analytics.dashboard_stats(crud.get_ads(session=session), crud.get_interactions(session=session))
