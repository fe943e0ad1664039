import logging
from typing import Any

from fastapi import APIRouter
from sqlalchemy.exc import SQLAlchemyError

from signage.api.deps import CurrentUser, SessionDep
from signage.models.schemas.news import (
    NewsListPublic,
    NewsPublic,
    NewsRefreshResponse,
    NewsSettings,
)
from signage.services import news_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=NewsListPublic)
def read_news(session: SessionDep) -> Any:
    """
    The newest headlines by publication time.
    """
    items = [NewsPublic.model_validate(item) for item in news_service.get_news(session)]
    return NewsListPublic(data=items, count=len(items))


@router.post("/refresh", response_model=NewsRefreshResponse)
async def refresh_news(session: SessionDep) -> Any:
    """
    Pull today's headlines from the feed unless that already happened today.
    """
    success = await news_service.fetch_and_store_news(session)
    return NewsRefreshResponse(success=success)


@router.get("/settings", response_model=NewsSettings)
def read_news_settings(session: SessionDep) -> Any:
    """
    Whether kiosks interleave headlines with ads. Defaults to enabled.
    """
    try:
        return news_service.get_news_settings(session)
    except SQLAlchemyError as e:
        logger.error(f"Error loading news settings: {str(e)}")
        session.rollback()
        return NewsSettings(enabled=True)


@router.put("/settings", response_model=NewsSettings)
def update_news_settings(
    session: SessionDep, current_user: CurrentUser, settings_in: NewsSettings
) -> Any:
    """
    Turn headline interleaving on or off for every kiosk.
    """
    logger.info(f"News interleaving set to {settings_in.enabled} by {current_user.email}")
    return news_service.update_news_settings(session, settings_in.enabled)
