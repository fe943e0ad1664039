"""
Headline ingestion from the external top-headlines feed.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from signage import crud
from signage.core.config import settings
from signage.models.database import NEWS_ENABLED_KEY, News
from signage.models.schemas.news import NewsCreate, NewsSettings

logger = logging.getLogger(__name__)


class NewsFeedError(Exception):
    """Raised when the external feed answers with something other than headlines"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        return f"News Feed Error: {self.message}"


def start_of_day(now: datetime) -> datetime:
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def parse_published_at(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.warning(f"Could not parse publishedAt: {value}")
        return None


def articles_to_news(articles: List[Dict[str, Any]]) -> List[NewsCreate]:
    """Keep only articles that can be shown on a kiosk: both an image and a description."""
    items = []
    for article in articles:
        if not isinstance(article, dict):
            continue
        if not article.get("urlToImage") or not article.get("description"):
            continue
        items.append(
            NewsCreate(
                title=article.get("title") or "",
                description=article["description"],
                url=article.get("url"),
                image_url=article["urlToImage"],
                published_at=parse_published_at(article.get("publishedAt")),
                source=(article.get("source") or {}).get("name"),
            )
        )
    return items


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    retry=retry_if_exception_type(httpx.HTTPError),
    reraise=True,
)
async def fetch_top_headlines() -> List[Dict[str, Any]]:
    """
    Fetch the raw article list from the feed.

    Raises:
        httpx.HTTPError: after three failed attempts
        NewsFeedError: if the feed reports a non-ok status or its body is malformed
    """
    params = {
        "country": settings.NEWS_COUNTRY,
        "category": settings.NEWS_CATEGORY,
        "apiKey": settings.NEWS_API_KEY,
    }
    async with httpx.AsyncClient(timeout=30.0) as client:
        response = await client.get(settings.NEWS_API_URL, params=params)
        response.raise_for_status()
        try:
            data = response.json()
        except ValueError as e:
            raise NewsFeedError("Feed returned a non-JSON body") from e

    if not isinstance(data, dict):
        raise NewsFeedError("Feed returned an unexpected payload")
    if data.get("status") != "ok":
        raise NewsFeedError("Failed to fetch news", details=data)
    articles = data.get("articles") or []
    if not isinstance(articles, list):
        raise NewsFeedError("Feed returned an unexpected article list")
    return articles


def prune_old_news(session: Session) -> int:
    """Drop the oldest headlines so only the newest half of the cap remains."""
    removed = crud.delete_oldest_news(session, keep=settings.MAX_NEWS_ROWS // 2)
    if removed:
        logger.info(f"Pruned {removed} old news entries")
    return removed


async def fetch_and_store_news(session: Session, now: Optional[datetime] = None) -> bool:
    """
    Pull today's headlines at most once per calendar day (UTC).

    Returns True when news for today is available, False on any failure.
    """
    now = now or datetime.now(timezone.utc)
    try:
        if crud.news_created_since(session, start_of_day(now)):
            logger.info("Already fetched news today, using existing data")
            return True

        if crud.count_news(session) >= settings.MAX_NEWS_ROWS:
            logger.info(f"News table has reached maximum limit of {settings.MAX_NEWS_ROWS} rows")
            prune_old_news(session)

        if not settings.news_enabled:
            logger.warning("NEWS_API_KEY is not configured, skipping headline fetch")
            return False

        articles = await fetch_top_headlines()
        items = articles_to_news(articles)
        if not items:
            logger.info("No valid news items found")
            return False

        crud.create_news(session, [News.model_validate(item, update={"created_at": now}) for item in items])
        logger.info(f"Stored {len(items)} news items")
        return True
    except (httpx.HTTPError, NewsFeedError) as e:
        logger.error(f"Error in fetch_and_store_news: {str(e)}")
        return False
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Database error in fetch_and_store_news: {str(e)}")
        return False


def get_news(session: Session) -> Sequence[News]:
    return crud.get_latest_news(session, limit=settings.NEWS_PAGE_SIZE)


def get_news_settings(session: Session) -> NewsSettings:
    """Read the interleave flag, creating it as enabled the first time it is asked for."""
    setting = crud.get_setting(session, NEWS_ENABLED_KEY)
    if setting is None:
        setting = crud.upsert_setting(session, NEWS_ENABLED_KEY, {"enabled": True})
    return NewsSettings(enabled=bool(setting.value.get("enabled", True)))


def update_news_settings(session: Session, enabled: bool) -> NewsSettings:
    setting = crud.upsert_setting(session, NEWS_ENABLED_KEY, {"enabled": enabled})
    return NewsSettings(enabled=bool(setting.value.get("enabled", True)))
