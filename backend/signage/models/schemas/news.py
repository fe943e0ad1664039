import uuid
from datetime import datetime
from typing import List, Optional
from sqlmodel import SQLModel


class NewsCreate(SQLModel):
    """Schema for a headline mapped from the external feed"""
    title: str
    description: str = ""
    url: Optional[str] = None
    image_url: str = ""
    source: Optional[str] = None
    published_at: Optional[datetime] = None


class NewsPublic(NewsCreate):
    id: uuid.UUID
    created_at: datetime


class NewsListPublic(SQLModel):
    data: List[NewsPublic]
    count: int


class NewsSettings(SQLModel):
    """Whether headlines are interleaved with ads on the kiosks"""
    enabled: bool = True


class NewsRefreshResponse(SQLModel):
    success: bool
