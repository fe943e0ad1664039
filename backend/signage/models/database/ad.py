import uuid
from enum import Enum
from sqlmodel import Field, SQLModel
from datetime import datetime, timezone


class AdType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


class Ad(SQLModel, table=True):
    """Database model for uploaded advertisements"""
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    title: str = Field(max_length=255)
    description: str = Field(default="")
    type: AdType = Field(default=AdType.IMAGE)
    url: str
    # Seconds on screen; only meaningful for images
    duration: int = Field(default=10, ge=0)
    is_active: bool = Field(default=True, index=True)
    external_link: str | None = Field(default=None)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), index=True)
