import uuid
from datetime import datetime, timezone
from sqlmodel import Field, SQLModel


class News(SQLModel, table=True):
    """Database model for headlines pulled from the external feed"""
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    title: str
    description: str = Field(default="")
    url: str | None = Field(default=None)
    image_url: str = Field(default="")
    source: str | None = Field(default=None, max_length=255)
    published_at: datetime | None = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), index=True)
