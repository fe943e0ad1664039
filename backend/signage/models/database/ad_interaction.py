import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from sqlalchemy import Column, JSON
from sqlmodel import Field, SQLModel


class InteractionType(str, Enum):
    IMPRESSION = "impression"
    LINK_CLICK = "link_click"
    READ_MORE_CLICK = "read_more_click"


CLICK_TYPES = {InteractionType.LINK_CLICK, InteractionType.READ_MORE_CLICK}


class AdInteraction(SQLModel, table=True):
    """Append-only analytics log of what kiosks showed and what viewers tapped"""
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    ad_id: uuid.UUID = Field(index=True, foreign_key="ad.id", ondelete="CASCADE")
    # Not a foreign key: kiosks may run under a self-generated identifier
    device_id: str = Field(index=True, max_length=64)
    interaction_type: InteractionType = Field(index=True)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), index=True)
    coordinates: dict[str, Any] | None = Field(default=None, sa_column=Column(JSON))
