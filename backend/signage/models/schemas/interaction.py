import uuid
from datetime import datetime
from typing import List, Optional
from sqlmodel import SQLModel

from signage.models.database.ad_interaction import InteractionType
from signage.models.schemas.ping import Location


class InteractionCreate(SQLModel):
    """One analytics event reported by a kiosk"""
    ad_id: uuid.UUID
    device_id: str
    interaction_type: InteractionType
    coordinates: Optional[Location] = None


class InteractionPublic(InteractionCreate):
    id: uuid.UUID
    timestamp: datetime
    ad_title: Optional[str] = None


class InteractionsPublic(SQLModel):
    data: List[InteractionPublic]
    count: int
