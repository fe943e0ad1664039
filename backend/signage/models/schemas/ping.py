import uuid
from datetime import datetime
from typing import Optional
from sqlmodel import Field, SQLModel

from signage.models.database.ping_request import PingStatus


class Location(SQLModel):
    latitude: float
    longitude: float
    accuracy: Optional[float] = None


class PingCreate(SQLModel):
    """Operator request to locate a device"""
    device_id: str


class PingComplete(SQLModel):
    """What a device reports back when answering a ping"""
    location: Optional[Location] = None
    battery_level: Optional[int] = Field(default=None, ge=0, le=100)
    is_active: bool = True


class PingFail(SQLModel):
    error_message: str = Field(default="Failed to process ping response", max_length=500)


class PingPublic(SQLModel):
    id: uuid.UUID
    device_id: str
    status: PingStatus
    location: Optional[Location] = None
    battery_level: Optional[int] = None
    is_active: Optional[bool] = None
    error_message: Optional[str] = None
    created_at: datetime
    completed_at: Optional[datetime] = None
