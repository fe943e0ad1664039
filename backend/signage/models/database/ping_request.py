import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from sqlalchemy import Column, JSON
from sqlmodel import Field, SQLModel


class PingStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class PingRequest(SQLModel, table=True):
    """
    A "locate me" request addressed to one device.

    Created pending by an operator and resolved exactly once by the device.
    """
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    device_id: str = Field(index=True, foreign_key="device.id", ondelete="CASCADE")
    status: PingStatus = Field(default=PingStatus.PENDING, index=True)
    location: dict[str, Any] | None = Field(default=None, sa_column=Column(JSON))
    battery_level: int | None = Field(default=None)
    is_active: bool | None = Field(default=None)
    error_message: str | None = Field(default=None)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), index=True)
    completed_at: datetime | None = Field(default=None)

    @property
    def is_terminal(self) -> bool:
        return self.status != PingStatus.PENDING
