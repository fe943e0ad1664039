from datetime import datetime
from sqlmodel import Field, SQLModel


class Device(SQLModel, table=True):
    """Database model for a kiosk mounted in a rickshaw"""
    id: str = Field(primary_key=True, max_length=64)
    name: str = Field(index=True, max_length=255)
    phone_number: str | None = Field(default=None, max_length=32)
    # Shared secret for the kiosk PIN login
    pin: str | None = Field(default=None, index=True, max_length=4)
    last_active: datetime | None = Field(default=None)
    force_refresh: bool = Field(default=False)
    force_refresh_timestamp: datetime | None = Field(default=None)
    last_ping_attempt: datetime | None = Field(default=None)
