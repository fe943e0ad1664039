import re
from datetime import datetime
from typing import Annotated, List, Optional
from pydantic import AfterValidator
from sqlmodel import Field, SQLModel

PIN_PATTERN = re.compile(r"^\d{4}$")


def validate_pin(pin: str) -> str:
    if not PIN_PATTERN.match(pin):
        raise ValueError("PIN must be 4 digits")
    return pin


Pin = Annotated[str, AfterValidator(validate_pin)]


class DeviceBase(SQLModel):
    name: str = Field(max_length=255)
    phone_number: Optional[str] = Field(default=None, max_length=32)


class DeviceCreate(DeviceBase):
    """Schema for registering a kiosk"""
    id: str = Field(min_length=1, max_length=64)
    pin: Optional[Pin] = None


class DeviceUpdate(SQLModel):
    name: Optional[str] = Field(default=None, max_length=255)
    phone_number: Optional[str] = Field(default=None, max_length=32)
    pin: Optional[Pin] = None


class DeviceInfo(DeviceBase):
    """What a kiosk may learn about itself"""
    id: str


class DevicePublic(DeviceInfo):
    """Operator view of a kiosk"""
    last_active: Optional[datetime] = None
    last_ping_attempt: Optional[datetime] = None
    force_refresh: bool = False
    force_refresh_timestamp: Optional[datetime] = None


class DevicesPublic(SQLModel):
    data: List[DevicePublic]
    count: int


class DeviceLogin(SQLModel):
    """Kiosk PIN login form"""
    pin: Pin


class RefreshSignal(SQLModel):
    """Out-of-band instruction asking a kiosk to reload itself"""
    force_refresh: bool = False
    force_refresh_timestamp: Optional[datetime] = None
