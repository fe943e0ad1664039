import uuid
from datetime import datetime
from typing import List, Optional
from sqlmodel import Field, SQLModel

from signage.models.database.ad import AdType


class AdBase(SQLModel):
    """Base schema for ad data"""
    title: str = Field(max_length=255)
    description: str = ""
    type: AdType = AdType.IMAGE
    duration: int = Field(default=10, ge=0)
    is_active: bool = True
    external_link: Optional[str] = None


class AdCreate(AdBase):
    """Schema for creating a new ad once its media is stored"""
    url: str


class AdUpdate(SQLModel):
    """Schema for updating ad data"""
    title: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    duration: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None
    external_link: Optional[str] = None


class AdPublic(AdBase):
    """Schema for public ad data"""
    id: uuid.UUID
    url: str
    created_at: datetime


class AdsPublic(SQLModel):
    """Schema for list of public ad data"""
    data: List[AdPublic]
    count: int
