from typing import Any
from sqlalchemy import Column, JSON
from sqlmodel import Field, SQLModel

NEWS_ENABLED_KEY = "news_enabled"


class Setting(SQLModel, table=True):
    """Key/value settings shared by the controller and the kiosks"""
    key: str = Field(primary_key=True, max_length=64)
    value: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
