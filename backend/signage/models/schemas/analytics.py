from typing import List
from sqlmodel import SQLModel


class AdBreakdown(SQLModel):
    ad_id: str
    ad_title: str
    impressions: int = 0
    clicks: int = 0
    ctr: float = 0.0


class HourBreakdown(SQLModel):
    hour: str
    impressions: int = 0
    clicks: int = 0


class DeviceBreakdown(SQLModel):
    device_id: str
    impressions: int = 0
    clicks: int = 0


class DayBreakdown(SQLModel):
    date: str
    impressions: int = 0
    clicks: int = 0


class AnalyticsSummary(SQLModel):
    """Aggregated view over the interaction log"""
    total_interactions: int = 0
    total_impressions: int = 0
    total_clicks: int = 0
    click_through_rate: float = 0.0
    unique_devices: int = 0
    by_ad: List[AdBreakdown] = []
    by_hour: List[HourBreakdown] = []
    by_device: List[DeviceBreakdown] = []
    by_day: List[DayBreakdown] = []


class DashboardStats(SQLModel):
    total_ads: int = 0
    active_ads: int = 0
    total_impressions: int = 0
    total_clicks: int = 0
    devices: int = 0
