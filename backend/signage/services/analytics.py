"""
Aggregation of the ad interaction log into the controller's analytics views.
"""
from datetime import date, timedelta
from typing import Dict, Iterable, Mapping, Sequence

from signage.crud import as_utc
from signage.models.database import CLICK_TYPES, Ad, AdInteraction, InteractionType
from signage.models.schemas.analytics import (
    AdBreakdown,
    AnalyticsSummary,
    DashboardStats,
    DayBreakdown,
    DeviceBreakdown,
    HourBreakdown,
)

TOP_DEVICES = 10
DAYS_SHOWN = 7


def click_through_rate(impressions: int, clicks: int) -> float:
    return (clicks / impressions) * 100 if impressions > 0 else 0.0


def _tally(counter, interaction: AdInteraction) -> None:
    if interaction.interaction_type == InteractionType.IMPRESSION:
        counter.impressions += 1
    elif interaction.interaction_type in CLICK_TYPES:
        counter.clicks += 1


def summarize(
    interactions: Sequence[AdInteraction],
    ad_titles: Mapping[str, str],
    today: date,
) -> AnalyticsSummary:
    """
    Build totals and breakdowns over the given interactions.

    Clicks are link clicks plus read-more taps. The per-day view always covers
    the last seven days ending at `today`, zero-filled.
    """
    impressions = sum(1 for i in interactions if i.interaction_type == InteractionType.IMPRESSION)
    clicks = sum(1 for i in interactions if i.interaction_type in CLICK_TYPES)

    by_ad: Dict[str, AdBreakdown] = {}
    by_hour: Dict[str, HourBreakdown] = {}
    by_device: Dict[str, DeviceBreakdown] = {}
    by_day: Dict[str, DayBreakdown] = {}

    for offset in range(DAYS_SHOWN - 1, -1, -1):
        day = (today - timedelta(days=offset)).isoformat()
        by_day[day] = DayBreakdown(date=day)

    for interaction in interactions:
        ad_id = str(interaction.ad_id)
        if ad_id not in by_ad:
            by_ad[ad_id] = AdBreakdown(ad_id=ad_id, ad_title=ad_titles.get(ad_id, "Unknown Ad"))
        _tally(by_ad[ad_id], interaction)

        timestamp = as_utc(interaction.timestamp)
        hour = timestamp.strftime("%H:00")
        _tally(by_hour.setdefault(hour, HourBreakdown(hour=hour)), interaction)

        device = interaction.device_id
        _tally(by_device.setdefault(device, DeviceBreakdown(device_id=device)), interaction)

        day = timestamp.date().isoformat()
        if day in by_day:
            _tally(by_day[day], interaction)

    for breakdown in by_ad.values():
        breakdown.ctr = click_through_rate(breakdown.impressions, breakdown.clicks)

    return AnalyticsSummary(
        total_interactions=len(interactions),
        total_impressions=impressions,
        total_clicks=clicks,
        click_through_rate=click_through_rate(impressions, clicks),
        unique_devices=len({i.device_id for i in interactions}),
        by_ad=list(by_ad.values()),
        by_hour=sorted(by_hour.values(), key=lambda h: h.hour),
        by_device=sorted(by_device.values(), key=lambda d: d.impressions, reverse=True)[:TOP_DEVICES],
        by_day=list(by_day.values()),
    )


def dashboard_stats(ads: Iterable[Ad], interactions: Sequence[AdInteraction]) -> DashboardStats:
    ads = list(ads)
    return DashboardStats(
        total_ads=len(ads),
        active_ads=sum(1 for ad in ads if ad.is_active),
        total_impressions=sum(1 for i in interactions if i.interaction_type == InteractionType.IMPRESSION),
        total_clicks=sum(1 for i in interactions if i.interaction_type in CLICK_TYPES),
        devices=len({i.device_id for i in interactions}),
    )
