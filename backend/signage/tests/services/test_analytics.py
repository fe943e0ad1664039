import uuid
from datetime import date, datetime, timezone

from signage.models.database import Ad, AdInteraction, InteractionType
from signage.services.analytics import click_through_rate, dashboard_stats, summarize

TODAY = date(2024, 3, 10)


def interaction(ad_id, device_id, interaction_type, when):
    return AdInteraction(
        ad_id=ad_id, device_id=device_id, interaction_type=interaction_type, timestamp=when
    )


class TestClickThroughRate:
    def test_no_impressions(self):
        assert click_through_rate(0, 5) == 0.0

    def test_percentage(self):
        assert click_through_rate(4, 1) == 25.0


class TestSummarize:
    def test_empty_log(self):
        summary = summarize([], {}, TODAY)

        assert summary.total_interactions == 0
        assert summary.click_through_rate == 0.0
        assert summary.by_ad == []
        assert [d.date for d in summary.by_day] == [
            "2024-03-04", "2024-03-05", "2024-03-06", "2024-03-07",
            "2024-03-08", "2024-03-09", "2024-03-10",
        ]
        assert all(d.impressions == 0 and d.clicks == 0 for d in summary.by_day)

    def test_totals_and_breakdowns(self):
        known, unknown = uuid.uuid4(), uuid.uuid4()
        morning = datetime(2024, 3, 10, 9, 15, tzinfo=timezone.utc)
        evening = datetime(2024, 3, 9, 18, 40, tzinfo=timezone.utc)
        log = [
            interaction(known, "r1", InteractionType.IMPRESSION, morning),
            interaction(known, "r1", InteractionType.IMPRESSION, morning),
            interaction(known, "r2", InteractionType.READ_MORE_CLICK, morning),
            interaction(unknown, "r2", InteractionType.IMPRESSION, evening),
            interaction(unknown, "r2", InteractionType.LINK_CLICK, evening),
        ]

        summary = summarize(log, {str(known): "Chai"}, TODAY)

        assert summary.total_interactions == 5
        assert summary.total_impressions == 3
        assert summary.total_clicks == 2
        assert round(summary.click_through_rate, 2) == 66.67
        assert summary.unique_devices == 2

        by_ad = {a.ad_title: a for a in summary.by_ad}
        assert by_ad["Chai"].impressions == 2
        assert by_ad["Chai"].clicks == 1
        assert by_ad["Chai"].ctr == 50.0
        assert by_ad["Unknown Ad"].ctr == 100.0

        assert [h.hour for h in summary.by_hour] == ["09:00", "18:00"]
        assert summary.by_device[0].device_id == "r1"
        assert summary.by_day[-1].impressions == 2
        assert summary.by_day[-1].clicks == 1
        assert summary.by_day[-2].impressions == 1

    def test_naive_timestamps_are_utc(self):
        ad_id = uuid.uuid4()
        log = [interaction(ad_id, "r1", InteractionType.IMPRESSION, datetime(2024, 3, 10, 23, 5))]

        summary = summarize(log, {}, TODAY)

        assert summary.by_hour[0].hour == "23:00"
        assert summary.by_day[-1].impressions == 1

    def test_old_interactions_outside_daily_window(self):
        ad_id = uuid.uuid4()
        log = [interaction(ad_id, "r1", InteractionType.IMPRESSION, datetime(2024, 1, 1, tzinfo=timezone.utc))]

        summary = summarize(log, {}, TODAY)

        assert summary.total_impressions == 1
        assert sum(d.impressions for d in summary.by_day) == 0

    def test_top_ten_devices(self):
        ad_id = uuid.uuid4()
        when = datetime(2024, 3, 10, tzinfo=timezone.utc)
        log = []
        for n in range(12):
            log += [interaction(ad_id, f"r{n}", InteractionType.IMPRESSION, when)] * (n + 1)

        summary = summarize(log, {}, TODAY)

        assert len(summary.by_device) == 10
        assert summary.by_device[0].device_id == "r11"
        assert summary.by_device[0].impressions == 12


class TestDashboardStats:
    def test_counts(self):
        ads = [
            Ad(title="a", url="/media/a.png", is_active=True),
            Ad(title="b", url="/media/b.png", is_active=False),
        ]
        when = datetime(2024, 3, 10, tzinfo=timezone.utc)
        log = [
            interaction(ads[0].id, "r1", InteractionType.IMPRESSION, when),
            interaction(ads[0].id, "r2", InteractionType.LINK_CLICK, when),
        ]

        stats = dashboard_stats(ads, log)

        assert stats.total_ads == 2
        assert stats.active_ads == 1
        assert stats.total_impressions == 1
        assert stats.total_clicks == 1
        assert stats.devices == 2
