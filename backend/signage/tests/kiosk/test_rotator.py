from unittest.mock import Mock

import pytest

from signage.kiosk.rotator import ContentRotator, ContentType, RotatorState
from signage.models.database import InteractionType
from signage.models.schemas.ad import AdPublic
from signage.models.schemas.news import NewsPublic
from signage.tests.utils.clock import FakeScheduler
from signage.tests.utils.gateway import ad_json, news_json


def make_ads(*fields):
    return [AdPublic.model_validate(ad_json(**f)) for f in fields]


def make_news(count):
    return [NewsPublic.model_validate(news_json(f"Headline {n}")) for n in range(count)]


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def sink():
    return Mock()


def impressions(sink):
    return [c.args[0].id for c in sink.call_args_list if c.args[1] == InteractionType.IMPRESSION]


class TestAdsOnly:
    def test_cycle_returns_to_start(self, scheduler, sink):
        ads = make_ads({"title": "A"}, {"title": "B"}, {"title": "C"})
        rotator = ContentRotator(ads, news_enabled=False, scheduler=scheduler, on_interaction=sink)
        rotator.start()
        start = rotator.ad_index

        for _ in range(len(ads)):
            rotator.advance()

        assert rotator.ad_index == start
        assert rotator.content_type == ContentType.AD

    def test_news_present_but_disabled(self, scheduler, sink):
        ads = make_ads({"title": "A"}, {"title": "B"})
        rotator = ContentRotator(ads, make_news(2), news_enabled=False, scheduler=scheduler, on_interaction=sink)
        rotator.start()

        for _ in range(5):
            rotator.advance()
            assert rotator.content_type == ContentType.AD

    def test_single_image_ad_end_to_end(self, scheduler, sink):
        ads = make_ads({"title": "a1", "type": "image", "duration": 10})
        rotator = ContentRotator(ads, news_enabled=False, scheduler=scheduler, on_interaction=sink)

        rotator.start()
        assert rotator.state == RotatorState.SHOWING_AD
        assert len(impressions(sink)) == 1

        scheduler.advance(9)
        assert rotator.state == RotatorState.SHOWING_AD

        scheduler.advance(1)
        assert rotator.state == RotatorState.SHOWING_DETAIL_PANEL
        assert rotator.countdown == 5

        scheduler.advance(1)
        assert rotator.countdown == 4

        scheduler.advance(4)
        assert rotator.state == RotatorState.SHOWING_AD
        assert rotator.ad_index == 0
        assert len(impressions(sink)) == 2

        # One impression per full 15 second cycle
        scheduler.advance(15 * 3)
        assert len(impressions(sink)) == 5


class TestNewsInterleaving:
    def test_strict_alternation(self, scheduler, sink):
        ads = make_ads({"title": "A"}, {"title": "B"}, {"title": "C"})
        rotator = ContentRotator(ads, make_news(2), news_enabled=True, scheduler=scheduler, on_interaction=sink)
        rotator.start()

        seen = [rotator.content_type]
        for _ in range(8):
            rotator.advance()
            seen.append(rotator.content_type)

        assert seen == [ContentType.AD, ContentType.NEWS] * 4 + [ContentType.AD]

    def test_indices_wrap_independently(self, scheduler, sink):
        ads = make_ads({"title": "A"}, {"title": "B"}, {"title": "C"})
        news = make_news(2)
        rotator = ContentRotator(ads, news, scheduler=scheduler, on_interaction=sink)
        rotator.start()

        positions = []
        for _ in range(6):
            rotator.advance()
            positions.append((rotator.content_type, rotator.ad_index, rotator.news_index))

        assert positions == [
            (ContentType.NEWS, 0, 1),
            (ContentType.AD, 1, 1),
            (ContentType.NEWS, 1, 0),
            (ContentType.AD, 2, 0),
            (ContentType.NEWS, 2, 1),
            (ContentType.AD, 0, 1),
        ]

    def test_news_shows_for_fifteen_seconds(self, scheduler, sink):
        ads = make_ads({"title": "A", "duration": 4})
        rotator = ContentRotator(ads, make_news(1), scheduler=scheduler, on_interaction=sink)
        rotator.start()

        scheduler.advance(4 + 5)
        assert rotator.state == RotatorState.SHOWING_NEWS
        assert rotator.current_news.title == "Headline 0"

        scheduler.advance(14)
        assert rotator.state == RotatorState.SHOWING_NEWS

        scheduler.advance(1)
        assert rotator.state == RotatorState.SHOWING_AD

    def test_empty_news_list_falls_back_to_ads(self, scheduler, sink):
        ads = make_ads({"title": "A"}, {"title": "B"})
        rotator = ContentRotator(ads, [], news_enabled=True, scheduler=scheduler, on_interaction=sink)
        rotator.start()

        rotator.advance()

        assert rotator.content_type == ContentType.AD
        assert rotator.ad_index == 1


class TestEmptyState:
    def test_no_ads_renders_empty_and_schedules_nothing(self, scheduler, sink):
        renderer = Mock()
        rotator = ContentRotator([], make_news(3), scheduler=scheduler, renderer=renderer, on_interaction=sink)

        rotator.start()
        rotator.advance()
        rotator.tap()
        rotator.on_media_ended()

        assert rotator.state == RotatorState.EMPTY
        assert rotator.current_ad is None
        assert scheduler.timers == []
        sink.assert_not_called()
        renderer.assert_called_with(rotator)


class TestImpressions:
    def test_one_impression_per_index_visit(self, scheduler, sink):
        ads = make_ads({"title": "A"}, {"title": "B"}, {"title": "C"})
        rotator = ContentRotator(ads, news_enabled=False, scheduler=scheduler, on_interaction=sink)
        rotator.start()
        rotator.advance()
        rotator.advance()
        assert rotator.ad_index == 2
        assert impressions(sink).count(ads[2].id) == 1

        rotator.render()
        rotator.render()

        assert impressions(sink).count(ads[2].id) == 1

    def test_no_impression_for_news(self, scheduler, sink):
        ads = make_ads({"title": "A"})
        rotator = ContentRotator(ads, make_news(1), scheduler=scheduler, on_interaction=sink)
        rotator.start()
        rotator.advance()
        rotator.render()

        assert rotator.content_type == ContentType.NEWS
        assert len(impressions(sink)) == 1


class TestVideoAds:
    def test_video_waits_for_end(self, scheduler, sink):
        ads = make_ads({"title": "V", "type": "video", "duration": 0})
        rotator = ContentRotator(ads, news_enabled=False, scheduler=scheduler, on_interaction=sink)
        rotator.start()

        assert scheduler.pending == []
        scheduler.advance(60)
        assert rotator.state == RotatorState.SHOWING_AD

        rotator.on_media_ended()
        assert rotator.state == RotatorState.SHOWING_DETAIL_PANEL

    def test_media_error_moves_on(self, scheduler, sink):
        ads = make_ads({"title": "V", "type": "video", "duration": 0}, {"title": "I"})
        rotator = ContentRotator(ads, news_enabled=False, scheduler=scheduler, on_interaction=sink)
        rotator.start()

        rotator.on_media_error(RuntimeError("codec not supported"))
        scheduler.advance(5)

        assert rotator.state == RotatorState.SHOWING_AD
        assert rotator.current_ad.title == "I"


class TestViewerInteractions:
    def test_tap_opens_details_early_and_records_click(self, scheduler, sink):
        ads = make_ads({"title": "A", "duration": 30})
        rotator = ContentRotator(ads, news_enabled=False, scheduler=scheduler, on_interaction=sink)
        rotator.start()

        scheduler.advance(3)
        rotator.tap()

        assert rotator.state == RotatorState.SHOWING_DETAIL_PANEL
        sink.assert_called_with(ads[0], InteractionType.READ_MORE_CLICK)

        # The image timer was cancelled: the panel runs its own 5 seconds
        scheduler.advance(5)
        assert rotator.state == RotatorState.SHOWING_AD

    def test_tap_on_news_is_ignored(self, scheduler, sink):
        ads = make_ads({"title": "A"})
        rotator = ContentRotator(ads, make_news(1), scheduler=scheduler, on_interaction=sink)
        rotator.start()
        rotator.advance()
        sink.reset_mock()

        rotator.tap()

        sink.assert_not_called()
        assert rotator.state == RotatorState.SHOWING_NEWS

    def test_open_link(self, scheduler, sink):
        ads = make_ads({"title": "A", "external_link": "https://chai.example"}, {"title": "B"})
        rotator = ContentRotator(ads, news_enabled=False, scheduler=scheduler, on_interaction=sink)
        rotator.start()

        assert rotator.open_link() == "https://chai.example"
        sink.assert_called_with(ads[0], InteractionType.LINK_CLICK)

        rotator.advance()
        sink.reset_mock()
        assert rotator.open_link() is None
        sink.assert_not_called()


class TestStop:
    def test_stop_cancels_timers(self, scheduler, sink):
        ads = make_ads({"title": "A", "duration": 10})
        rotator = ContentRotator(ads, news_enabled=False, scheduler=scheduler, on_interaction=sink)
        rotator.start()

        rotator.stop()
        scheduler.advance(60)

        assert scheduler.pending == []
        assert rotator.state == RotatorState.SHOWING_AD
        assert not rotator.is_running
