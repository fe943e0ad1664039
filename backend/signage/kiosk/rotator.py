"""
Ad and news rotation for the kiosk display.

States:
    showing-ad            an image ad waits out its duration; a video waits for
                          its end (or a media error)
    showing-detail-panel  the ad's details with a per-second countdown, then the
                          next item
    showing-news          a headline for a fixed time, then the next item
    empty                 no active ads; nothing is scheduled

Rotation alternates ad, news, ad, news while news is enabled and present, and
cycles ads only otherwise. Each index wraps on its own collection.
"""
import asyncio
import logging
from enum import Enum
from typing import Any, Callable, List, Optional, Protocol, Sequence

from signage.models.database.ad import AdType
from signage.models.database.ad_interaction import InteractionType
from signage.models.schemas.ad import AdPublic
from signage.models.schemas.news import NewsPublic

logger = logging.getLogger(__name__)

DETAIL_PANEL_SECONDS = 5
NEWS_SECONDS = 15


class RotatorState(str, Enum):
    SHOWING_AD = "showing-ad"
    SHOWING_NEWS = "showing-news"
    SHOWING_DETAIL_PANEL = "showing-detail-panel"
    EMPTY = "empty"


class ContentType(str, Enum):
    AD = "ad"
    NEWS = "news"


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], Any]) -> TimerHandle: ...


class AsyncioScheduler:
    """Single-shot timers on the running event loop."""

    def call_later(self, delay: float, callback: Callable[[], Any]) -> asyncio.TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback)


Renderer = Callable[["ContentRotator"], None]
InteractionSink = Callable[[AdPublic, InteractionType], None]


class ContentRotator:
    def __init__(
        self,
        ads: Sequence[AdPublic],
        news: Sequence[NewsPublic] = (),
        news_enabled: bool = True,
        *,
        scheduler: Optional[Scheduler] = None,
        renderer: Optional[Renderer] = None,
        on_interaction: Optional[InteractionSink] = None,
        detail_seconds: int = DETAIL_PANEL_SECONDS,
        news_seconds: int = NEWS_SECONDS,
    ):
        self.ads: List[AdPublic] = list(ads)
        self.news: List[NewsPublic] = list(news)
        self.news_enabled = news_enabled
        self.scheduler: Scheduler = scheduler or AsyncioScheduler()
        self.renderer = renderer
        self.on_interaction = on_interaction
        self.detail_seconds = detail_seconds
        self.news_seconds = news_seconds

        self._state = RotatorState.EMPTY
        self._content_type = ContentType.AD
        self._ad_index = 0
        self._news_index = 0
        self._countdown = 0
        self._impression_recorded = False
        self._timers: List[TimerHandle] = []
        self._running = False

    @property
    def state(self) -> RotatorState:
        return self._state

    @property
    def content_type(self) -> ContentType:
        return self._content_type

    @property
    def ad_index(self) -> int:
        return self._ad_index

    @property
    def news_index(self) -> int:
        return self._news_index

    @property
    def countdown(self) -> int:
        return self._countdown

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def interleaving_news(self) -> bool:
        return self.news_enabled and len(self.news) > 0

    @property
    def current_ad(self) -> Optional[AdPublic]:
        if not self.ads:
            return None
        return self.ads[self._ad_index]

    @property
    def current_news(self) -> Optional[NewsPublic]:
        if self._content_type != ContentType.NEWS or not self.news:
            return None
        return self.news[self._news_index]

    # Lifecycle

    def start(self) -> None:
        self._running = True
        if not self.ads:
            self._enter_empty()
            return
        self._enter_ad()

    def stop(self) -> None:
        self._running = False
        self._cancel_timers()

    def render(self) -> None:
        """Redraw the current item without moving on."""
        if self._state == RotatorState.SHOWING_AD:
            self._record_impression()
        self._render()

    # Transitions

    def advance(self) -> None:
        """Move to the next item: the next news headline after an ad, else the next ad."""
        self._cancel_timers()
        self._impression_recorded = False
        self._countdown = 0

        if not self.ads:
            self._enter_empty()
            return

        if not self.interleaving_news:
            self._ad_index = (self._ad_index + 1) % len(self.ads)
            self._enter_ad()
            return

        if self._content_type == ContentType.AD:
            self._news_index = (self._news_index + 1) % len(self.news)
            self._enter_news()
        else:
            self._ad_index = (self._ad_index + 1) % len(self.ads)
            self._enter_ad()

    def on_media_ended(self) -> None:
        """The video in view played to its end."""
        if self._state == RotatorState.SHOWING_AD:
            self.show_detail_panel()

    def on_media_error(self, error: Optional[BaseException] = None) -> None:
        """The video in view could not be played; treated like its end."""
        ad = self.current_ad
        logger.error(f"Error playing media for ad {ad.id if ad else None}: {error}")
        if self._state == RotatorState.SHOWING_AD:
            self.show_detail_panel()

    def show_detail_panel(self) -> None:
        if self._state != RotatorState.SHOWING_AD:
            return
        self._cancel_timers()
        self._state = RotatorState.SHOWING_DETAIL_PANEL
        self._countdown = self.detail_seconds
        if self._countdown <= 0:
            self.advance()
            return
        self._schedule(1, self._tick)
        self._render()

    def tap(self) -> None:
        """
        A viewer tapped "read more".

        Records a click for the ad in view; on a playing ad this opens the detail
        panel early. Taps on news are ignored.
        """
        if self._content_type != ContentType.AD or self._state == RotatorState.EMPTY:
            return
        ad = self.current_ad
        if ad is not None:
            self._emit(ad, InteractionType.READ_MORE_CLICK)
        if self._state == RotatorState.SHOWING_AD:
            self.show_detail_panel()

    def open_link(self) -> Optional[str]:
        """A viewer followed the ad's external link (QR code or button)."""
        if self._content_type != ContentType.AD or self._state == RotatorState.EMPTY:
            return None
        ad = self.current_ad
        if ad is None or not ad.external_link:
            return None
        self._emit(ad, InteractionType.LINK_CLICK)
        return ad.external_link

    # Internals

    def _enter_ad(self) -> None:
        self._state = RotatorState.SHOWING_AD
        self._content_type = ContentType.AD
        ad = self.ads[self._ad_index]
        self._record_impression()
        if ad.type == AdType.IMAGE:
            self._schedule(ad.duration, self.show_detail_panel)
        self._render()

    def _enter_news(self) -> None:
        self._state = RotatorState.SHOWING_NEWS
        self._content_type = ContentType.NEWS
        self._schedule(self.news_seconds, self.advance)
        self._render()

    def _enter_empty(self) -> None:
        self._state = RotatorState.EMPTY
        self._content_type = ContentType.AD
        self._render()

    def _tick(self) -> None:
        self._countdown -= 1
        if self._countdown <= 0:
            self._countdown = 0
            self.advance()
            return
        self._schedule(1, self._tick)
        self._render()

    def _record_impression(self) -> None:
        if self._impression_recorded:
            return
        self._impression_recorded = True
        self._emit(self.ads[self._ad_index], InteractionType.IMPRESSION)

    def _emit(self, ad: AdPublic, interaction_type: InteractionType) -> None:
        if self.on_interaction is not None:
            self.on_interaction(ad, interaction_type)

    def _schedule(self, delay: float, callback: Callable[[], Any]) -> None:
        self._timers.append(self.scheduler.call_later(delay, callback))

    def _cancel_timers(self) -> None:
        for timer in self._timers:
            timer.cancel()
        self._timers = []

    def _render(self) -> None:
        if self.renderer is not None:
            self.renderer(self)
