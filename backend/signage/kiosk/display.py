"""
The kiosk display: identity, content rotation and remote commands wired together.

mount() is the equivalent of loading the display page and unmount() of leaving
it; reload() is a full page reload, discarding all in-memory rotation state.
"""
import asyncio
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Mapping, Optional, Set, TypeVar

from signage.gateway.client import GatewayClient
from signage.kiosk.config import KioskSettings
from signage.kiosk.identity import DeviceIdentity, resolve_device_identity
from signage.kiosk.local_store import LocalStore
from signage.kiosk.poller import RemoteCommandPoller, utcnow
from signage.kiosk.result import Ok, capture, log_result, spawn_best_effort
from signage.kiosk.rotator import ContentRotator, Renderer, RotatorState, Scheduler
from signage.kiosk.sensors import LocationProvider, read_location
from signage.models.database.ad_interaction import CLICK_TYPES, InteractionType
from signage.models.schemas.ad import AdPublic
from signage.models.schemas.interaction import InteractionCreate

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LoggingRenderer:
    """Renders the rotation as log lines, for headless kiosks and debugging."""

    def __init__(self, gateway: Optional[GatewayClient] = None):
        self.gateway = gateway
        self._last = None

    def __call__(self, rotator: ContentRotator) -> None:
        if rotator.state == RotatorState.EMPTY:
            line = "No content available"
        elif rotator.state == RotatorState.SHOWING_NEWS and rotator.current_news:
            line = f"News: {rotator.current_news.title}"
        elif rotator.state == RotatorState.SHOWING_DETAIL_PANEL and rotator.current_ad:
            logger.debug(f"Details for {rotator.current_ad.title}, next in {rotator.countdown}s")
            line = f"Details: {rotator.current_ad.title}"
        elif rotator.current_ad:
            ad = rotator.current_ad
            url = self.gateway.media_url(ad.url) if self.gateway else ad.url
            line = f"Ad {rotator.ad_index + 1}/{len(rotator.ads)}: {ad.title} ({ad.type.value}) {url}"
        else:
            return

        if line != self._last:
            logger.info(line)
            self._last = line


class KioskDisplay:
    def __init__(
        self,
        gateway: GatewayClient,
        store: LocalStore,
        settings: Optional[KioskSettings] = None,
        *,
        query: Optional[Mapping[str, str]] = None,
        renderer: Optional[Renderer] = None,
        scheduler: Optional[Scheduler] = None,
        location_provider: Optional[LocationProvider] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.gateway = gateway
        self.store = store
        self.settings = settings or KioskSettings()
        self.query = dict(query or {})
        self.renderer = renderer or LoggingRenderer(gateway)
        self.scheduler = scheduler
        self.location_provider = location_provider or LocationProvider()
        self.clock = clock

        self.identity: Optional[DeviceIdentity] = None
        self.rotator: Optional[ContentRotator] = None
        self.poller: Optional[RemoteCommandPoller] = None
        self.mounted = False
        self._reloads: Set["asyncio.Task[None]"] = set()

    async def _load(self, operation: str, call: Callable[[], Awaitable[T]], default: T) -> T:
        result = await capture(operation, call)
        if isinstance(result, Ok):
            return result.value
        log_result(result)
        return default

    async def mount(self) -> None:
        if self.mounted:
            return
        self.identity = await resolve_device_identity(self.query, self.store, self.gateway)
        device_id = self.identity.id
        logger.info(f"Kiosk running as {device_id} ({self.identity.name or 'unregistered'})")

        if self.identity.name is not None:
            spawn_best_effort("heartbeat", lambda: self.gateway.heartbeat(device_id))

        # At most one feed fetch per day happens server side; this just nudges it
        log_result(await capture("refresh_news", self.gateway.refresh_news))
        news = await self._load("get_news", self.gateway.get_news, [])
        news_settings = await self._load("get_news_settings", self.gateway.get_news_settings, None)
        news_enabled = news_settings.enabled if news_settings is not None else True
        ads = await self._load("get_active_ads", self.gateway.get_active_ads, [])
        logger.info(f"Loaded {len(ads)} ads and {len(news)} news items (news {'on' if news_enabled else 'off'})")

        rotator_kwargs: dict[str, Any] = {}
        if self.scheduler is not None:
            rotator_kwargs["scheduler"] = self.scheduler
        self.rotator = ContentRotator(
            ads,
            news,
            news_enabled,
            renderer=self.renderer,
            on_interaction=self.record_interaction,
            detail_seconds=self.settings.DETAIL_PANEL_SECONDS,
            news_seconds=self.settings.NEWS_SECONDS,
            **rotator_kwargs,
        )
        self.rotator.start()

        self.poller = RemoteCommandPoller(
            device_id,
            self.gateway,
            on_reload=self.request_reload,
            location_provider=self.location_provider,
            settings=self.settings,
            clock=self.clock,
        )
        self.poller.start()
        self.mounted = True

    async def unmount(self) -> None:
        """Tear down every timer and polling loop."""
        if self.rotator is not None:
            self.rotator.stop()
        if self.poller is not None:
            await self.poller.stop()
        self.rotator = None
        self.poller = None
        self.mounted = False

    async def reload(self) -> None:
        logger.info("Reloading display")
        await self.unmount()
        await self.mount()

    def request_reload(self) -> None:
        """Reload outside the caller's task, since unmounting cancels the polling loops."""
        task = asyncio.get_running_loop().create_task(self.reload())
        self._reloads.add(task)
        task.add_done_callback(self._reloads.discard)

    async def run(self) -> None:
        """Mount and keep the display up until cancelled."""
        await self.mount()
        try:
            await asyncio.Event().wait()
        finally:
            await self.unmount()

    def record_interaction(self, ad: AdPublic, interaction_type: InteractionType) -> None:
        """Write an analytics event in the background; clicks carry a best-effort position."""
        if self.identity is None:
            logger.error("No device id available, dropping interaction")
            return
        device_id = self.identity.id

        async def send() -> None:
            coordinates = None
            if interaction_type in CLICK_TYPES:
                location = await read_location(self.location_provider, self.settings.GEOLOCATION_TIMEOUT)
                if isinstance(location, Ok):
                    coordinates = location.value
            await self.gateway.record_interaction(
                InteractionCreate(
                    ad_id=ad.id,
                    device_id=device_id,
                    interaction_type=interaction_type,
                    coordinates=coordinates,
                )
            )

        spawn_best_effort(f"record_{interaction_type.value}", send)
