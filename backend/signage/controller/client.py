"""
Operator-side actions: managing ads, locating devices, forcing reloads,
toggling news and reading analytics.
"""
import asyncio
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional

from signage.gateway.client import GatewayClient, GatewayError
from signage.gateway.session import AuthSession
from signage.kiosk.local_store import AD_PLAYLIST_KEY, LocalStore
from signage.kiosk.result import spawn_best_effort
from signage.models.database.ad import AdType
from signage.models.database.ping_request import PingStatus
from signage.models.schemas.ad import AdPublic
from signage.models.schemas.analytics import AnalyticsSummary, DashboardStats
from signage.models.schemas.device import DevicePublic, RefreshSignal
from signage.models.schemas.news import NewsSettings
from signage.models.schemas.ping import PingPublic

logger = logging.getLogger(__name__)

PING_ATTEMPTS = 15
PING_INTERVAL = 2.0
FORCE_REFRESH_RESET_AFTER = 10.0


@dataclass
class PingOutcome:
    ping_id: uuid.UUID
    status: PingStatus
    ping: Optional[PingPublic] = None

    @property
    def timed_out(self) -> bool:
        return self.status == PingStatus.PENDING

    @property
    def succeeded(self) -> bool:
        return self.status == PingStatus.COMPLETED


class ControllerClient:
    def __init__(
        self,
        gateway: GatewayClient,
        session: AuthSession,
        store: Optional[LocalStore] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.gateway = gateway
        self.session = session
        self.store = store
        self._sleep = sleep
        self.background: List["asyncio.Task[None]"] = []

    def _require_operator(self, operation: str) -> None:
        """Operator-only calls need a signed-in session."""
        if not self.session.token:
            raise GatewayError("Not signed in", operation)

    # Ads

    async def list_ads(self) -> List[AdPublic]:
        self._require_operator("list_ads")
        return await self.gateway.get_ads()

    async def upload_ad(
        self,
        title: str,
        type: AdType,
        filename: str,
        content: bytes,
        description: str = "",
        external_link: Optional[str] = None,
        duration: int = 10,
        is_active: bool = True,
    ) -> AdPublic:
        fields = {
            "title": title,
            "type": type,
            "description": description,
            "external_link": external_link,
            "duration": 0 if type == AdType.VIDEO else duration,
            "is_active": is_active,
        }
        self._require_operator("upload_ad")
        ad = await self.gateway.upload_ad(fields, filename, content)
        logger.info(f"Uploaded ad {ad.id}: {ad.title}")
        return ad

    async def toggle_ad(self, ad_id: uuid.UUID) -> AdPublic:
        self._require_operator("toggle_ad")
        return await self.gateway.toggle_ad(ad_id)

    async def delete_ad(self, ad_id: uuid.UUID) -> None:
        self._require_operator("delete_ad")
        await self.gateway.delete_ad(ad_id)
        logger.info(f"Deleted ad {ad_id}")
        self._prune_playlist(ad_id)

    def _prune_playlist(self, ad_id: uuid.UUID) -> None:
        if self.store is None:
            return
        playlist = self.store.get_json(AD_PLAYLIST_KEY)
        if not isinstance(playlist, list):
            return
        kept = [
            item for item in playlist
            if not (isinstance(item, dict) and item.get("type") == "ad" and item.get("adId") == str(ad_id))
        ]
        try:
            self.store.set_json(AD_PLAYLIST_KEY, kept)
        except OSError as e:
            logger.error(f"Error updating local playlist: {str(e)}")

    # Devices

    async def list_devices(self) -> List[DevicePublic]:
        self._require_operator("list_devices")
        return await self.gateway.get_devices()

    async def ping_device(
        self, device_id: str, attempts: int = PING_ATTEMPTS, interval: float = PING_INTERVAL
    ) -> PingOutcome:
        """
        Send a ping and wait for the device to answer it.

        Polls the result every `interval` seconds, up to `attempts` times. A
        ping still pending afterwards is reported as timed out; it stays in
        the backend and the device may still answer it later.

        Raises:
            GatewayError: if the ping could not be sent
        """
        self._require_operator("ping_device")
        ping = await self.gateway.create_ping(device_id)
        logger.info(f"Sent ping {ping.id} to device {device_id}")

        for attempt in range(1, attempts + 1):
            await self._sleep(interval)
            try:
                result = await self.gateway.get_ping(ping.id)
            except GatewayError as e:
                logger.error(f"Error checking ping result (attempt {attempt}/{attempts}): {str(e)}")
                continue
            if result.status != PingStatus.PENDING:
                logger.info(f"Ping {ping.id} {result.status.value} after {attempt} checks")
                return PingOutcome(ping_id=ping.id, status=result.status, ping=result)

        logger.warning(f"Device {device_id} did not answer ping {ping.id}")
        return PingOutcome(ping_id=ping.id, status=PingStatus.PENDING, ping=None)

    async def force_refresh(
        self, device_id: str, reset_after: float = FORCE_REFRESH_RESET_AFTER
    ) -> RefreshSignal:
        """
        Ask a device to reload, then clear the flag after `reset_after` seconds.

        Raises:
            GatewayError: if the signal could not be sent
        """
        self._require_operator("force_refresh")
        signal = await self.gateway.set_force_refresh(device_id)
        logger.info(f"Force refresh signal sent to device {device_id}")

        async def reset() -> RefreshSignal:
            await self._sleep(reset_after)
            return await self.gateway.clear_force_refresh(device_id)

        task = spawn_best_effort("clear_force_refresh", reset)
        self.background.append(task)
        task.add_done_callback(self.background.remove)
        return signal

    # News and analytics

    async def news_settings(self) -> NewsSettings:
        return await self.gateway.get_news_settings()

    async def set_news_enabled(self, enabled: bool) -> NewsSettings:
        self._require_operator("set_news_enabled")
        result = await self.gateway.update_news_settings(enabled)
        logger.info(f"News {'enabled' if result.enabled else 'disabled'}")
        return result

    async def analytics_summary(self) -> AnalyticsSummary:
        self._require_operator("analytics_summary")
        return await self.gateway.get_analytics_summary()

    async def dashboard_stats(self) -> DashboardStats:
        self._require_operator("dashboard_stats")
        return await self.gateway.get_dashboard_stats()
