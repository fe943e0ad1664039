"""
Polling for out-of-band commands addressed to this kiosk.

Two independent loops share the device id: one answers "locate me" pings,
the other honours force-refresh signals. Each ticks immediately on start and
then at a fixed interval. Nothing raised inside a tick escapes its loop.
"""
import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, List, Optional

from signage.gateway.client import GatewayClient, GatewayError
from signage.kiosk.config import KioskSettings
from signage.kiosk.result import Ok, log_result
from signage.kiosk.sensors import LocationProvider, read_battery_level, read_location
from signage.models.schemas.ping import PingPublic

logger = logging.getLogger(__name__)

PING_FAILED_MESSAGE = "Failed to process ping response"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RemoteCommandPoller:
    def __init__(
        self,
        device_id: str,
        gateway: GatewayClient,
        on_reload: Callable[[], Any],
        *,
        location_provider: Optional[LocationProvider] = None,
        settings: Optional[KioskSettings] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.device_id = device_id
        self.gateway = gateway
        self.on_reload = on_reload
        self.location_provider = location_provider or LocationProvider()
        self.settings = settings or KioskSettings()
        self.clock = clock
        self._tasks: List["asyncio.Task[None]"] = []

    @property
    def is_running(self) -> bool:
        return any(not task.done() for task in self._tasks)

    # Ping loop

    async def check_for_pings(self) -> Optional[PingPublic]:
        """
        Resolve the oldest pending ping for this device, if there is one.

        Returns the resolved ping, or None when there was nothing to answer or
        the backend could not be reached.
        """
        try:
            ping = await self.gateway.get_pending_ping(self.device_id)
        except GatewayError as e:
            logger.error(f"Error checking for pings: {str(e)}")
            return None
        if ping is None:
            return None

        logger.info(f"Received ping request {ping.id}")
        try:
            return await self._answer(ping)
        except Exception as e:
            logger.error(f"Error handling ping request {ping.id}: {str(e)}")
            return await self._fail(ping)

    async def _answer(self, ping: PingPublic) -> PingPublic:
        location_result = await read_location(self.location_provider, self.settings.GEOLOCATION_TIMEOUT)
        if not isinstance(location_result, Ok):
            logger.info(f"Answering ping without location: {location_result.error}")
        location = location_result.value if isinstance(location_result, Ok) else None

        battery_result = read_battery_level()
        if not isinstance(battery_result, Ok):
            log_result(battery_result)
        battery_level = (
            battery_result.value if isinstance(battery_result, Ok) else self.settings.DEFAULT_BATTERY_LEVEL
        )

        resolved = await self.gateway.complete_ping(
            ping.id, location=location, battery_level=battery_level, is_active=True
        )
        logger.info(f"Successfully responded to ping {ping.id}")
        return resolved

    async def _fail(self, ping: PingPublic) -> Optional[PingPublic]:
        try:
            return await self.gateway.fail_ping(ping.id, PING_FAILED_MESSAGE)
        except GatewayError as e:
            logger.error(f"Error marking ping {ping.id} as failed: {str(e)}")
            return None

    # Force-refresh loop

    async def check_force_refresh(self) -> bool:
        """
        Honour a force-refresh signal if it is fresh; clear it either way.

        Returns True when a reload was triggered.
        """
        try:
            signal = await self.gateway.get_refresh_signal(self.device_id)
        except GatewayError as e:
            logger.error(f"Error checking force refresh: {str(e)}")
            return False
        if not signal.force_refresh:
            return False

        fresh = False
        if signal.force_refresh_timestamp is not None:
            sent_at = signal.force_refresh_timestamp
            if sent_at.tzinfo is None:
                sent_at = sent_at.replace(tzinfo=timezone.utc)
            age = (self.clock() - sent_at).total_seconds()
            fresh = age < self.settings.FORCE_REFRESH_WINDOW

        # Cleared before reloading so the reloaded kiosk does not see it again
        try:
            await self.gateway.clear_force_refresh(self.device_id)
        except GatewayError as e:
            logger.error(f"Error clearing force refresh flag: {str(e)}")

        if not fresh:
            logger.info("Ignoring stale force refresh signal")
            return False

        logger.info("Force refresh signal received, reloading")
        self.on_reload()
        return True

    # Scheduling

    def start(self) -> None:
        if self.is_running:
            return
        loop = asyncio.get_running_loop()
        self._tasks = [
            loop.create_task(self._run_every(self.settings.PING_INTERVAL, self.check_for_pings)),
            loop.create_task(
                self._run_every(self.settings.FORCE_REFRESH_INTERVAL, self.check_force_refresh)
            ),
        ]
        logger.info(f"Polling for remote commands for device {self.device_id}")

    async def stop(self) -> None:
        tasks, self._tasks = self._tasks, []
        current = asyncio.current_task()
        for task in tasks:
            if task is not current:
                task.cancel()
        for task in tasks:
            if task is current:
                continue
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def _run_every(self, interval: float, tick: Callable[[], Awaitable[Any]]) -> None:
        while True:
            try:
                await tick()
            except Exception as e:
                logger.error(f"Unexpected error in {tick.__name__}: {str(e)}")
            await asyncio.sleep(interval)
