"""
Best-effort location and battery probes used when answering pings.
"""
import asyncio
import logging
from typing import Optional

import psutil

from signage.kiosk.result import Err, Ok, Result
from signage.models.schemas.ping import Location

logger = logging.getLogger(__name__)


class LocationUnavailable(Exception):
    """Raised when the device cannot determine where it is"""


class LocationProvider:
    """Source of the device's current position."""

    async def locate(self) -> Location:
        raise LocationUnavailable("No location source configured")


class StaticLocationProvider(LocationProvider):
    """Reports a fixed position, for kiosks configured with their coordinates."""

    def __init__(self, latitude: float, longitude: float, accuracy: Optional[float] = None):
        self.location = Location(latitude=latitude, longitude=longitude, accuracy=accuracy)

    async def locate(self) -> Location:
        return self.location


def location_provider_from_settings(latitude, longitude, accuracy=None) -> LocationProvider:
    if latitude is None or longitude is None:
        return LocationProvider()
    return StaticLocationProvider(latitude, longitude, accuracy)


async def read_location(provider: LocationProvider, timeout: float) -> Result:
    """Ask the provider for a position, giving up after `timeout` seconds."""
    try:
        location = await asyncio.wait_for(provider.locate(), timeout=timeout)
        return Ok(location, "read_location")
    except asyncio.TimeoutError:
        return Err(LocationUnavailable(f"Timed out after {timeout}s"), "read_location")
    except Exception as e:
        # Denied permission and driver errors count as "no location"
        return Err(e, "read_location")


def read_battery_level() -> Result:
    """Battery charge as a whole percentage, when the platform exposes one."""
    try:
        battery = psutil.sensors_battery()
    except (AttributeError, NotImplementedError, OSError) as e:
        return Err(e, "read_battery_level")
    if battery is None:
        return Err(RuntimeError("No battery information available"), "read_battery_level")
    return Ok(int(round(battery.percent)), "read_battery_level")
