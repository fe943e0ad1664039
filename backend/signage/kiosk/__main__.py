import argparse
import asyncio
import logging
from typing import Dict, Optional
from urllib.parse import parse_qs, urlparse

from signage.gateway.client import GatewayClient
from signage.kiosk.config import KioskSettings
from signage.kiosk.display import KioskDisplay
from signage.kiosk.local_store import LocalStore
from signage.kiosk.sensors import location_provider_from_settings


def query_from_launch_url(launch_url: Optional[str]) -> Dict[str, str]:
    """Flatten the launch URL's query string, keeping the first value of each key."""
    if not launch_url:
        return {}
    query = urlparse(launch_url).query or launch_url.lstrip("?")
    return {key: values[0] for key, values in parse_qs(query).items() if values}


async def run_kiosk(settings: KioskSettings, query: Dict[str, str]) -> None:
    async with GatewayClient(settings.API_URL, timeout=settings.REQUEST_TIMEOUT) as gateway:
        display = KioskDisplay(
            gateway,
            LocalStore(settings.STATE_FILE),
            settings,
            query=query,
            location_provider=location_provider_from_settings(
                settings.LATITUDE, settings.LONGITUDE, settings.LOCATION_ACCURACY
            ),
        )
        await display.run()


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(prog="signage-kiosk", description="Run the rickshaw signage display")
    parser.add_argument("launch_url", nargs="?", help="launch URL or query string, e.g. '?id=rickshaw-42'")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        asyncio.run(run_kiosk(KioskSettings(), query_from_launch_url(args.launch_url)))
    except KeyboardInterrupt:
        logging.getLogger(__name__).info("Kiosk stopped")


if __name__ == "__main__":
    main()
