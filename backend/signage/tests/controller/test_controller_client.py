import asyncio
import uuid
from unittest.mock import AsyncMock

import httpx
import pytest

from signage.controller.client import ControllerClient
from signage.gateway.client import GatewayError
from signage.gateway.session import AuthSession
from signage.kiosk.local_store import AD_PLAYLIST_KEY, LocalStore
from signage.models.database import AdType
from signage.models.database.ping_request import PingStatus
from signage.tests.utils.gateway import FakeBackend, ad_json, make_gateway, ping_json

DEVICE_ID = "rickshaw-7"


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def sleep():
    return AsyncMock()


def make_controller(backend, sleep, store=None):
    gateway = make_gateway(backend, token="operator-token")
    return ControllerClient(gateway, AuthSession(gateway), store=store, sleep=sleep)


class TestPingDevice:
    async def test_completed_after_a_few_checks(self, backend, sleep):
        ping = ping_json(DEVICE_ID)
        backend.on("POST", "/pings/", ping)
        answers = [
            ping_json(DEVICE_ID, "completed", ping["id"], battery_level=80),
            ping_json(DEVICE_ID, "pending", ping["id"]),
            ping_json(DEVICE_ID, "pending", ping["id"]),
        ]
        backend.on("GET", f"/pings/{ping['id']}", lambda request: httpx.Response(200, json=answers.pop()))

        outcome = await make_controller(backend, sleep).ping_device(DEVICE_ID)

        assert outcome.succeeded
        assert outcome.ping.battery_level == 80
        assert sleep.await_count == 3
        sleep.assert_awaited_with(2.0)
        assert backend.json_sent("POST", "/pings/") == [{"device_id": DEVICE_ID}]

    async def test_failed_ping(self, backend, sleep):
        ping = ping_json(DEVICE_ID)
        backend.on("POST", "/pings/", ping)
        backend.on(
            "GET", f"/pings/{ping['id']}",
            ping_json(DEVICE_ID, "failed", ping["id"], error_message="Failed to process ping response"),
        )

        outcome = await make_controller(backend, sleep).ping_device(DEVICE_ID)

        assert outcome.status == PingStatus.FAILED
        assert not outcome.succeeded
        assert not outcome.timed_out

    async def test_times_out_while_pending(self, backend, sleep):
        ping = ping_json(DEVICE_ID)
        backend.on("POST", "/pings/", ping)
        backend.on("GET", f"/pings/{ping['id']}", ping)

        outcome = await make_controller(backend, sleep).ping_device(DEVICE_ID, attempts=4, interval=0.5)

        assert outcome.timed_out
        assert outcome.ping_id == uuid.UUID(ping["id"])
        assert sleep.await_count == 4
        assert len(backend.sent("GET", f"/pings/{ping['id']}")) == 4

    async def test_keeps_polling_through_errors(self, backend, sleep):
        ping = ping_json(DEVICE_ID)
        backend.on("POST", "/pings/", ping)
        answers = [
            httpx.Response(200, json=ping_json(DEVICE_ID, "completed", ping["id"])),
            httpx.Response(502, json={"detail": "bad gateway"}),
        ]
        backend.on("GET", f"/pings/{ping['id']}", lambda request: answers.pop())

        outcome = await make_controller(backend, sleep).ping_device(DEVICE_ID)

        assert outcome.succeeded
        assert sleep.await_count == 2


class TestForceRefresh:
    async def test_flag_cleared_after_delay(self, backend, sleep):
        backend.on("POST", f"/devices/{DEVICE_ID}/force-refresh", {"force_refresh": True})
        backend.on("DELETE", f"/devices/{DEVICE_ID}/force-refresh", {"force_refresh": False})
        controller = make_controller(backend, sleep)

        signal = await controller.force_refresh(DEVICE_ID)
        await asyncio.gather(*controller.background)

        assert signal.force_refresh
        sleep.assert_awaited_once_with(10.0)
        assert len(backend.sent("DELETE", f"/devices/{DEVICE_ID}/force-refresh")) == 1

        await asyncio.sleep(0)
        assert controller.background == []

    async def test_failed_reset_is_logged(self, backend, sleep, caplog):
        backend.on("POST", f"/devices/{DEVICE_ID}/force-refresh", {"force_refresh": True})
        controller = make_controller(backend, sleep)

        await controller.force_refresh(DEVICE_ID)
        await asyncio.gather(*controller.background)

        assert "Error in clear_force_refresh" in caplog.text


class TestAds:
    async def test_video_upload_sends_zero_duration(self, backend, sleep):
        backend.on("POST", "/ads/", ad_json("Lassi", type="video", duration=0))

        ad = await make_controller(backend, sleep).upload_ad(
            "Lassi", AdType.VIDEO, "lassi.mp4", b"\x00\x00", duration=30
        )

        assert ad.duration == 0
        body = backend.sent("POST", "/ads/")[0].content
        assert b'name="duration"\r\n\r\n0\r\n' in body
        assert b'name="type"\r\n\r\nvideo\r\n' in body
        assert b'name="external_link"' not in body

    async def test_delete_prunes_local_playlist(self, backend, sleep, tmp_path):
        ad_id = uuid.uuid4()
        other = str(uuid.uuid4())
        store = LocalStore(tmp_path / "state.json")
        store.set_json(
            AD_PLAYLIST_KEY,
            [{"type": "ad", "adId": str(ad_id)}, {"type": "news"}, {"type": "ad", "adId": other}],
        )
        backend.on("DELETE", f"/ads/{ad_id}", {"message": "Ad deleted successfully"})

        await make_controller(backend, sleep, store).delete_ad(ad_id)

        assert store.get_json(AD_PLAYLIST_KEY) == [{"type": "news"}, {"type": "ad", "adId": other}]

    async def test_failed_delete_keeps_playlist(self, backend, sleep, tmp_path):
        ad_id = uuid.uuid4()
        store = LocalStore(tmp_path / "state.json")
        store.set_json(AD_PLAYLIST_KEY, [{"type": "ad", "adId": str(ad_id)}])

        with pytest.raises(GatewayError):
            await make_controller(backend, sleep, store).delete_ad(ad_id)

        assert store.get_json(AD_PLAYLIST_KEY) == [{"type": "ad", "adId": str(ad_id)}]

    async def test_requests_carry_operator_token(self, backend, sleep):
        backend.on("GET", "/ads/", {"data": [], "count": 0})

        assert await make_controller(backend, sleep).list_ads() == []
        assert backend.sent("GET", "/ads/")[0].headers["Authorization"] == "Bearer operator-token"


async def test_set_news_enabled(backend, sleep):
    backend.on("PUT", "/news/settings", {"enabled": False})

    result = await make_controller(backend, sleep).set_news_enabled(False)

    assert result.enabled is False
    assert backend.json_sent("PUT", "/news/settings") == [{"enabled": False}]


class TestSignedOut:
    @pytest.mark.parametrize(
        "call",
        [
            lambda c: c.list_ads(),
            lambda c: c.toggle_ad(uuid.uuid4()),
            lambda c: c.delete_ad(uuid.uuid4()),
            lambda c: c.ping_device(DEVICE_ID),
            lambda c: c.force_refresh(DEVICE_ID),
            lambda c: c.set_news_enabled(False),
            lambda c: c.dashboard_stats(),
        ],
    )
    async def test_operator_calls_need_a_session(self, backend, sleep, call):
        gateway = make_gateway(backend)
        controller = ControllerClient(gateway, AuthSession(gateway), sleep=sleep)

        with pytest.raises(GatewayError) as exc_info:
            await call(controller)

        assert "Not signed in" in str(exc_info.value)
        assert backend.requests == []

    async def test_news_settings_are_public(self, backend, sleep):
        backend.on("GET", "/news/settings", {"enabled": True})
        gateway = make_gateway(backend)
        controller = ControllerClient(gateway, AuthSession(gateway), sleep=sleep)

        assert (await controller.news_settings()).enabled is True
