"""
HTTP client for the signage backend.

Every call is fallible: transport failures, non-2xx answers and malformed
bodies are raised as GatewayError, and it is up to the caller to decide
whether to swallow them.
"""
import logging
import uuid
from enum import Enum
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from signage.models.schemas.ad import AdPublic
from signage.models.schemas.analytics import AnalyticsSummary, DashboardStats
from signage.models.schemas.device import DeviceInfo, DevicePublic, RefreshSignal
from signage.models.schemas.interaction import InteractionCreate
from signage.models.schemas.news import NewsPublic, NewsSettings
from signage.models.schemas.ping import Location, PingPublic
from signage.models.schemas.token import Token
from signage.models.schemas.user import CurrentUserPublic, UserPublic

logger = logging.getLogger(__name__)

DEFAULT_API_PREFIX = "/api/v1"

M = TypeVar("M", bound=BaseModel)


def _form_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


class GatewayError(Exception):
    """Custom exception for failed backend calls"""

    def __init__(self, message: str, operation: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.operation = operation
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        return f"Gateway Error ({self.operation}): {self.message}"

    @property
    def status_code(self) -> Optional[int]:
        return (self.details or {}).get("status_code")


class GatewayClient:
    """Thin async wrapper over the backend's REST collections"""

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        api_prefix: str = DEFAULT_API_PREFIX,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_prefix = api_prefix
        self.token = token
        self._client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> "GatewayClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def headers(self) -> Dict[str, str]:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}

    def media_url(self, url: str) -> str:
        """Absolute URL for a stored media object; foreign URLs pass through."""
        if url.startswith("/"):
            return f"{self.base_url}{url}"
        return url

    async def _request(self, operation: str, method: str, path: str, **kwargs) -> Any:
        logger.debug(f"{operation}: {method} {path}")
        try:
            response = await self._client.request(
                method, f"{self.api_prefix}{path}", headers=self.headers, **kwargs
            )
        except httpx.HTTPError as e:
            raise GatewayError(f"Request failed: {str(e)}", operation) from e

        if response.is_error:
            try:
                detail = response.json().get("detail")
            except (ValueError, AttributeError):
                detail = response.text
            raise GatewayError(
                f"HTTP {response.status_code}: {detail}",
                operation,
                {"status_code": response.status_code, "detail": detail},
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise GatewayError(
                f"Invalid JSON in HTTP {response.status_code} response",
                operation,
                {"status_code": response.status_code, "detail": response.text[:200]},
            ) from e

    def _parse(self, operation: str, model: Type[M], data: Any) -> M:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise GatewayError(f"Unexpected response: {str(e)}", operation) from e

    def _parse_list(self, operation: str, model: Type[M], data: Any) -> List[M]:
        """Parse a `{"data": [...], "count": n}` collection body."""
        if not isinstance(data, dict) or not isinstance(data.get("data"), list):
            raise GatewayError("Unexpected response: expected a data list", operation)
        return [self._parse(operation, model, item) for item in data["data"]]

    # Auth

    async def login(self, email: str, password: str) -> Token:
        data = await self._request(
            "login", "POST", "/auth/login", data={"username": email, "password": password}
        )
        return self._parse("login", Token, data)

    async def sign_up(self, email: str, password: str, username: str) -> UserPublic:
        data = await self._request(
            "sign_up", "POST", "/auth/signup",
            json={"email": email, "password": password, "username": username},
        )
        return self._parse("sign_up", UserPublic, data)

    async def read_me(self) -> CurrentUserPublic:
        data = await self._request("read_me", "GET", "/auth/me")
        return self._parse("read_me", CurrentUserPublic, data)

    async def device_login(self, pin: str) -> DeviceInfo:
        data = await self._request("device_login", "POST", "/auth/device-login", json={"pin": pin})
        return self._parse("device_login", DeviceInfo, data)

    # Ads

    async def get_active_ads(self) -> List[AdPublic]:
        data = await self._request("get_active_ads", "GET", "/ads/active")
        return self._parse_list("get_active_ads", AdPublic, data)

    async def get_ads(self) -> List[AdPublic]:
        data = await self._request("get_ads", "GET", "/ads/")
        return self._parse_list("get_ads", AdPublic, data)

    async def upload_ad(self, fields: Dict[str, Any], filename: str, content: bytes) -> AdPublic:
        form = {key: _form_value(value) for key, value in fields.items() if value is not None}
        data = await self._request(
            "upload_ad", "POST", "/ads/", data=form, files={"file": (filename, content)}
        )
        return self._parse("upload_ad", AdPublic, data)

    async def toggle_ad(self, ad_id: uuid.UUID) -> AdPublic:
        data = await self._request("toggle_ad", "PATCH", f"/ads/{ad_id}/toggle")
        return self._parse("toggle_ad", AdPublic, data)

    async def delete_ad(self, ad_id: uuid.UUID) -> None:
        await self._request("delete_ad", "DELETE", f"/ads/{ad_id}")

    # News

    async def get_news(self) -> List[NewsPublic]:
        data = await self._request("get_news", "GET", "/news/")
        return self._parse_list("get_news", NewsPublic, data)

    async def refresh_news(self) -> bool:
        data = await self._request("refresh_news", "POST", "/news/refresh")
        return isinstance(data, dict) and bool(data.get("success"))

    async def get_news_settings(self) -> NewsSettings:
        data = await self._request("get_news_settings", "GET", "/news/settings")
        return self._parse("get_news_settings", NewsSettings, data)

    async def update_news_settings(self, enabled: bool) -> NewsSettings:
        data = await self._request(
            "update_news_settings", "PUT", "/news/settings", json={"enabled": enabled}
        )
        return self._parse("update_news_settings", NewsSettings, data)

    # Devices

    async def get_devices(self) -> List[DevicePublic]:
        data = await self._request("get_devices", "GET", "/devices/")
        return self._parse_list("get_devices", DevicePublic, data)

    async def get_device(self, device_id: str) -> Optional[DeviceInfo]:
        """Look up a device, returning None when it is not registered."""
        try:
            data = await self._request("get_device", "GET", f"/devices/{device_id}")
        except GatewayError as e:
            if e.status_code == 404:
                return None
            raise
        return self._parse("get_device", DeviceInfo, data)

    async def get_refresh_signal(self, device_id: str) -> RefreshSignal:
        data = await self._request("get_refresh_signal", "GET", f"/devices/{device_id}/refresh-signal")
        return self._parse("get_refresh_signal", RefreshSignal, data)

    async def set_force_refresh(self, device_id: str) -> RefreshSignal:
        data = await self._request("set_force_refresh", "POST", f"/devices/{device_id}/force-refresh")
        return self._parse("set_force_refresh", RefreshSignal, data)

    async def clear_force_refresh(self, device_id: str) -> RefreshSignal:
        data = await self._request("clear_force_refresh", "DELETE", f"/devices/{device_id}/force-refresh")
        return self._parse("clear_force_refresh", RefreshSignal, data)

    async def heartbeat(self, device_id: str) -> None:
        await self._request("heartbeat", "POST", f"/devices/{device_id}/heartbeat")

    # Pings

    async def create_ping(self, device_id: str) -> PingPublic:
        data = await self._request("create_ping", "POST", "/pings/", json={"device_id": device_id})
        return self._parse("create_ping", PingPublic, data)

    async def get_ping(self, ping_id: uuid.UUID) -> PingPublic:
        data = await self._request("get_ping", "GET", f"/pings/{ping_id}")
        return self._parse("get_ping", PingPublic, data)

    async def get_pending_ping(self, device_id: str) -> Optional[PingPublic]:
        data = await self._request("get_pending_ping", "GET", f"/pings/pending/{device_id}")
        return self._parse("get_pending_ping", PingPublic, data) if data else None

    async def complete_ping(
        self,
        ping_id: uuid.UUID,
        location: Optional[Location],
        battery_level: Optional[int],
        is_active: bool = True,
    ) -> PingPublic:
        payload = {
            "location": location.model_dump() if location else None,
            "battery_level": battery_level,
            "is_active": is_active,
        }
        data = await self._request("complete_ping", "POST", f"/pings/{ping_id}/complete", json=payload)
        return self._parse("complete_ping", PingPublic, data)

    async def fail_ping(self, ping_id: uuid.UUID, error_message: str) -> PingPublic:
        data = await self._request(
            "fail_ping", "POST", f"/pings/{ping_id}/fail", json={"error_message": error_message}
        )
        return self._parse("fail_ping", PingPublic, data)

    # Interactions and analytics

    async def record_interaction(self, interaction: InteractionCreate) -> None:
        await self._request(
            "record_interaction", "POST", "/interactions/", json=interaction.model_dump(mode="json")
        )

    async def get_analytics_summary(self) -> AnalyticsSummary:
        data = await self._request("get_analytics_summary", "GET", "/analytics/summary")
        return self._parse("get_analytics_summary", AnalyticsSummary, data)

    async def get_dashboard_stats(self) -> DashboardStats:
        data = await self._request("get_dashboard_stats", "GET", "/analytics/dashboard")
        return self._parse("get_dashboard_stats", DashboardStats, data)
