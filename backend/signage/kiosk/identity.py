"""
Device identity resolution for the kiosk.

Precedence, evaluated once at startup:
    1. an `id` query parameter (provisioning), persisted for next time
    2. the device id stored by a PIN login, looked up on the backend
    3. a previously persisted identifier
    4. a freshly generated `rickshaw-xxxxxxx` identifier, persisted
A failed lookup falls through to the next level; it is logged, never raised.
"""
import logging
import secrets
import string
from dataclasses import dataclass
from typing import Mapping, Optional

from signage.gateway.client import GatewayClient, GatewayError
from signage.kiosk.local_store import DEVICE_ID_KEY, RICKSHAW_ID_KEY, LocalStore
from signage.models.schemas.device import DeviceInfo, validate_pin

logger = logging.getLogger(__name__)

GENERATED_ID_PREFIX = "rickshaw-"
_BASE36 = string.digits + string.ascii_lowercase


@dataclass
class DeviceIdentity:
    id: str
    name: Optional[str] = None
    phone_number: Optional[str] = None

    @classmethod
    def from_device(cls, device: DeviceInfo) -> "DeviceIdentity":
        return cls(id=device.id, name=device.name, phone_number=device.phone_number)


def generate_device_id() -> str:
    return GENERATED_ID_PREFIX + "".join(secrets.choice(_BASE36) for _ in range(7))


async def _lookup(gateway: GatewayClient, device_id: str) -> Optional[DeviceInfo]:
    try:
        return await gateway.get_device(device_id)
    except GatewayError as e:
        logger.error(f"Error fetching device info for {device_id}: {str(e)}")
        return None


async def resolve_device_identity(
    query: Mapping[str, str], store: LocalStore, gateway: GatewayClient
) -> DeviceIdentity:
    identity: Optional[DeviceIdentity] = None

    query_id = (query.get("id") or "").strip()
    if query_id:
        store.set(RICKSHAW_ID_KEY, query_id)
        identity = DeviceIdentity(id=query_id)
        logger.info(f"Using device id from launch parameters: {query_id}")

    if identity is None:
        login_id = store.get(DEVICE_ID_KEY)
        if login_id:
            device = await _lookup(gateway, login_id)
            if device:
                identity = DeviceIdentity.from_device(device)
                logger.info(f"Using device id from PIN login: {device.id}")

    if identity is None:
        stored_id = store.get(RICKSHAW_ID_KEY)
        if stored_id:
            identity = DeviceIdentity(id=stored_id)

    if identity is None:
        new_id = generate_device_id()
        store.set(RICKSHAW_ID_KEY, new_id)
        identity = DeviceIdentity(id=new_id)
        logger.info(f"Generated new device id: {new_id}")

    if identity.name is None:
        device = await _lookup(gateway, identity.id)
        if device:
            identity.name = device.name
            identity.phone_number = device.phone_number

    return identity


async def login_with_pin(pin: str, gateway: GatewayClient, store: LocalStore) -> DeviceIdentity:
    """
    Log the kiosk in with its 4-digit PIN and remember the device id.

    Raises:
        ValueError: if the PIN is not exactly 4 digits
        GatewayError: if the PIN is unknown or the backend is unreachable
    """
    pin = validate_pin(pin.strip())
    device = await gateway.device_login(pin)
    store.set(DEVICE_ID_KEY, device.id)
    logger.info(f"Logged in as device {device.id}")
    return DeviceIdentity.from_device(device)


def logout(store: LocalStore) -> None:
    store.remove(RICKSHAW_ID_KEY)
    store.remove(DEVICE_ID_KEY)
    logger.info("Logged out; device identifiers cleared")
