import logging
from typing import Any

from fastapi import APIRouter, HTTPException

from signage import crud
from signage.api.deps import CurrentUser, DeviceDep, SessionDep
from signage.models.database import Device
from signage.models.schemas.device import (
    DeviceCreate,
    DeviceInfo,
    DevicePublic,
    DevicesPublic,
    DeviceUpdate,
    RefreshSignal,
)
from signage.models.schemas.message import Message

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=DevicesPublic)
def read_devices(session: SessionDep, current_user: CurrentUser) -> Any:
    """
    Registered kiosks, ordered by name.
    """
    devices = crud.get_devices(session=session)
    return DevicesPublic(data=devices, count=len(devices))


@router.post("/", response_model=DevicePublic)
def create_device(session: SessionDep, current_user: CurrentUser, device_in: DeviceCreate) -> Any:
    """
    Register a kiosk under a chosen identifier.
    """
    if session.get(Device, device_in.id):
        raise HTTPException(status_code=400, detail="A device with this id already exists")
    if device_in.pin and crud.get_device_by_pin(session=session, pin=device_in.pin):
        raise HTTPException(status_code=400, detail="This PIN is already in use")
    device = crud.create_device(session=session, device_create=device_in)
    logger.info(f"Registered device {device.id}")
    return device


@router.get("/{device_id}", response_model=DeviceInfo)
def read_device(device: DeviceDep) -> Any:
    """
    Identity of a single kiosk: id, name and phone number.
    """
    return device


@router.patch("/{device_id}", response_model=DevicePublic)
def update_device(
    session: SessionDep, current_user: CurrentUser, device: DeviceDep, device_in: DeviceUpdate
) -> Any:
    if device_in.pin:
        owner = crud.get_device_by_pin(session=session, pin=device_in.pin)
        if owner and owner.id != device.id:
            raise HTTPException(status_code=400, detail="This PIN is already in use")
    return crud.update_device(session=session, db_obj=device, obj_in=device_in)


@router.post("/{device_id}/force-refresh", response_model=RefreshSignal)
def send_force_refresh(session: SessionDep, current_user: CurrentUser, device: DeviceDep) -> Any:
    """
    Ask a kiosk to reload itself. The signal is timestamped now and goes stale after 30 seconds.
    """
    device = crud.set_force_refresh(session=session, db_obj=device, enabled=True)
    logger.info(f"Force refresh requested for device {device.id} by {current_user.email}")
    return device


@router.get("/{device_id}/refresh-signal", response_model=RefreshSignal)
def read_refresh_signal(device: DeviceDep) -> Any:
    """
    The kiosk-facing view of the force-refresh flag.
    """
    return device


@router.delete("/{device_id}/force-refresh", response_model=RefreshSignal)
def clear_force_refresh(session: SessionDep, device: DeviceDep) -> Any:
    """
    Clear the force-refresh flag. Called by the kiosk before reloading and by the controller afterwards.
    """
    return crud.set_force_refresh(session=session, db_obj=device, enabled=False)


@router.post("/{device_id}/heartbeat", response_model=Message)
def heartbeat(session: SessionDep, device: DeviceDep) -> Any:
    crud.update_device(session=session, db_obj=device, obj_in={"last_active": crud.utcnow()})
    return Message(message="ok")
