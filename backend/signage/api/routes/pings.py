import logging
import uuid
from typing import Any, Optional

from fastapi import APIRouter, HTTPException

from signage import crud
from signage.api.deps import CurrentUser, SessionDep
from signage.models.database import Device, PingRequest
from signage.models.schemas.ping import PingComplete, PingCreate, PingFail, PingPublic

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_ping_or_404(session, ping_id: uuid.UUID) -> PingRequest:
    ping = session.get(PingRequest, ping_id)
    if not ping:
        raise HTTPException(status_code=404, detail="Ping request not found")
    return ping


def _ensure_pending(ping: PingRequest) -> None:
    if ping.is_terminal:
        raise HTTPException(
            status_code=409,
            detail=f"Ping request already {ping.status.value}",
        )


@router.post("/", response_model=PingPublic)
def create_ping(session: SessionDep, current_user: CurrentUser, ping_in: PingCreate) -> Any:
    """
    Ask a device to report its location, battery level and activity.
    """
    device = session.get(Device, ping_in.device_id)
    if not device:
        raise HTTPException(status_code=404, detail="Device not found")
    ping = crud.create_ping(session=session, device=device)
    logger.info(f"Ping {ping.id} sent to device {device.id}")
    return ping


@router.get("/pending/{device_id}", response_model=Optional[PingPublic])
def read_pending_ping(session: SessionDep, device_id: str) -> Any:
    """
    The oldest ping still waiting for this device, or null.
    """
    return crud.get_oldest_pending_ping(session=session, device_id=device_id)


@router.get("/{ping_id}", response_model=PingPublic)
def read_ping(session: SessionDep, current_user: CurrentUser, ping_id: uuid.UUID) -> Any:
    return _get_ping_or_404(session, ping_id)


@router.post("/{ping_id}/complete", response_model=PingPublic)
def complete_ping(session: SessionDep, ping_id: uuid.UUID, ping_in: PingComplete) -> Any:
    """
    Answer a pending ping. A ping is resolved exactly once.
    """
    ping = _get_ping_or_404(session, ping_id)
    _ensure_pending(ping)
    ping = crud.complete_ping(session=session, ping=ping, ping_in=ping_in)
    logger.info(f"Ping {ping.id} completed by device {ping.device_id}")
    return ping


@router.post("/{ping_id}/fail", response_model=PingPublic)
def fail_ping(session: SessionDep, ping_id: uuid.UUID, ping_in: PingFail) -> Any:
    """
    Mark a pending ping as failed.
    """
    ping = _get_ping_or_404(session, ping_id)
    _ensure_pending(ping)
    ping = crud.fail_ping(session=session, ping=ping, error_message=ping_in.error_message)
    logger.warning(f"Ping {ping.id} failed on device {ping.device_id}: {ping.error_message}")
    return ping
