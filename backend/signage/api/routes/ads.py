import logging
import uuid
from typing import Any, Optional

from fastapi import APIRouter, File, Form, HTTPException, UploadFile

from signage import crud
from signage.api.deps import CurrentUser, SessionDep, StorageDep
from signage.core.config import settings
from signage.core.storage import StorageError, allowed_file, random_object_name
from signage.models.database import Ad, AdType
from signage.models.schemas.ad import AdCreate, AdPublic, AdsPublic
from signage.models.schemas.message import Message

logger = logging.getLogger(__name__)

router = APIRouter()


def _ads_public(ads) -> AdsPublic:
    data = [AdPublic.model_validate(ad, update={"url": ad.url.strip()}) for ad in ads]
    return AdsPublic(data=data, count=len(data))


@router.get("/active", response_model=AdsPublic)
def read_active_ads(session: SessionDep) -> Any:
    """
    Active ads, newest first, as the kiosks play them.
    """
    return _ads_public(crud.get_ads(session=session, active_only=True))


@router.get("/", response_model=AdsPublic)
def read_ads(session: SessionDep, current_user: CurrentUser) -> Any:
    """
    Every ad, active or not.
    """
    return _ads_public(crud.get_ads(session=session))


@router.post("/", response_model=AdPublic)
async def upload_ad(
    session: SessionDep,
    storage: StorageDep,
    current_user: CurrentUser,
    title: str = Form(),
    type: AdType = Form(),
    description: str = Form(""),
    external_link: Optional[str] = Form(None),
    duration: int = Form(10),
    is_active: bool = Form(True),
    file: UploadFile = File(...),
) -> Any:
    """
    Upload an image or video ad.

    The media is stored under a random name that keeps the original extension.
    Videos play to their natural end, so their duration is always stored as 0.
    """
    filename = file.filename or ""
    if not allowed_file(filename, type.value):
        raise HTTPException(
            status_code=400,
            detail=f"Invalid file format for a {type.value} ad",
        )
    if duration < 0:
        raise HTTPException(status_code=400, detail="Duration must not be negative")

    data = await file.read()
    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=400, detail="File too large")

    try:
        path = storage.upload(random_object_name(filename), data)
    except StorageError as e:
        logger.error(f"Error uploading ad media: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to store ad media")

    ad_in = AdCreate(
        title=title,
        description=description,
        type=type,
        url=storage.public_url(path),
        duration=0 if type == AdType.VIDEO else duration,
        is_active=is_active,
        external_link=external_link or None,
    )
    ad = crud.create_ad(session=session, ad_create=ad_in)
    logger.info(f"Uploaded {type.value} ad {ad.id} ({path})")
    return ad


@router.patch("/{ad_id}/toggle", response_model=AdPublic)
def toggle_ad(session: SessionDep, current_user: CurrentUser, ad_id: uuid.UUID) -> Any:
    """
    Flip an ad between active and inactive.
    """
    ad = session.get(Ad, ad_id)
    if not ad:
        raise HTTPException(status_code=404, detail="Ad not found")
    return crud.update_ad(session=session, db_obj=ad, obj_in={"is_active": not ad.is_active})


@router.delete("/{ad_id}", response_model=Message)
def delete_ad(
    session: SessionDep, storage: StorageDep, current_user: CurrentUser, ad_id: uuid.UUID
) -> Any:
    """
    Delete an ad and its backing media file.
    """
    ad = session.get(Ad, ad_id)
    if not ad:
        raise HTTPException(status_code=404, detail="Ad not found")

    path = storage.path_from_url(ad.url)
    if path:
        try:
            storage.remove(path)
        except StorageError as e:
            logger.warning(f"Could not remove media for ad {ad.id}: {str(e)}")

    crud.delete_ad(session=session, db_obj=ad)
    return Message(message="Ad deleted successfully")
