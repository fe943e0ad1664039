import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Union

from fastapi.encoders import jsonable_encoder
from sqlalchemy import delete
from sqlmodel import Session, func, select

from signage.core.security import get_password_hash, verify_password
from signage.models.database import (
    Ad,
    AdInteraction,
    Device,
    News,
    PingRequest,
    PingStatus,
    Setting,
    User,
)
from signage.models.schemas.ad import AdCreate, AdUpdate
from signage.models.schemas.device import DeviceCreate, DeviceUpdate
from signage.models.schemas.interaction import InteractionCreate
from signage.models.schemas.ping import PingComplete
from signage.models.schemas.user import UserCreate


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """SQLite hands datetimes back naive; every timestamp we store is UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# User-related CRUD operations

def get_user_by_email(session: Session, email: str) -> Optional[User]:
    statement = select(User).where(User.email == email)
    return session.exec(statement).first()


def create_user(*, session: Session, user_create: UserCreate) -> User:
    user = User.model_validate(
        user_create, update={"hashed_password": get_password_hash(user_create.password)}
    )
    if not user.username:
        user.username = f"user_{str(user.id)[:8]}"
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def authenticate(session: Session, email: str, password: str) -> Optional[User]:
    user = get_user_by_email(session=session, email=email)
    if not user or not user.hashed_password:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


# Ad-related CRUD operations

def create_ad(*, session: Session, ad_create: AdCreate) -> Ad:
    db_obj = Ad.model_validate(ad_create)
    session.add(db_obj)
    session.commit()
    session.refresh(db_obj)
    return db_obj


def get_ads(session: Session, active_only: bool = False) -> Sequence[Ad]:
    statement = select(Ad)
    if active_only:
        statement = statement.where(Ad.is_active == True)  # noqa: E712
    statement = statement.order_by(Ad.created_at.desc())
    return session.exec(statement).all()


def update_ad(session: Session, db_obj: Ad, obj_in: Union[AdUpdate, Dict[str, Any]]) -> Ad:
    if isinstance(obj_in, dict):
        update_data = obj_in
    else:
        update_data = obj_in.model_dump(exclude_unset=True)
    db_obj.sqlmodel_update(update_data)
    session.add(db_obj)
    session.commit()
    session.refresh(db_obj)
    return db_obj


def delete_ad(session: Session, db_obj: Ad) -> None:
    # SQLite does not enforce ON DELETE CASCADE unless asked to, so clear the log explicitly
    session.exec(delete(AdInteraction).where(AdInteraction.ad_id == db_obj.id))
    session.delete(db_obj)
    session.commit()


# Device-related CRUD operations

def create_device(*, session: Session, device_create: DeviceCreate) -> Device:
    db_obj = Device.model_validate(device_create)
    session.add(db_obj)
    session.commit()
    session.refresh(db_obj)
    return db_obj


def get_devices(session: Session) -> Sequence[Device]:
    return session.exec(select(Device).order_by(Device.name)).all()


def get_device_by_pin(session: Session, pin: str) -> Optional[Device]:
    return session.exec(select(Device).where(Device.pin == pin)).first()


def update_device(session: Session, db_obj: Device, obj_in: Union[DeviceUpdate, Dict[str, Any]]) -> Device:
    obj_data = jsonable_encoder(db_obj)
    if isinstance(obj_in, dict):
        update_data = obj_in
    else:
        update_data = obj_in.model_dump(exclude_unset=True)

    for field in obj_data:
        if field in update_data:
            setattr(db_obj, field, update_data[field])

    session.add(db_obj)
    session.commit()
    session.refresh(db_obj)
    return db_obj


def set_force_refresh(session: Session, db_obj: Device, enabled: bool) -> Device:
    update_data: Dict[str, Any] = {"force_refresh": enabled}
    if enabled:
        update_data["force_refresh_timestamp"] = utcnow()
    return update_device(session=session, db_obj=db_obj, obj_in=update_data)


# Ping-related CRUD operations

def create_ping(*, session: Session, device: Device) -> PingRequest:
    now = utcnow()
    device.last_ping_attempt = now
    ping = PingRequest(device_id=device.id, status=PingStatus.PENDING, created_at=now)
    session.add(device)
    session.add(ping)
    session.commit()
    session.refresh(ping)
    return ping


def get_oldest_pending_ping(session: Session, device_id: str) -> Optional[PingRequest]:
    statement = (
        select(PingRequest)
        .where(PingRequest.device_id == device_id)
        .where(PingRequest.status == PingStatus.PENDING)
        .order_by(PingRequest.created_at.asc())
        .limit(1)
    )
    return session.exec(statement).first()


def complete_ping(session: Session, ping: PingRequest, ping_in: PingComplete) -> PingRequest:
    ping.status = PingStatus.COMPLETED
    ping.location = ping_in.location.model_dump() if ping_in.location else None
    ping.battery_level = ping_in.battery_level
    ping.is_active = ping_in.is_active
    ping.completed_at = utcnow()
    session.add(ping)
    session.commit()
    session.refresh(ping)
    return ping


def fail_ping(session: Session, ping: PingRequest, error_message: str) -> PingRequest:
    ping.status = PingStatus.FAILED
    ping.error_message = error_message
    ping.completed_at = utcnow()
    session.add(ping)
    session.commit()
    session.refresh(ping)
    return ping


# Interaction-related CRUD operations

def create_interaction(*, session: Session, interaction_in: InteractionCreate) -> AdInteraction:
    db_obj = AdInteraction(
        ad_id=interaction_in.ad_id,
        device_id=interaction_in.device_id,
        interaction_type=interaction_in.interaction_type,
        coordinates=interaction_in.coordinates.model_dump() if interaction_in.coordinates else None,
    )
    session.add(db_obj)
    session.commit()
    session.refresh(db_obj)
    return db_obj


def get_interactions(
    session: Session, ad_id: Optional[uuid.UUID] = None, skip: int = 0, limit: Optional[int] = None
) -> Sequence[AdInteraction]:
    statement = select(AdInteraction)
    if ad_id:
        statement = statement.where(AdInteraction.ad_id == ad_id)
    statement = statement.order_by(AdInteraction.timestamp.desc()).offset(skip)
    if limit is not None:
        statement = statement.limit(limit)
    return session.exec(statement).all()


def get_ad_titles(session: Session) -> Dict[str, str]:
    return {str(ad_id): title for ad_id, title in session.exec(select(Ad.id, Ad.title)).all()}


# News-related CRUD operations

def count_news(session: Session) -> int:
    return session.exec(select(func.count(News.id))).one()


def news_created_since(session: Session, since: datetime) -> bool:
    statement = select(News.id).where(News.created_at >= since).limit(1)
    return session.exec(statement).first() is not None


def get_latest_news(session: Session, limit: int) -> Sequence[News]:
    statement = select(News).order_by(News.published_at.desc()).limit(limit)
    return session.exec(statement).all()


def create_news(session: Session, items: List[News]) -> None:
    session.add_all(items)
    session.commit()


def delete_oldest_news(session: Session, keep: int) -> int:
    """Delete oldest-first until only the newest `keep` rows remain; returns the number removed."""
    total = count_news(session)
    excess = total - keep
    if excess <= 0:
        return 0
    oldest_ids = session.exec(
        select(News.id).order_by(News.created_at.asc()).limit(excess)
    ).all()
    session.exec(delete(News).where(News.id.in_(oldest_ids)))
    session.commit()
    return len(oldest_ids)


# Setting-related CRUD operations

def get_setting(session: Session, key: str) -> Optional[Setting]:
    return session.get(Setting, key)


def upsert_setting(session: Session, key: str, value: Dict[str, Any]) -> Setting:
    setting = session.get(Setting, key)
    if setting:
        setting.value = value
    else:
        setting = Setting(key=key, value=value)
    session.add(setting)
    session.commit()
    session.refresh(setting)
    return setting
