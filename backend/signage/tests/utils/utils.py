import random
import string
from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Session

from signage import crud
from signage.models.database import Ad, AdType, Device, News
from signage.models.schemas.ad import AdCreate
from signage.models.schemas.device import DeviceCreate


def random_lower_string() -> str:
    return "".join(random.choices(string.ascii_lowercase, k=32))


def random_email() -> str:
    return f"{random_lower_string()}@{random_lower_string()}.com"


def create_ad(
    db: Session,
    title: str = "Chai Point",
    type: AdType = AdType.IMAGE,
    duration: int = 10,
    is_active: bool = True,
    url: str = "/media/abc.png",
    external_link: Optional[str] = None,
) -> Ad:
    ad_in = AdCreate(
        title=title,
        description="Fresh chai on every corner",
        type=type,
        url=url,
        duration=duration,
        is_active=is_active,
        external_link=external_link,
    )
    return crud.create_ad(session=db, ad_create=ad_in)


def create_device(
    db: Session, device_id: Optional[str] = None, name: str = "Rickshaw 7", pin: Optional[str] = None
) -> Device:
    device_in = DeviceCreate(
        id=device_id or f"rickshaw-{random_lower_string()[:7]}",
        name=name,
        phone_number="+91 98765 43210",
        pin=pin,
    )
    return crud.create_device(session=db, device_create=device_in)


def create_news(db: Session, title: str, published_at: datetime, created_at: Optional[datetime] = None) -> News:
    item = News(
        title=title,
        description=f"About {title}",
        url=f"https://news.example.com/{title}",
        image_url=f"https://news.example.com/{title}.jpg",
        source="Example Times",
        published_at=published_at,
        created_at=created_at or datetime.now(timezone.utc),
    )
    crud.create_news(db, [item])
    return item
