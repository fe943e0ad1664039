from .user import User
from .ad import Ad, AdType
from .news import News
from .device import Device
from .ping_request import PingRequest, PingStatus
from .ad_interaction import AdInteraction, InteractionType, CLICK_TYPES
from .setting import Setting, NEWS_ENABLED_KEY

__all__ = [
    "User",
    "Ad",
    "AdType",
    "News",
    "Device",
    "PingRequest",
    "PingStatus",
    "AdInteraction",
    "InteractionType",
    "CLICK_TYPES",
    "Setting",
    "NEWS_ENABLED_KEY",
]
