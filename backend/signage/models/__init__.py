# Re-export database models
from signage.models.database import (
    User,
    Ad,
    AdType,
    News,
    Device,
    PingRequest,
    PingStatus,
    AdInteraction,
    InteractionType,
    Setting,
)

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
    "Setting",
]
