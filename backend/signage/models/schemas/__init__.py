from .user import UserBase, UserCreate, UserRegister, UserPublic, ProfilePublic, CurrentUserPublic, UsersPublic
from .token import Token, TokenPayload
from .message import Message
from .ad import AdBase, AdCreate, AdUpdate, AdPublic, AdsPublic
from .news import NewsCreate, NewsPublic, NewsListPublic, NewsSettings, NewsRefreshResponse
from .device import (
    DeviceCreate, DeviceUpdate, DeviceInfo, DevicePublic, DevicesPublic, DeviceLogin, RefreshSignal
)
from .ping import Location, PingCreate, PingComplete, PingFail, PingPublic
from .interaction import InteractionCreate, InteractionPublic, InteractionsPublic
from .analytics import AnalyticsSummary, DashboardStats

__all__ = [
    # User schemas
    "UserBase", "UserCreate", "UserRegister", "UserPublic", "ProfilePublic",
    "CurrentUserPublic", "UsersPublic",
    # Token schemas
    "Token", "TokenPayload", "Message",
    # Ad schemas
    "AdBase", "AdCreate", "AdUpdate", "AdPublic", "AdsPublic",
    # News schemas
    "NewsCreate", "NewsPublic", "NewsListPublic", "NewsSettings", "NewsRefreshResponse",
    # Device schemas
    "DeviceCreate", "DeviceUpdate", "DeviceInfo", "DevicePublic", "DevicesPublic",
    "DeviceLogin", "RefreshSignal",
    # Ping schemas
    "Location", "PingCreate", "PingComplete", "PingFail", "PingPublic",
    # Interaction schemas
    "InteractionCreate", "InteractionPublic", "InteractionsPublic",
    # Analytics schemas
    "AnalyticsSummary", "DashboardStats",
]
