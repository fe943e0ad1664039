from fastapi import APIRouter

from signage.api.routes import ads, analytics, auth, devices, interactions, news, pings, utils

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(ads.router, prefix="/ads", tags=["ads"])
api_router.include_router(news.router, prefix="/news", tags=["news"])
api_router.include_router(devices.router, prefix="/devices", tags=["devices"])
api_router.include_router(pings.router, prefix="/pings", tags=["pings"])
api_router.include_router(interactions.router, prefix="/interactions", tags=["interactions"])
api_router.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
api_router.include_router(utils.router, prefix="/utils", tags=["utils"])
