import logging

import sentry_sdk
from fastapi import FastAPI
from fastapi.routing import APIRoute
from sqlmodel import Session
from starlette.middleware.cors import CORSMiddleware

from signage.api.main import api_router
from signage.api.routes import media
from signage.core.config import settings
from signage.core.db import engine, init_db
from signage.core.security.rate_limiter import RateLimitMiddleware
from signage.core.security.security_headers import SecurityHeadersMiddleware

logger = logging.getLogger(__name__)


def custom_generate_unique_id(route: APIRoute) -> str:
    return f"{route.tags[0]}-{route.name}"


if settings.SENTRY_DSN and settings.ENVIRONMENT != "local":
    sentry_sdk.init(dsn=str(settings.SENTRY_DSN), enable_tracing=True)

# Disable Swagger UI and documentation in production
if settings.ENVIRONMENT == "production":
    app = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=None,
        docs_url=None,
        redoc_url=None,
        generate_unique_id_function=custom_generate_unique_id,
    )
else:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        generate_unique_id_function=custom_generate_unique_id,
    )

# Set all CORS enabled origins
if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            str(origin).strip("/") for origin in settings.BACKEND_CORS_ORIGINS
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.add_middleware(SecurityHeadersMiddleware)
# Kiosk polling paths and /health are exempt; the limiter is a no-op outside production unless enabled
app.add_middleware(RateLimitMiddleware, max_requests=60, window_seconds=60)


@app.on_event("startup")
def on_startup() -> None:
    with Session(engine) as session:
        init_db(session)
    logger.info(f"{settings.PROJECT_NAME} started ({settings.ENVIRONMENT})")


app.include_router(api_router, prefix=settings.API_V1_STR)
app.include_router(media.router, prefix=settings.MEDIA_URL_PREFIX, tags=["media"])
