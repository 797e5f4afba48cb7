"""FastAPI application entry point."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import health, songs, users
from app.config import settings
from app.core.logging import setup_logging
from app.core.responses import register_exception_handlers
from app.database.mongo import close_clients, connect_database, get_database
from app.middleware.request_logging import RequestLoggingMiddleware

setup_logging(settings.LOG_LEVEL, service=settings.APP_NAME)

logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="Music sharing API: accounts, artist song uploads and media hosting",
    version=settings.APP_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Trace middleware for request logging and correlation
app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)

app.include_router(health.router, tags=["Health"])
app.include_router(users.router, prefix="/api/v1")
app.include_router(songs.router, prefix="/api/v1")


@app.on_event("startup")
async def startup_event():
    logger.info("Starting %s", settings.APP_NAME)
    connect_database(get_database(settings.mongo_uri, settings.DB_NAME))


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down %s", settings.APP_NAME)
    close_clients()
