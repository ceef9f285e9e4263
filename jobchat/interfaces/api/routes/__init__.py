from fastapi import FastAPI

from .conversations import router as conversations_router
from .notifications import router as notifications_router


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    app.include_router(conversations_router)
    app.include_router(notifications_router)
