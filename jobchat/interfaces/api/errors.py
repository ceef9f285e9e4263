"""Translate domain and request errors into the response envelope."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from jobchat.domain.errors import (
    Conflict,
    ConversationClosed,
    Forbidden,
    MessagingError,
    NotFound,
    Unauthenticated,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_CODES: dict[type[MessagingError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    Unauthenticated: status.HTTP_401_UNAUTHORIZED,
    Forbidden: status.HTTP_403_FORBIDDEN,
    NotFound: status.HTTP_404_NOT_FOUND,
    Conflict: status.HTTP_400_BAD_REQUEST,
    ConversationClosed: status.HTTP_400_BAD_REQUEST,
}


def status_code_for(exc: MessagingError) -> int:
    for error_type in type(exc).__mro__:
        code = STATUS_CODES.get(error_type)
        if code is not None:
            return code
    return status.HTTP_400_BAD_REQUEST


def error_body(error: str, *, data: dict | None = None) -> dict:
    body: dict = {"success": False, "error": error}
    if data is not None:
        body["data"] = data
    return body


async def messaging_error_handler(request: Request, exc: MessagingError) -> JSONResponse:
    data = None
    if isinstance(exc, Conflict):
        data = {"conversationId": exc.conversation_id}
    headers = None
    if isinstance(exc, Unauthenticated):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=status_code_for(exc),
        content=error_body(exc.message, data=data),
        headers=headers,
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        details.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("; ".join(details) or "Invalid request"),
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the envelope-rendering exception handlers on ``app``."""

    app.add_exception_handler(MessagingError, messaging_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


__all__ = ["error_body", "register_exception_handlers", "status_code_for"]
