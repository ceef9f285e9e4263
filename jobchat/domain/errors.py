"""Errors raised by the messaging core.

Every failure a caller can act upon derives from :class:`MessagingError`; the
API layer maps each subclass onto an HTTP status code.
"""

from __future__ import annotations


class MessagingError(Exception):
    """Base class for expected messaging failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(MessagingError):
    """Input is malformed: empty or oversized content, unknown enum value."""


class Unauthenticated(MessagingError):
    """The caller could not be identified."""


class Forbidden(MessagingError):
    """The caller is not a participant or lacks the required role."""


class NotFound(MessagingError):
    """The referenced conversation, message, notification or application is missing."""


class Conflict(MessagingError):
    """A conversation already exists for the application."""

    def __init__(self, message: str, *, conversation_id: int) -> None:
        super().__init__(message)
        self.conversation_id = conversation_id


class ConversationClosed(MessagingError):
    """A message was sent to a conversation that is not active."""


__all__ = [
    "Conflict",
    "ConversationClosed",
    "Forbidden",
    "MessagingError",
    "NotFound",
    "Unauthenticated",
    "ValidationError",
]
