"""Notification use cases."""

from .dispatcher import NotificationDispatcher, SweepResult

__all__ = ["NotificationDispatcher", "SweepResult"]
