"""Application workflow hooks."""

from .events import ApplicationEvents, format_interview_date

__all__ = ["ApplicationEvents", "format_interview_date"]
