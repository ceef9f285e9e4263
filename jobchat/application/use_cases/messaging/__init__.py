"""Messaging use cases."""

from .service import ConversationDetail, ConversationView, MessagingService, UnreadSummary

__all__ = ["ConversationDetail", "ConversationView", "MessagingService", "UnreadSummary"]
