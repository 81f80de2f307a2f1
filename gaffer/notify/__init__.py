"""Chat notifications for merge request assignments."""

from __future__ import annotations

from .chat import ChatClient, ChatConnection, DiscordChatClient
from .config import ChannelTable, NotificationConfig
from .errors import ChatDeliveryError, NotificationConfigError
from .factory import create_notification_sink
from .notifier import UNKNOWN_AUTHOR, Notifier, format_assignment_message
from .sink import ActiveSink, ChatMessage, DisabledSink, NotificationSink

__all__ = [
    "UNKNOWN_AUTHOR",
    "ActiveSink",
    "ChannelTable",
    "ChatClient",
    "ChatConnection",
    "ChatDeliveryError",
    "ChatMessage",
    "DisabledSink",
    "DiscordChatClient",
    "NotificationConfig",
    "NotificationConfigError",
    "NotificationSink",
    "Notifier",
    "create_notification_sink",
    "format_assignment_message",
]
