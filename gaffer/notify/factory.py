"""Factory for building a NotificationSink from configuration."""

from __future__ import annotations

import typing as typ

from gaffer.logging import get_logger, log_info

from .chat import ChatConnection, DiscordChatClient
from .sink import ActiveSink, DisabledSink

if typ.TYPE_CHECKING:
    from .config import NotificationConfig
    from .sink import NotificationSink

logger = get_logger(__name__)


def create_notification_sink(config: NotificationConfig) -> NotificationSink:
    """Create the sink matching ``config``.

    Returns
    -------
    NotificationSink
        An :class:`ActiveSink` backed by a Discord :class:`ChatConnection`
        when a chat token is configured, otherwise a :class:`DisabledSink`.

    """
    if not config.enabled:
        log_info(logger, "GAFFER_CHAT_TOKEN not set; chat notifications disabled")
        return DisabledSink()

    connection = ChatConnection(
        DiscordChatClient(config),
        queue_size=config.queue_size,
    )
    return ActiveSink(connection)
