"""NotificationSink protocol and its active and disabled adapters.

The notifier talks to a sink rather than to the chat connection directly.
When no chat token is configured the runtime wires in :class:`DisabledSink`,
so call sites never check whether chat is available.

Usage
-----
>>> from gaffer.notify.sink import DisabledSink, NotificationSink
>>> isinstance(DisabledSink(), NotificationSink)
True

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from gaffer.logging import get_logger, log_debug

if typ.TYPE_CHECKING:
    from .chat import ChatConnection

logger = get_logger(__name__)


@dc.dataclass(frozen=True, slots=True)
class ChatMessage:
    """A message addressed to one chat channel."""

    channel_id: str
    content: str


@typ.runtime_checkable
class NotificationSink(typ.Protocol):
    """Protocol for best-effort, non-blocking message delivery."""

    def deliver(self, message: ChatMessage) -> bool:
        """Hand ``message`` off for delivery.

        Returns
        -------
        bool
            ``True`` when the message was accepted for delivery.

        """
        ...

    async def start(self) -> None:
        """Acquire long-lived resources at process startup."""
        ...

    async def stop(self) -> None:
        """Release long-lived resources at process shutdown."""
        ...


class DisabledSink:
    """Sink used when chat delivery is not configured."""

    def deliver(self, message: ChatMessage) -> bool:
        """Drop ``message``."""
        log_debug(
            logger,
            "Chat disabled; not delivering message to channel %s",
            message.channel_id,
        )
        return False

    async def start(self) -> None:
        """Do nothing."""

    async def stop(self) -> None:
        """Do nothing."""


class ActiveSink:
    """Sink that queues messages on a :class:`ChatConnection`."""

    def __init__(self, connection: ChatConnection) -> None:
        """Wrap the connection that performs the actual sends."""
        self._connection = connection

    def deliver(self, message: ChatMessage) -> bool:
        """Queue ``message`` without waiting for it to be sent."""
        return self._connection.submit(message)

    async def start(self) -> None:
        """Start the connection's background sender."""
        await self._connection.start()

    async def stop(self) -> None:
        """Drain and stop the connection."""
        await self._connection.stop()
