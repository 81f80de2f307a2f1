"""Chat API client and the long-lived connection that feeds it.

``ChatConnection`` owns a bounded queue and one background task that sends
messages one at a time. Request handlers only ever enqueue, so a slow or
failing chat API never holds up a webhook response.
"""

from __future__ import annotations

import asyncio
import contextlib
import typing as typ

import httpx

from gaffer.logging import (
    get_logger,
    log_debug,
    log_error,
    log_exception,
    log_info,
    log_warning,
)

from .errors import ChatDeliveryError

if typ.TYPE_CHECKING:
    from .config import NotificationConfig
    from .sink import ChatMessage

logger = get_logger(__name__)

_HTTP_ERROR_STATUS_THRESHOLD = 400
_DEFAULT_DRAIN_TIMEOUT_S = 5.0


class ChatClient(typ.Protocol):
    """Interface for posting messages to a chat service."""

    async def send_message(self, channel_id: str, content: str) -> None:
        """Post ``content`` to ``channel_id``."""
        ...

    async def aclose(self) -> None:
        """Release any network resources."""
        ...


class DiscordChatClient:
    """Post messages through the Discord REST API."""

    def __init__(
        self,
        config: NotificationConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client from notification configuration."""
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            base_url=config.api_url,
            timeout=config.timeout_s,
            headers={
                "Authorization": f"Bot {config.chat_token}",
                "User-Agent": "gaffer/0.1",
            },
        )

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def send_message(self, channel_id: str, content: str) -> None:
        """Post ``content`` to the Discord channel ``channel_id``.

        Raises
        ------
        ChatDeliveryError
            If the request fails or Discord answers with an error status.

        """
        try:
            response = await self._client.post(
                f"/channels/{channel_id}/messages", json={"content": content}
            )
        except httpx.HTTPError as exc:
            reason = str(exc) or type(exc).__name__
            raise ChatDeliveryError.request_failed(channel_id, reason) from exc
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise ChatDeliveryError.http_error(channel_id, response.status_code)


class ChatConnection:
    """Serialise chat sends through a single background task.

    Parameters
    ----------
    client
        Chat client used by the background sender.
    queue_size
        Maximum number of pending messages; further submissions are dropped.
    drain_timeout_s
        Grace period :meth:`stop` allows for pending messages to go out.

    """

    def __init__(
        self,
        client: ChatClient,
        *,
        queue_size: int = 100,
        drain_timeout_s: float = _DEFAULT_DRAIN_TIMEOUT_S,
    ) -> None:
        """Create an idle connection; call :meth:`start` to begin sending."""
        self._client = client
        self._queue: asyncio.Queue[ChatMessage] = asyncio.Queue(maxsize=queue_size)
        self._drain_timeout_s = drain_timeout_s
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        """Return whether the background sender is active."""
        return self._task is not None and not self._task.done()

    @property
    def pending(self) -> int:
        """Return the number of messages waiting to be sent."""
        return self._queue.qsize()

    async def start(self) -> None:
        """Start the background sender if it is not already running."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="gaffer-chat-connection")
        log_info(logger, "Chat connection started")

    def submit(self, message: ChatMessage) -> bool:
        """Queue ``message`` without blocking.

        Returns
        -------
        bool
            ``False`` when the queue is full and the message was dropped.

        """
        try:
            self._queue.put_nowait(message)
        except asyncio.QueueFull:
            log_warning(
                logger,
                "Chat queue full (%d pending); dropping message for channel %s",
                self._queue.qsize(),
                message.channel_id,
            )
            return False
        return True

    async def stop(self) -> None:
        """Drain pending messages, stop the sender, and close the client."""
        if self._task is not None:
            try:
                await asyncio.wait_for(self._queue.join(), self._drain_timeout_s)
            except TimeoutError:
                log_warning(
                    logger,
                    "Chat connection stopping with %d undelivered message(s)",
                    self._queue.qsize(),
                )
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
            log_info(logger, "Chat connection stopped")
        await self._client.aclose()

    async def _run(self) -> None:
        while True:
            message = await self._queue.get()
            try:
                await self._send(message)
            finally:
                self._queue.task_done()

    async def _send(self, message: ChatMessage) -> None:
        try:
            await self._client.send_message(message.channel_id, message.content)
        except ChatDeliveryError as exc:
            log_error(
                logger,
                "Chat delivery to channel %s failed: %s",
                message.channel_id,
                exc,
                exc_info=exc,
            )
        except Exception as exc:  # noqa: BLE001
            # The sender task must outlive any single failed message.
            log_exception(
                logger,
                f"Unexpected chat delivery error for channel {message.channel_id}",
                exc,
            )
        else:
            log_debug(logger, "Delivered chat message to channel %s", message.channel_id)
