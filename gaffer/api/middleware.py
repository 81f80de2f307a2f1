"""Lifespan middleware owning Gaffer's long-lived clients.

The chat connection's background sender is started when the ASGI server
sends ``lifespan.startup`` and drained on ``lifespan.shutdown``. The GitLab
HTTP client is closed on shutdown.

Usage
-----
Register the middleware when creating the Falcon app::

    lifespan = ClientLifespanManager(sink=sink, client=gitlab_client)
    app = falcon.asgi.App(middleware=[lifespan])

"""

from __future__ import annotations

import typing as typ

from gaffer.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    from gaffer.gitlab.client import SourceControlClient
    from gaffer.notify.sink import NotificationSink

__all__ = ["ClientLifespanManager"]

logger = get_logger(__name__)


class ClientLifespanManager:
    """Falcon middleware tying client lifetimes to the ASGI lifespan.

    Parameters
    ----------
    sink
        Notification sink started at startup and stopped at shutdown.
    client
        GitLab client closed at shutdown.

    """

    def __init__(self, *, sink: NotificationSink, client: SourceControlClient) -> None:
        """Store the resources whose lifetime this middleware manages."""
        self._sink = sink
        self._client = client

    async def process_startup(
        self, _scope: dict[str, typ.Any], _event: dict[str, typ.Any]
    ) -> None:
        """Start the notification sink."""
        await self._sink.start()
        log_info(logger, "Gaffer startup complete")

    async def process_shutdown(
        self, _scope: dict[str, typ.Any], _event: dict[str, typ.Any]
    ) -> None:
        """Stop the notification sink and close the GitLab client."""
        try:
            await self._sink.stop()
        finally:
            await self._client.aclose()
        log_info(logger, "Gaffer shutdown complete")
