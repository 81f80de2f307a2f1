"""Liveness and readiness probes.

Both probes are registered whether or not the webhook endpoint is wired, and
neither touches GitLab or the chat API.

Usage
-----
Register health endpoints on the Falcon app::

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource())

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

__all__ = ["HealthResource", "ReadyResource"]


class HealthResource:
    """Liveness probe returning ``{"status": "ok"}``."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /health requests."""
        resp.media = {"status": "ok"}
        resp.status = HTTPStatus.OK


class ReadyResource:
    """Readiness probe returning ``{"status": "ready"}``.

    Reports ``webhooks: false`` when the app was built without a router, so
    operators can spot a probe-only deployment.

    """

    def __init__(self, *, webhooks_enabled: bool = False) -> None:
        """Record whether the webhook endpoint is registered."""
        self._webhooks_enabled = webhooks_enabled

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /ready requests."""
        resp.media = {"status": "ready", "webhooks": self._webhooks_enabled}
        resp.status = HTTPStatus.OK
