"""Domain exceptions and Falcon error handlers for the API layer.

Usage
-----
Register error handlers on the Falcon app::

    from gaffer.api.errors import (
        WebhookAuthenticationError,
        handle_payload_error,
        handle_webhook_authentication,
    )
    from gaffer.webhook.errors import PayloadError

    app.add_error_handler(PayloadError, handle_payload_error)
    app.add_error_handler(
        WebhookAuthenticationError, handle_webhook_authentication
    )

"""

from __future__ import annotations

import typing as typ

import falcon

from gaffer.logging import get_logger, log_warning

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from gaffer.webhook.errors import PayloadError

__all__ = [
    "WebhookAuthenticationError",
    "handle_payload_error",
    "handle_webhook_authentication",
]

logger = get_logger(__name__)


class WebhookAuthenticationError(Exception):
    """Raised when a delivery's ``X-Gitlab-Token`` does not match the secret."""

    def __init__(self) -> None:
        """Initialise with a fixed message that does not echo the token."""
        super().__init__("Webhook token missing or invalid")


async def handle_payload_error(
    req: Request,
    resp: Response,
    ex: PayloadError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``PayloadError`` to an HTTP 400 JSON response.

    Parameters
    ----------
    req
        Falcon request, used for the log message.
    resp
        Falcon response whose status and media are set.
    ex
        The decoding failure.
    _params
        URI template parameters (unused).

    """
    log_warning(logger, "Rejected webhook on %s: %s", req.path, ex)
    resp.status = falcon.HTTP_400
    resp.media = {
        "title": "Invalid payload",
        "description": ex.reason,
    }


async def handle_webhook_authentication(
    req: Request,
    resp: Response,
    ex: WebhookAuthenticationError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``WebhookAuthenticationError`` to an HTTP 401 JSON response."""
    log_warning(logger, "Rejected webhook on %s: %s", req.path, ex)
    resp.status = falcon.HTTP_401
    resp.media = {
        "title": "Unauthorized",
        "description": str(ex),
    }
