"""GitLab webhook receiver.

This module provides ``GitLabWebhookResource`` which handles
``POST /gitlab/callback``. The resource decodes the merge request payload,
answers immediately, and schedules routing to run after the response has
been sent.

Usage
-----
Register the resource on the Falcon app::

    app.add_route(
        "/gitlab/callback",
        GitLabWebhookResource(router, config=WebhookConfig.from_env()),
    )

"""

from __future__ import annotations

import typing as typ

import falcon

from gaffer.api.errors import WebhookAuthenticationError
from gaffer.logging import get_logger, log_error, log_exception
from gaffer.webhook.config import WebhookConfig
from gaffer.webhook.parsing import parse_merge_request_event

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from gaffer.webhook.models import MergeRequestEvent
    from gaffer.webhook.router import EventRouter

__all__ = [
    "EVENT_HEADER",
    "MERGE_REQUEST_HOOK",
    "TOKEN_HEADER",
    "GitLabWebhookResource",
]

logger = get_logger(__name__)

EVENT_HEADER = "X-Gitlab-Event"
TOKEN_HEADER = "X-Gitlab-Token"
MERGE_REQUEST_HOOK = "Merge Request Hook"


class GitLabWebhookResource:
    """Resource accepting GitLab ``Merge Request Hook`` deliveries.

    Parameters
    ----------
    router
        Router that runs assignment and notification for each event.
    config
        Webhook authentication settings. Defaults to no shared secret.

    """

    def __init__(
        self, router: EventRouter, *, config: WebhookConfig | None = None
    ) -> None:
        """Configure the resource with its router and auth settings."""
        self._router = router
        self._config = config or WebhookConfig()

    async def on_post(self, req: Request, resp: Response) -> None:
        """Handle a GitLab webhook delivery.

        Raises
        ------
        WebhookAuthenticationError
            If a secret is configured and ``X-Gitlab-Token`` does not match.
        PayloadError
            If the body is not a merge request payload.

        """
        if not self._config.token_matches(req.get_header(TOKEN_HEADER)):
            raise WebhookAuthenticationError

        event_kind = req.get_header(EVENT_HEADER) or ""
        if event_kind != MERGE_REQUEST_HOOK:
            log_error(
                logger,
                "Not handling %r webhook; only %r is processed",
                event_kind,
                MERGE_REQUEST_HOOK,
            )
            resp.status = falcon.HTTP_204
            return

        body = await req.stream.read()
        event = parse_merge_request_event(body)

        async def _dispatch() -> None:
            await self._dispatch(event)

        resp.schedule(_dispatch)
        resp.status = falcon.HTTP_200
        resp.media = {"status": "accepted", "action": event.raw_action}

    async def _dispatch(self, event: MergeRequestEvent) -> None:
        # Runs after the response has been sent.
        try:
            await self._router.dispatch(event)
        except Exception as exc:  # noqa: BLE001 - background task boundary
            log_exception(
                logger,
                f"Unhandled error dispatching merge request {event.label}",
                exc,
            )
