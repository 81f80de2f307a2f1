"""Application factory for the Gaffer Falcon ASGI application.

This module provides ``create_app()`` which builds and configures the
Falcon ASGI application with health endpoints and, when a router is
supplied, the GitLab webhook endpoint.

Usage
-----
Create a health-only app::

    app = create_app()

Create a full app with the webhook endpoint::

    from gaffer.api.app import AppDependencies, create_app

    deps = AppDependencies(
        router=router,
        sink=sink,
        gitlab_client=gitlab_client,
    )
    app = create_app(deps)

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from gaffer.api.errors import (
    WebhookAuthenticationError,
    handle_payload_error,
    handle_webhook_authentication,
)
from gaffer.api.health.resources import HealthResource, ReadyResource
from gaffer.webhook.config import WebhookConfig
from gaffer.webhook.errors import PayloadError

if typ.TYPE_CHECKING:
    from gaffer.gitlab.client import SourceControlClient
    from gaffer.notify.sink import NotificationSink
    from gaffer.webhook.router import EventRouter

__all__ = ["WEBHOOK_ROUTE", "AppDependencies", "create_app"]

WEBHOOK_ROUTE = "/gitlab/callback"


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon ASGI application.

    Attributes
    ----------
    router
        Event router handling accepted merge request events.
    sink
        Notification sink whose lifetime follows the ASGI lifespan.
    gitlab_client
        GitLab client closed at shutdown.
    webhook_config
        Shared secret settings for ``X-Gitlab-Token``.

    """

    router: EventRouter
    sink: NotificationSink
    gitlab_client: SourceControlClient
    webhook_config: WebhookConfig = dc.field(default_factory=WebhookConfig)


def create_app(
    dependencies: AppDependencies | None = None,
) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    When *dependencies* is provided, the app includes the lifespan
    middleware and the ``POST /gitlab/callback`` endpoint. Otherwise only
    ``/health`` and ``/ready`` are registered.

    Parameters
    ----------
    dependencies
        Optional application dependencies.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    middleware: list[object] = []

    if dependencies is not None:
        from gaffer.api.middleware import ClientLifespanManager

        middleware.append(
            ClientLifespanManager(
                sink=dependencies.sink, client=dependencies.gitlab_client
            )
        )

    app = falcon.asgi.App(middleware=middleware)  # type: ignore[no-matching-overload]  # Falcon stubs

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(webhooks_enabled=dependencies is not None))

    if dependencies is not None:
        from gaffer.api.webhooks.resources import GitLabWebhookResource

        app.add_route(
            WEBHOOK_ROUTE,
            GitLabWebhookResource(
                dependencies.router, config=dependencies.webhook_config
            ),
        )

    app.add_error_handler(PayloadError, handle_payload_error)
    app.add_error_handler(WebhookAuthenticationError, handle_webhook_authentication)

    return app
