"""Factory for building application dependencies from the environment.

Usage
-----
Build dependencies for the API layer::

    from gaffer.api.factory import build_dependencies

    deps = build_dependencies()

"""

from __future__ import annotations

from gaffer.api.app import AppDependencies
from gaffer.assignment.engine import AssignmentEngine
from gaffer.gitlab.client import GitLabConfig, GitLabRESTClient
from gaffer.notify.config import NotificationConfig
from gaffer.notify.factory import create_notification_sink
from gaffer.notify.notifier import Notifier
from gaffer.webhook.config import WebhookConfig
from gaffer.webhook.router import EventRouter

__all__ = ["build_dependencies"]


def build_dependencies() -> AppDependencies:
    """Build ``AppDependencies`` from ``GAFFER_*`` environment variables.

    Reads the GitLab, chat, and webhook settings once, then wires the
    GitLab client, notification sink, assignment engine, notifier, and
    event router together.

    Raises
    ------
    GitLabConfigError
        If ``GAFFER_GITLAB_TOKEN`` is missing or a GitLab setting is invalid.
    NotificationConfigError
        If a chat setting or the channel table is invalid.

    """
    gitlab_config = GitLabConfig.from_env()
    notification_config = NotificationConfig.from_env()
    webhook_config = WebhookConfig.from_env()

    gitlab_client = GitLabRESTClient(gitlab_config)
    sink = create_notification_sink(notification_config)
    router = EventRouter(
        AssignmentEngine(gitlab_client),
        Notifier(gitlab_client, sink),
        notification_config.channels,
    )
    return AppDependencies(
        router=router,
        sink=sink,
        gitlab_client=gitlab_client,
        webhook_config=webhook_config,
    )
