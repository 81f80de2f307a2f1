"""Format and fan out merge request assignment announcements."""

from __future__ import annotations

import typing as typ

from gaffer.gitlab.errors import TransportError
from gaffer.logging import get_logger, log_debug, log_warning

from .sink import ChatMessage

if typ.TYPE_CHECKING:
    from gaffer.gitlab.client import SourceControlClient
    from gaffer.webhook.models import MergeRequestEvent

    from .sink import NotificationSink

logger = get_logger(__name__)

UNKNOWN_AUTHOR = "<unknown author>"

_TEMPLATE = (
    "New {kind} in {repo} from {author} has been assigned to {assignee}.  "
    "See {url} for details."
)


def format_assignment_message(
    event: MergeRequestEvent, *, author_name: str, assignee_name: str
) -> str:
    """Render the assignment announcement for ``event``."""
    kind = "WIP merge request" if event.is_work_in_progress else "merge request"
    return _TEMPLATE.format(
        kind=kind,
        repo=event.target_repo_name,
        author=author_name,
        assignee=assignee_name,
        url=event.url,
    )


class Notifier:
    """Announce assignments to the chat channels subscribed to a project."""

    def __init__(self, client: SourceControlClient, sink: NotificationSink) -> None:
        """Configure the notifier with a GitLab client and a delivery sink."""
        self._client = client
        self._sink = sink

    async def notify(
        self,
        event: MergeRequestEvent,
        assignee_name: str,
        destinations: typ.Sequence[str],
    ) -> int:
        """Send the assignment message for ``event`` to each destination.

        The author's name is looked up in GitLab; if that fails, a placeholder
        is used and the message still goes out. Each destination is handled on
        its own, so one rejected hand-off does not stop the others.

        Returns
        -------
        int
            Number of destinations that accepted the message.

        """
        if not destinations:
            log_debug(logger, "No chat destinations for project %d", event.project_id)
            return 0

        author_name = await self._author_name(event)
        content = format_assignment_message(
            event, author_name=author_name, assignee_name=assignee_name
        )
        accepted = 0
        for channel_id in destinations:
            if self._sink.deliver(ChatMessage(channel_id=channel_id, content=content)):
                accepted += 1
            else:
                log_debug(
                    logger,
                    "Notification for %s not accepted by channel %s",
                    event.label,
                    channel_id,
                )
        return accepted

    async def _author_name(self, event: MergeRequestEvent) -> str:
        try:
            user = await self._client.get_user(event.author_id)
        except TransportError as exc:
            log_warning(
                logger,
                "Could not resolve author %d of %s: %s",
                event.author_id,
                event.label,
                exc,
            )
            return UNKNOWN_AUTHOR
        return user.display_name or UNKNOWN_AUTHOR
