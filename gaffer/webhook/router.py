"""Route merge request actions to assignment and notification.

Each webhook delivery is evaluated on its own: ``open`` and ``reopen`` run the
assignment engine and, if it succeeds, the notifier. Every other recognised
action is accepted and left alone. Those actions are kept distinct in
:class:`MergeRequestAction` so behaviour such as approval-count enforcement
can be attached to them later.
"""

from __future__ import annotations

import enum
import typing as typ

from gaffer.assignment.errors import AssignmentError
from gaffer.gitlab.errors import TransportError
from gaffer.observability import DispatchEventLogger

from .models import ASSIGNMENT_ACTIONS

if typ.TYPE_CHECKING:
    from gaffer.assignment.engine import AssignmentEngine
    from gaffer.notify.config import ChannelTable
    from gaffer.notify.notifier import Notifier

    from .models import MergeRequestEvent


class DispatchOutcome(enum.StrEnum):
    """Result of routing one merge request event."""

    ASSIGNED = "assigned"
    IGNORED = "ignored"
    UNKNOWN_ACTION = "unknown_action"
    FAILED = "failed"


class EventRouter:
    """Map merge request actions to behaviour.

    Parameters
    ----------
    engine
        Assignment engine run for ``open`` and ``reopen`` actions.
    notifier
        Notifier run after a successful assignment.
    channels
        Project-to-channel table used to pick notification destinations.
    event_logger
        Structured logger for dispatch outcomes.

    """

    def __init__(
        self,
        engine: AssignmentEngine,
        notifier: Notifier,
        channels: ChannelTable,
        *,
        event_logger: DispatchEventLogger | None = None,
    ) -> None:
        """Wire the router to its collaborators."""
        self._engine = engine
        self._notifier = notifier
        self._channels = channels
        self._event_logger = event_logger or DispatchEventLogger()

    async def dispatch(self, event: MergeRequestEvent) -> DispatchOutcome:
        """Evaluate one delivery and perform its side effects.

        Assignment failures are logged and reported as ``FAILED``; they never
        propagate, and no notification is sent for them.
        """
        if event.action is None:
            self._event_logger.log_unknown_action(event)
            return DispatchOutcome.UNKNOWN_ACTION

        if event.action not in ASSIGNMENT_ACTIONS:
            self._event_logger.log_ignored(event)
            return DispatchOutcome.IGNORED

        try:
            result = await self._engine.ensure_assigned(event)
        except (AssignmentError, TransportError) as exc:
            self._event_logger.log_failed(event, exc)
            return DispatchOutcome.FAILED

        destinations = self._channels.for_project(event.project_id)
        accepted = await self._notifier.notify(
            event, result.assignee_name, destinations
        )
        self._event_logger.log_assigned(event, result, accepted)
        return DispatchOutcome.ASSIGNED
