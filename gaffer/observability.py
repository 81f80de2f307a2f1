"""Structured log events and error categorisation for webhook dispatch.

Every dispatch outcome is emitted as a single log line tagged with its event
type so log aggregators can count assignments, ignored actions, and failures
without parsing free text.
"""

from __future__ import annotations

import enum
import typing as typ

from gaffer.assignment.errors import NoMaintainersError, UserLookupError
from gaffer.gitlab.errors import GitLabConfigError, TransportError
from gaffer.logging import get_logger, log_debug, log_error, log_info, log_warning

if typ.TYPE_CHECKING:
    from gaffer.assignment.engine import AssignmentResult
    from gaffer.webhook.models import MergeRequestEvent

logger = get_logger(__name__)

# HTTP status code threshold for server errors (5xx)
_HTTP_SERVER_ERROR_THRESHOLD = 500


class DispatchEventType(enum.StrEnum):
    """Structured log event types for webhook dispatch."""

    ASSIGNED = "webhook.dispatch.assigned"
    IGNORED = "webhook.dispatch.ignored"
    UNKNOWN_ACTION = "webhook.dispatch.unknown_action"
    FAILED = "webhook.dispatch.failed"


class ErrorCategory(enum.StrEnum):
    """Categories for classifying dispatch failures."""

    TRANSIENT = "transient"
    CLIENT_ERROR = "client_error"
    CONFIGURATION = "configuration"
    NO_MAINTAINERS = "no_maintainers"
    USER_LOOKUP = "user_lookup"
    UNKNOWN = "unknown"


_EXCEPTION_CATEGORY_MAP: tuple[tuple[type[BaseException], ErrorCategory], ...] = (
    (NoMaintainersError, ErrorCategory.NO_MAINTAINERS),
    (UserLookupError, ErrorCategory.USER_LOOKUP),
    (GitLabConfigError, ErrorCategory.CONFIGURATION),
)


def categorize_error(exc: BaseException) -> ErrorCategory:
    """Categorise an exception for log-based alerting.

    A :class:`TransportError` without a status code never reached GitLab, so it
    is treated as transient along with 5xx responses.
    """
    if isinstance(exc, TransportError):
        if (
            exc.status_code is None
            or exc.status_code >= _HTTP_SERVER_ERROR_THRESHOLD
        ):
            return ErrorCategory.TRANSIENT
        return ErrorCategory.CLIENT_ERROR

    for exc_type, category in _EXCEPTION_CATEGORY_MAP:
        if isinstance(exc, exc_type):
            return category

    return ErrorCategory.UNKNOWN


class DispatchEventLogger:
    """Emit one structured log line per dispatch outcome."""

    def log_assigned(
        self,
        event: MergeRequestEvent,
        result: AssignmentResult,
        destinations: int,
    ) -> None:
        """Log a successful assignment decision."""
        log_info(
            logger,
            "[%s] project_id=%d iid=%d action=%s assignee_id=%d changed=%s "
            "destinations=%d",
            DispatchEventType.ASSIGNED,
            event.project_id,
            event.iid,
            event.raw_action,
            result.assignee_id,
            result.changed,
            destinations,
        )

    def log_ignored(self, event: MergeRequestEvent) -> None:
        """Log a recognised action that has no behaviour attached."""
        log_debug(
            logger,
            "[%s] project_id=%d iid=%d action=%s",
            DispatchEventType.IGNORED,
            event.project_id,
            event.iid,
            event.raw_action,
        )

    def log_unknown_action(self, event: MergeRequestEvent) -> None:
        """Log an action string Gaffer does not recognise."""
        log_warning(
            logger,
            "[%s] project_id=%d iid=%d action=%r",
            DispatchEventType.UNKNOWN_ACTION,
            event.project_id,
            event.iid,
            event.raw_action,
        )

    def log_failed(self, event: MergeRequestEvent, error: BaseException) -> None:
        """Log an assignment failure with its error category."""
        log_error(
            logger,
            "[%s] project_id=%d iid=%d action=%s error_type=%s "
            "error_category=%s error_message=%s",
            DispatchEventType.FAILED,
            event.project_id,
            event.iid,
            event.raw_action,
            type(error).__name__,
            categorize_error(error),
            str(error),
            exc_info=error,
        )
