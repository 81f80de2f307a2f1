"""Errors raised by the assignment engine."""

from __future__ import annotations


class AssignmentError(Exception):
    """Base class for assignment failures that abort notification."""


class NoMaintainersError(AssignmentError):
    """Raised when a project has no member with maintainer access.

    Attributes
    ----------
    project_id
        Numeric GitLab project ID that was inspected.

    """

    def __init__(self, project_id: int) -> None:
        """Initialise with the project that has no maintainers."""
        self.project_id = project_id
        super().__init__(
            f"Project {project_id} has no maintainers; cannot assign a reviewer"
        )


class UserLookupError(AssignmentError):
    """Raised when the display name of an assignee cannot be resolved.

    Attributes
    ----------
    user_id
        GitLab user ID whose name could not be resolved.

    """

    def __init__(self, user_id: int, reason: str) -> None:
        """Initialise with the user ID and the lookup failure reason."""
        self.user_id = user_id
        super().__init__(f"Could not resolve display name of user {user_id}: {reason}")
