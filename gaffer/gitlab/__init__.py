"""GitLab API client and membership resolution."""

from __future__ import annotations

from .client import GitLabConfig, GitLabRESTClient, SourceControlClient
from .errors import GitLabConfigError, TransportError
from .membership import DEFAULT_PAGE_SIZE, list_maintainers
from .models import AccessLevel, Member, User

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "AccessLevel",
    "GitLabConfig",
    "GitLabConfigError",
    "GitLabRESTClient",
    "Member",
    "SourceControlClient",
    "TransportError",
    "User",
    "list_maintainers",
]
