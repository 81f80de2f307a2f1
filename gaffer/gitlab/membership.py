"""Resolve the maintainers of a GitLab project.

Membership is re-read from GitLab on every call. Only direct project members
are considered; permissions inherited from parent groups are ignored.
"""

from __future__ import annotations

import typing as typ

from gaffer.logging import get_logger, log_debug, log_warning

if typ.TYPE_CHECKING:
    from .client import SourceControlClient
    from .models import Member

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 100
_FIRST_PAGE = 1


async def list_maintainers(
    client: SourceControlClient,
    project_id: int,
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> tuple[Member, ...]:
    """Return the project's members with maintainer access or above.

    Pages are fetched in order until one comes back shorter than
    ``page_size``. Absent or undecodable entries are skipped with a warning
    rather than ending the listing early. Members are deduplicated by user ID
    in first-seen order.

    Parameters
    ----------
    client
        GitLab API client.
    project_id
        Numeric GitLab project ID.
    page_size
        Number of members requested per page.

    Returns
    -------
    tuple[Member, ...]
        Maintainers and owners of the project, possibly empty.

    Raises
    ------
    TransportError
        If any page fails to load.

    """
    maintainers: dict[int, Member] = {}
    page = _FIRST_PAGE
    while True:
        entries = await client.list_project_members(
            project_id, page=page, per_page=page_size
        )
        for position, member in enumerate(entries):
            if member is None:
                log_warning(
                    logger,
                    "Skipping absent member entry %d on page %d for project %d",
                    position,
                    page,
                    project_id,
                )
                continue
            if member.is_maintainer:
                maintainers.setdefault(member.user_id, member)

        if len(entries) < page_size:
            break
        page += 1

    log_debug(
        logger,
        "Resolved %d maintainer(s) for project %d across %d page(s)",
        len(maintainers),
        project_id,
        page,
    )
    return tuple(maintainers.values())
