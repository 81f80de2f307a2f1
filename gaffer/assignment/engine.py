"""Keep merge requests assigned to a project maintainer.

The engine re-resolves the maintainer set on every call and picks a candidate
at random. A merge request that already has a maintainer as its assignee is
left alone; anything else is assigned to the candidate. Concurrent deliveries
for the same merge request may each pick a different maintainer, but the next
delivery sees a valid maintainer and stops changing it.

Usage
-----
Ensure a freshly opened merge request has a reviewer::

    engine = AssignmentEngine(client, rng=random.Random(7))
    result = await engine.ensure_assigned(event)

"""

from __future__ import annotations

import dataclasses
import random
import typing as typ

from gaffer.gitlab.errors import TransportError
from gaffer.gitlab.membership import DEFAULT_PAGE_SIZE, list_maintainers
from gaffer.logging import get_logger, log_debug, log_info

from .errors import NoMaintainersError, UserLookupError

if typ.TYPE_CHECKING:
    from gaffer.gitlab.client import SourceControlClient
    from gaffer.gitlab.models import Member
    from gaffer.webhook.models import MergeRequestEvent

logger = get_logger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class AssignmentResult:
    """Outcome of :meth:`AssignmentEngine.ensure_assigned`.

    Attributes
    ----------
    assignee_id
        User ID of the maintainer now assigned.
    assignee_name
        Display name of that maintainer, used for notifications.
    changed
        ``True`` when an update call was issued to GitLab.

    """

    assignee_id: int
    assignee_name: str
    changed: bool


class AssignmentEngine:
    """Apply the pick-randomly, keep-if-valid, else-replace policy."""

    def __init__(
        self,
        client: SourceControlClient,
        *,
        rng: random.Random | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        """Configure the engine.

        Parameters
        ----------
        client
            GitLab API client used for membership, user, and update calls.
        rng
            Source of randomness for candidate selection. Tests inject a
            seeded instance; production uses a fresh ``random.Random``.
        page_size
            Page size used when listing project members.

        """
        self._client = client
        self._rng = rng or random.Random()  # noqa: S311 - reviewer choice, not crypto
        self._page_size = page_size

    async def ensure_assigned(self, event: MergeRequestEvent) -> AssignmentResult:
        """Ensure ``event``'s merge request is assigned to a maintainer.

        Returns
        -------
        AssignmentResult
            The maintainer now assigned and whether GitLab was updated.

        Raises
        ------
        NoMaintainersError
            If the project has no maintainers. No update is attempted.
        TransportError
            If listing members or updating the merge request fails.
        UserLookupError
            If the kept assignee's or the candidate's display name cannot be
            resolved. The candidate's name is resolved before the update, so
            the merge request is left as it was.

        """
        maintainers = await list_maintainers(
            self._client, event.project_id, page_size=self._page_size
        )
        if not maintainers:
            raise NoMaintainersError(event.project_id)

        candidate = self._rng.choice(maintainers)

        if not event.is_unassigned:
            current = _find_member(maintainers, event.assignee_id)
            if current is not None:
                name = await self._display_name(current)
                log_debug(
                    logger,
                    "Keeping maintainer %s (%d) on %s",
                    name,
                    current.user_id,
                    event.label,
                )
                return AssignmentResult(
                    assignee_id=current.user_id, assignee_name=name, changed=False
                )
            log_info(
                logger,
                "Assignee %d on %s is not a maintainer; reassigning",
                event.assignee_id,
                event.label,
            )

        name = await self._display_name(candidate)
        await self._client.update_merge_request_assignee(
            event.project_id, event.iid, candidate.user_id
        )
        log_info(
            logger,
            "Assigned %s to maintainer %s (%d)",
            event.label,
            name,
            candidate.user_id,
        )
        return AssignmentResult(
            assignee_id=candidate.user_id, assignee_name=name, changed=True
        )

    async def _display_name(self, member: Member) -> str:
        """Return the member's display name, fetching the user if it is blank."""
        if member.display_name:
            return member.display_name
        try:
            user = await self._client.get_user(member.user_id)
        except TransportError as exc:
            raise UserLookupError(member.user_id, str(exc)) from exc
        if not user.display_name:
            raise UserLookupError(member.user_id, "user has no display name")
        return user.display_name


def _find_member(members: typ.Sequence[Member], user_id: int) -> Member | None:
    return next((member for member in members if member.user_id == user_id), None)
