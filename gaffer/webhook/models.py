"""Wire and domain models for GitLab merge request webhooks.

GitLab posts a ``Merge Request Hook`` body whose ``object_attributes`` carry
the action that triggered the delivery. Only the fields Gaffer acts on are
modelled; everything else in the payload is ignored by msgspec.
"""

from __future__ import annotations

import dataclasses
import enum

import msgspec


class MergeRequestAction(enum.StrEnum):
    """Merge request actions reported by GitLab, keyed by their wire value."""

    OPENED = "open"
    REOPENED = "reopen"
    UPDATED = "update"
    APPROVED = "approved"
    UNAPPROVED = "unapproved"
    MERGED = "merge"
    CLOSED = "close"

    @classmethod
    def parse(cls, raw: str) -> MergeRequestAction | None:
        """Return the action for ``raw`` or ``None`` when it is unrecognised."""
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


ASSIGNMENT_ACTIONS = frozenset({MergeRequestAction.OPENED, MergeRequestAction.REOPENED})


class ProjectPayload(msgspec.Struct, kw_only=True):
    """The ``project`` block of a merge request hook."""

    id: int


class TargetPayload(msgspec.Struct, kw_only=True):
    """The ``object_attributes.target`` block naming the target repository."""

    name: str = ""


class ObjectAttributesPayload(msgspec.Struct, kw_only=True):
    """The ``object_attributes`` block of a merge request hook."""

    iid: int
    author_id: int
    action: str = ""
    assignee_id: int | None = None
    url: str = ""
    target: TargetPayload = msgspec.field(default_factory=TargetPayload)
    work_in_progress: bool = False
    draft: bool = False


class MergeRequestHookPayload(msgspec.Struct, kw_only=True):
    """Top-level ``Merge Request Hook`` delivery."""

    object_kind: str
    project: ProjectPayload
    object_attributes: ObjectAttributesPayload


@dataclasses.dataclass(frozen=True, slots=True)
class MergeRequestEvent:
    """Immutable snapshot of one merge request webhook delivery.

    Attributes
    ----------
    project_id
        Numeric GitLab project ID.
    iid
        Project-scoped merge request number.
    action
        Recognised action, or ``None`` when GitLab sent an unknown value.
    raw_action
        Action string exactly as delivered.
    author_id
        User ID of the merge request author.
    assignee_id
        User ID of the current assignee; ``0`` when unassigned.
    url
        Web URL of the merge request.
    target_repo_name
        Name of the repository the merge request targets.
    is_work_in_progress
        Whether the merge request is marked WIP or draft.

    """

    project_id: int
    iid: int
    action: MergeRequestAction | None
    raw_action: str
    author_id: int
    assignee_id: int
    url: str
    target_repo_name: str
    is_work_in_progress: bool = False

    @property
    def is_unassigned(self) -> bool:
        """Return whether the merge request has no assignee."""
        return self.assignee_id == 0

    @property
    def label(self) -> str:
        """Return a short ``project!iid`` label for log messages."""
        return f"{self.project_id}!{self.iid}"

    @classmethod
    def from_payload(cls, payload: MergeRequestHookPayload) -> MergeRequestEvent:
        """Build an event from a decoded hook payload."""
        attrs = payload.object_attributes
        return cls(
            project_id=payload.project.id,
            iid=attrs.iid,
            action=MergeRequestAction.parse(attrs.action),
            raw_action=attrs.action,
            author_id=attrs.author_id,
            assignee_id=attrs.assignee_id or 0,
            url=attrs.url,
            target_repo_name=attrs.target.name,
            is_work_in_progress=attrs.work_in_progress or attrs.draft,
        )
