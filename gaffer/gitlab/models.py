"""Typed models for GitLab users and project membership."""

from __future__ import annotations

import dataclasses
import enum

import msgspec


class AccessLevel(enum.IntEnum):
    """GitLab project access levels, ordered by privilege."""

    NO_ACCESS = 0
    MINIMAL_ACCESS = 5
    GUEST = 10
    PLANNER = 15
    REPORTER = 20
    DEVELOPER = 30
    MAINTAINER = 40
    OWNER = 50

    @classmethod
    def coerce(cls, value: int) -> AccessLevel:
        """Map a raw numeric level onto the highest known level not above it."""
        if value in cls._value2member_map_:
            return cls(value)
        known = [level for level in cls if level <= value]
        return max(known) if known else cls.NO_ACCESS


class UserPayload(msgspec.Struct, kw_only=True):
    """Subset of the ``GET /users/:id`` response used by Gaffer."""

    id: int
    username: str = ""
    name: str = ""


class MemberPayload(msgspec.Struct, kw_only=True):
    """Subset of a ``GET /projects/:id/members`` entry."""

    id: int
    access_level: int
    username: str = ""
    name: str = ""


@dataclasses.dataclass(frozen=True, slots=True)
class User:
    """A GitLab user resolved by ID."""

    user_id: int
    display_name: str
    username: str

    @classmethod
    def from_payload(cls, payload: UserPayload) -> User:
        """Build a user from its wire representation."""
        return cls(
            user_id=payload.id, display_name=payload.name, username=payload.username
        )


@dataclasses.dataclass(frozen=True, slots=True)
class Member:
    """A direct member of a GitLab project."""

    user_id: int
    display_name: str
    username: str
    access_level: AccessLevel

    @classmethod
    def from_payload(cls, payload: MemberPayload) -> Member:
        """Build a member from its wire representation."""
        return cls(
            user_id=payload.id,
            display_name=payload.name,
            username=payload.username,
            access_level=AccessLevel.coerce(payload.access_level),
        )

    @property
    def is_maintainer(self) -> bool:
        """Return whether the member may review and merge."""
        return self.access_level >= AccessLevel.MAINTAINER
