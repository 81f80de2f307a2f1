"""Reviewer assignment for merge requests."""

from __future__ import annotations

from .engine import AssignmentEngine, AssignmentResult
from .errors import AssignmentError, NoMaintainersError, UserLookupError

__all__ = [
    "AssignmentEngine",
    "AssignmentError",
    "AssignmentResult",
    "NoMaintainersError",
    "UserLookupError",
]
