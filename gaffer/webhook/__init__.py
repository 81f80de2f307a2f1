"""GitLab merge request webhook decoding and routing."""

from __future__ import annotations

from .config import WebhookConfig
from .errors import PayloadError
from .models import MergeRequestAction, MergeRequestEvent
from .parsing import parse_merge_request_event
from .router import DispatchOutcome, EventRouter

__all__ = [
    "DispatchOutcome",
    "EventRouter",
    "MergeRequestAction",
    "MergeRequestEvent",
    "PayloadError",
    "WebhookConfig",
    "parse_merge_request_event",
]
