"""Errors raised while reading webhook deliveries."""

from __future__ import annotations


class PayloadError(ValueError):
    """Raised when a webhook body cannot be decoded into a merge request event.

    Attributes
    ----------
    reason
        Human-readable description of what was wrong with the body.

    """

    def __init__(self, reason: str) -> None:
        """Initialise with the decoding failure reason."""
        self.reason = reason
        super().__init__(f"Malformed webhook payload: {reason}")

    @classmethod
    def empty_body(cls) -> PayloadError:
        """Return an error for a delivery with no body."""
        return cls("request body is empty")

    @classmethod
    def wrong_kind(cls, object_kind: str) -> PayloadError:
        """Return an error for a body describing something other than an MR."""
        return cls(f"expected object_kind 'merge_request', got {object_kind!r}")
