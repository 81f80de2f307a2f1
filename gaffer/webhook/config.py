"""Configuration for inbound webhook authentication."""

from __future__ import annotations

import dataclasses as dc
import hmac
import os


@dc.dataclass(frozen=True, slots=True)
class WebhookConfig:
    """Shared secret GitLab sends in ``X-Gitlab-Token``.

    When ``secret`` is ``None`` every delivery is accepted.
    """

    secret: str | None = None

    @property
    def requires_token(self) -> bool:
        """Return True when deliveries must carry a matching token."""
        return self.secret is not None

    def token_matches(self, token: str | None) -> bool:
        """Compare ``token`` with the configured secret in constant time."""
        if self.secret is None:
            return True
        if token is None:
            return False
        return hmac.compare_digest(token.encode(), self.secret.encode())

    @classmethod
    def from_env(cls) -> WebhookConfig:
        """Read ``GAFFER_WEBHOOK_SECRET``; blank values disable the check."""
        secret = os.environ.get("GAFFER_WEBHOOK_SECRET", "").strip()
        return cls(secret=secret or None)
