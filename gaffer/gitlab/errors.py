"""GitLab API client errors."""

from __future__ import annotations


class TransportError(RuntimeError):
    """Raised when a GitLab API call fails at the network or HTTP level."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, method: str, path: str, status_code: int) -> TransportError:
        """Return an error for non-2xx HTTP responses."""
        message = f"GitLab {method} {path} HTTP {status_code}"
        return cls(message, status_code=status_code)

    @classmethod
    def request_failed(cls, method: str, path: str, reason: str) -> TransportError:
        """Return an error for requests that never produced a response."""
        return cls(f"GitLab {method} {path} failed: {reason}")

    @classmethod
    def malformed_response(cls, method: str, path: str, reason: str) -> TransportError:
        """Return an error for responses that do not decode to the expected shape."""
        return cls(f"GitLab {method} {path} returned a malformed body: {reason}")


class GitLabConfigError(RuntimeError):
    """Raised when GitLab client configuration is invalid."""

    @classmethod
    def missing_token(cls) -> GitLabConfigError:
        """Return an error when no GitLab token is configured."""
        return cls("GAFFER_GITLAB_TOKEN is required for the GitLab API")

    @classmethod
    def empty_token(cls) -> GitLabConfigError:
        """Return an error when the provided token is empty."""
        return cls("GitLab token must be non-empty")

    @classmethod
    def invalid_timeout(cls, raw: str) -> GitLabConfigError:
        """Return an error for a non-positive or non-numeric timeout."""
        return cls(f"GAFFER_GITLAB_TIMEOUT_S must be a positive number: {raw!r}")
