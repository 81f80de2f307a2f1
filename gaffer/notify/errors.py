"""Errors raised by chat delivery and notification configuration."""

from __future__ import annotations


class ChatDeliveryError(Exception):
    """Raised when the chat API rejects or fails to receive a message.

    Attributes
    ----------
    channel_id
        Destination channel of the failed message.
    status_code
        HTTP status code returned by the chat API, if any.

    """

    def __init__(
        self, channel_id: str, message: str, *, status_code: int | None = None
    ) -> None:
        """Initialise with the channel, a description, and optional status."""
        self.channel_id = channel_id
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, channel_id: str, status_code: int) -> ChatDeliveryError:
        """Return an error for non-2xx chat API responses."""
        return cls(
            channel_id,
            f"Chat API HTTP {status_code} for channel {channel_id}",
            status_code=status_code,
        )

    @classmethod
    def request_failed(cls, channel_id: str, reason: str) -> ChatDeliveryError:
        """Return an error for requests that never produced a response."""
        return cls(channel_id, f"Chat API request for channel {channel_id} failed: {reason}")


class NotificationConfigError(ValueError):
    """Raised when chat notification settings cannot be parsed."""

    @classmethod
    def invalid_channels(cls, reason: str) -> NotificationConfigError:
        """Return an error for an unreadable project-to-channel table."""
        return cls(f"GAFFER_CHAT_CHANNELS is invalid: {reason}")

    @classmethod
    def invalid_number(cls, env_var: str, raw: str) -> NotificationConfigError:
        """Return an error for a non-positive or non-numeric setting."""
        return cls(f"{env_var} must be a positive number, got: {raw!r}")
