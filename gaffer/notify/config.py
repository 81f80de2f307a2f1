"""Configuration for chat notifications.

The project-to-channel table is the single source of notification
destinations. It is read once at startup and passed to the event router.

Usage
-----
Load from the environment:

>>> import os
>>> os.environ["GAFFER_CHAT_CHANNELS"] = '{"42": ["1100", "1101"]}'
>>> config = NotificationConfig.from_env()
>>> config.channels.for_project(42)
('1100', '1101')

"""

from __future__ import annotations

import dataclasses as dc
import os

import msgspec

from .errors import NotificationConfigError

_DEFAULT_API_URL = "https://discord.com/api/v10"
_DEFAULT_TIMEOUT_S = 10.0
_DEFAULT_QUEUE_SIZE = 100


@dc.dataclass(frozen=True, slots=True)
class ChannelTable:
    """Static mapping of GitLab project IDs to chat channel IDs."""

    routes: dict[int, tuple[str, ...]] = dc.field(default_factory=dict)

    def for_project(self, project_id: int) -> tuple[str, ...]:
        """Return the channels subscribed to ``project_id``, possibly empty."""
        return self.routes.get(project_id, ())

    @classmethod
    def from_json(cls, raw: str) -> ChannelTable:
        """Parse a JSON object of ``{"<project id>": ["<channel id>", ...]}``.

        Raises
        ------
        NotificationConfigError
            If the JSON is malformed or a key is not an integer project ID.

        """
        try:
            decoded = msgspec.json.decode(raw, type=dict[str, list[str | int]])
        except msgspec.DecodeError as exc:
            raise NotificationConfigError.invalid_channels(str(exc)) from exc

        routes: dict[int, tuple[str, ...]] = {}
        for key, channels in decoded.items():
            try:
                project_id = int(key)
            except ValueError as exc:
                msg = f"project ID {key!r} is not an integer"
                raise NotificationConfigError.invalid_channels(msg) from exc
            routes[project_id] = tuple(str(channel) for channel in channels)
        return cls(routes=routes)


def _positive_number(env_var: str, default: float) -> float:
    raw = os.environ.get(env_var, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise NotificationConfigError.invalid_number(env_var, raw) from exc
    if value <= 0:
        raise NotificationConfigError.invalid_number(env_var, raw)
    return value


def _positive_int(env_var: str, default: int) -> int:
    raw = os.environ.get(env_var, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise NotificationConfigError.invalid_number(env_var, raw) from exc
    if value < 1:
        raise NotificationConfigError.invalid_number(env_var, raw)
    return value


@dc.dataclass(frozen=True, slots=True)
class NotificationConfig:
    """Chat delivery settings.

    Attributes
    ----------
    chat_token
        Bot token for the chat API. ``None`` disables chat delivery.
    api_url
        Base URL of the chat REST API.
    timeout_s
        Timeout applied to every chat API request.
    queue_size
        Maximum number of messages waiting for the background sender.
    channels
        Project-to-channel routing table.

    """

    chat_token: str | None = None
    api_url: str = _DEFAULT_API_URL
    timeout_s: float = _DEFAULT_TIMEOUT_S
    queue_size: int = _DEFAULT_QUEUE_SIZE
    channels: ChannelTable = dc.field(default_factory=ChannelTable)

    @property
    def enabled(self) -> bool:
        """Return whether a chat token is configured."""
        return bool(self.chat_token)

    @classmethod
    def from_env(cls) -> NotificationConfig:
        """Create configuration from ``GAFFER_CHAT_*`` environment variables.

        A missing ``GAFFER_CHAT_TOKEN`` is not an error; it yields a
        configuration with chat delivery disabled.
        """
        token = os.environ.get("GAFFER_CHAT_TOKEN", "").strip() or None
        api_url = os.environ.get("GAFFER_CHAT_API_URL", "").strip() or _DEFAULT_API_URL
        raw_channels = os.environ.get("GAFFER_CHAT_CHANNELS", "").strip()
        channels = ChannelTable.from_json(raw_channels) if raw_channels else ChannelTable()
        return cls(
            chat_token=token,
            api_url=api_url.rstrip("/"),
            timeout_s=_positive_number("GAFFER_CHAT_TIMEOUT_S", _DEFAULT_TIMEOUT_S),
            queue_size=_positive_int("GAFFER_CHAT_QUEUE_SIZE", _DEFAULT_QUEUE_SIZE),
            channels=channels,
        )
