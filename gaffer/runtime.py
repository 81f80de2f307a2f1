"""Gaffer runtime entrypoint.

``create_app`` is the Granian factory (``gaffer.runtime:create_app``); it
reads the service configuration from the environment and delegates to
:func:`gaffer.api.app.create_app`. ``main`` validates that configuration in
the parent process, so a missing ``GAFFER_GITLAB_TOKEN`` stops startup with
a single log line instead of failing in every worker.

Server settings:

- ``GAFFER_HOST``: Bind address (default ``0.0.0.0``)
- ``GAFFER_PORT``: Listen port (default ``8080``)
- ``GAFFER_LOG_LEVEL``: Log level (default ``INFO``)

The ``GAFFER_GITLAB_*``, ``GAFFER_CHAT_*`` and ``GAFFER_WEBHOOK_SECRET``
variables are read by the configuration objects of each package.

Run the service directly with ``python -m gaffer.runtime``.
"""

from __future__ import annotations

import dataclasses as dc
import os
import typing as typ

from gaffer.gitlab.client import GitLabConfig
from gaffer.gitlab.errors import GitLabConfigError
from gaffer.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)
from gaffer.notify.config import NotificationConfig
from gaffer.notify.errors import NotificationConfigError

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["ServerSettings", "create_app", "main"]

logger = get_logger(__name__)

_PORT_RANGE = range(1, 65536)
_DEFAULT_HOST = "0.0.0.0"  # noqa: S104 - bind all interfaces for container
_DEFAULT_PORT = "8080"


def _parse_port(raw: str) -> int:
    """Return ``raw`` as a TCP port, exiting on anything out of range.

    Raises
    ------
    SystemExit
        If ``raw`` is not an integer between 1 and 65535.

    """
    port = int(raw) if raw.strip().isdigit() else None
    if port is None or port not in _PORT_RANGE:
        log_error(
            logger,
            "Invalid GAFFER_PORT value: %r (must be %d-%d)",
            raw,
            _PORT_RANGE.start,
            _PORT_RANGE.stop - 1,
        )
        raise SystemExit(1)
    return port


@dc.dataclass(frozen=True, slots=True)
class ServerSettings:
    """Where Granian listens and how verbosely Gaffer logs."""

    host: str = _DEFAULT_HOST
    port: int = int(_DEFAULT_PORT)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> ServerSettings:
        """Read ``GAFFER_HOST``, ``GAFFER_PORT`` and ``GAFFER_LOG_LEVEL``."""
        return cls(
            host=os.environ.get("GAFFER_HOST", _DEFAULT_HOST),
            port=_parse_port(os.environ.get("GAFFER_PORT", _DEFAULT_PORT)),
            log_level=os.environ.get("GAFFER_LOG_LEVEL", "INFO"),
        )


def _validate_config() -> None:
    """Exit before serving if the GitLab or chat settings are unusable."""
    try:
        GitLabConfig.from_env()
        NotificationConfig.from_env()
    except (GitLabConfigError, NotificationConfigError) as exc:
        log_error(logger, "Invalid configuration: %s", exc)
        raise SystemExit(1) from exc


def create_app() -> falcon.asgi.App:
    """Build the webhook application from the environment.

    Raises
    ------
    GitLabConfigError
        If ``GAFFER_GITLAB_TOKEN`` is missing.
    NotificationConfigError
        If a ``GAFFER_CHAT_*`` value is invalid.

    """
    from gaffer.api.app import create_app as _create_api_app
    from gaffer.api.factory import build_dependencies

    return _create_api_app(build_dependencies())


def main() -> None:
    """Configure logging, validate settings, and serve with Granian."""
    from granian import Granian
    from granian.constants import Interfaces

    settings = ServerSettings.from_env()
    level, invalid_level = configure_logging(settings.log_level)
    if invalid_level:
        log_warning(
            logger,
            "Invalid GAFFER_LOG_LEVEL %r, falling back to %s",
            settings.log_level,
            level,
        )

    _validate_config()

    log_info(
        logger,
        "Starting Gaffer on %s:%d (log_level=%s)",
        settings.host,
        settings.port,
        level,
    )
    Granian(
        "gaffer.runtime:create_app",
        address=settings.host,
        port=settings.port,
        interface=Interfaces.ASGI,
        factory=True,
    ).serve()


if __name__ == "__main__":
    main()
