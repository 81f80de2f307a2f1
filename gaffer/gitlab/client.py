"""GitLab REST API client used by the assignment engine and notifier."""

from __future__ import annotations

import dataclasses
import os
import typing as typ

import httpx
import msgspec

from gaffer.logging import get_logger, log_warning

from .errors import GitLabConfigError, TransportError
from .models import Member, MemberPayload, User, UserPayload

logger = get_logger(__name__)

_HTTP_ERROR_STATUS_THRESHOLD = 400
_DEFAULT_BASE_URL = "https://gitlab.com/api/v4"
_DEFAULT_TIMEOUT_S = 10.0


class SourceControlClient(typ.Protocol):
    """Interface for the GitLab calls Gaffer depends on."""

    async def get_user(self, user_id: int) -> User:
        """Return the user with the given ID."""
        ...

    async def list_project_members(
        self, project_id: int, *, page: int, per_page: int
    ) -> list[Member | None]:
        """Return one page of direct project members.

        Entries that could not be decoded are returned as ``None`` so callers
        can tell a short page from a damaged one.
        """
        ...

    async def update_merge_request_assignee(
        self, project_id: int, iid: int, assignee_id: int
    ) -> None:
        """Set the single assignee of a merge request."""
        ...

    async def aclose(self) -> None:
        """Release any network resources."""
        ...


def _parse_timeout(raw: str) -> float:
    try:
        value = float(raw)
    except ValueError as exc:
        raise GitLabConfigError.invalid_timeout(raw) from exc
    if value <= 0:
        raise GitLabConfigError.invalid_timeout(raw)
    return value


@dataclasses.dataclass(frozen=True, slots=True)
class GitLabConfig:
    """Configuration for the GitLab REST API client."""

    token: str
    base_url: str = _DEFAULT_BASE_URL
    timeout_s: float = _DEFAULT_TIMEOUT_S
    user_agent: str = "gaffer/0.1"

    @classmethod
    def from_env(cls) -> GitLabConfig:
        """Build configuration from ``GAFFER_GITLAB_*`` environment variables.

        Raises
        ------
        GitLabConfigError
            If ``GAFFER_GITLAB_TOKEN`` is unset or the timeout is invalid.

        """
        token = os.environ.get("GAFFER_GITLAB_TOKEN", "").strip()
        if not token:
            raise GitLabConfigError.missing_token()

        base_url = os.environ.get("GAFFER_GITLAB_URL", "").strip() or _DEFAULT_BASE_URL
        raw_timeout = os.environ.get("GAFFER_GITLAB_TIMEOUT_S", "").strip()
        timeout_s = _parse_timeout(raw_timeout) if raw_timeout else _DEFAULT_TIMEOUT_S
        return cls(token=token, base_url=base_url.rstrip("/"), timeout_s=timeout_s)


def _decode_member_entry(
    entry: object, *, project_id: int, page: int
) -> Member | None:
    if entry is None:
        return None
    try:
        payload = msgspec.convert(entry, type=MemberPayload)
    except msgspec.ValidationError as exc:
        log_warning(
            logger,
            "Discarding malformed member entry for project %d page %d: %s",
            project_id,
            page,
            exc,
        )
        return None
    return Member.from_payload(payload)


class GitLabRESTClient:
    """httpx implementation of :class:`SourceControlClient`."""

    def __init__(
        self,
        config: GitLabConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client with the provided API configuration."""
        if not config.token.strip():
            raise GitLabConfigError.empty_token()

        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            base_url=config.base_url,
            timeout=config.timeout_s,
            headers={
                "PRIVATE-TOKEN": config.token,
                "User-Agent": config.user_agent,
                "Accept": "application/json",
            },
        )

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def get_user(self, user_id: int) -> User:
        """Return the user with the given ID."""
        path = f"/users/{user_id}"
        body = await self._request("GET", path)
        try:
            payload = msgspec.json.decode(body, type=UserPayload)
        except msgspec.DecodeError as exc:
            raise TransportError.malformed_response("GET", path, str(exc)) from exc
        return User.from_payload(payload)

    async def list_project_members(
        self, project_id: int, *, page: int, per_page: int
    ) -> list[Member | None]:
        """Return one page of direct members of ``project_id``.

        Only direct membership is listed; the ``/members/all`` variant that
        includes inherited group members is not used.
        """
        path = f"/projects/{project_id}/members"
        body = await self._request(
            "GET", path, params={"page": page, "per_page": per_page}
        )
        try:
            entries = msgspec.json.decode(body, type=list[typ.Any])
        except msgspec.DecodeError as exc:
            raise TransportError.malformed_response("GET", path, str(exc)) from exc
        return [
            _decode_member_entry(entry, project_id=project_id, page=page)
            for entry in entries
        ]

    async def update_merge_request_assignee(
        self, project_id: int, iid: int, assignee_id: int
    ) -> None:
        """Set ``assignee_id`` as the assignee of merge request ``iid``."""
        await self._request(
            "PUT",
            f"/projects/{project_id}/merge_requests/{iid}",
            json={"assignee_id": assignee_id},
        )

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, typ.Any] | None = None,
        json: dict[str, typ.Any] | None = None,
    ) -> bytes:
        """Issue a request and return the raw body of a successful response."""
        try:
            response = await self._client.request(
                method, path, params=params, json=json
            )
        except httpx.HTTPError as exc:
            reason = str(exc) or type(exc).__name__
            raise TransportError.request_failed(method, path, reason) from exc
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise TransportError.http_error(method, path, response.status_code)
        return response.content
