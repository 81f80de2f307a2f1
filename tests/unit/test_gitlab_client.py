"""Unit tests for the GitLab REST client and its configuration."""

from __future__ import annotations

import json
import typing as typ

import httpx
import pytest

from gaffer.gitlab import (
    AccessLevel,
    GitLabConfig,
    GitLabConfigError,
    GitLabRESTClient,
    Member,
    TransportError,
)

_BASE_URL = "https://gitlab.example.com/api/v4"

Handler = typ.Callable[[httpx.Request], httpx.Response]


def _client_with(handler: Handler) -> GitLabRESTClient:
    http_client = httpx.AsyncClient(
        base_url=_BASE_URL, transport=httpx.MockTransport(handler)
    )
    return GitLabRESTClient(GitLabConfig(token="t0ken"), http_client=http_client)


class TestGitLabConfig:
    """Tests for GitLabConfig.from_env."""

    def test_missing_token_is_fatal(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """An unset token raises GitLabConfigError."""
        monkeypatch.delenv("GAFFER_GITLAB_TOKEN", raising=False)
        with pytest.raises(GitLabConfigError, match="GAFFER_GITLAB_TOKEN"):
            GitLabConfig.from_env()

    def test_blank_token_is_fatal(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A whitespace-only token is treated as missing."""
        monkeypatch.setenv("GAFFER_GITLAB_TOKEN", "   ")
        with pytest.raises(GitLabConfigError):
            GitLabConfig.from_env()

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Only the token is required; URL and timeout have defaults."""
        monkeypatch.setenv("GAFFER_GITLAB_TOKEN", "abc")
        monkeypatch.delenv("GAFFER_GITLAB_URL", raising=False)
        monkeypatch.delenv("GAFFER_GITLAB_TIMEOUT_S", raising=False)

        config = GitLabConfig.from_env()

        assert config.token == "abc"
        assert config.base_url == "https://gitlab.com/api/v4"
        assert config.timeout_s == pytest.approx(10.0)

    def test_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """URL and timeout are read from the environment."""
        monkeypatch.setenv("GAFFER_GITLAB_TOKEN", "abc")
        monkeypatch.setenv("GAFFER_GITLAB_URL", "https://git.internal/api/v4/")
        monkeypatch.setenv("GAFFER_GITLAB_TIMEOUT_S", "2.5")

        config = GitLabConfig.from_env()

        assert config.base_url == "https://git.internal/api/v4", (
            "Expected trailing slash to be stripped"
        )
        assert config.timeout_s == pytest.approx(2.5)

    @pytest.mark.parametrize("raw", ["zero", "0", "-3"])
    def test_invalid_timeout(self, monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
        """Non-numeric and non-positive timeouts are rejected."""
        monkeypatch.setenv("GAFFER_GITLAB_TOKEN", "abc")
        monkeypatch.setenv("GAFFER_GITLAB_TIMEOUT_S", raw)
        with pytest.raises(GitLabConfigError, match="GAFFER_GITLAB_TIMEOUT_S"):
            GitLabConfig.from_env()

    def test_client_rejects_empty_token(self) -> None:
        """The client refuses to start without a token."""
        with pytest.raises(GitLabConfigError):
            GitLabRESTClient(GitLabConfig(token=""))


class TestGitLabRESTClient:
    """Tests for GitLabRESTClient request handling."""

    @pytest.mark.asyncio
    async def test_get_user_decodes_name(self) -> None:
        """get_user returns the user's display name and username."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={"id": 1, "username": "alice", "name": "Alice", "state": "active"},
            )

        client = _client_with(handler)
        user = await client.get_user(1)

        assert user.display_name == "Alice"
        assert user.username == "alice"
        assert seen[0].url.path == "/api/v4/users/1"
        await client.aclose()

    @pytest.mark.asyncio
    async def test_list_members_sends_pagination_params(self) -> None:
        """Members are requested with page and per_page parameters."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json=[
                    {"id": 1, "username": "alice", "name": "Alice", "access_level": 40},
                    {"id": 3, "username": "dan", "name": "Dan", "access_level": 30},
                ],
            )

        client = _client_with(handler)
        members = await client.list_project_members(42, page=2, per_page=100)

        assert seen[0].url.path == "/api/v4/projects/42/members"
        assert seen[0].url.params["page"] == "2"
        assert seen[0].url.params["per_page"] == "100"
        assert members == [
            Member(1, "Alice", "alice", AccessLevel.MAINTAINER),
            Member(3, "Dan", "dan", AccessLevel.DEVELOPER),
        ]

    @pytest.mark.asyncio
    async def test_list_members_keeps_gaps_as_none(self) -> None:
        """Null and malformed entries are returned as None in place."""

        def handler(_request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json=[
                    {"id": 1, "name": "Alice", "access_level": 40},
                    None,
                    {"name": "No ID", "access_level": 40},
                    {"id": 2, "name": "Bob", "access_level": 50},
                ],
            )

        client = _client_with(handler)
        members = await client.list_project_members(42, page=1, per_page=100)

        assert len(members) == 4, "Expected page length to be preserved"
        assert members[1] is None
        assert members[2] is None
        assert members[3] is not None
        assert members[3].access_level is AccessLevel.OWNER

    @pytest.mark.asyncio
    async def test_update_assignee_puts_json(self) -> None:
        """The assignee update is a PUT with an assignee_id body."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"iid": 7})

        client = _client_with(handler)
        await client.update_merge_request_assignee(42, 7, 2)

        request = seen[0]
        assert request.method == "PUT"
        assert request.url.path == "/api/v4/projects/42/merge_requests/7"
        assert json.loads(request.content) == {"assignee_id": 2}

    @pytest.mark.asyncio
    async def test_http_error_raises_transport_error(self) -> None:
        """Error statuses raise TransportError carrying the status code."""

        def handler(_request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"message": "404 Not found"})

        client = _client_with(handler)
        with pytest.raises(TransportError) as excinfo:
            await client.get_user(99)

        assert excinfo.value.status_code == 404
        assert "/users/99" in str(excinfo.value)

    @pytest.mark.asyncio
    async def test_network_failure_raises_transport_error(self) -> None:
        """Connection failures raise TransportError without a status."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = _client_with(handler)
        with pytest.raises(TransportError) as excinfo:
            await client.update_merge_request_assignee(42, 7, 2)

        assert excinfo.value.status_code is None
        assert "connection refused" in str(excinfo.value)

    @pytest.mark.asyncio
    async def test_malformed_member_page_raises_transport_error(self) -> None:
        """A member page that is not a JSON list is a transport failure."""

        def handler(_request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"message": "unexpected"})

        client = _client_with(handler)
        with pytest.raises(TransportError, match="malformed"):
            await client.list_project_members(42, page=1, per_page=100)

    @pytest.mark.asyncio
    async def test_aclose_leaves_injected_client_open(self) -> None:
        """Only clients created by GitLabRESTClient are closed by it."""
        http_client = httpx.AsyncClient(
            base_url=_BASE_URL,
            transport=httpx.MockTransport(lambda _r: httpx.Response(200)),
        )
        client = GitLabRESTClient(GitLabConfig(token="t"), http_client=http_client)

        await client.aclose()

        assert not http_client.is_closed
        await http_client.aclose()


class TestAccessLevel:
    """Tests for AccessLevel ordering and coercion."""

    def test_owner_outranks_maintainer(self) -> None:
        """Owner access satisfies the maintainer threshold."""
        owner = Member(2, "Bob", "bob", AccessLevel.OWNER)
        developer = Member(3, "Dan", "dan", AccessLevel.DEVELOPER)
        assert owner.is_maintainer
        assert not developer.is_maintainer

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (40, AccessLevel.MAINTAINER),
            (45, AccessLevel.MAINTAINER),
            (60, AccessLevel.OWNER),
            (-1, AccessLevel.NO_ACCESS),
        ],
    )
    def test_coerce(self, raw: int, expected: AccessLevel) -> None:
        """Unknown numeric levels map to the nearest known level below."""
        assert AccessLevel.coerce(raw) is expected
