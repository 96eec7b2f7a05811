"""Unit tests for the GitHub REST client."""

from __future__ import annotations

import json
import secrets
import typing as typ

import httpx
import pytest

from repokeeper.github import (
    GitHubAPIError,
    GitHubConfigError,
    GitHubNotFoundError,
    GitHubResponseShapeError,
    GitHubRestClient,
    GitHubRestConfig,
)
from repokeeper.repository import (
    RepositoryDesiredState,
    build_repository_request,
    build_update_request,
)

_TOKEN = secrets.token_hex(8)
_API_URL = "https://ghe.example.test/api/v3"


class _Recorded(typ.NamedTuple):
    method: str
    url: str
    headers: httpx.Headers
    body: dict[str, typ.Any] | None


def _repository_payload(name: str = "reef", **overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": 1296269,
        "name": name,
        "full_name": f"octo/{name}",
        "description": "Coral tracking",
        "homepage": None,
        "private": True,
        "has_issues": True,
        "has_wiki": False,
        "allow_merge_commit": True,
        "allow_squash_merge": False,
        "allow_rebase_merge": True,
        "has_downloads": True,
        "default_branch": "main",
        "ssh_url": f"git@github.com:octo/{name}.git",
        "svn_url": f"https://github.com/octo/{name}",
        "git_url": f"git://github.com/octo/{name}.git",
        "clone_url": f"https://github.com/octo/{name}.git",
        "owner": {"login": "octo"},
    }
    payload.update(overrides)
    return payload


def _make_client(
    responses: list[httpx.Response],
) -> tuple[GitHubRestClient, httpx.AsyncClient, list[_Recorded]]:
    calls: list[_Recorded] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content.decode("utf-8")) if request.content else None
        calls.append(_Recorded(request.method, str(request.url), request.headers, body))
        return responses[len(calls) - 1]

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(_handler))
    client = GitHubRestClient(
        GitHubRestConfig(token=_TOKEN, api_url=_API_URL),
        http_client=http_client,
    )
    return client, http_client, calls


@pytest.mark.asyncio
async def test_create_posts_to_organization_endpoint() -> None:
    """create sends the full request body to /orgs/{org}/repos."""
    client, http_client, calls = _make_client(
        [httpx.Response(201, json=_repository_payload())]
    )
    request = build_repository_request(RepositoryDesiredState(name="reef"))
    try:
        remote = await client.create("octo", request)
    finally:
        await http_client.aclose()

    assert remote.name == "reef"
    assert remote.full_name == "octo/reef"
    (call,) = calls
    assert call.method == "POST"
    assert call.url == f"{_API_URL}/orgs/octo/repos"
    assert call.body is not None
    assert call.body["allow_merge_commit"] is True
    assert "default_branch" not in call.body
    assert call.headers["authorization"] == f"Bearer {_TOKEN}"
    assert call.headers["accept"] == "application/vnd.github+json"
    assert call.headers["content-type"] == "application/json"


@pytest.mark.asyncio
async def test_create_without_owner_targets_authenticated_user() -> None:
    """An empty owner creates a repository for the token's user."""
    client, http_client, calls = _make_client(
        [httpx.Response(201, json=_repository_payload())]
    )
    request = build_repository_request(RepositoryDesiredState(name="reef"))
    try:
        await client.create("", request)
    finally:
        await http_client.aclose()

    assert calls[0].url == f"{_API_URL}/user/repos"


@pytest.mark.asyncio
async def test_get_decodes_repository_and_ignores_extra_fields() -> None:
    """get returns the typed entity; null strings stay None."""
    client, http_client, calls = _make_client(
        [httpx.Response(200, json=_repository_payload())]
    )
    try:
        remote = await client.get("octo", "reef")
    finally:
        await http_client.aclose()

    assert calls[0].method == "GET"
    assert calls[0].url == f"{_API_URL}/repos/octo/reef"
    assert calls[0].body is None
    assert remote.homepage is None
    assert remote.allow_squash_merge is False
    assert remote.clone_url == "https://github.com/octo/reef.git"


@pytest.mark.asyncio
async def test_get_raises_not_found_for_404() -> None:
    """A 404 becomes GitHubNotFoundError carrying GitHub's message."""
    client, http_client, _ = _make_client(
        [httpx.Response(404, json={"message": "Not Found"})]
    )
    try:
        with pytest.raises(GitHubNotFoundError) as exc:
            await client.get("octo", "ghost")
    finally:
        await http_client.aclose()

    assert exc.value.status_code == 404
    assert exc.value.detail == "Not Found"


@pytest.mark.asyncio
async def test_edit_patches_repository_with_default_branch() -> None:
    """edit sends PATCH with the default branch when one is forwarded."""
    client, http_client, calls = _make_client(
        [httpx.Response(200, json=_repository_payload(default_branch="develop"))]
    )
    request = build_update_request(
        RepositoryDesiredState(name="reef", default_branch="develop")
    )
    try:
        remote = await client.edit("octo", "reef", request)
    finally:
        await http_client.aclose()

    (call,) = calls
    assert call.method == "PATCH"
    assert call.url == f"{_API_URL}/repos/octo/reef"
    assert call.body is not None
    assert call.body["default_branch"] == "develop"
    assert remote.default_branch == "develop"


@pytest.mark.asyncio
async def test_edit_error_keeps_status_and_detail() -> None:
    """Validation failures from GitHub surface as GitHubAPIError."""
    client, http_client, _ = _make_client(
        [httpx.Response(422, json={"message": "Validation Failed"})]
    )
    request = build_update_request(
        RepositoryDesiredState(name="reef", default_branch="missing")
    )
    try:
        with pytest.raises(GitHubAPIError) as exc:
            await client.edit("octo", "reef", request)
    finally:
        await http_client.aclose()

    assert not isinstance(exc.value, GitHubNotFoundError)
    assert exc.value.status_code == 422
    assert "Validation Failed" in str(exc.value)


@pytest.mark.asyncio
async def test_delete_accepts_no_content() -> None:
    """delete succeeds on 204 and sends no body."""
    client, http_client, calls = _make_client([httpx.Response(204)])
    try:
        result = await client.delete("octo", "reef")
    finally:
        await http_client.aclose()

    assert result is None
    assert calls[0].method == "DELETE"
    assert calls[0].body is None


@pytest.mark.asyncio
async def test_error_without_json_body_has_no_detail() -> None:
    """Non-JSON error bodies still produce a status-coded error."""
    client, http_client, _ = _make_client([httpx.Response(502, text="bad gateway")])
    try:
        with pytest.raises(GitHubAPIError) as exc:
            await client.delete("octo", "reef")
    finally:
        await http_client.aclose()

    assert exc.value.status_code == 502
    assert exc.value.detail is None


@pytest.mark.asyncio
async def test_malformed_repository_raises_shape_error() -> None:
    """A body without a repository name cannot be decoded."""
    client, http_client, _ = _make_client(
        [httpx.Response(200, json={"full_name": "octo/reef"})]
    )
    try:
        with pytest.raises(GitHubResponseShapeError):
            await client.get("octo", "reef")
    finally:
        await http_client.aclose()


@pytest.mark.asyncio
async def test_owned_client_is_closed_by_context_manager() -> None:
    """The client closes the HTTP client it created itself."""
    async with GitHubRestClient(GitHubRestConfig(token=_TOKEN)) as client:
        inner = client._client

    assert inner.is_closed


def test_empty_token_is_rejected() -> None:
    """A whitespace token fails at construction."""
    with pytest.raises(GitHubConfigError):
        GitHubRestClient(GitHubRestConfig(token="  "))
