"""GitHub REST client used by the repository reconciler."""

from __future__ import annotations

import dataclasses
import os
import typing as typ
from urllib.parse import quote

import httpx
import msgspec

from .errors import GitHubAPIError, GitHubConfigError, GitHubResponseShapeError
from .models import RemoteRepository, RepositoryRequest

if typ.TYPE_CHECKING:
    import types


_DEFAULT_API_URL = "https://api.github.com"
_DEFAULT_TIMEOUT_S = 20.0


class GitHubRepositoriesClient(typ.Protocol):
    """Interface for the repository calls the reconciler depends on."""

    async def create(self, owner: str, request: RepositoryRequest) -> RemoteRepository:
        """Create a repository owned by ``owner``."""
        ...

    async def get(self, owner: str, name: str) -> RemoteRepository:
        """Fetch ``owner/name``; raise GitHubNotFoundError when it is absent."""
        ...

    async def edit(
        self, owner: str, name: str, request: RepositoryRequest
    ) -> RemoteRepository:
        """Apply ``request`` to the existing repository ``owner/name``."""
        ...

    async def delete(self, owner: str, name: str) -> None:
        """Delete the repository ``owner/name``."""
        ...


@dataclasses.dataclass(frozen=True, slots=True)
class GitHubRestConfig:
    """Configuration for the GitHub REST API client."""

    token: str
    api_url: str = _DEFAULT_API_URL
    timeout_s: float = _DEFAULT_TIMEOUT_S
    user_agent: str = "repokeeper/0.1"

    @classmethod
    def from_env(cls) -> GitHubRestConfig:
        """Build configuration from ``REPOKEEPER_GITHUB_*`` env vars.

        ``REPOKEEPER_GITHUB_TOKEN`` is required. ``REPOKEEPER_GITHUB_API_URL``
        points at a GitHub Enterprise API root and
        ``REPOKEEPER_GITHUB_TIMEOUT_S`` overrides the request timeout.
        """
        token = os.environ.get("REPOKEEPER_GITHUB_TOKEN", "").strip()
        if not token:
            raise GitHubConfigError.missing_token()

        api_url = os.environ.get("REPOKEEPER_GITHUB_API_URL", "").strip()
        raw_timeout = os.environ.get("REPOKEEPER_GITHUB_TIMEOUT_S", "").strip()
        timeout_s = _DEFAULT_TIMEOUT_S
        if raw_timeout:
            try:
                timeout_s = float(raw_timeout)
            except ValueError as exc:
                raise GitHubConfigError.invalid_timeout(raw_timeout) from exc
            if timeout_s <= 0:
                raise GitHubConfigError.invalid_timeout(raw_timeout)

        return cls(
            token=token,
            api_url=api_url or _DEFAULT_API_URL,
            timeout_s=timeout_s,
        )


_HTTP_ERROR_STATUS_THRESHOLD = 400


class _ErrorBody(msgspec.Struct):
    message: str = ""


def _error_detail(response: httpx.Response) -> str | None:
    """Return GitHub's ``message`` field from an error body, if any."""
    try:
        body = msgspec.json.decode(response.content, type=_ErrorBody)
    except msgspec.DecodeError:
        return None
    return body.message or None


def _decode_repository(response: httpx.Response) -> RemoteRepository:
    try:
        return msgspec.json.decode(response.content, type=RemoteRepository)
    except msgspec.DecodeError as exc:
        raise GitHubResponseShapeError.undecodable("repository", exc) from exc


def _segment(value: str) -> str:
    return quote(value, safe="")


class GitHubRestClient:
    """GitHub REST implementation of :class:`GitHubRepositoriesClient`."""

    def __init__(
        self,
        config: GitHubRestConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client with the provided API configuration."""
        if not config.token.strip():
            raise GitHubConfigError.empty_token()

        self._config = config
        self._base_url = config.api_url.rstrip("/")
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=config.timeout_s)
        self._headers = {
            "Authorization": f"Bearer {config.token}",
            "User-Agent": config.user_agent,
            "Accept": "application/vnd.github+json",
        }

    async def __aenter__(self) -> typ.Self:
        """Return the client for use in ``async with`` blocks."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: types.TracebackType | None,
    ) -> None:
        """Close owned HTTP resources on exit."""
        await self.aclose()

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def create(self, owner: str, request: RepositoryRequest) -> RemoteRepository:
        """Create a repository in the ``owner`` organization.

        An empty ``owner`` creates the repository for the authenticated user.
        """
        path = f"/orgs/{_segment(owner)}/repos" if owner else "/user/repos"
        response = await self._request("POST", path, body=request)
        return _decode_repository(response)

    async def get(self, owner: str, name: str) -> RemoteRepository:
        """Fetch a repository; a 404 raises GitHubNotFoundError."""
        response = await self._request("GET", _repo_path(owner, name))
        return _decode_repository(response)

    async def edit(
        self, owner: str, name: str, request: RepositoryRequest
    ) -> RemoteRepository:
        """Update repository settings in place."""
        response = await self._request("PATCH", _repo_path(owner, name), body=request)
        return _decode_repository(response)

    async def delete(self, owner: str, name: str) -> None:
        """Delete a repository."""
        await self._request("DELETE", _repo_path(owner, name))

    async def _request(
        self,
        method: str,
        path: str,
        *,
        body: RepositoryRequest | None = None,
    ) -> httpx.Response:
        """Send one request and raise GitHubAPIError on error statuses."""
        url = f"{self._base_url}{path}"
        headers = dict(self._headers)
        content: bytes | None = None
        if body is not None:
            content = msgspec.json.encode(body)
            headers["Content-Type"] = "application/json"

        response = await self._client.request(
            method, url, content=content, headers=headers
        )
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise GitHubAPIError.http_error(
                method, path, response.status_code, _error_detail(response)
            )
        return response


def _repo_path(owner: str, name: str) -> str:
    return f"/repos/{_segment(owner)}/{_segment(name)}"
