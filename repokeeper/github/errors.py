"""GitHub REST client errors."""

from __future__ import annotations

_HTTP_NOT_FOUND = 404


class GitHubAPIError(RuntimeError):
    """Raised when GitHub returns an error response."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        detail: str | None = None,
    ) -> None:
        """Initialise with a message, HTTP status code and API message."""
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)

    @classmethod
    def http_error(
        cls, method: str, url: str, status_code: int, detail: str | None = None
    ) -> GitHubAPIError:
        """Return an error for a non-2xx REST response.

        A 404 yields :class:`GitHubNotFoundError` so callers can treat a
        missing entity differently from other failures.
        """
        message = f"{method} {url}: GitHub HTTP {status_code}"
        if detail:
            message = f"{message}: {detail}"
        error_cls = GitHubNotFoundError if status_code == _HTTP_NOT_FOUND else cls
        return error_cls(message, status_code=status_code, detail=detail)


class GitHubNotFoundError(GitHubAPIError):
    """Raised when the requested GitHub entity does not exist."""


class GitHubResponseShapeError(RuntimeError):
    """Raised when a GitHub response body cannot be decoded."""

    @classmethod
    def undecodable(cls, entity: str, reason: object) -> GitHubResponseShapeError:
        """Return an error for a response that does not match ``entity``."""
        return cls(f"GitHub response is not a valid {entity}: {reason}")


class GitHubConfigError(RuntimeError):
    """Raised when GitHub client configuration is invalid."""

    @classmethod
    def missing_token(cls) -> GitHubConfigError:
        """Return an error when no GitHub token is configured."""
        return cls("REPOKEEPER_GITHUB_TOKEN is required for GitHub API")

    @classmethod
    def empty_token(cls) -> GitHubConfigError:
        """Return an error when the provided token is empty."""
        return cls("GitHub token must be non-empty")

    @classmethod
    def missing_organization(cls) -> GitHubConfigError:
        """Return an error when no owning organization is configured."""
        return cls("REPOKEEPER_GITHUB_ORGANIZATION is required")

    @classmethod
    def invalid_timeout(cls, raw: str) -> GitHubConfigError:
        """Return an error for a timeout that is not a positive number."""
        msg = f"REPOKEEPER_GITHUB_TIMEOUT_S must be a positive number, got: {raw!r}"
        return cls(msg)
