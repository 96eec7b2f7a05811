"""GitHub REST client and organization context."""

from __future__ import annotations

from .client import GitHubRepositoriesClient, GitHubRestClient, GitHubRestConfig
from .errors import (
    GitHubAPIError,
    GitHubConfigError,
    GitHubNotFoundError,
    GitHubResponseShapeError,
)
from .models import RemoteRepository, RepositoryRequest
from .organization import Organization, OrganizationConfig, build_organization

__all__ = [
    "GitHubAPIError",
    "GitHubConfigError",
    "GitHubNotFoundError",
    "GitHubRepositoriesClient",
    "GitHubResponseShapeError",
    "GitHubRestClient",
    "GitHubRestConfig",
    "Organization",
    "OrganizationConfig",
    "RemoteRepository",
    "RepositoryRequest",
    "build_organization",
]
