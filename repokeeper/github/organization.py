"""Organization context shared by every reconciler call."""

from __future__ import annotations

import dataclasses
import os
import typing as typ

from .errors import GitHubConfigError

if typ.TYPE_CHECKING:
    from .client import GitHubRepositoriesClient


@dataclasses.dataclass(frozen=True, slots=True)
class OrganizationConfig:
    """Name of the account or organization that owns managed repositories."""

    name: str

    @classmethod
    def from_env(cls) -> OrganizationConfig:
        """Build configuration using ``REPOKEEPER_GITHUB_ORGANIZATION``."""
        name = os.environ.get("REPOKEEPER_GITHUB_ORGANIZATION", "").strip()
        if not name:
            raise GitHubConfigError.missing_organization()
        return cls(name=name)


@dataclasses.dataclass(frozen=True, slots=True)
class Organization:
    """Owning organization bound to the client that talks to GitHub."""

    name: str
    client: GitHubRepositoriesClient

    def slug(self, repository: str) -> str:
        """Return ``owner/name`` for a repository in this organization."""
        return f"{self.name}/{repository}"


def build_organization(
    config: OrganizationConfig, client: GitHubRepositoriesClient
) -> Organization:
    """Bind an organization name to a repositories client."""
    return Organization(name=config.name, client=client)
