"""Command-line entrypoint for reconciling GitHub repositories.

Usage:
    repokeeper apply repositories.yaml   # Create or update declared repos
    repokeeper show demo                 # Import and print one repository
    repokeeper delete demo               # Delete one repository

Environment variables:
    REPOKEEPER_GITHUB_TOKEN         - API token (required)
    REPOKEEPER_GITHUB_ORGANIZATION  - Owning organization (required unless
                                      --organization is passed)
    REPOKEEPER_GITHUB_API_URL       - API root for GitHub Enterprise
    REPOKEEPER_LOG_LEVEL            - Log level (default: INFO)
"""

from __future__ import annotations

import asyncio
import dataclasses
import os
import sys
import typing as typ
from pathlib import Path

import msgspec
from cyclopts import App, Parameter

from repokeeper.github import (
    GitHubAPIError,
    GitHubConfigError,
    GitHubRestClient,
    GitHubRestConfig,
    GitHubResponseShapeError,
    Organization,
    OrganizationConfig,
    build_organization,
)
from repokeeper.logging import (
    LOG_LEVEL_ENV_VAR,
    configure_logging,
    get_logger,
    log_warning,
)
from repokeeper.repository import (
    RepositoryError,
    RepositoryManifest,
    RepositoryReconciler,
    RepositoryState,
    load_manifest,
)

if typ.TYPE_CHECKING:
    from repokeeper.repository import RepositoryDesiredState

logger = get_logger(__name__)

app = App(
    name="repokeeper",
    help="Reconcile declared GitHub repositories",
    version="0.1.0",
)

_CLI_ERRORS = (
    RepositoryError,
    GitHubAPIError,
    GitHubConfigError,
    GitHubResponseShapeError,
)

OrganizationOption = typ.Annotated[
    str | None, Parameter(env_var="REPOKEEPER_GITHUB_ORGANIZATION")
]


def build_client() -> GitHubRestClient:
    """Build the REST client from environment configuration."""
    return GitHubRestClient(GitHubRestConfig.from_env())


def _organization_config(organization: str | None) -> OrganizationConfig:
    if organization and organization.strip():
        return OrganizationConfig(name=organization.strip())
    return OrganizationConfig.from_env()


def _print_state(state: RepositoryState) -> None:
    print(msgspec.json.encode(state).decode("utf-8"))


async def _reconcile_one(
    reconciler: RepositoryReconciler,
    org: Organization,
    desired: RepositoryDesiredState,
) -> RepositoryState:
    """Run one pass for a declared repository: read, then update or create."""
    current = await reconciler.read(org, RepositoryState.pending(desired.name, desired))
    if current.id is not None:
        return await reconciler.update(org, current.id, desired)
    return await reconciler.create(org, desired)


@dataclasses.dataclass(frozen=True, slots=True)
class ApplyResult:
    """Outcome of one manifest pass.

    ``states`` holds the record of every repository that reconciled and
    ``failures`` pairs each remaining repository name with its error.
    """

    states: list[RepositoryState]
    failures: list[tuple[str, Exception]]

    @property
    def succeeded(self) -> bool:
        """Return True when no repository failed."""
        return not self.failures


def _process_gathered_results(
    names: list[str],
    gathered: list[RepositoryState | BaseException],
) -> ApplyResult:
    """Split results from asyncio.gather into records and failures.

    Raises
    ------
    BaseException
        Re-raised immediately for system-level exceptions such as
        cancellation.

    """
    states: list[RepositoryState] = []
    failures: list[tuple[str, Exception]] = []
    for name, result in zip(names, gathered, strict=True):
        if isinstance(result, Exception):
            failures.append((name, result))
        elif isinstance(result, BaseException):
            raise result
        else:
            states.append(result)
    return ApplyResult(states=states, failures=failures)


async def apply_manifest(
    org: Organization,
    manifest: RepositoryManifest,
    *,
    reconciler: RepositoryReconciler | None = None,
) -> ApplyResult:
    """Reconcile every repository in ``manifest`` concurrently.

    One repository failing does not stop the others; every pass runs to
    completion before the result is returned.
    """
    active = reconciler or RepositoryReconciler()
    gathered = await asyncio.gather(
        *(_reconcile_one(active, org, desired) for desired in manifest.repositories),
        return_exceptions=True,
    )
    names = [desired.name for desired in manifest.repositories]
    return _process_gathered_results(names, gathered)


async def _apply(manifest_path: Path, organization: str | None) -> int:
    manifest = load_manifest(manifest_path)
    config = _organization_config(organization)
    async with build_client() as client:
        org = build_organization(config, client)
        result = await apply_manifest(org, manifest)
    for state in result.states:
        _print_state(state)
    for name, error in result.failures:
        print(f"repokeeper: {org.slug(name)}: {error}", file=sys.stderr)
    return 0 if result.succeeded else 1


async def _show(name: str, organization: str | None) -> int:
    config = _organization_config(organization)
    async with build_client() as client:
        org = build_organization(config, client)
        state = await RepositoryReconciler().import_state(org, name)
    if state.id is None:
        log_warning(logger, "repository %s does not exist", org.slug(name))
        return 1
    _print_state(state)
    return 0


async def _delete(name: str, organization: str | None) -> int:
    config = _organization_config(organization)
    async with build_client() as client:
        org = build_organization(config, client)
        await RepositoryReconciler().delete(org, name)
    return 0


def _run(coro: typ.Coroutine[typ.Any, typ.Any, int]) -> int:
    try:
        return asyncio.run(coro)
    except _CLI_ERRORS as exc:
        print(f"repokeeper: {exc}", file=sys.stderr)
        return 1


@app.command
def apply(manifest: Path, *, organization: OrganizationOption = None) -> int:
    """Create or update every repository declared in a YAML manifest.

    Args:
        manifest: Path to the desired-state YAML file.
        organization: Owning organization; defaults to the environment.

    Returns:
        Exit code (0 for success, 1 for failure).

    """
    return _run(_apply(manifest, organization))


@app.command
def show(name: str, *, organization: OrganizationOption = None) -> int:
    """Import an existing repository by name and print its record.

    Args:
        name: Repository name.
        organization: Owning organization; defaults to the environment.

    Returns:
        Exit code (0 when the repository exists, 1 otherwise).

    """
    return _run(_show(name, organization))


@app.command
def delete(name: str, *, organization: OrganizationOption = None) -> int:
    """Delete a repository.

    Args:
        name: Repository name.
        organization: Owning organization; defaults to the environment.

    Returns:
        Exit code (0 for success, 1 for failure).

    """
    return _run(_delete(name, organization))


def main() -> int:
    """Entry point for the CLI."""
    raw_level = os.environ.get(LOG_LEVEL_ENV_VAR)
    normalized_level, invalid_level = configure_logging()
    if invalid_level:
        log_warning(
            logger,
            "Invalid %s %r, falling back to %s",
            LOG_LEVEL_ENV_VAR,
            raw_level,
            normalized_level,
        )
    return app()


if __name__ == "__main__":
    sys.exit(main())
