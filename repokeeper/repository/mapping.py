"""Translate between local repository records and GitHub wire models."""

from __future__ import annotations

import typing as typ

import msgspec

from repokeeper.github.models import RepositoryRequest

from .models import MASTER_BRANCH, RepositoryState

if typ.TYPE_CHECKING:
    from repokeeper.github.models import RemoteRepository

    from .models import RepositoryDesiredState


def build_repository_request(desired: RepositoryDesiredState) -> RepositoryRequest:
    """Build the create/edit request body for a desired state.

    Parameters
    ----------
    desired
        Declared repository settings.

    Returns
    -------
    RepositoryRequest
        Request with every field populated and ``default_branch`` unset.

    """
    return RepositoryRequest(
        name=desired.name,
        description=desired.description,
        homepage=desired.homepage_url,
        private=desired.private,
        has_issues=desired.has_issues,
        has_wiki=desired.has_wiki,
        allow_merge_commit=desired.allow_merge_commit,
        allow_squash_merge=desired.allow_squash_merge,
        allow_rebase_merge=desired.allow_rebase_merge,
        has_downloads=desired.has_downloads,
        auto_init=desired.auto_init,
        license_template=desired.license_template,
        gitignore_template=desired.gitignore_template,
    )


def with_default_branch(request: RepositoryRequest, branch: str) -> RepositoryRequest:
    """Return a copy of ``request`` that also sets the default branch."""
    return msgspec.structs.replace(request, default_branch=branch)


def build_update_request(desired: RepositoryDesiredState) -> RepositoryRequest:
    """Build an edit request, forwarding the default branch when allowed.

    ``master`` is left out because an uninitialised repository has no
    ``master`` ref yet and GitHub rejects the edit.
    """
    request = build_repository_request(desired)
    branch = desired.default_branch
    if branch and branch != MASTER_BRANCH:
        request = with_default_branch(request, branch)
    return request


def apply_remote_repository(
    state: RepositoryState, remote: RemoteRepository
) -> RepositoryState:
    """Copy a fetched repository into the local record.

    ``auto_init`` and the template identifiers only matter at creation time
    and are not echoed by GitHub, so the record keeps its own values.
    """
    identifier = state.id if state.id is not None else remote.name
    settings = msgspec.structs.replace(
        state.settings,
        name=identifier,
        description=remote.description or "",
        homepage_url=remote.homepage or "",
        private=remote.private,
        has_issues=remote.has_issues,
        has_wiki=remote.has_wiki,
        allow_merge_commit=remote.allow_merge_commit,
        allow_squash_merge=remote.allow_squash_merge,
        allow_rebase_merge=remote.allow_rebase_merge,
        has_downloads=remote.has_downloads,
        default_branch=remote.default_branch,
    )
    return RepositoryState(
        id=identifier,
        settings=settings,
        full_name=remote.full_name,
        ssh_clone_url=remote.ssh_url,
        svn_url=remote.svn_url,
        git_clone_url=remote.git_url,
        http_clone_url=remote.clone_url,
    )
