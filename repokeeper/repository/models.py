"""Typed local records for a managed GitHub repository."""

from __future__ import annotations

import dataclasses

import msgspec

from .errors import RepositoryValidationError

# GitHub's implicit default branch; never sent as an explicit edit.
MASTER_BRANCH = "master"


class RepositoryDesiredState(
    msgspec.Struct, frozen=True, kw_only=True, forbid_unknown_fields=True
):
    """Settings an operator declares for one repository.

    Attributes
    ----------
    name : str
        Repository name. Changing it requires destroying and recreating the
        repository.
    description, homepage_url : str
        Free-text metadata. Empty strings are sent as explicit values.
    private, has_issues, has_wiki, has_downloads, auto_init : bool
        Feature toggles, all off by default.
    allow_merge_commit, allow_squash_merge, allow_rebase_merge : bool
        Merge strategies, all on by default.
    default_branch : str, optional
        Only applied by updates; a repository cannot be created with one.
    license_template, gitignore_template : str
        Template identifiers used when GitHub initialises the repository.

    """

    name: str
    description: str = ""
    homepage_url: str = ""
    private: bool = False
    has_issues: bool = False
    has_wiki: bool = False
    allow_merge_commit: bool = True
    allow_squash_merge: bool = True
    allow_rebase_merge: bool = True
    has_downloads: bool = False
    auto_init: bool = False
    default_branch: str | None = None
    license_template: str = ""
    gitignore_template: str = ""

    def __post_init__(self) -> None:
        """Reject blank names at the boundary."""
        if not self.name.strip():
            raise RepositoryValidationError.empty_name()

    @property
    def has_default_branch(self) -> bool:
        """Return True when a non-empty default branch is declared."""
        return bool(self.default_branch)


@dataclasses.dataclass(frozen=True, slots=True)
class RepositoryState:
    """Local record of a repository after the last successful operation.

    ``id`` is the repository name while the repository exists remotely and
    ``None`` once it has been found missing.

    ``settings`` mixes the declared and remote views: a read overwrites
    every field GitHub reports, ``default_branch`` included, and keeps
    ``auto_init`` and the templates from the declaration. A record cleared
    by :meth:`absent` keeps those settings, so recreating the repository
    must start from the declared :class:`RepositoryDesiredState` rather
    than ``settings``; otherwise create rejects the remote default branch.
    """

    id: str | None
    settings: RepositoryDesiredState
    full_name: str = ""
    ssh_clone_url: str = ""
    svn_url: str = ""
    git_clone_url: str = ""
    http_clone_url: str = ""

    @property
    def exists(self) -> bool:
        """Return True while the record refers to a remote repository."""
        return self.id is not None

    @classmethod
    def pending(
        cls, identifier: str, settings: RepositoryDesiredState
    ) -> RepositoryState:
        """Return a record that only knows its identifier and settings."""
        return cls(id=identifier, settings=settings)

    def absent(self) -> RepositoryState:
        """Return a copy whose identifier is cleared."""
        return dataclasses.replace(self, id=None)
