"""Wire models for the GitHub repositories REST API."""

from __future__ import annotations

import msgspec


class RepositoryRequest(msgspec.Struct, kw_only=True):
    """Body sent to the create and edit repository endpoints.

    Every field is always present except ``default_branch``, which stays
    ``UNSET`` (and is left out of the encoded JSON) until a caller opts in.
    """

    name: str
    description: str
    homepage: str
    private: bool
    has_issues: bool
    has_wiki: bool
    allow_merge_commit: bool
    allow_squash_merge: bool
    allow_rebase_merge: bool
    has_downloads: bool
    auto_init: bool
    license_template: str
    gitignore_template: str
    default_branch: str | msgspec.UnsetType = msgspec.UNSET


class RemoteRepository(msgspec.Struct, kw_only=True):
    """Repository entity returned by the GitHub REST API.

    Only the fields used for reconciliation are declared; the rest of the
    payload is ignored on decode.
    """

    name: str
    full_name: str = ""
    description: str | None = None
    homepage: str | None = None
    private: bool = False
    has_issues: bool = False
    has_wiki: bool = False
    allow_merge_commit: bool = False
    allow_squash_merge: bool = False
    allow_rebase_merge: bool = False
    has_downloads: bool = False
    default_branch: str | None = None
    ssh_url: str = ""
    svn_url: str = ""
    git_url: str = ""
    clone_url: str = ""
