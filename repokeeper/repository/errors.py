"""Errors raised by the repository reconciler and desired-state loader."""

from __future__ import annotations


class RepositoryError(Exception):
    """Base class for repository reconciliation errors."""


class RepositoryValidationError(RepositoryError, ValueError):
    """Raised when a local precondition fails before any remote call."""

    @classmethod
    def default_branch_on_create(cls) -> RepositoryValidationError:
        """Return an error for a default branch supplied at creation time."""
        return cls("cannot set default branch on a new repository")

    @classmethod
    def empty_name(cls) -> RepositoryValidationError:
        """Return an error for a blank repository name."""
        return cls("repository name must be non-empty")

    @classmethod
    def missing_identifier(cls, operation: str) -> RepositoryValidationError:
        """Return an error when an operation needs an identifier and has none."""
        return cls(f"cannot {operation} a repository without an identifier")


class DesiredStateError(RepositoryError, ValueError):
    """Raised when a desired-state file cannot be loaded."""

    def __init__(self, issues: list[str]) -> None:
        """Capture loading issues whilst preserving the aggregated message."""
        super().__init__("\n".join(issues))
        self.issues = issues
