"""Create, read, update and delete a GitHub repository.

The reconciler is stateless: each coroutine receives the organization
context and the local record it acts on, and returns a new record on
success. A failed call leaves the caller's record untouched.

Usage
-----
>>> reconciler = RepositoryReconciler()
>>> state = await reconciler.create(org, RepositoryDesiredState(name="demo"))
>>> state.full_name
'octo/demo'

"""

from __future__ import annotations

import contextlib
import typing as typ

from repokeeper.github.errors import GitHubNotFoundError

from .errors import RepositoryValidationError
from .mapping import (
    apply_remote_repository,
    build_repository_request,
    build_update_request,
)
from .models import RepositoryDesiredState, RepositoryState
from .observability import ReconcileEventLogger, ReconcileOperation

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from repokeeper.github.organization import Organization


class RepositoryReconciler:
    """Apply repository lifecycle operations against GitHub.

    Parameters
    ----------
    event_logger:
        Optional structured event logger. Defaults to
        :class:`ReconcileEventLogger`.

    """

    def __init__(self, *, event_logger: ReconcileEventLogger | None = None) -> None:
        """Configure the reconciler with an event logger."""
        self._events = event_logger or ReconcileEventLogger()

    @contextlib.contextmanager
    def _tracked(
        self, operation: ReconcileOperation, repo_slug: str
    ) -> cabc.Iterator[None]:
        self._events.log_started(operation, repo_slug)
        try:
            yield
        except Exception as exc:
            self._events.log_failed(operation, repo_slug, exc)
            raise
        self._events.log_completed(operation, repo_slug)

    async def create(
        self, org: Organization, desired: RepositoryDesiredState
    ) -> RepositoryState:
        """Create the repository and return its freshly read record.

        Raises
        ------
        RepositoryValidationError
            If ``desired`` declares a default branch. No remote call is made.

        """
        slug = org.slug(desired.name)
        if desired.has_default_branch:
            error = RepositoryValidationError.default_branch_on_create()
            self._events.log_failed(ReconcileOperation.CREATE, slug, error)
            raise error

        request = build_repository_request(desired)
        with self._tracked(ReconcileOperation.CREATE, slug):
            remote = await org.client.create(org.name, request)

        return await self.read(org, RepositoryState.pending(remote.name, desired))

    async def read(self, org: Organization, state: RepositoryState) -> RepositoryState:
        """Refresh ``state`` from GitHub.

        A repository that no longer exists is not an error: the returned
        record has its identifier cleared so the caller recreates it.
        """
        if state.id is None:
            raise RepositoryValidationError.missing_identifier(ReconcileOperation.READ)

        slug = org.slug(state.id)
        self._events.log_started(ReconcileOperation.READ, slug)
        try:
            remote = await org.client.get(org.name, state.id)
        except GitHubNotFoundError:
            self._events.log_drift_detected(slug)
            return state.absent()
        except Exception as exc:
            self._events.log_failed(ReconcileOperation.READ, slug, exc)
            raise
        self._events.log_completed(ReconcileOperation.READ, slug)

        return apply_remote_repository(state, remote)

    async def import_state(self, org: Organization, name: str) -> RepositoryState:
        """Seed a record from an existing repository name alone."""
        return await self.read(
            org, RepositoryState.pending(name, RepositoryDesiredState(name=name))
        )

    async def update(
        self,
        org: Organization,
        identifier: str,
        desired: RepositoryDesiredState,
    ) -> RepositoryState:
        """Edit the repository named ``identifier`` to match ``desired``.

        The default branch is forwarded unless it is ``master``. Whether the
        branch exists is left for GitHub to decide.
        """
        request = build_update_request(desired)
        with self._tracked(ReconcileOperation.UPDATE, org.slug(identifier)):
            remote = await org.client.edit(org.name, identifier, request)

        # GitHub may normalise the name's casing.
        return await self.read(org, RepositoryState.pending(remote.name, desired))

    async def delete(self, org: Organization, identifier: str) -> None:
        """Delete the repository named ``identifier``."""
        with self._tracked(ReconcileOperation.DELETE, org.slug(identifier)):
            await org.client.delete(org.name, identifier)
