"""Reconciliation of declared GitHub repositories.

* **Models** - the typed desired state and the local record returned by every
  operation.
* **Mapping** - request construction and remote-to-local translation.
* **Reconciler** - create, read, update, delete and import.
* **Loader** - YAML manifests of desired states.

Quick example
-------------

    >>> from repokeeper.repository import RepositoryDesiredState, RepositoryReconciler
    >>> reconciler = RepositoryReconciler()
    >>> state = await reconciler.create(org, RepositoryDesiredState(name="demo"))
    >>> state = await reconciler.read(org, state)
    >>> state.exists
    True
"""

from __future__ import annotations

from .errors import DesiredStateError, RepositoryError, RepositoryValidationError
from .loader import RepositoryManifest, load_manifest, parse_manifest
from .mapping import (
    apply_remote_repository,
    build_repository_request,
    build_update_request,
    with_default_branch,
)
from .models import MASTER_BRANCH, RepositoryDesiredState, RepositoryState
from .observability import (
    ErrorCategory,
    ReconcileEventLogger,
    ReconcileEventType,
    ReconcileOperation,
    categorize_error,
)
from .reconciler import RepositoryReconciler

__all__ = [
    "MASTER_BRANCH",
    "DesiredStateError",
    "ErrorCategory",
    "ReconcileEventLogger",
    "ReconcileEventType",
    "ReconcileOperation",
    "RepositoryDesiredState",
    "RepositoryError",
    "RepositoryManifest",
    "RepositoryReconciler",
    "RepositoryState",
    "RepositoryValidationError",
    "apply_remote_repository",
    "build_repository_request",
    "build_update_request",
    "categorize_error",
    "load_manifest",
    "parse_manifest",
    "with_default_branch",
]
