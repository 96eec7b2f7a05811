"""Structured log events for repository reconciliation.

Every lifecycle operation logs a ``started`` and ``completed`` line at DEBUG,
drift at WARNING and failures at ERROR. Lines follow the
``[<event>] key=value`` layout so log aggregators can parse them.
"""

from __future__ import annotations

import enum

import httpx

from repokeeper.github.errors import (
    GitHubAPIError,
    GitHubConfigError,
    GitHubNotFoundError,
    GitHubResponseShapeError,
)
from repokeeper.logging import get_logger, log_debug, log_error, log_warning

from .errors import RepositoryValidationError

logger = get_logger(__name__)

_HTTP_SERVER_ERROR_THRESHOLD = 500


class ReconcileOperation(enum.StrEnum):
    """Lifecycle operations performed against a remote repository."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


class ReconcileEventType(enum.StrEnum):
    """Structured log event types for reconciliation."""

    OPERATION_STARTED = "repository.operation.started"
    OPERATION_COMPLETED = "repository.operation.completed"
    OPERATION_FAILED = "repository.operation.failed"
    DRIFT_DETECTED = "repository.drift.detected"


class ErrorCategory(enum.StrEnum):
    """Categories used to label failed operations."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    TRANSIENT = "transient"
    CLIENT_ERROR = "client_error"
    SCHEMA_DRIFT = "schema_drift"
    CONFIGURATION = "configuration"
    TRANSPORT = "transport"
    UNKNOWN = "unknown"


_EXCEPTION_CATEGORY_MAP: tuple[tuple[type[BaseException], ErrorCategory], ...] = (
    (RepositoryValidationError, ErrorCategory.VALIDATION),
    (GitHubNotFoundError, ErrorCategory.NOT_FOUND),
    (GitHubResponseShapeError, ErrorCategory.SCHEMA_DRIFT),
    (GitHubConfigError, ErrorCategory.CONFIGURATION),
    (httpx.TransportError, ErrorCategory.TRANSPORT),
)


def categorize_error(exc: BaseException) -> ErrorCategory:
    """Categorize an exception for log fields.

    Returns:
        ErrorCategory describing the failure.

    """
    for exc_type, category in _EXCEPTION_CATEGORY_MAP:
        if isinstance(exc, exc_type):
            return category

    if isinstance(exc, GitHubAPIError):
        if (
            exc.status_code is not None
            and exc.status_code >= _HTTP_SERVER_ERROR_THRESHOLD
        ):
            return ErrorCategory.TRANSIENT
        return ErrorCategory.CLIENT_ERROR

    return ErrorCategory.UNKNOWN


class ReconcileEventLogger:
    """Emit structured reconciliation events via femtologging."""

    def log_started(self, operation: ReconcileOperation, repo_slug: str) -> None:
        """Log the start of a remote call."""
        log_debug(
            logger,
            "[%s] operation=%s repo_slug=%s",
            ReconcileEventType.OPERATION_STARTED,
            operation,
            repo_slug,
        )

    def log_completed(self, operation: ReconcileOperation, repo_slug: str) -> None:
        """Log a remote call that succeeded."""
        log_debug(
            logger,
            "[%s] operation=%s repo_slug=%s",
            ReconcileEventType.OPERATION_COMPLETED,
            operation,
            repo_slug,
        )

    def log_drift_detected(self, repo_slug: str) -> None:
        """Log a repository that vanished remotely and is dropped from state."""
        log_warning(
            logger,
            "[%s] repo_slug=%s removing from state because it no longer exists "
            "in github",
            ReconcileEventType.DRIFT_DETECTED,
            repo_slug,
        )

    def log_failed(
        self,
        operation: ReconcileOperation,
        repo_slug: str,
        error: BaseException,
    ) -> None:
        """Log a failed operation with its error category."""
        log_error(
            logger,
            "[%s] operation=%s repo_slug=%s error_type=%s error_category=%s "
            "error_message=%s",
            ReconcileEventType.OPERATION_FAILED,
            operation,
            repo_slug,
            type(error).__name__,
            categorize_error(error),
            str(error),
            exc_info=error,
        )
