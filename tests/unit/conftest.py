"""Unit-test fixtures for the repository reconciler."""

from __future__ import annotations

import pytest

from repokeeper.github.organization import Organization
from repokeeper.repository import RepositoryReconciler
from tests.helpers.github_fakes import ORG_NAME, FakeRepositoriesClient


@pytest.fixture
def fake_client() -> FakeRepositoriesClient:
    """Return an empty in-memory repositories client."""
    return FakeRepositoriesClient()


@pytest.fixture
def org(fake_client: FakeRepositoriesClient) -> Organization:
    """Return an organization bound to the fake client."""
    return Organization(name=ORG_NAME, client=fake_client)


@pytest.fixture
def reconciler() -> RepositoryReconciler:
    """Return a reconciler with the default event logger."""
    return RepositoryReconciler()
