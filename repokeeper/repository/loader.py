"""YAML loader for desired-state manifests.

A manifest lists the repositories an operator wants managed::

    repositories:
      - name: demo
        private: true
        description: Demo repository

"""

from __future__ import annotations

from pathlib import Path

import msgspec
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import DesiredStateError
from .models import RepositoryDesiredState

YAML_VERSION = (1, 2)


class RepositoryManifest(msgspec.Struct, kw_only=True, forbid_unknown_fields=True):
    """Collection of desired repository states loaded from YAML."""

    repositories: list[RepositoryDesiredState] = msgspec.field(default_factory=list)


def load_manifest(path: Path | str) -> RepositoryManifest:
    """Parse a manifest file using a YAML 1.2 compliant loader."""
    path_obj = Path(path)
    try:
        loaded = _yaml().load(path_obj.read_text(encoding="utf-8"))
    except (OSError, YAMLError) as exc:
        raise DesiredStateError([f"failed to parse YAML: {exc}"]) from exc

    if loaded is None:
        raise DesiredStateError(["manifest file is empty"])

    return parse_manifest(loaded)


def parse_manifest(raw: object) -> RepositoryManifest:
    """Convert already-parsed YAML data into a validated manifest."""
    try:
        manifest = msgspec.convert(raw, type=RepositoryManifest)
    except msgspec.ValidationError as exc:
        raise DesiredStateError([f"schema validation failed: {exc}"]) from exc

    seen: set[str] = set()
    issues: list[str] = []
    for repository in manifest.repositories:
        key = repository.name.lower()
        if key in seen:
            issues.append(f"repository {repository.name!r} is declared more than once")
        seen.add(key)
    if issues:
        raise DesiredStateError(issues)

    return manifest


def _yaml() -> YAML:
    yaml = YAML(typ="safe")
    yaml.version = YAML_VERSION
    yaml.allow_duplicate_keys = False
    return yaml
