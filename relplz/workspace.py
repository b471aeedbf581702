"""Workspace metadata reported by ``cargo metadata`` and its members."""

from __future__ import annotations

import json
import os
import subprocess
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from relplz.manifest import DepKind
from relplz.version import Version

_KIND_FROM_JSON = {
    None: DepKind.NORMAL,
    "normal": DepKind.NORMAL,
    "dev": DepKind.DEVELOPMENT,
    "build": DepKind.BUILD,
}


class MetadataError(Exception):
    """Raised when workspace metadata cannot be obtained or understood."""


def _required(data: Mapping[str, Any], key: str, kind: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise MetadataError(f"missing field `{key}` in {kind}") from None


def _optional_path(value: Any) -> Path | None:
    return None if value is None else Path(value)


@dataclass(frozen=True)
class Dependency:
    """A dependency declared by a package."""

    name: str
    req: str
    kind: DepKind = DepKind.NORMAL
    optional: bool = False
    uses_default_features: bool = True
    features: tuple[str, ...] = ()
    path: Path | None = None
    rename: str | None = None
    target: str | None = None
    registry: str | None = None
    source: str | None = None

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> Dependency:
        """Build a dependency from its ``cargo metadata`` JSON object."""
        kind_text = data.get("kind")
        try:
            kind = _KIND_FROM_JSON[kind_text]
        except (KeyError, TypeError):
            raise MetadataError(f"unknown dependency kind: {kind_text!r}") from None
        return cls(
            name=_required(data, "name", "dependency"),
            req=_required(data, "req", "dependency"),
            kind=kind,
            optional=bool(_required(data, "optional", "dependency")),
            uses_default_features=bool(
                _required(data, "uses_default_features", "dependency")
            ),
            features=tuple(_required(data, "features", "dependency")),
            path=_optional_path(data.get("path")),
            rename=data.get("rename"),
            target=data.get("target"),
            registry=data.get("registry"),
            source=data.get("source"),
        )


@dataclass(frozen=True)
class Package:
    """A package of the workspace."""

    name: str
    version: Version
    id: str
    manifest_path: Path
    dependencies: tuple[Dependency, ...] = ()
    features: dict[str, list[str]] = field(default_factory=dict)
    targets: tuple[Any, ...] = ()

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> Package:
        """Build a package from its ``cargo metadata`` JSON object."""
        version_text = _required(data, "version", "package")
        try:
            version = Version.parse(version_text)
        except (ValueError, TypeError) as exc:
            raise MetadataError(f"invalid package version: {version_text!r}") from exc
        return cls(
            name=_required(data, "name", "package"),
            version=version,
            id=_required(data, "id", "package"),
            manifest_path=Path(_required(data, "manifest_path", "package")),
            dependencies=tuple(
                Dependency.from_json(dep)
                for dep in _required(data, "dependencies", "package")
            ),
            features={
                name: list(values)
                for name, values in _required(data, "features", "package").items()
            },
            targets=tuple(_required(data, "targets", "package")),
        )


@dataclass(frozen=True)
class Metadata:
    """The packages of a workspace and which of them are members."""

    packages: tuple[Package, ...]
    workspace_members: tuple[str, ...]
    workspace_root: Path
    target_directory: Path | None = None

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> Metadata:
        """Build metadata from the JSON object printed by ``cargo metadata``."""
        return cls(
            packages=tuple(
                Package.from_json(pkg) for pkg in _required(data, "packages", "metadata")
            ),
            workspace_members=tuple(_required(data, "workspace_members", "metadata")),
            workspace_root=Path(_required(data, "workspace_root", "metadata")),
            target_directory=_optional_path(data.get("target_directory")),
        )


def get_manifest_metadata(manifest_path: str | os.PathLike[str]) -> Metadata:
    """Run ``cargo metadata --no-deps`` for ``manifest_path`` and parse the result."""
    command = [
        "cargo",
        "metadata",
        "--no-deps",
        "--format-version",
        "1",
        "--manifest-path",
        str(manifest_path),
    ]
    try:
        result = subprocess.run(command, capture_output=True, check=False)
    except OSError as exc:
        raise MetadataError(f"failed to run cargo metadata: {exc}") from exc
    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace").strip()
        raise MetadataError(f"cargo metadata failed: {stderr}")
    stdout = result.stdout.decode("utf-8", errors="replace")
    line = next((l for l in stdout.splitlines() if l.startswith("{")), None)
    if line is None:
        raise MetadataError("cargo metadata printed no JSON")
    try:
        data = json.loads(line)
    except json.JSONDecodeError as exc:
        raise MetadataError("cargo metadata printed invalid JSON") from exc
    return Metadata.from_json(data)


def _canonicalize_path(path: Path) -> Path:
    try:
        return path.resolve(strict=True)
    except (OSError, RuntimeError):
        return path


def _canonicalize_package(package: Package) -> Package:
    dependencies = tuple(
        dep if dep.path is None else replace(dep, path=_canonicalize_path(dep.path))
        for dep in package.dependencies
    )
    return replace(
        package,
        manifest_path=_canonicalize_path(package.manifest_path),
        dependencies=dependencies,
    )


def workspace_members(metadata: Metadata) -> Iterator[Package]:
    """The workspace's member packages, with their paths canonicalized."""
    members = set(metadata.workspace_members)
    return (
        _canonicalize_package(package)
        for package in metadata.packages
        if package.id in members
    )