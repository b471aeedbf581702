"""Cargo manifests stored on disk."""

from __future__ import annotations

import os
from collections.abc import Iterator
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.items import Array, Bool, Table

from relplz.manifest import CARGO_TOML, DepTable, Manifest, ManifestError, is_table_like
from relplz.version import Version

_KIND_NAMES = frozenset(t.kind_table() for t in DepTable.KINDS)


class _FeatureStatus(IntEnum):
    NONE = 0
    DEP_FEATURE = 1
    FEATURE = 2


def _as_bool(item: Any) -> bool | None:
    if isinstance(item, bool):
        return item
    if isinstance(item, Bool):
        return item.value
    return None


def _get(item: Any, key: str) -> Any:
    return item.get(key) if is_table_like(item) or isinstance(item, dict) else None


def _ensure_table(container: Any, key: str) -> Any:
    if key not in container:
        container[key] = tomlkit.table()
    return container[key]


@dataclass
class LocalManifest:
    """A Cargo manifest with the path it was read from."""

    path: Path
    manifest: Manifest

    @property
    def data(self) -> tomlkit.TOMLDocument:
        return self.manifest.data

    @classmethod
    def find(cls, path: str | os.PathLike[str] | None = None) -> LocalManifest:
        """Locate the manifest for ``path`` (or the current directory) and load it."""
        return cls.try_new(find_manifest(path).resolve(strict=True))

    @classmethod
    def try_new(cls, path: str | os.PathLike[str]) -> LocalManifest:
        """Load the manifest at the absolute ``path``."""
        path = Path(path)
        if not path.is_absolute():
            raise ManifestError(f"can only edit absolute paths, got {path}")
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ManifestError("Failed to read manifest contents") from exc
        try:
            manifest = Manifest.parse(text)
        except ManifestError as exc:
            raise ManifestError("Unable to parse Cargo.toml") from exc
        return cls(path=path, manifest=manifest)

    def write(self) -> None:
        """Write the manifest back to its file."""
        try:
            self.path.write_text(str(self.manifest), encoding="utf-8")
        except OSError as exc:
            raise ManifestError("Failed to write updated Cargo.toml") from exc

    def get_dependency_tables(self) -> Iterator[Any]:
        """Every dependency table, including workspace and target ones."""
        for key, value in self.data.items():
            if key in _KIND_NAMES:
                if is_table_like(value):
                    yield value
            elif key == "workspace" and is_table_like(value):
                deps = value.get("dependencies")
                if is_table_like(deps):
                    yield deps
            elif key == "target" and is_table_like(value):
                for target in value.values():
                    if not is_table_like(target):
                        continue
                    for name, table in target.items():
                        if name in _KIND_NAMES and is_table_like(table):
                            yield table

    def get_workspace_dependency_table(self) -> Any:
        """The ``[workspace.dependencies]`` table, or ``None``."""
        table = _get(_get(self.data, "workspace"), "dependencies")
        return table if is_table_like(table) else None

    def set_package_version(self, version: Version) -> None:
        """Set ``package.version``."""
        _ensure_table(self.data, "package")["version"] = str(version)

    def version_is_inherited(self) -> bool:
        """True if the package takes its version from the workspace."""
        version = _get(_get(self.data, "package"), "version")
        return _as_bool(_get(version, "workspace")) is True

    def get_workspace_version(self) -> Version | None:
        """``workspace.package.version``, if present and valid."""
        text = _get(_get(_get(self.data, "workspace"), "package"), "version")
        if not isinstance(text, str):
            return None
        try:
            return Version.parse(str(text))
        except ValueError:
            return None

    def set_workspace_version(self, version: Version) -> None:
        """Set ``workspace.package.version``."""
        workspace = _ensure_table(self.data, "workspace")
        _ensure_table(workspace, "package")["version"] = str(version)

    def gc_dep(self, dep_key: str) -> None:
        """Drop feature activations that refer to ``dep_key`` when it is gone."""
        status = self._dep_feature(dep_key)
        if status is _FeatureStatus.FEATURE:
            return
        features = self.data.get("features")
        if not isinstance(features, Table):
            return
        for activations in features.values():
            if isinstance(activations, Array):
                _remove_feature_activation(activations, dep_key, status)

    def _dep_feature(self, dep_key: str) -> _FeatureStatus:
        status = _FeatureStatus.NONE
        for _, table in self.manifest.get_sections():
            if not isinstance(table, Table) or dep_key not in table:
                continue
            if _as_bool(_get(table[dep_key], "optional")):
                return _FeatureStatus.FEATURE
            status = _FeatureStatus.DEP_FEATURE
        return status


def _remove_feature_activation(activations: Array, dep: str, status: _FeatureStatus) -> None:
    prefix = f"{dep}/"

    def matches(activation: Any) -> bool:
        if not isinstance(activation, str):
            return False
        if status is _FeatureStatus.NONE:
            return activation == dep or activation.startswith(prefix)
        if status is _FeatureStatus.DEP_FEATURE:
            return activation == dep
        return False

    for idx in reversed([i for i, a in enumerate(activations) if matches(a)]):
        del activations[idx]


def find_manifest(specified: str | os.PathLike[str] | None = None) -> Path:
    """The manifest itself if a file is given, else search up from the directory."""
    if specified is None:
        return find_manifest_path(Path.cwd())
    path = Path(specified)
    try:
        is_file = path.stat() and path.is_file()
    except OSError as exc:
        raise ManifestError("Failed to get cargo file metadata") from exc
    return path if is_file else find_manifest_path(path)


def find_manifest_path(directory: str | os.PathLike[str]) -> Path:
    """Search ``directory`` and its ancestors for ``Cargo.toml``."""
    directory = Path(directory)
    for candidate in (directory, *directory.parents):
        manifest = candidate / CARGO_TOML
        if manifest.exists():
            return manifest
    raise ManifestError(f"Unable to find Cargo.toml for {directory}")


def workspace_manifest(workspace_root: str | os.PathLike[str]) -> Path:
    """Path of the workspace manifest."""
    return Path(workspace_root) / CARGO_TOML


def canonical_local_manifest(local_manifest: str | os.PathLike[str]) -> Path:
    """Canonical path of a manifest, appending ``Cargo.toml`` to directories."""
    path = Path(local_manifest).resolve(strict=True)
    return path if path.name == CARGO_TOML else path / CARGO_TOML