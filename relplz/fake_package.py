"""Lightweight packages and dependencies for building test metadata."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from pathlib import Path

from relplz.manifest import CARGO_TOML, DepKind
from relplz.version import Version
from relplz.workspace import Dependency, Metadata, Package, get_manifest_metadata

_FAKE_VERSION = "0.1.0"


@dataclass(frozen=True)
class FakeDependency:
    """A dependency on ``name`` at version ``0.1.0``."""

    name: str
    kind: DepKind = DepKind.NORMAL

    def dev(self) -> FakeDependency:
        """The same dependency as a development dependency."""
        return replace(self, kind=DepKind.DEVELOPMENT)

    def to_dependency(self) -> Dependency:
        """The corresponding metadata dependency."""
        return Dependency(
            name=self.name,
            req=_FAKE_VERSION,
            kind=self.kind,
            optional=False,
            uses_default_features=True,
            features=(),
        )


@dataclass(frozen=True)
class FakePackage:
    """A package ``name`` at version ``0.1.0`` with some dependencies."""

    name: str
    dependencies: tuple[FakeDependency, ...] = ()

    def with_dependencies(self, dependencies: Iterable[FakeDependency]) -> FakePackage:
        """Copy with the given dependencies."""
        return replace(self, dependencies=tuple(dependencies))

    def to_package(self) -> Package:
        """The corresponding metadata package."""
        return Package(
            name=self.name,
            version=Version.parse(_FAKE_VERSION),
            id=self.name,
            manifest_path=Path(f"{self.name}/{CARGO_TOML}"),
            dependencies=tuple(dep.to_dependency() for dep in self.dependencies),
            features={},
            targets=(),
        )


def fake_metadata() -> Metadata:
    """Metadata of the workspace whose manifest is ``Cargo.toml`` in the current directory."""
    return get_manifest_metadata(Path(CARGO_TOML))