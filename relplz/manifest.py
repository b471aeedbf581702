"""Cargo manifests and their dependency tables."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, ClassVar

import tomlkit
from tomlkit.exceptions import TOMLKitError
from tomlkit.items import InlineTable, Table

CARGO_TOML = "Cargo.toml"


class ManifestError(Exception):
    """Raised when a manifest cannot be found, read or parsed."""


class DepKind(Enum):
    """The kind of a dependency."""

    NORMAL = "normal"
    DEVELOPMENT = "development"
    BUILD = "build"


_KIND_TABLES = {
    DepKind.NORMAL: "dependencies",
    DepKind.DEVELOPMENT: "dev-dependencies",
    DepKind.BUILD: "build-dependencies",
}


def is_table_like(item: Any) -> bool:
    """True for TOML tables and inline tables."""
    return isinstance(item, (Table, InlineTable))


@dataclass(frozen=True)
class DepTable:
    """A dependency table, optionally restricted to a target platform."""

    kind: DepKind = DepKind.NORMAL
    target: str | None = None

    KINDS: ClassVar[tuple[DepTable, ...]]

    def with_kind(self, kind: DepKind) -> DepTable:
        """Copy with another kind."""
        return replace(self, kind=kind)

    def with_target(self, target: str) -> DepTable:
        """Copy for the given platform target."""
        return replace(self, target=target)

    def kind_table(self) -> str:
        """Name of the manifest table for this kind."""
        return _KIND_TABLES[self.kind]


DepTable.KINDS = tuple(DepTable(kind) for kind in DepKind)


class Manifest:
    """A Cargo manifest held as an editable TOML document."""

    def __init__(self, data: tomlkit.TOMLDocument) -> None:
        self.data = data

    @classmethod
    def parse(cls, text: str) -> Manifest:
        """Parse manifest text, raising ``ManifestError`` if it is not TOML."""
        try:
            return cls(tomlkit.parse(text))
        except TOMLKitError as exc:
            raise ManifestError("Manifest not valid TOML") from exc

    def __str__(self) -> str:
        return tomlkit.dumps(self.data)

    def get_sections(self) -> list[tuple[DepTable, Any]]:
        """All existing sections that may hold dependencies, targets included."""
        sections: list[tuple[DepTable, Any]] = []
        targets = self.data.get("target")
        for table in DepTable.KINDS:
            name = table.kind_table()
            item = self.data.get(name)
            if is_table_like(item):
                sections.append((table, item))
            if is_table_like(targets):
                for target_name, target_table in targets.items():
                    if not is_table_like(target_table):
                        continue
                    dep_table = target_table.get(name)
                    if is_table_like(dep_table):
                        sections.append((table.with_target(target_name), dep_table))
        return sections