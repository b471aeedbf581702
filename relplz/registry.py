"""Locate the index URL of a Cargo registry from Cargo configuration files."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlsplit

import tomlkit
from tomlkit.exceptions import TOMLKitError

CRATES_IO_INDEX = "https://github.com/rust-lang/crates.io-index"
CRATES_IO_REGISTRY = "crates-io"


class RegistryError(Exception):
    """Raised when a registry cannot be resolved."""


@dataclass
class _Source:
    registry: str | None = None
    replace_with: str | None = None


def _opt_str(table: dict, key: str) -> str | None:
    value = table.get(key)
    if value is not None and not isinstance(value, str):
        raise RegistryError("Invalid cargo config")
    return value


def _read_config(registries: dict[str, _Source], path: Path) -> None:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RegistryError("failed to read cargo config file") from exc
    try:
        config = tomlkit.parse(content).unwrap()
    except TOMLKitError as exc:
        raise RegistryError("Invalid cargo config") from exc
    sections = config.get("registries", {}), config.get("source", {})
    if not all(isinstance(s, dict) and all(isinstance(v, dict) for v in s.values()) for s in sections):
        raise RegistryError("Invalid cargo config")
    for key, value in sections[0].items():
        registries.setdefault(key, _Source(registry=_opt_str(value, "index")))
    for key, value in sections[1].items():
        registries.setdefault(
            key,
            _Source(registry=_opt_str(value, "registry"), replace_with=_opt_str(value, "replace-with")),
        )


def _read_dir_config(registries: dict[str, _Source], cargo_dir: Path) -> None:
    for name in ("config", "config.toml"):
        path = cargo_dir / name
        if path.is_file():
            _read_config(registries, path)
            return


def _is_url(text: str) -> bool:
    parts = urlsplit(text)
    return bool(parts.scheme) and parts.scheme[0].isalpha()


def registry_url(manifest_path: str | os.PathLike[str], registry: str | None = None) -> str:
    """The index URL of ``registry`` (crates.io by default), following replacements."""
    registries: dict[str, _Source] = {}
    parent = Path(manifest_path).parent
    for work_dir in (parent, *parent.parents):
        _read_dir_config(registries, work_dir / ".cargo")
    _read_dir_config(registries, cargo_home())

    if registry is None or registry == CRATES_IO_INDEX:
        source = registries.pop(CRATES_IO_REGISTRY, None) or _Source()
        if source.registry is None:
            source.registry = CRATES_IO_INDEX
    else:
        try:
            source = registries.pop(registry)
        except KeyError:
            raise RegistryError(f"The registry '{registry}' could not be found") from None

    while source.replace_with is not None:
        replace_with = source.replace_with
        try:
            source = registries.pop(replace_with)
        except KeyError:
            raise RegistryError(f"The source '{replace_with}' could not be found") from None
        if replace_with == CRATES_IO_INDEX and source.registry is None:
            source.registry = CRATES_IO_INDEX

    if source.registry is None or not _is_url(source.registry):
        raise RegistryError("Invalid cargo config")
    return source.registry


def cargo_home() -> Path:
    """``CARGO_HOME``, or ``~/.cargo``."""
    env = os.environ.get("CARGO_HOME")
    if env is not None:
        return Path(env)
    try:
        return Path.home() / ".cargo"
    except RuntimeError as exc:
        raise RegistryError("Failed to read home directory") from exc