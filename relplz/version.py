"""Semantic versions and the basic ways of incrementing them."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace

_MAX_NUMBER = 2**64 - 1
_MAX_IDENTIFIER_NUMBER = 2**32 - 1

_NUMBER = r"0|[1-9][0-9]*"
_IDENTIFIER = r"[0-9A-Za-z-]+"
_DOTTED = rf"{_IDENTIFIER}(?:\.{_IDENTIFIER})*"
_VERSION_RE = re.compile(
    rf"(?P<major>{_NUMBER})\.(?P<minor>{_NUMBER})\.(?P<patch>{_NUMBER})"
    rf"(?:-(?P<pre>{_DOTTED}))?"
    rf"(?:\+(?P<build>{_DOTTED}))?"
)
_PRERELEASE_RE = re.compile(_DOTTED)
_DIGITS_RE = re.compile(r"[0-9]+")


def _validate_prerelease(pre: str) -> None:
    if not pre:
        return
    if not _PRERELEASE_RE.fullmatch(pre):
        raise ValueError(f"invalid pre-release identifier: {pre!r}")
    for identifier in pre.split("."):
        if _DIGITS_RE.fullmatch(identifier) and len(identifier) > 1 and identifier[0] == "0":
            raise ValueError(f"invalid leading zero in pre-release identifier: {pre!r}")


@dataclass(frozen=True)
class Version:
    """A semantic version: ``major.minor.patch[-pre][+build]``."""

    major: int
    minor: int
    patch: int
    pre: str = ""
    build: str = ""

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse a semantic version string, raising ``ValueError`` if it is invalid."""
        match = _VERSION_RE.fullmatch(text)
        if match is None:
            raise ValueError(f"invalid semantic version: {text!r}")
        numbers = [int(match[part]) for part in ("major", "minor", "patch")]
        if any(number > _MAX_NUMBER for number in numbers):
            raise ValueError(f"version number exceeds the maximum: {text!r}")
        pre = match["pre"] or ""
        _validate_prerelease(pre)
        return cls(*numbers, pre=pre, build=match["build"] or "")

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre:
            text += f"-{self.pre}"
        if self.build:
            text += f"+{self.build}"
        return text

    def increment_major(self) -> Version:
        """Increment the major number, resetting minor, patch and pre-release."""
        return replace(self, major=self.major + 1, minor=0, patch=0, pre="")

    def increment_minor(self) -> Version:
        """Increment the minor number, resetting patch and pre-release."""
        return replace(self, minor=self.minor + 1, patch=0, pre="")

    def increment_patch(self) -> Version:
        """Increment the patch number, resetting the pre-release."""
        return replace(self, patch=self.patch + 1, pre="")

    def increment_prerelease(self) -> Version:
        """Increment the last numeric pre-release identifier, or append ``.1``."""
        next_pre = increment_last_identifier(self.pre)
        try:
            _validate_prerelease(next_pre)
        except ValueError as exc:
            raise ValueError(f"cannot increment pre-release of {self}") from exc
        return replace(self, pre=next_pre)


def increment_last_identifier(release: str) -> str:
    """Increment the number after the last dot, or append ``.1`` if there is none."""
    left, dot, right = release.rpartition(".")
    if dot and _DIGITS_RE.fullmatch(right) and int(right) <= _MAX_IDENTIFIER_NUMBER:
        return f"{left}.{int(right) + 1}"
    return f"{release}.1"