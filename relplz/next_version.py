"""Compute the next semantic version from a list of commit messages.

Non conventional commits increment the patch. In ``0.0.x`` versions the patch
is always incremented. Features increment the minor, or the patch when the
major is ``0``. Breaking changes increment the major, or the minor when the
major is ``0``. Pre-release versions always increment their pre-release part,
and build metadata is kept.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, replace
from enum import Enum

from relplz.conventional import (
    CommitParseError,
    CommitType,
    ConventionalCommit,
    parse_commit,
)
from relplz.version import Version


class VersionIncrement(Enum):
    """The part of a version that should be incremented."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    PRERELEASE = "prerelease"

    @classmethod
    def from_commits(
        cls, current_version: Version, commits: Iterable[str]
    ) -> VersionIncrement | None:
        """Decide the increment for ``commits``; ``None`` if there are no commits."""
        return _from_commits_with_updater(VersionUpdater(), current_version, commits)

    @classmethod
    def breaking(cls, current_version: Version) -> VersionIncrement:
        """The increment that accounts for a breaking change."""
        if current_version.pre:
            return cls.PRERELEASE
        if current_version.major == 0 and current_version.minor == 0:
            return cls.PATCH
        if current_version.major == 0:
            return cls.MINOR
        return cls.MAJOR

    def bump(self, version: Version) -> Version:
        """Apply this increment to ``version``."""
        if self is VersionIncrement.MAJOR:
            return version.increment_major()
        if self is VersionIncrement.MINOR:
            return version.increment_minor()
        if self is VersionIncrement.PATCH:
            return version.increment_patch()
        return version.increment_prerelease()


def is_there_a_custom_match(
    regex: re.Pattern[str] | None, commits: Iterable[ConventionalCommit]
) -> bool:
    """True if any custom-typed commit has a type matching ``regex``."""
    if regex is None:
        return False
    return any(
        commit.commit_type is CommitType.CUSTOM and regex.search(commit.type_name)
        for commit in commits
    )


def _parse_or_none(message: str) -> ConventionalCommit | None:
    try:
        return parse_commit(message)
    except CommitParseError:
        return None


def _from_commits_with_updater(
    updater: VersionUpdater, current_version: Version, commits: Iterable[str]
) -> VersionIncrement | None:
    messages = list(commits)
    if not messages:
        return None
    if current_version.pre:
        return VersionIncrement.PRERELEASE
    parsed = [c for c in map(_parse_or_none, messages) if c is not None]
    return _from_conventional_commits(current_version, parsed, updater)


def _from_conventional_commits(
    current: Version, commits: list[ConventionalCommit], updater: VersionUpdater
) -> VersionIncrement:
    is_breaking = any(commit.is_breaking_change for commit in commits)
    has_feature = any(commit.commit_type is CommitType.FEATURE for commit in commits)

    is_major_bump = (
        is_breaking or is_there_a_custom_match(updater.custom_major_increment_regex, commits)
    ) and (current.major != 0 or updater.breaking_always_increment_major)
    if is_major_bump:
        return VersionIncrement.MAJOR

    is_feature_bump = has_feature and (
        current.major != 0 or updater.features_always_increment_minor
    )
    is_breaking_bump = current.major == 0 and current.minor != 0 and is_breaking
    if (
        is_feature_bump
        or is_breaking_bump
        or is_there_a_custom_match(updater.custom_minor_increment_regex, commits)
    ):
        return VersionIncrement.MINOR
    return VersionIncrement.PATCH


@dataclass(frozen=True)
class VersionUpdater:
    """Configurable rules for computing the next version."""

    features_always_increment_minor: bool = False
    breaking_always_increment_major: bool = False
    custom_major_increment_regex: re.Pattern[str] | None = None
    custom_minor_increment_regex: re.Pattern[str] | None = None

    def with_features_always_increment_minor(self, value: bool) -> VersionUpdater:
        """Make features always bump the minor, even when the major is ``0``."""
        return replace(self, features_always_increment_minor=value)

    def with_breaking_always_increment_major(self, value: bool) -> VersionUpdater:
        """Make breaking changes always bump the major, even from ``0`` to ``1``."""
        return replace(self, breaking_always_increment_major=value)

    def with_custom_major_increment_regex(self, pattern: str) -> VersionUpdater:
        """Commit types matching ``pattern`` bump the major; raises ``re.error`` if invalid."""
        return replace(self, custom_major_increment_regex=re.compile(pattern))

    def with_custom_minor_increment_regex(self, pattern: str) -> VersionUpdater:
        """Commit types matching ``pattern`` bump the minor; raises ``re.error`` if invalid."""
        return replace(self, custom_minor_increment_regex=re.compile(pattern))

    def increment(self, version: Version, commits: Iterable[str]) -> Version:
        """Analyse ``commits`` and return the next version."""
        increment = _from_commits_with_updater(self, version, commits)
        return version if increment is None else increment.bump(version)


def next_version(version: Version, commits: Iterable[str]) -> Version:
    """Next version of ``version`` under the default rules."""
    return VersionUpdater().increment(version, commits)