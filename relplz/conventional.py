"""Parsing of commit messages that follow the conventional commits format."""

from __future__ import annotations

import itertools
import re
from dataclasses import dataclass
from enum import Enum


class CommitParseError(ValueError):
    """Raised when a commit message is not a conventional commit."""


class CommitType(Enum):
    """The type of a conventional commit."""

    FEATURE = "feat"
    BUG_FIX = "fix"
    CHORE = "chore"
    REVERT = "revert"
    PERFORMANCES = "perf"
    DOCUMENTATION = "docs"
    STYLE = "style"
    REFACTOR = "refactor"
    TEST = "test"
    BUILD = "build"
    CI = "ci"
    CUSTOM = "custom"


_KNOWN_TYPES = {member.value: member for member in CommitType if member is not CommitType.CUSTOM}

_BREAKING_TOKENS = frozenset({"BREAKING CHANGE", "BREAKING-CHANGE"})

_SUMMARY_RE = re.compile(
    r"(?P<type>[A-Za-z]+)(?:\((?P<scope>[^()\r\n]+)\))?(?P<bang>!)?: (?P<summary>.+)"
)
_FOOTER_RE = re.compile(
    r"(?P<token>BREAKING[ -]CHANGE|[A-Za-z][A-Za-z0-9-]*)(?:: | #)(?P<content>.*)"
)


@dataclass(frozen=True)
class ConventionalCommit:
    """A parsed conventional commit message."""

    commit_type: CommitType
    summary: str
    type_name: str = ""
    scope: str | None = None
    body: str | None = None
    footers: tuple[tuple[str, str], ...] = ()
    is_breaking_change: bool = False


def _paragraphs(lines: list[str]) -> list[list[str]]:
    return [
        list(group)
        for is_blank, group in itertools.groupby(lines, key=lambda line: not line.strip())
        if not is_blank
    ]


def _parse_footers(lines: list[str]) -> list[tuple[str, str]]:
    footers: list[tuple[str, str]] = []
    for line in lines:
        match = _FOOTER_RE.fullmatch(line)
        if match is not None:
            footers.append((match["token"], match["content"]))
        else:
            token, content = footers[-1]
            footers[-1] = (token, f"{content}\n{line}")
    return footers


def parse_commit(message: str) -> ConventionalCommit:
    """Parse ``message``, raising ``CommitParseError`` if it is not conventional."""
    lines = message.splitlines()
    if not lines:
        raise CommitParseError("empty commit message")
    match = _SUMMARY_RE.fullmatch(lines[0])
    if match is None or not match["summary"].strip():
        raise CommitParseError(f"not a conventional commit: {lines[0]!r}")

    type_name = match["type"]
    commit_type = _KNOWN_TYPES.get(type_name.lower(), CommitType.CUSTOM)

    paragraphs = _paragraphs(lines[1:])
    footers: list[tuple[str, str]] = []
    if paragraphs and _FOOTER_RE.fullmatch(paragraphs[-1][0]):
        footers = _parse_footers(paragraphs.pop())
    body = "\n\n".join("\n".join(paragraph) for paragraph in paragraphs) or None

    is_breaking = match["bang"] is not None or any(
        token in _BREAKING_TOKENS for token, _ in footers
    )
    return ConventionalCommit(
        commit_type=commit_type,
        summary=match["summary"].strip(),
        type_name=type_name,
        scope=match["scope"],
        body=body,
        footers=tuple(footers),
        is_breaking_change=is_breaking,
    )