"""Version requirements and upgrading them to a new version."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum

from relplz.version import Version


class UnsupportedRequirementError(ValueError):
    """Raised when a requirement uses an operator that cannot be upgraded."""


class Op(Enum):
    """The operator of a comparator."""

    EXACT = "="
    GREATER = ">"
    GREATER_EQ = ">="
    LESS = "<"
    LESS_EQ = "<="
    TILDE = "~"
    CARET = "^"
    WILDCARD = "*"


_COMPARATOR_RE = re.compile(
    r"(?P<op>>=|<=|=|>|<|~|\^)?\s*"
    r"(?P<major>0|[1-9][0-9]*|\*|x|X)"
    r"(?:\.(?P<minor>0|[1-9][0-9]*|\*|x|X)"
    r"(?:\.(?P<patch>0|[1-9][0-9]*|\*|x|X)"
    r"(?:-(?P<pre>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?)?)?"
    r"(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?"
)
_WILD = frozenset({"*", "x", "X"})


@dataclass(frozen=True)
class Comparator:
    """One comparison against a version, with optional minor and patch."""

    op: Op
    major: int
    minor: int | None = None
    patch: int | None = None
    pre: str = ""

    def __str__(self) -> str:
        text = ("" if self.op is Op.WILDCARD else self.op.value) + str(self.major)
        if self.minor is not None:
            text += f".{self.minor}"
            if self.patch is not None:
                text += f".{self.patch}"
                if self.pre:
                    text += f"-{self.pre}"
            elif self.op is Op.WILDCARD:
                text += ".*"
        elif self.op is Op.WILDCARD:
            text += ".*"
        return text


def _parse_comparator(text: str) -> Comparator | None:
    match = _COMPARATOR_RE.fullmatch(text)
    if match is None:
        raise ValueError(f"invalid version requirement: {text!r}")
    parts = [match["major"], match["minor"], match["patch"]]
    op_text = match["op"]
    wild_at = next((i for i, part in enumerate(parts) if part in _WILD), None)
    if wild_at is not None:
        if any(part is not None and part not in _WILD for part in parts[wild_at:]):
            raise ValueError(f"unexpected number after wildcard: {text!r}")
        if match["pre"]:
            raise ValueError(f"unexpected pre-release after wildcard: {text!r}")
        if wild_at == 0:
            if op_text is not None:
                raise ValueError(f"unexpected wildcard: {text!r}")
            return None
        numbers = [int(part) for part in parts[:wild_at]]
        numbers += [None] * (3 - len(numbers))
        op = Op.WILDCARD if op_text in (None, "=") else Op(op_text)
        return Comparator(op, numbers[0], numbers[1], numbers[2])
    op = Op.CARET if op_text is None else Op(op_text)
    numbers = [None if part is None else int(part) for part in parts]
    return Comparator(op, numbers[0], numbers[1], numbers[2], match["pre"] or "")


@dataclass(frozen=True)
class VersionReq:
    """A comma separated list of comparators; empty matches every version."""

    comparators: tuple[Comparator, ...] = ()

    @classmethod
    def parse(cls, text: str) -> VersionReq:
        """Parse a requirement, raising ``ValueError`` if it is invalid."""
        stripped = text.strip()
        if not stripped:
            raise ValueError("empty version requirement")
        comparators = []
        for piece in stripped.split(","):
            comparator = _parse_comparator(piece.strip())
            if comparator is not None:
                comparators.append(comparator)
            elif len(stripped.split(",")) > 1:
                raise ValueError(f"wildcard must stand alone: {text!r}")
        return cls(tuple(comparators))

    def __str__(self) -> str:
        if not self.comparators:
            return "*"
        return ", ".join(str(c) for c in self.comparators)


def _set_comparator(pred: Comparator, version: Version) -> Comparator:
    if pred.op not in (Op.WILDCARD, Op.EXACT, Op.TILDE, Op.CARET):
        raise UnsupportedRequirementError(
            f"Support for modifying {pred} is currently unsupported"
        )
    updated = replace(
        pred,
        major=version.major,
        minor=None if pred.minor is None else version.minor,
        patch=None if pred.patch is None else version.patch,
    )
    if pred.op is not Op.WILDCARD:
        updated = replace(updated, pre=version.pre)
    return updated


def upgrade_requirement(req: str, version: Version) -> str | None:
    """Upgrade ``req`` to ``version``; ``None`` if nothing changes."""
    raw_req = VersionReq.parse(req)
    if not raw_req.comparators:
        return None
    new_req = VersionReq(tuple(_set_comparator(c, version) for c in raw_req.comparators))
    new_text = str(new_req)
    if new_text.startswith("^") and not req.startswith("^"):
        new_text = new_text[1:]
    return None if new_text == req else new_text