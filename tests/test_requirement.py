import pytest

from relplz.requirement import (
    Comparator,
    Op,
    UnsupportedRequirementError,
    VersionReq,
    upgrade_requirement,
)
from relplz.version import Version


@pytest.mark.parametrize("text", ["^1.2.3", "=1.2.3", "~1.2", "1.*", ">=1.0.0, <2.0.0"])
def test_parse_display_round_trip(text):
    assert str(VersionReq.parse(text)) == text


def test_bare_version_is_caret():
    req = VersionReq.parse("1.2")
    assert req.comparators == (Comparator(Op.CARET, 1, 2),)


def test_star_is_empty():
    assert VersionReq.parse("*").comparators == ()
    assert str(VersionReq.parse("*")) == "*"


def test_invalid_requirement():
    with pytest.raises(ValueError):
        VersionReq.parse("not a version")


def test_unchanged_requirement_gives_none():
    assert upgrade_requirement("1.2.3", Version(1, 2, 3)) is None
    assert upgrade_requirement("*", Version(5, 0, 0)) is None


def test_caret_upgrade():
    assert upgrade_requirement("^1.2.3", Version(2, 0, 0)) == "^2.0.0"


def test_bare_requirement_keeps_no_caret():
    result = upgrade_requirement("1.2.3", Version(2, 0, 0))
    assert result == "2.0.0"
    assert not result.startswith("^")


def test_partial_requirement_keeps_precision():
    result = upgrade_requirement("~1.2", Version(1, 5, 9))
    assert result == "~1.5"


def test_wildcard_upgrade_keeps_shape():
    result = upgrade_requirement("1.*", Version(3, 4, 5))
    assert result == "3.*"


def test_unsupported_operator():
    with pytest.raises(UnsupportedRequirementError, match="currently unsupported"):
        upgrade_requirement(">=1.0.0", Version(2, 0, 0))