import re

import pytest

from relplz.conventional import CommitType, ConventionalCommit
from relplz.next_version import (
    VersionIncrement,
    VersionUpdater,
    is_there_a_custom_match,
    next_version,
)
from relplz.version import Version


# Normal versions


def test_commit_without_semver_prefix_increments_patch_version():
    assert next_version(Version(1, 2, 3), ["my change"]) == Version(1, 2, 4)


def test_commit_with_fix_semver_prefix_increments_patch_version():
    assert next_version(Version(1, 2, 3), ["my change", "fix: serious bug"]) == Version(1, 2, 4)


def test_commit_with_feat_semver_prefix_increments_minor_version():
    assert next_version(Version(1, 3, 3), ["feat: make coffe"]) == Version(1, 4, 0)


def test_commit_with_feat_increments_patch_version_when_major_is_zero():
    assert next_version(Version(0, 2, 3), ["feat: make coffee"]) == Version(0, 2, 4)


def test_commit_with_feat_increments_minor_version_when_major_is_zero_if_configured():
    updater = (
        VersionUpdater()
        .with_features_always_increment_minor(True)
        .with_breaking_always_increment_major(False)
    )
    assert updater.increment(Version(0, 2, 3), ["feat: make coffee"]) == Version(0, 3, 0)


def test_commit_with_breaking_change_increments_major_version():
    assert next_version(Version(1, 2, 3), ["feat!: break user"]) == Version(2, 0, 0)


def test_commit_with_breaking_change_increments_minor_version_when_major_is_zero():
    assert next_version(Version(0, 2, 3), ["feat!: break user"]) == Version(0, 3, 0)


def test_commit_with_breaking_change_increments_major_version_when_major_is_zero_if_configured():
    updater = (
        VersionUpdater()
        .with_features_always_increment_minor(False)
        .with_breaking_always_increment_major(True)
    )
    assert updater.increment(Version(0, 2, 3), ["feat!: break user"]) == Version(1, 0, 0)


def test_commit_with_custom_major_increment_regex_increments_major_version():
    updater = VersionUpdater().with_custom_major_increment_regex("another|major")
    assert updater.increment(Version(1, 2, 3), ["major: some changes"]) == Version(2, 0, 0)


def test_commit_with_custom_minor_increment_regex_increments_minor_version():
    updater = VersionUpdater().with_custom_minor_increment_regex("minor")
    assert updater.increment(Version(1, 2, 3), ["minor: some changes"]) == Version(1, 3, 0)


def test_custom_major_regex_is_ignored_without_it():
    assert next_version(Version(1, 2, 3), ["abc: incompatible change"]) == Version(1, 2, 4)
    updater = VersionUpdater().with_custom_major_increment_regex("abc")
    assert updater.increment(Version(1, 2, 3), ["abc: incompatible change"]) == Version(2, 0, 0)


def test_custom_minor_regex_with_alternatives():
    updater = VersionUpdater().with_custom_minor_increment_regex("abc|bbb")
    assert updater.increment(Version(0, 2, 3), ["bbb: make coffee"]) == Version(0, 3, 0)
    assert next_version(Version(0, 2, 3), ["bbb: make coffee"]) == Version(0, 2, 4)


def test_invalid_regex_raises():
    with pytest.raises(re.error):
        VersionUpdater().with_custom_major_increment_regex("(")


def test_updater_example_from_docs():
    updater = (
        VersionUpdater()
        .with_features_always_increment_minor(False)
        .with_breaking_always_increment_major(True)
    )
    result = updater.increment(Version(1, 2, 3), ["feat: commit 1", "fix: commit 2"])
    assert result == Version(1, 3, 0)


def test_default_updater_equals_next_version():
    commits = ["feat: commit 1", "fix: commit 2"]
    version = Version(1, 2, 3)
    assert VersionUpdater().increment(version, commits) == next_version(version, commits)


def test_zero_zero_versions_always_increment_patch():
    assert next_version(Version(0, 0, 4), ["my change"]) == Version(0, 0, 5)
    assert next_version(Version(0, 0, 1), ["feat!: break user"]) == Version(0, 0, 2)


def test_feature_with_other_commits():
    commits = ["my change", "feat: make coffe"]
    assert next_version(Version(1, 2, 4), commits) == Version(1, 3, 0)
    assert next_version(Version(0, 2, 4), commits) == Version(0, 2, 5)


def test_breaking_change_in_footer():
    breaking_commit = "feat: make coffe\n\nmy change\n\nBREAKING CHANGE: user will be broken\n"
    assert next_version(Version(1, 2, 4), [breaking_commit]) == Version(2, 0, 0)


def test_breaking_change_doc_examples():
    assert next_version(Version(1, 2, 4), ["feat!: break user"]) == Version(2, 0, 0)
    assert next_version(Version(0, 4, 4), ["feat!: break user"]) == Version(0, 5, 0)


def test_no_commits_leaves_version_unchanged():
    version = Version(0, 3, 3)
    assert next_version(version, []) == version


def test_build_metadata_is_kept():
    commits = ["my change"]
    assert next_version(Version.parse("1.0.0-beta.1+1.1.0"), commits) == Version.parse(
        "1.0.0-beta.2+1.1.0"
    )
    assert next_version(Version.parse("1.0.0+abcd"), commits) == Version.parse("1.0.1+abcd")


# Pre-release versions


@pytest.mark.parametrize(
    ("commit", "current", "expected"),
    [
        ("my change", "1.0.0-alpha.2", "1.0.0-alpha.3"),
        ("feat!: break user", "1.0.0-alpha.2", "1.0.0-alpha.3"),
        ("feat!: break user", "1.0.0-alpha", "1.0.0-alpha.1"),
        ("feat!: break user", "1.0.0-beta.1.2", "1.0.0-beta.1.3"),
        ("feat!: break user", "1.0.0-beta.1.a", "1.0.0-beta.1.a.1"),
        ("feat!: break user", "1.0.0-alpha.1.2", "1.0.0-alpha.1.3"),
        ("feat!: break user", "1.0.0-beta", "1.0.0-beta.1"),
    ],
)
def test_pre_release_increments(commit, current, expected):
    assert next_version(Version.parse(current), [commit]) == Version.parse(expected)


# VersionIncrement


def test_breaking_increment():
    assert VersionIncrement.breaking(Version(0, 3, 3)) is VersionIncrement.MINOR
    assert VersionIncrement.breaking(Version(1, 3, 3)) is VersionIncrement.MAJOR
    assert VersionIncrement.breaking(Version.parse("1.3.3-alpha.1")) is VersionIncrement.PRERELEASE
    assert VersionIncrement.breaking(Version(0, 0, 1)) is VersionIncrement.PATCH


def test_from_commits():
    assert VersionIncrement.from_commits(Version(1, 2, 3), []) is None
    assert VersionIncrement.from_commits(Version(1, 2, 3), ["my change"]) is VersionIncrement.PATCH
    assert VersionIncrement.from_commits(Version(1, 2, 3), ["feat: x"]) is VersionIncrement.MINOR
    assert (
        VersionIncrement.from_commits(Version.parse("1.0.0-rc.1"), ["feat: x"])
        is VersionIncrement.PRERELEASE
    )


def test_from_commits_accepts_generator():
    commits = (message for message in ["feat!: break user"])
    assert VersionIncrement.from_commits(Version(1, 2, 3), commits) is VersionIncrement.MAJOR


def test_bump():
    assert VersionIncrement.MAJOR.bump(Version(1, 2, 4)) == Version(2, 0, 0)
    assert VersionIncrement.PATCH.bump(Version(1, 2, 3)) == Version(1, 2, 4)


# Custom matches


def _commit(commit_type, type_name, summary):
    return ConventionalCommit(commit_type=commit_type, summary=summary, type_name=type_name)


def test_returns_true_for_matching_custom_type():
    commits = [_commit(CommitType.CUSTOM, "custom", "A custom commit")]
    assert is_there_a_custom_match(re.compile("custom"), commits) is True


def test_returns_false_for_non_custom_commit_types():
    commits = [_commit(CommitType.FEATURE, "feat", "A feature commit")]
    assert is_there_a_custom_match(re.compile("custom"), commits) is False


def test_returns_false_for_empty_commits_list():
    assert is_there_a_custom_match(re.compile("custom"), []) is False


def test_handles_commits_with_empty_custom_types():
    commits = [_commit(CommitType.CUSTOM, "", "A custom commit")]
    assert is_there_a_custom_match(re.compile("custom"), commits) is False


def test_returns_false_without_regex():
    commits = [_commit(CommitType.CUSTOM, "custom", "A custom commit")]
    assert is_there_a_custom_match(None, commits) is False