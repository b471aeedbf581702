from pathlib import Path

import pytest

from relplz.fake_package import FakeDependency, FakePackage, fake_metadata
from relplz.manifest import DepKind
from relplz.version import Version
from relplz.workspace import MetadataError


def test_dependency_defaults_to_normal():
    dep = FakeDependency("serde").to_dependency()
    assert dep.name == "serde"
    assert dep.kind is DepKind.NORMAL
    assert dep.req == "0.1.0"
    assert dep.optional is False
    assert dep.uses_default_features is True
    assert dep.features == ()


def test_dev_dependency():
    dep = FakeDependency("serde").dev()
    assert dep.kind is DepKind.DEVELOPMENT
    assert dep.to_dependency().kind is DepKind.DEVELOPMENT
    assert dep.name == "serde"


def test_dev_leaves_original_untouched():
    original = FakeDependency("serde")
    original.dev()
    assert original.kind is DepKind.NORMAL


def test_package_without_dependencies():
    pkg = FakePackage("one").to_package()
    assert pkg.name == "one"
    assert pkg.id == "one"
    assert pkg.version == Version(0, 1, 0)
    assert pkg.manifest_path == Path("one/Cargo.toml")
    assert pkg.dependencies == ()
    assert pkg.features == {}


def test_package_with_dependencies():
    fake = FakePackage("one").with_dependencies(
        [FakeDependency("two"), FakeDependency("three").dev()]
    )
    pkg = fake.to_package()
    assert [d.name for d in pkg.dependencies] == ["two", "three"]
    assert [d.kind for d in pkg.dependencies] == [DepKind.NORMAL, DepKind.DEVELOPMENT]


def test_with_dependencies_replaces_previous_ones():
    fake = FakePackage("one").with_dependencies([FakeDependency("two")])
    fake = fake.with_dependencies([FakeDependency("three")])
    assert [d.name for d in fake.to_package().dependencies] == ["three"]


def test_fake_metadata_fails_without_manifest(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(MetadataError):
        fake_metadata()