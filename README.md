# relplz

A library of helpers for releasing Cargo projects:

- work out the next semantic version from commit messages that follow the
  conventional commits convention;
- upgrade version requirements such as `^1.2` to a new version;
- read and edit `Cargo.toml` manifests while keeping their formatting;
- find the index URL of a registry from Cargo configuration files;
- read workspace metadata from `cargo metadata` and list workspace members;
- run common git operations on a repository.

## Installation

```
pip install relplz
```

The git helpers need `git` on the `PATH`; `relplz.workspace.get_manifest_metadata`
needs `cargo`.

## Versions

`relplz.version.Version` is a frozen semantic version with `parse`,
`increment_major`, `increment_minor`, `increment_patch` and
`increment_prerelease`. Build metadata is kept by every increment.

```python
from relplz.version import Version

Version.parse("1.0.0-beta.1.2").increment_prerelease()  # 1.0.0-beta.1.3
Version.parse("1.0.0-beta").increment_prerelease()      # 1.0.0-beta.1
```

## Next version from commits

```python
from relplz.version import Version
from relplz.next_version import VersionUpdater, next_version

next_version(Version.parse("1.2.3"), ["my change"])          # 1.2.4
next_version(Version.parse("1.3.3"), ["feat: make coffee"])  # 1.4.0
next_version(Version.parse("1.2.3"), ["feat!: break user"])  # 2.0.0
next_version(Version.parse("0.2.3"), ["feat!: break user"])  # 0.3.0
next_version(Version.parse("1.0.0-alpha"), ["fix: bug"])     # 1.0.0-alpha.1

updater = (
    VersionUpdater()
    .with_features_always_increment_minor(True)
    .with_custom_major_increment_regex("major|another")
)
updater.increment(Version.parse("0.2.3"), ["feat: make coffee"])  # 0.3.0
```

Rules in short:

- no commits: the version is unchanged;
- pre-release versions always bump their last pre-release identifier;
- `0.0.x` versions always bump the patch;
- breaking changes (`!` after the type, or a `BREAKING CHANGE` footer) bump
  the major, or the minor while the major is `0`;
- features bump the minor, or the patch while the major is `0`;
- anything else, including messages that are not conventional, bumps the patch.

`VersionUpdater` also has `with_breaking_always_increment_major` and
`with_custom_minor_increment_regex`; the custom patterns are matched against
the type of commits whose type is not a standard one. An invalid pattern
raises `re.error`.

`VersionIncrement.from_commits` returns which part would be bumped (or
`None` without commits), `VersionIncrement.breaking` the part a breaking
change would bump, and `bump` applies it.

Commit messages are parsed by `relplz.conventional.parse_commit`, which
returns a `ConventionalCommit` or raises `CommitParseError`.

## Version requirements

```python
from relplz.requirement import upgrade_requirement
from relplz.version import Version

upgrade_requirement("1.0", Version.parse("2.3.4"))  # "2.3"
upgrade_requirement("*", Version.parse("2.3.4"))    # None, nothing to change
```

Operators other than `=`, `~`, `^` and wildcards raise
`UnsupportedRequirementError`. `VersionReq.parse` raises `ValueError` on
text that is not a requirement.

## Manifests

```python
from relplz.local_manifest import LocalManifest
from relplz.version import Version

manifest = LocalManifest.find(None)  # searches upwards from the current directory
manifest.set_package_version(Version.parse("0.2.0"))
manifest.gc_dep("serde")
manifest.write()
```

`LocalManifest` also offers `get_dependency_tables`,
`get_workspace_dependency_table`, `version_is_inherited`,
`get_workspace_version` and `set_workspace_version`. `relplz.manifest.Manifest`
holds the TOML document itself; `get_sections` lists the dependency sections
as `(DepTable, table)` pairs. Problems raise `ManifestError`.

## Registries

```python
from relplz.registry import registry_url

registry_url("path/to/Cargo.toml", None)  # crates.io index unless replaced in config
```

Configuration is read from `.cargo/config` or `.cargo/config.toml` in the
manifest's directory and its ancestors, then from `cargo_home()`
(`CARGO_HOME` or `~/.cargo`). Source replacements are followed. Unknown
registries and invalid configuration raise `RegistryError`.

## Workspace metadata

```python
from relplz.workspace import get_manifest_metadata, workspace_members

metadata = get_manifest_metadata("Cargo.toml")  # runs cargo metadata --no-deps
for package in workspace_members(metadata):
    print(package.name, package.version, package.manifest_path)
```

`Metadata`, `Package` and `Dependency` can also be built from JSON with
`from_json`. Failures raise `MetadataError`. `relplz.fake_package` has
`FakePackage` and `FakeDependency` for building such objects in tests.

## Git

```python
from relplz.git import Repo

repo = Repo("path/to/repo")
repo.is_clean()
repo.add_all_and_commit("chore: release")
repo.tag("v0.2.0", "release v0.2.0")
```

Failing git commands raise `GitError` with git's output in the message.

## What this package does not do

It is a library only: it has no command-line program, and it does not
publish packages, open pull requests or write changelogs.

## Running the tests

```
pip install -e ".[test]"
pytest
```