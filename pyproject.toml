[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "relplz"
version = "0.1.0"
description = "Release helpers for Cargo projects: next version from conventional commits, requirement upgrades, manifest editing, registry lookup, workspace metadata and git operations."
requires-python = ">=3.10"
keywords = ["release", "semver", "conventional-commits", "cargo", "git", "versioning"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
    "Topic :: Software Development :: Version Control :: Git",
]
dependencies = [
    "tomlkit",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["relplz"]

[tool.pytest.ini_options]
addopts = "-ra"
