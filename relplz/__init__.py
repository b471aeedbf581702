"""Release helpers for Cargo projects: versions, requirements, manifests, registries, workspace metadata and git."""

__version__ = "0.1.0"