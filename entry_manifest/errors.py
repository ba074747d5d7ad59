"""Exceptions raised while producing entry manifests."""

from __future__ import annotations


class ManifestError(RuntimeError):
    """Raised when a manifest cannot be produced."""


class UnsupportedEntrypointsError(ManifestError, TypeError):
    """Raised when the host exposes entrypoints in a shape we cannot read."""


class StatsError(ManifestError):
    """Raised when a bundler stats document is malformed."""
