"""Entry manifest generation for bundler builds."""

from __future__ import annotations

from .config import ManifestOptions
from .manifests import Manifest, ManifestBuilder, ManifestEntry
from .plugin import EntryManifestPlugin
from .version import package_version

__version__ = package_version()

__all__ = [
    "EntryManifestPlugin",
    "Manifest",
    "ManifestBuilder",
    "ManifestEntry",
    "ManifestOptions",
    "__version__",
]
