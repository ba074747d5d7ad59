"""Manifest data structures and helpers."""

from .models import Manifest, ManifestEntry
from .builder import ManifestBuilder
from .writer import EmittedManifest, ManifestAsset, emit_manifest, write_manifest

__all__ = [
    "EmittedManifest",
    "Manifest",
    "ManifestAsset",
    "ManifestBuilder",
    "ManifestEntry",
    "emit_manifest",
    "write_manifest",
]
