"""Serialization and persistence helpers for entry manifests."""

from __future__ import annotations

import logging
import os
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..config import ManifestOptions, ManifestSerializer
from ..host import Compilation
from .models import Manifest

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ManifestAsset:
    """Raw serialized manifest handed to the host's asset registry."""

    content: bytes

    def source(self) -> bytes:
        return self.content

    def size(self) -> int:
        return len(self.content)


@dataclass(slots=True)
class EmittedManifest:
    """Where a manifest went and, when written to disk, the pending write."""

    asset_name: str
    payload: bytes
    path: Optional[Path] = None
    write: Optional["Future[Path]"] = None


def unixify(path: str) -> str:
    """Normalize a path and convert separators to forward slashes."""
    return os.path.normpath(path).replace("\\", "/")


def asset_name(output_path: str | Path, filename: str) -> str:
    """Name of the artifact relative to the build output directory."""
    if os.path.isabs(filename):
        return unixify(os.path.relpath(filename, output_path))
    return unixify(filename)


def resolve_output_file(output_path: str | Path, filename: str) -> Path:
    target = Path(filename)
    if target.is_absolute():
        return target
    return Path(output_path) / target


def serialize_manifest(manifest: Manifest, serializer: ManifestSerializer) -> bytes:
    payload = serializer(manifest)
    if isinstance(payload, bytes):
        return payload
    if isinstance(payload, str):
        return payload.encode("utf-8")
    raise TypeError(f"Manifest serializer returned {type(payload).__name__}; expected str or bytes")


def register_asset(compilation: Compilation, name: str, asset: ManifestAsset) -> None:
    """Add the asset through ``emit_asset`` when the host has it, else into ``assets``."""
    emit = getattr(compilation, "emit_asset", None)
    if callable(emit):
        emit(name, asset)
    else:
        compilation.assets[name] = asset


def write_manifest(path: Path, payload: bytes) -> Path:
    """Write the serialized manifest, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(payload)
    logger.info("Wrote manifest to %s (%d bytes)", path, len(payload))
    return path


def write_manifest_async(path: Path, payload: bytes) -> "Future[Path]":
    """Write the manifest on a worker thread; the future carries any ``OSError``."""
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="entry-manifest")
    try:
        return executor.submit(write_manifest, path, payload)
    finally:
        executor.shutdown(wait=False)


def emit_manifest(
    compilation: Compilation,
    manifest: Manifest,
    options: ManifestOptions,
    *,
    output_path: str | Path,
) -> EmittedManifest:
    """Serialize ``manifest`` and hand it to the host and/or the filesystem."""
    name = asset_name(output_path, options.filename)
    payload = serialize_manifest(manifest, options.serialize)
    emitted = EmittedManifest(asset_name=name, payload=payload)

    if options.emit_asset:
        register_asset(compilation, name, ManifestAsset(payload))

    if options.write_to_disk:
        emitted.path = resolve_output_file(output_path, options.filename)
        emitted.write = write_manifest_async(emitted.path, payload)

    return emitted
