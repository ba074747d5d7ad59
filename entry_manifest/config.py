"""Configuration models for manifest generation."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable

import yaml
from pydantic import BaseModel, Field, ImportString, field_validator

if TYPE_CHECKING:
    from .manifests.models import Manifest

CONFIG_FILENAME = "entry-manifest.yml"
DEFAULT_FILENAME = "manifest.json"

PathMapper = Callable[[str, Any], Any]
"""Rewrites a public file path; receives the path and the owning chunk."""

PathFilter = Callable[[str, Any], bool]
"""Decides whether a public file path is recorded at all."""

ManifestSerializer = Callable[..., Any]
"""Turns a finished :class:`Manifest` into the artifact payload (``str`` or ``bytes``)."""


def identity_map(path: str, chunk: Any) -> str:
    return path


def accept_all(path: str, chunk: Any) -> bool:
    return True


def json_serializer(manifest: Manifest) -> str:
    """Pretty-printed JSON keyed by entry name."""
    return json.dumps(manifest.to_payload(), ensure_ascii=False, indent=2)


class ManifestOptions(BaseModel):
    """Options for building and emitting one manifest.

    ``map``, ``filter`` and ``serialize`` accept callables or import strings
    such as ``"myproject.assets:cdn_url"``.
    """

    filename: str = Field(
        default=DEFAULT_FILENAME,
        description="Artifact path, relative to the build output directory unless absolute.",
    )
    base_path: str = Field(default="", description="Prefix prepended to every entry name.")
    public_path: str | None = Field(
        default=None,
        description="Prefix prepended to every output file; defaults to the host's public path.",
    )
    map: ImportString[PathMapper] = Field(default=identity_map)
    filter: ImportString[PathFilter] = Field(default=accept_all)
    serialize: ImportString[ManifestSerializer] = Field(default=json_serializer)
    chunks: bool = Field(
        default=False,
        description="Also list descendant/async chunk files per entry.",
    )
    emit_asset: bool = Field(
        default=True,
        description="Register the artifact with the host's asset registry.",
    )
    write_to_disk: bool = Field(
        default=True,
        description="Write the artifact directly below the output directory.",
    )

    @field_validator("filename")
    def _normalize_filename(cls, value: str) -> str:
        text = value.strip()
        if not text:
            return DEFAULT_FILENAME
        return text

    @field_validator("base_path", mode="before")
    def _ensure_base_path(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value)


class Config(BaseModel):
    """Command-line configuration wrapping manifest options."""

    output_dir: Path | None = Field(
        default=None,
        description="Override for the build output directory recorded in the stats file.",
    )
    manifest: ManifestOptions = Field(default_factory=ManifestOptions)

    @field_validator("output_dir", mode="before")
    def _ensure_optional_path(cls, value: Any) -> Path | None:
        if value is None or value == "":
            return None
        return Path(value)


def load_config(path: str | Path) -> Config:
    """Load configuration and resolve relative paths based on the config location.

    ``path`` may point to a file or a directory containing ``entry-manifest.yml``.
    A directory without that file yields the defaults.
    """
    candidate = Path(path)
    data: dict[str, Any] = {}
    if candidate.is_dir():
        config_file = candidate / CONFIG_FILENAME
        if config_file.exists():
            with config_file.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
        base_dir = candidate.resolve()
    else:
        if not candidate.exists():
            raise FileNotFoundError(candidate)
        with candidate.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
        base_dir = candidate.parent.resolve()

    if not isinstance(data, dict):
        raise ValueError(f"Configuration at {candidate} should define a mapping.")

    cfg = Config(**data)
    if cfg.output_dir is not None and not cfg.output_dir.is_absolute():
        cfg.output_dir = (base_dir / cfg.output_dir).resolve()
    return cfg
