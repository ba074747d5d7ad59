"""Read a bundler stats document (``webpack --json``) as a compilation."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import StatsError

ChunkId = Union[int, str]


class StatsAssetRef(BaseModel):
    name: str


class StatsChunkRecord(BaseModel):
    id: ChunkId
    files: list[str] = Field(default_factory=list)
    children: list[ChunkId] = Field(default_factory=list)


class StatsEntrypointRecord(BaseModel):
    chunks: list[ChunkId] = Field(default_factory=list)
    assets: list[Union[str, StatsAssetRef]] = Field(default_factory=list)


class StatsDocument(BaseModel):
    """The subset of the stats JSON needed to rebuild the entry graph."""

    model_config = ConfigDict(populate_by_name=True)

    output_path: Optional[str] = Field(default=None, alias="outputPath")
    public_path: Optional[str] = Field(default=None, alias="publicPath")
    entrypoints: dict[str, StatsEntrypointRecord] = Field(default_factory=dict)
    chunks: list[StatsChunkRecord] = Field(default_factory=list)


@dataclass(slots=True)
class StatsChunk:
    id: Optional[ChunkId]
    files: list[str] = field(default_factory=list)


@dataclass(eq=False, slots=True)
class StatsChunkGroup:
    name: str
    chunks: list[StatsChunk] = field(default_factory=list)
    children: list["StatsChunkGroup"] = field(default_factory=list)


@dataclass(slots=True)
class StatsCompilation:
    """Compilation view over a stats document."""

    entrypoints: dict[str, StatsChunkGroup]
    output_path: Optional[Path] = None
    public_path: str = ""
    assets: dict[str, Any] = field(default_factory=dict)

    def emit_asset(self, name: str, source: Any) -> None:
        self.assets[name] = source


def load_stats(path: str | Path) -> StatsCompilation:
    source = Path(path)
    with source.open("r", encoding="utf-8") as handle:
        try:
            data = json.load(handle)
        except json.JSONDecodeError as exc:
            raise StatsError(f"Stats file {source} is not valid JSON: {exc}") from exc
    return parse_stats(data)


def parse_stats(data: Any) -> StatsCompilation:
    if not isinstance(data, Mapping):
        raise StatsError("Stats document should be a JSON object.")
    try:
        document = StatsDocument.model_validate(data)
    except ValidationError as exc:
        raise StatsError(f"Invalid stats document: {exc}") from exc

    records = {_key(chunk.id): chunk for chunk in document.chunks}
    chunks = {key: StatsChunk(id=record.id, files=list(record.files)) for key, record in records.items()}
    groups: dict[str, StatsChunkGroup] = {}

    def child_group(key: str) -> StatsChunkGroup:
        if key in groups:
            return groups[key]
        group = StatsChunkGroup(name=key, chunks=[chunks[key]])
        groups[key] = group
        group.children = [child_group(child) for child in _child_keys(records, [key], chunks)]
        return group

    entrypoints: dict[str, StatsChunkGroup] = {}
    for name, entry in document.entrypoints.items():
        own_keys = [_key(chunk_id) for chunk_id in entry.chunks if _key(chunk_id) in chunks]
        if own_keys:
            group = StatsChunkGroup(name=name, chunks=[chunks[key] for key in own_keys])
            group.children = [
                child_group(child)
                for child in _child_keys(records, own_keys, chunks)
                if child not in own_keys
            ]
        else:
            files = [asset if isinstance(asset, str) else asset.name for asset in entry.assets]
            group = StatsChunkGroup(name=name, chunks=[StatsChunk(id=None, files=files)])
        entrypoints[name] = group

    public_path = document.public_path or ""
    if public_path == "auto":
        public_path = ""

    return StatsCompilation(
        entrypoints=entrypoints,
        output_path=Path(document.output_path) if document.output_path else None,
        public_path=public_path,
    )


def _key(chunk_id: ChunkId) -> str:
    return str(chunk_id)


def _child_keys(
    records: Mapping[str, StatsChunkRecord],
    parents: list[str],
    chunks: Mapping[str, StatsChunk],
) -> list[str]:
    keys: list[str] = []
    for parent in parents:
        for child in records[parent].children:
            key = _key(child)
            if key in chunks and key not in keys:
                keys.append(key)
    return keys
