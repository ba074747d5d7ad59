"""Pydantic models describing entry manifest structures."""

from __future__ import annotations

from typing import Iterator, Optional

from pydantic import BaseModel, Field, RootModel


class ManifestEntry(BaseModel):
    """Output files recorded for a single build entry."""

    js: list[str] = Field(default_factory=list)
    css: list[str] = Field(default_factory=list)
    chunks: Optional[list[str]] = Field(
        default=None,
        description="Descendant/async files; omitted unless chunk collection is enabled.",
    )

    def files(self) -> list[str]:
        return [*self.js, *self.css, *(self.chunks or [])]


class Manifest(RootModel[dict[str, ManifestEntry]]):
    """Mapping of (optionally prefixed) entry names to their output files."""

    root: dict[str, ManifestEntry] = Field(default_factory=dict)

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(self.root)

    def __getitem__(self, name: str) -> ManifestEntry:
        return self.root[name]

    def __len__(self) -> int:
        return len(self.root)

    def items(self):
        return self.root.items()

    def to_payload(self) -> dict[str, dict[str, list[str]]]:
        return self.model_dump(mode="json", exclude_none=True)
