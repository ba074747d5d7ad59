"""Normalize the host's entrypoint structure into an ordered mapping."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterator, Mapping

from .errors import UnsupportedEntrypointsError
from .host import Chunk, ChunkGroup, Compilation

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ResolvedEntry:
    """A named build entry and the chunk group behind it."""

    name: str
    group: ChunkGroup

    @property
    def chunks(self) -> list[Chunk]:
        return list(self.group.chunks)

    def descendants(self) -> Iterator[ChunkGroup]:
        return iter_descendants(self.group)


def resolve_entrypoints(compilation: Compilation) -> dict[str, ChunkGroup]:
    """Return the compilation's entrypoints as an insertion-ordered dict.

    Hosts expose entrypoints either as a mapping or as a plain object whose
    attributes are the entry names.
    """
    entrypoints = getattr(compilation, "entrypoints", None)

    if isinstance(entrypoints, Mapping):
        return {str(name): group for name, group in entrypoints.items()}

    if entrypoints is not None and hasattr(entrypoints, "__dict__"):
        return dict(vars(entrypoints))

    raise UnsupportedEntrypointsError(
        f"Unsupported entrypoints structure: {type(entrypoints).__name__}"
    )


def iter_entries(compilation: Compilation) -> Iterator[ResolvedEntry]:
    for name, group in resolve_entrypoints(compilation).items():
        logger.debug("Resolved entry %s", name)
        yield ResolvedEntry(name=name, group=group)


def iter_descendants(group: ChunkGroup) -> Iterator[ChunkGroup]:
    """Yield child chunk groups depth-first, each group at most once."""
    visited: set[int] = {id(group)}
    stack: list[Any] = list(reversed(_children(group)))
    while stack:
        child = stack.pop()
        if id(child) in visited:
            continue
        visited.add(id(child))
        yield child
        stack.extend(reversed(_children(child)))


def _children(group: ChunkGroup) -> list[ChunkGroup]:
    return list(getattr(group, "children", None) or ())
