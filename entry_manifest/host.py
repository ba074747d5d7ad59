"""Structural types for the bundler host this package plugs into.

The host owns the build graph. Everything here is read-only from our side
except the asset registry, which receives the serialized manifest.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, MutableMapping, Optional, Protocol, Sequence, runtime_checkable

EmitCallback = Callable[[Optional[BaseException]], None]
"""Completion callback; receives ``None`` on success or the failure."""


class Chunk(Protocol):
    files: Iterable[str]


class ChunkGroup(Protocol):
    chunks: Sequence[Chunk]
    children: Sequence["ChunkGroup"]


class Compilation(Protocol):
    entrypoints: Any
    assets: MutableMapping[str, Any]


class OutputOptions(Protocol):
    public_path: Optional[str]


class CompilerOptions(Protocol):
    output: OutputOptions


class AsyncHook(Protocol):
    def tap_async(self, name: str, handler: Callable[[Compilation, EmitCallback], None]) -> None: ...


class CompilerHooks(Protocol):
    emit: AsyncHook


@runtime_checkable
class Compiler(Protocol):
    output_path: str
    options: CompilerOptions
    hooks: CompilerHooks


@runtime_checkable
class LegacyCompiler(Protocol):
    """Older hosts register handlers by event name instead of exposing ``hooks``."""

    output_path: str
    options: CompilerOptions

    def plugin(self, event: str, handler: Callable[[Compilation, EmitCallback], None]) -> None: ...
