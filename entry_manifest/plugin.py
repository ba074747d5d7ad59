"""Bundler plugin emitting the entry manifest once per build."""

from __future__ import annotations

import logging
from concurrent.futures import Future
from pathlib import Path
from typing import Any, Mapping, Optional, cast

from .config import ManifestOptions
from .host import Compilation, Compiler, EmitCallback, LegacyCompiler
from .manifests import EmittedManifest, Manifest, ManifestBuilder, emit_manifest

logger = logging.getLogger(__name__)


class EntryManifestPlugin:
    """Hook into the host's emit stage and write ``manifest.json``.

    Options are validated once here; every build reuses them unchanged.
    """

    name = "EntryManifestPlugin"

    def __init__(
        self,
        options: ManifestOptions | Mapping[str, Any] | None = None,
        **overrides: Any,
    ) -> None:
        if isinstance(options, ManifestOptions):
            base = dict(options)
        else:
            base = dict(options or {})
        self.options = ManifestOptions(**{**base, **overrides})
        self.builder = ManifestBuilder(self.options)

    def apply(self, compiler: Compiler | LegacyCompiler) -> None:
        def emit(compilation: Compilation, callback: EmitCallback) -> None:
            self.generate_manifest(compiler, compilation, callback)

        if getattr(compiler, "hooks", None) is not None:
            cast(Compiler, compiler).hooks.emit.tap_async(self.name, emit)
        else:
            cast(LegacyCompiler, compiler).plugin("emit", emit)

    def generate_manifest(
        self,
        compiler: Compiler | LegacyCompiler,
        compilation: Compilation,
        callback: EmitCallback,
    ) -> EmittedManifest:
        """Build, register and write the manifest, then release ``callback``.

        Errors from the host shape or from user hooks raise immediately; a
        failed write reaches ``callback`` instead.
        """
        manifest = self.build(compilation, public_path=_public_path(compiler))
        emitted = emit_manifest(
            compilation,
            manifest,
            self.options,
            output_path=Path(compiler.output_path),
        )

        if emitted.write is None:
            callback(None)
        else:
            emitted.write.add_done_callback(lambda done: _settle(done, callback))
        return emitted

    def build(self, compilation: Compilation, *, public_path: Optional[str] = None) -> Manifest:
        return self.builder.build(compilation, public_path=public_path)


def _public_path(compiler: Compiler | LegacyCompiler) -> Optional[str]:
    output = getattr(getattr(compiler, "options", None), "output", None)
    return getattr(output, "public_path", None)


def _settle(done: "Future[Path]", callback: EmitCallback) -> None:
    error = done.exception()
    if error is not None:
        logger.error("Failed to write manifest: %s", error)
    callback(error)
