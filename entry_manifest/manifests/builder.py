"""Build entry manifests from a compilation's chunk graph."""

from __future__ import annotations

import logging
import os
from typing import Iterable, Optional

from ..config import ManifestOptions
from ..entrypoints import ResolvedEntry, iter_entries
from ..host import Chunk, Compilation
from .models import Manifest, ManifestEntry

logger = logging.getLogger(__name__)


class ManifestBuilder:
    """Project each build entry onto its script, stylesheet and chunk files."""

    def __init__(self, options: Optional[ManifestOptions] = None) -> None:
        self.options = options or ManifestOptions()

    def build(self, compilation: Compilation, *, public_path: Optional[str] = None) -> Manifest:
        """Build the manifest for every entry, in the host's entry order.

        ``public_path`` is the host's configured value; the option of the same
        name takes precedence when set.
        """
        prefix = self.options.public_path
        if prefix is None:
            prefix = public_path or ""

        entries: dict[str, ManifestEntry] = {}
        for entry in iter_entries(compilation):
            entries[f"{self.options.base_path}{entry.name}"] = self.build_entry(entry, prefix)
        return Manifest(entries)

    def build_entry(self, entry: ResolvedEntry, public_path: str = "") -> ManifestEntry:
        js: list[str] = []
        css: list[str] = []
        seen: set[str] = set()

        for chunk in entry.chunks:
            for file in _files(chunk):
                file = file.replace("\\", "/")
                if file in seen:
                    continue
                seen.add(file)

                ext = extname(file)
                path = self._resolve(file, chunk, public_path)
                if path is None:
                    continue

                if ext == ".js":
                    js.append(path)
                elif ext == ".css":
                    css.append(path)
                else:
                    logger.debug("Dropping unclassified file %s from entry %s", file, entry.name)

        if not self.options.chunks:
            return ManifestEntry(js=js, css=css)

        children: list[str] = []
        children_seen: set[str] = set()
        for group in entry.descendants():
            for chunk in group.chunks:
                for file in _files(chunk):
                    file = file.replace("\\", "/")
                    if file in seen or file in children_seen:
                        continue
                    children_seen.add(file)

                    path = self._resolve(file, chunk, public_path)
                    if path is not None:
                        children.append(path)

        return ManifestEntry(js=js, css=css, chunks=children)

    def _resolve(self, file: str, chunk: Chunk, public_path: str) -> Optional[str]:
        """Apply the public path, then ``filter`` and ``map``; ``None`` means rejected."""
        path = public_file_path(public_path, file)
        if not self.options.filter(path, chunk):
            return None
        return str(self.options.map(path, chunk))


def extname(file: str) -> str:
    """Lower-cased extension of a raw output file, including the dot."""
    return os.path.splitext(file)[1].lower()


def public_file_path(public_path: str, file: str) -> str:
    return public_path + file.replace("\\", "/")


def _files(chunk: Chunk) -> Iterable[str]:
    return getattr(chunk, "files", None) or ()
