from __future__ import annotations

import json
from pathlib import Path
from types import SimpleNamespace

import pytest

from entry_manifest.config import ManifestOptions
from entry_manifest.manifests import Manifest, ManifestAsset, ManifestEntry, emit_manifest, write_manifest
from entry_manifest.manifests.writer import asset_name, register_asset, serialize_manifest


def _manifest() -> Manifest:
    return Manifest(
        {
            "main": ManifestEntry(js=["/static/main.js"], css=["/static/main.css"]),
            "admin": ManifestEntry(js=["/static/admin.js"], chunks=["/static/1.chunk.js"]),
        }
    )


def test_asset_name_keeps_relative_filenames() -> None:
    assert asset_name("/srv/dist", "manifest.json") == "manifest.json"
    assert asset_name("/srv/dist", "meta/./manifest.json") == "meta/manifest.json"
    assert asset_name("/srv/dist", "meta\\manifest.json") == "meta/manifest.json"


def test_asset_name_relativizes_absolute_filenames(tmp_path: Path) -> None:
    output = tmp_path / "dist"
    target = tmp_path / "manifests" / "entries.json"

    assert asset_name(output, str(target)) == "../manifests/entries.json"
    assert asset_name(output, str(output / "assets" / "manifest.json")) == "assets/manifest.json"


def test_default_serializer_writes_pretty_json() -> None:
    payload = serialize_manifest(_manifest(), ManifestOptions().serialize)

    text = payload.decode("utf-8")
    assert text.startswith('{\n  "main": {')
    assert json.loads(text) == {
        "main": {"js": ["/static/main.js"], "css": ["/static/main.css"]},
        "admin": {"js": ["/static/admin.js"], "css": [], "chunks": ["/static/1.chunk.js"]},
    }


def test_custom_serializer_may_return_bytes() -> None:
    payload = serialize_manifest(_manifest(), lambda manifest: b",".join(name.encode() for name in manifest))

    assert payload == b"main,admin"


def test_serializer_must_return_text_or_bytes() -> None:
    with pytest.raises(TypeError):
        serialize_manifest(_manifest(), lambda manifest: manifest.to_payload())


def test_register_asset_prefers_emit_asset() -> None:
    emitted: list[tuple[str, ManifestAsset]] = []
    compilation = SimpleNamespace(
        assets={},
        emit_asset=lambda name, source: emitted.append((name, source)),
    )
    asset = ManifestAsset(b"{}")

    register_asset(compilation, "manifest.json", asset)

    assert emitted == [("manifest.json", asset)]
    assert compilation.assets == {}


def test_register_asset_falls_back_to_asset_mapping() -> None:
    compilation = SimpleNamespace(assets={})
    asset = ManifestAsset(b'{"main": {}}')

    register_asset(compilation, "manifest.json", asset)

    assert compilation.assets["manifest.json"].source() == b'{"main": {}}'
    assert compilation.assets["manifest.json"].size() == 12


def test_write_manifest_creates_parent_directories(tmp_path: Path) -> None:
    target = tmp_path / "dist" / "meta" / "manifest.json"

    written = write_manifest(target, b"{}")

    assert written == target
    assert target.read_bytes() == b"{}"


def test_emit_manifest_registers_and_writes(tmp_path: Path) -> None:
    compilation = SimpleNamespace(assets={})
    options = ManifestOptions(filename="meta/manifest.json")

    emitted = emit_manifest(compilation, _manifest(), options, output_path=tmp_path / "dist")

    assert emitted.asset_name == "meta/manifest.json"
    assert emitted.write is not None
    path = emitted.write.result(timeout=5)
    assert path == tmp_path / "dist" / "meta" / "manifest.json"
    assert path.read_bytes() == emitted.payload
    assert compilation.assets["meta/manifest.json"].source() == emitted.payload


def test_emit_manifest_honours_output_switches(tmp_path: Path) -> None:
    compilation = SimpleNamespace(assets={})
    options = ManifestOptions(emit_asset=False, write_to_disk=False)

    emitted = emit_manifest(compilation, _manifest(), options, output_path=tmp_path)

    assert emitted.write is None
    assert emitted.path is None
    assert compilation.assets == {}
    assert not (tmp_path / "manifest.json").exists()


def test_emit_manifest_surfaces_write_failures(tmp_path: Path) -> None:
    (tmp_path / "blocked").write_text("not a directory", encoding="utf-8")
    options = ManifestOptions(filename="blocked/manifest.json", emit_asset=False)

    emitted = emit_manifest(SimpleNamespace(assets={}), _manifest(), options, output_path=tmp_path)

    assert emitted.write is not None
    assert isinstance(emitted.write.exception(timeout=5), OSError)
