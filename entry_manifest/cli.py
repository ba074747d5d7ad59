"""CLI entrypoints for entry manifest generation."""

from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console

from .config import Config, ManifestOptions, load_config
from .errors import ManifestError, StatsError
from .manifests import EmittedManifest, Manifest, ManifestBuilder, emit_manifest
from .stats import StatsCompilation, load_stats

console = Console()
app = typer.Typer(help="Generate entry manifests from bundler stats.")

StatsArgument = Annotated[
    Path,
    typer.Argument(..., help="Path to the bundler stats JSON file."),
]
ConfigPathOption = Annotated[
    str | None,
    typer.Option("--config", "-c", help="Path to configuration file or project directory."),
]


@app.command()
def generate(
    stats_path: StatsArgument,
    config_path: ConfigPathOption = None,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Override the build output directory."),
    ] = None,
    public_path: Annotated[
        str | None,
        typer.Option("--public-path", help="Prefix prepended to every output file."),
    ] = None,
    base_path: Annotated[
        str | None,
        typer.Option("--base-path", help="Prefix prepended to every entry name."),
    ] = None,
    filename: Annotated[
        str | None,
        typer.Option("--filename", "-f", help="Manifest filename, relative to the output directory."),
    ] = None,
    chunks: Annotated[
        bool | None,
        typer.Option("--chunks/--no-chunks", help="List descendant/async chunk files per entry."),
    ] = None,
) -> None:
    """Build the manifest for a stats file and write it to the output directory."""
    config = _load(config_path)
    options = _apply_overrides(
        config.manifest,
        public_path=public_path,
        base_path=base_path,
        filename=filename,
        chunks=chunks,
    )
    compilation = _read_stats(stats_path)
    target_dir = _output_dir(stats_path, compilation, config, output_dir)

    manifest = _build(options, compilation)
    emitted = emit_manifest(compilation, manifest, options, output_path=target_dir)
    _await_write(emitted)

    console.print(
        "[bold green]Manifest[/]: "
        f"{len(manifest)} entr{'y' if len(manifest) == 1 else 'ies'} written to "
        f"{_display_path(emitted.path) if emitted.path else emitted.asset_name}"
    )


@app.command()
def entries(
    stats_path: StatsArgument,
    config_path: ConfigPathOption = None,
) -> None:
    """List the entries a manifest would contain without writing anything."""
    config = _load(config_path)
    compilation = _read_stats(stats_path)
    manifest = _build(config.manifest, compilation)

    if not len(manifest):
        console.print("[bold yellow]No entries[/]: the stats file defines no entrypoints.")
        raise typer.Exit()

    for name, entry in manifest.items():
        line = f"[bold blue]{name}[/]: {len(entry.js)} script(s), {len(entry.css)} stylesheet(s)"
        if entry.chunks is not None:
            line += f", {len(entry.chunks)} chunk file(s)"
        console.print(line)


def _load(path: str | None) -> Config:
    target = Path.cwd() if path is None else path
    try:
        return load_config(target)
    except FileNotFoundError as exc:
        raise typer.BadParameter(f"Config file not found: {target}") from exc
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _apply_overrides(options: ManifestOptions, **overrides: Any) -> ManifestOptions:
    updates = {key: value for key, value in overrides.items() if value is not None}
    if not updates:
        return options
    return ManifestOptions(**{**dict(options), **updates})


def _read_stats(path: Path) -> StatsCompilation:
    try:
        return load_stats(path)
    except FileNotFoundError as exc:
        raise typer.BadParameter(f"Stats file not found: {path}") from exc
    except StatsError as exc:
        console.print(f"[bold red]Invalid stats[/]: {exc}")
        raise typer.Exit(code=1) from exc


def _output_dir(
    stats_path: Path,
    compilation: StatsCompilation,
    config: Config,
    override: Path | None,
) -> Path:
    if override is not None:
        return override.resolve()
    if config.output_dir is not None:
        return config.output_dir
    if compilation.output_path is not None:
        return compilation.output_path
    return stats_path.resolve().parent


def _build(options: ManifestOptions, compilation: StatsCompilation) -> Manifest:
    try:
        return ManifestBuilder(options).build(compilation, public_path=compilation.public_path)
    except ManifestError as exc:
        console.print(f"[bold red]Cannot build manifest[/]: {exc}")
        raise typer.Exit(code=1) from exc


def _await_write(emitted: EmittedManifest) -> None:
    if emitted.write is None:
        return
    try:
        emitted.write.result()
    except OSError as exc:
        console.print(f"[bold red]Failed to write manifest[/]: {exc}")
        raise typer.Exit(code=1) from exc


def _display_path(path: Path) -> str:
    try:
        return path.relative_to(Path.cwd()).as_posix()
    except ValueError:
        return path.as_posix()


def main() -> None:
    app()


if __name__ == "__main__":
    main()
