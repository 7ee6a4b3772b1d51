"""FileFinder CLI application with Typer."""

import logging
from pathlib import Path
from typing import Annotated, NoReturn

import typer
from pydantic import ValidationError

from filefinder import __version__
from filefinder.config import get_settings, set_settings
from filefinder.presets import (
    LOCAL_CONFIG_NAME,
    PresetError,
    SearchOptions,
    build_search_config,
    load_preset_file,
    merge_options,
    resolve_config_path,
    write_sample_config,
)
from filefinder.report import render_json, render_markdown
from filefinder.scan import ScanCoordinator, SearchConfigError
from filefinder.scan.models import ScanReport

app = typer.Typer(
    name="filefinder",
    help="Search files by name and/or content recursively",
    add_completion=False,
    no_args_is_help=True,
)

CONFIG_ERROR_EXIT_CODE = 2


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"FileFinder version {__version__}")
        raise typer.Exit()


def _config_error(message: str) -> NoReturn:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=CONFIG_ERROR_EXIT_CODE)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _print_issues(report: ScanReport) -> None:
    for issue in report.issues:
        typer.secho(f"[{issue.kind}] {issue.path}: {issue.message}", fg=typer.colors.YELLOW, err=True)


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-V", callback=version_callback, is_eager=True),
    ] = None,
    workers: Annotated[
        int | None,
        typer.Option("--workers", min=1, help="Number of files scanned concurrently"),
    ] = None,
) -> None:
    """FileFinder - search files by name and/or content recursively."""
    settings = get_settings()
    if workers:
        settings.max_workers = workers
    set_settings(settings)


@app.command("search")
def search(
    root_dir: Annotated[
        Path | None,
        typer.Option("--dir", "-d", help="Root directory to search [default: .]"),
    ] = None,
    name: Annotated[
        str | None,
        typer.Option("--name", "-n", help="Case-insensitive substring of the file name"),
    ] = None,
    content: Annotated[
        str | None,
        typer.Option("--content", "-c", help="Regular expression searched in file contents"),
    ] = None,
    ext: Annotated[
        str | None,
        typer.Option("--ext", help="Comma-separated extensions to include (e.g. txt,md)"),
    ] = None,
    include_pdf: Annotated[
        bool | None,
        typer.Option("--include-pdf/--no-include-pdf", help="Extract and search PDF text"),
    ] = None,
    output_format: Annotated[
        str | None,
        typer.Option("--format", "-f", help="Output format: json or markdown [default: markdown]"),
    ] = None,
    max_bytes: Annotated[
        int | None,
        typer.Option("--max-bytes", help="Skip text files larger than this [default: 2000000]"),
    ] = None,
    limit: Annotated[
        int | None,
        typer.Option("--limit", help="Maximum number of results to print (0 = unlimited)"),
    ] = None,
    preset: Annotated[
        str | None,
        typer.Option("--preset", "-p", help="Named preset from the config file"),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option("--config", help="Preset file to use"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Print per-file diagnostics to stderr"),
    ] = False,
) -> None:
    """Search DIR recursively by file name and/or content."""
    settings = get_settings()

    try:
        cli_options = SearchOptions(
            dir=root_dir,
            name=name,
            content=content,
            ext=ext,
            include_pdf=include_pdf,
            format=output_format,
            max_bytes=max_bytes,
            limit=limit,
            verbose=verbose or None,
        )
    except ValidationError as exc:
        _config_error(f"Invalid option: {exc.errors()[0]['msg']}")

    try:
        preset_file = load_preset_file(resolve_config_path(config, settings))
        options = merge_options(cli_options, preset_file, preset)
        search_config = build_search_config(options)
    except (PresetError, SearchConfigError) as exc:
        _config_error(str(exc))

    _configure_logging(search_config.verbose)

    coordinator = ScanCoordinator(max_workers=settings.get_max_workers())
    report = coordinator.run(search_config)

    if options.format == "json":
        typer.echo(render_json(report))
    else:
        typer.echo(render_markdown(report, search_config), nl=False)

    if search_config.verbose:
        _print_issues(report)


@app.command("presets")
def presets(
    config: Annotated[
        Path | None,
        typer.Option("--config", help="Preset file to read"),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output presets as JSON"),
    ] = False,
) -> None:
    """List preset names and their resolved configuration."""
    settings = get_settings()
    config_path = resolve_config_path(config, settings)

    try:
        preset_file = load_preset_file(config_path)
        resolved = {
            preset_name: merge_options(SearchOptions(), preset_file, preset_name)
            for preset_name in sorted(preset_file.presets)
        }
    except PresetError as exc:
        _config_error(str(exc))

    if json_output:
        from filefinder.utils.cli_output import json_response

        typer.echo(
            json_response(
                "presets",
                1,
                config_path=str(config_path) if config_path else None,
                presets={
                    key: value.model_dump(mode="json", exclude_none=True)
                    for key, value in resolved.items()
                },
            )
        )
        return

    if not resolved:
        typer.secho("No presets defined", fg=typer.colors.YELLOW)
        return

    typer.secho(f"Presets from {config_path}:", fg=typer.colors.BLUE)
    for preset_name, options in resolved.items():
        typer.echo(preset_name)
        for key, value in options.model_dump(exclude_none=True).items():
            typer.echo(f"  {key} = {value}")


@app.command("config-init")
def config_init(
    path: Annotated[
        Path | None,
        typer.Option("--path", help=f"Where to write the sample config [default: ./{LOCAL_CONFIG_NAME}]"),
    ] = None,
) -> None:
    """Write a sample preset file."""
    target = path if path is not None else Path(LOCAL_CONFIG_NAME)

    if not write_sample_config(target):
        typer.secho(
            f"Config file already exists: {target}\nNothing was changed.",
            fg=typer.colors.YELLOW,
            err=True,
        )
        return

    typer.secho(f"Config file created at: {target}", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
