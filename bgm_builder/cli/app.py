"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Any

import aiohttp
import typer
from rich.console import Console
from rich.logging import RichHandler

from bgm_builder import __version__
from bgm_builder.api.client import FeedClient
from bgm_builder.archive import open_archive
from bgm_builder.core.builder import BgmDataBuilder
from bgm_builder.core.locations import MAP_STRING_IMAGE
from bgm_builder.core.tracks import MAP_DIRECTORY, REGION_PREFIX
from bgm_builder.exceptions import BgmBuilderError
from bgm_builder.models.config import BuildConfig
from bgm_builder.storage.config_manager import DEFAULT_CONFIG_FILE, ConfigManager

from .formatters import (
    format_error_with_suggestions,
    print_check_table,
    print_config,
    print_summary_panel,
)
from .progress_manager import ProgressManager

console = Console()

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("bgm_builder")

app = typer.Typer(
    name="bgm-builder",
    help=(
        "Builds the BGM data repo from the exported game archive and the public"
        " BGM feeds. Run without a command to build."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def _config_path(ctx: typer.Context) -> Path:
    return (ctx.obj or {}).get("config_file", DEFAULT_CONFIG_FILE)


def _load_config(config_file: Path, cli_options: dict[str, Any]) -> BuildConfig:
    overrides = {key: value for key, value in cli_options.items() if value is not None}
    return ConfigManager(config_file).load_config(overrides)


def _run_build(config_file: Path, cli_options: dict[str, Any]) -> None:
    """Loads the configuration and runs one build, printing a summary."""
    try:
        config = _load_config(config_file, cli_options)
    except BgmBuilderError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e

    async def _build_async():
        console.print("[bold cyan]🎵 Start to build data repo...[/bold cyan]")
        async with (
            ProgressManager(console=console) as progress,
            FeedClient(
                config.catalog_url, config.build_url, config.request_timeout
            ) as feeds,
        ):
            builder = BgmDataBuilder(config, feeds, progress)
            return await builder.run()

    try:
        stats = asyncio.run(_build_async())
    except KeyboardInterrupt:
        console.print("\n[yellow]⚠️  Build cancelled by user.[/yellow]")
        raise typer.Exit(code=0)
    except BgmBuilderError as e:
        console.print(format_error_with_suggestions(e))
        log.debug("Full traceback:", exc_info=True)
        raise typer.Exit(code=1) from e

    print_summary_panel(stats)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
    config_file: Path = typer.Option(
        DEFAULT_CONFIG_FILE,
        "--config",
        "-c",
        help="Path to the INI configuration file (optional).",
    ),
    show_config: bool = typer.Option(
        False, "--show-config", help="Display the effective configuration and exit."
    ),
):
    """BGM data repo builder"""
    if version:
        console.print(f"[bold]bgm-builder[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("bgm_builder").setLevel(log_level)

    ctx.obj = {"config_file": config_file}

    if show_config:
        try:
            config = _load_config(config_file, {})
        except BgmBuilderError as e:
            console.print(format_error_with_suggestions(e))
            raise typer.Exit(code=1) from e
        print_config(config_file, config)
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        _run_build(config_file, {})


@app.command()
def build(
    ctx: typer.Context,
    archive_dir: Path | None = typer.Option(
        None,
        "--archive-dir",
        "-a",
        help="Folder holding the exported String and Map archives.",
    ),
    dist_dir: Path | None = typer.Option(
        None,
        "--dist-dir",
        "-o",
        help="Output folder. It is cleared before every build.",
    ),
    indent: int | None = typer.Option(
        None, "--indent", help="JSON indentation of the output file."
    ),
):
    """Build the BGM dataset."""
    _run_build(
        _config_path(ctx),
        {"archive_dir": archive_dir, "dist_dir": dist_dir, "indent": indent},
    )


@app.command(name="init-config")
def init_config(
    ctx: typer.Context,
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing file without asking."
    ),
):
    """Write a configuration file with the default settings."""
    config_file = _config_path(ctx)
    if (
        config_file.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    try:
        ConfigManager(config_file).save_new_config()
    except BgmBuilderError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1) from e
    console.print(f"[bold green]✓ Configuration saved to '{config_file}'[/bold green]")


async def _check_archives(config: BuildConfig) -> list[tuple[str, bool, str]]:
    checks = []
    try:
        string_root = await open_archive(config.string_archive_path)
        string_root.image(MAP_STRING_IMAGE)
        checks.append(("Map names", True, str(config.string_archive_path)))
    except BgmBuilderError as e:
        checks.append(("Map names", False, str(e)))

    try:
        map_root = await open_archive(config.map_archive_path)
        directories = map_root.directory(MAP_DIRECTORY).find_directories(REGION_PREFIX)
        images = sum(len(d.images) for d in directories)
        checks.append(
            (
                "Map data",
                bool(images),
                f"{images} map images in {len(directories)} directories",
            )
        )
    except BgmBuilderError as e:
        checks.append(("Map data", False, str(e)))
    return checks


async def _check_feed(url: str, timeout: float) -> tuple[bool, str]:
    try:
        async with (
            aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=timeout)) as session,
            session.get(url) as resp,
        ):
            return resp.status == 200, f"HTTP {resp.status}"
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        return False, f"Connection failed: {e!r}"


@app.command()
def diagnose(ctx: typer.Context):
    """Check the archive export and the connectivity to both feeds."""
    console.print("\n[bold cyan]Running diagnostics...[/bold cyan]\n")
    try:
        config = _load_config(_config_path(ctx), {})
    except BgmBuilderError as e:
        console.print(f"[red]✗ Configuration is invalid: {e}[/red]")
        raise typer.Exit(code=1) from e

    async def _diagnose_async():
        checks = await _check_archives(config)
        for name, url in (
            ("Catalog feed", config.catalog_url),
            ("Build feed", config.build_url),
        ):
            ok, detail = await _check_feed(url, config.request_timeout)
            checks.append((name, ok, detail))
        return checks

    checks = asyncio.run(_diagnose_async())
    print_check_table(checks)
    console.print()
    if all(ok for _, ok, _ in checks):
        console.print("[bold green]✓ All checks passed! Ready to build.[/bold green]\n")
    else:
        console.print(
            "[bold red]✗ Some issues were found. "
            "Please review the messages above.[/bold red]\n"
        )
        raise typer.Exit(code=1)
