"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from bgm_builder.models.config import BuildConfig
from bgm_builder.models.stats import BuildStats
from bgm_builder.utils.formatting import format_duration, format_size


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "ArchiveStructureError": [
            "• Check that `archive_dir` points at the exported archive folders.",
            "• Re-export the archive as XML; every image should be a `.img.xml` file.",
            "• Run `bgm-builder diagnose` to list what is missing.",
        ],
        "MapIdError": [
            "• A map image or map name entry is not numeric.",
            "• The export may contain extra files; remove them and retry.",
        ],
        "FeedError": [
            "• Check your internet connection.",
            "• The feed host might be temporarily unavailable.",
            "• Verify `catalog_url` and `build_url` in the configuration.",
        ],
        "ConfigurationError": [
            "• Review the values in your configuration file.",
            "• Run `bgm-builder init-config --force` to write a fresh file.",
        ],
        "ClientResponseError": [
            "• A network connection issue occurred.",
            "• Please try again in a few minutes.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    suggestion_text = Text("\n".join(suggestions))

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(suggestion_text)

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_config(config_path: Path, config: BuildConfig):
    """Displays the effective configuration."""
    console = Console()
    content = ""
    for key, value in config.model_dump().items():
        content += f"{key} = {value}\n"

    source = str(config_path) if config_path.is_file() else "defaults"
    console.print(
        Panel(
            content.strip(),
            title=f"Configuration ([dim]{source}[/dim])",
            border_style="cyan",
        )
    )


def print_check_table(checks: list[tuple[str, bool, str]]):
    """Displays diagnostic results as a table of passed and failed checks."""
    console = Console()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column()
    table.add_column(style="bold cyan")
    table.add_column()

    for name, ok, detail in checks:
        mark = "[green]✓[/green]" if ok else "[red]✗[/red]"
        table.add_row(mark, name, f"[dim]{detail}[/dim]")

    console.print(table)


def print_summary_panel(stats: BuildStats):
    """Displays the final summary of a build."""
    console = Console()

    stats_table = Table(show_header=False, box=None, padding=(0, 2))
    stats_table.add_column(style="bold cyan", justify="right", width=22)
    stats_table.add_column(style="white", justify="left")

    stats_table.add_row("Tracks:", f"[bold green]{stats.tracks}[/bold green]")
    stats_table.add_row("Tracks With Maps:", f"[green]{stats.tracks_with_maps}[/green]")
    stats_table.add_row("Downloadable:", f"[green]{stats.downloadable_tracks}[/green]")

    stats_table.add_row("", "")

    stats_table.add_row("Maps With Names:", str(stats.maps_located))
    stats_table.add_row("Maps With Track Data:", str(stats.maps_assigned))
    stats_table.add_row("Maps In Output:", f"[cyan]{stats.maps_in_output}[/cyan]")

    if stats.maps_without_track > 0:
        stats_table.add_row(
            "○ No Track:", f"[yellow]{stats.maps_without_track}[/yellow]"
        )
    if stats.maps_dropped > 0:
        stats_table.add_row(
            "⚠ Unknown Track:", f"[yellow]{stats.maps_dropped}[/yellow]"
        )

    stats_table.add_row("", "")

    if stats.output_path is not None:
        stats_table.add_row("Output:", f"[dim]{stats.output_path}[/dim]")
    stats_table.add_row("Size:", f"[cyan]{format_size(stats.output_size)}[/cyan]")
    stats_table.add_row(
        "Time Elapsed:", f"[blue]{format_duration(stats.duration_seconds)}[/blue]"
    )

    console.print()
    console.print(
        Panel(
            stats_table,
            title="🎵 [bold]Data Repo Built! Ready to deploy![/bold]",
            border_style="green",
            box=box.DOUBLE,
            expand=False,
            padding=(1, 2),
        )
    )
    console.print()
