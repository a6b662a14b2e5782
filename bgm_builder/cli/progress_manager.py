"""
Manages a Rich progress display with one spinner line per build stage.
"""

import asyncio

from rich.console import Console
from rich.progress import (
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)


class ProgressManager:
    """
    Shows the concurrently running build stages and marks each one as done or
    failed when it settles.
    """

    def __init__(self, console: Console):
        self.console = console

        self.progress = Progress(
            SpinnerColumn(finished_text="[green]✓[/green]"),
            TextColumn("[progress.description]{task.description}", justify="left"),
            TimeElapsedColumn(),
            console=console,
            transient=False,
        )

    def start_stage(self, description: str) -> TaskID:
        """Adds a spinner line for a stage and returns its task ID."""
        return self.progress.add_task(f"{description}...", total=1)

    def finish_stage(self, task_id: TaskID, summary: str) -> None:
        """Marks a stage as completed with a one-line summary."""
        self.progress.update(task_id, description=summary, completed=1)

    def fail_stage(self, task_id: TaskID, summary: str) -> None:
        self.progress.update(task_id, description=f"[red]✗ {summary}[/red]")
        self.progress.stop_task(task_id)

    async def __aenter__(self):
        self.progress.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await asyncio.sleep(0.1)
        self.progress.stop()
