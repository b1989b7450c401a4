"""Console rendering and progress helpers for the pdrive CLI.

Everything here writes to stderr so stdout carries only the final URL.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)
from rich.table import Table

from .models import PartResult
from .utils.events import NOTICE, PART_COMPLETE, PART_START, EventEmitter, PartProgress

console = Console(stderr=True)


def _echo(message: str) -> None:
    console.print(message)


def _human_size(value: int) -> str:
    size = float(max(value, 0))
    units = ["B", "KB", "MB", "GB", "TB"]
    unit_idx = 0
    while size >= 1024.0 and unit_idx < len(units) - 1:
        size /= 1024.0
        unit_idx += 1
    if unit_idx == 0:
        return f"{int(size)} {units[unit_idx]}"
    return f"{size:.2f} {units[unit_idx]}"


def render_configuration_summary(config: Dict[str, Any]) -> None:
    """Render startup configuration summary."""
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold cyan", justify="right")
    table.add_column(style="white")

    for key, value in config.items():
        rendered = "-" if value is None else str(value)
        table.add_row(key, rendered)

    panel = Panel(
        table,
        title="[bold green]pdrive[/bold green]",
        subtitle="[dim]upload CLI[/dim]",
        border_style="blue",
    )
    console.print(panel)


class UploadProgressDisplay:
    """Event-based console display for a single file upload."""

    def __init__(self, file_path: Path, quiet: bool = False):
        self.file_path = Path(file_path)
        self.filename = self.file_path.name
        try:
            self.file_size = self.file_path.stat().st_size
        except OSError:
            self.file_size = 0
        self._quiet = quiet
        self._uploaded_bytes = 0
        self._live: Optional[Live] = None
        self._task_id: Optional[TaskID] = None
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold cyan]{task.fields[filename]}", justify="left"),
            BarColumn(bar_width=42),
            TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
            DownloadColumn(),
            TransferSpeedColumn(),
            TimeRemainingColumn(),
            expand=False,
            console=console,
        )

    def attach(self, events: EventEmitter) -> None:
        events.on(NOTICE, self.on_notice)
        events.on(PART_START, self.on_part_start)
        events.on(PART_COMPLETE, self.on_part_complete)

    def _start_live(self) -> None:
        if self._live is not None:
            return
        self._live = Live(
            self._progress,
            console=console,
            refresh_per_second=5,
            vertical_overflow="visible",
        )
        self._live.start()
        self._task_id = self._progress.add_task(
            "upload",
            filename=self.filename[:60],
            total=max(self.file_size, 1),
        )

    def _stop_live(self) -> None:
        if self._live is None:
            return
        self._live.stop()
        self._live = None

    def on_notice(self, message: str) -> None:
        if self._quiet:
            return
        _echo(f"[cyan]{message}[/cyan]")

    def on_part_start(self, progress: PartProgress) -> None:
        if self._quiet:
            return
        self._start_live()
        _echo(
            f"[dim]Uploading part {progress.part_number}/{progress.total_parts}"
            f" ({_human_size(progress.size)})[/dim]"
        )

    def on_part_complete(self, part: PartResult, progress: PartProgress) -> None:
        self._uploaded_bytes += progress.size
        if self._quiet:
            return
        if self._task_id is not None:
            self._progress.update(self._task_id, completed=self._uploaded_bytes)
        _echo(
            f"[green]Finished uploading part {part.part_number}[/green]"
            f" [dim]({progress.completed_parts}/{progress.total_parts})[/dim]"
        )

    def complete(self, success: bool = True, error: Optional[str] = None) -> None:
        self._stop_live()
        if success:
            if not self._quiet:
                _echo(f"[green]Uploaded:[/green] {self.filename} ({_human_size(self.file_size)})")
            return

        suffix = f" - {error}" if error else ""
        _echo(f"[red]Failed:[/red] {self.filename}{suffix}")
