"""
Main CLI application using Typer.
"""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional, Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.schedule_file import ScheduleFile
from ..config import AppConfig
from ..domain.drag import Committed, Discarded, DiscardReason
from ..domain.exceptions import DayblocksError
from ..domain.models import TimeInterval
from ..domain.projection import DialProjection, LinearProjection, angle_to_minute
from ..domain.time_codec import format_duration, from_clock_string, to_12_hour
from ..services.schedule_editor import ScheduleEditor

app = typer.Typer(
    name="dayblocks",
    help="Compose a 24-hour schedule out of labeled time blocks",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
FileOption = Annotated[Optional[Path], typer.Option("--file", "-f", help="Schedule file. Defaults to the configured schedule_file")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")]


class DragMode(str, Enum):
    linear = "linear"
    dial = "dial"
    point = "point"
    minutes = "minutes"


def _setup_logging(config: AppConfig, verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, config.log_level)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _open_schedule(config_file: Optional[Path], schedule_path: Optional[Path], verbose: bool):
    """Load config and schedule; returns (config, store, name, editor)."""
    config = AppConfig.load_or_default(config_file)
    _setup_logging(config, verbose)

    store = ScheduleFile(schedule_path or config.schedule_file)
    name, blocks = store.load()
    editor = ScheduleEditor(
        blocks=blocks,
        palette=config.palette,
        activation_threshold=config.drag.activation_threshold_minutes,
    )
    return config, store, name, editor


def _parse_interval(start: str, end: str) -> TimeInterval:
    return TimeInterval(start=from_clock_string(start), end=from_clock_string(end))


def _fail(error: Exception) -> None:
    console.print(f"[bold red]Error:[/bold red] {error}")
    raise typer.Exit(1)


@app.command()
def show(
    config_file: ConfigOption = None,
    schedule_path: FileOption = None,
    verbose: VerboseOption = False,
):
    """
    List the blocks of the schedule.
    """
    try:
        _, _, name, editor = _open_schedule(config_file, schedule_path, verbose)
    except (DayblocksError, ValueError, FileNotFoundError) as e:
        _fail(e)

    blocks = editor.blocks
    if not blocks:
        console.print("[yellow]The schedule is empty.[/yellow]")
        return

    table = Table(title=name, show_header=True, header_style="bold cyan")
    table.add_column("Time", style="bold")
    table.add_column("12-hour", style="dim")
    table.add_column("Duration")
    table.add_column("Label", style="bold yellow")
    table.add_column("Color")
    table.add_column("Id", style="dim")

    for block in blocks:
        table.add_row(
            str(block.interval),
            f"{to_12_hour(block.start)} - {to_12_hour(block.end)}",
            format_duration(block.duration_minutes()),
            block.label,
            f"[{block.color}]■[/] {block.color}",
            block.id,
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def add(
    start: Annotated[str, typer.Argument(help="Start time (HH:MM)")],
    end: Annotated[str, typer.Argument(help="End time (HH:MM), may be earlier than start to cross midnight")],
    label: Annotated[str, typer.Argument(help="Label of the block")],
    color: Annotated[Optional[str], typer.Option("--color", help="Palette color, defaults to the first palette entry")] = None,
    config_file: ConfigOption = None,
    schedule_path: FileOption = None,
    verbose: VerboseOption = False,
):
    """
    Add a block after checking it against the schedule.

    Examples:

        dayblocks add 09:00 12:30 Work

        dayblocks add 23:00 07:00 Sleep --color "#60a5fa"
    """
    try:
        _, store, name, editor = _open_schedule(config_file, schedule_path, verbose)
        block = editor.add_block(_parse_interval(start, end), label=label, color=color)
        store.save(name, editor.blocks)
    except (DayblocksError, ValueError, FileNotFoundError) as e:
        _fail(e)

    console.print(
        f"[green]✓ Added[/green] {block.label} {block.interval} "
        f"({format_duration(block.duration_minutes())})"
    )


@app.command()
def check(
    start: Annotated[str, typer.Argument(help="Start time (HH:MM)")],
    end: Annotated[str, typer.Argument(help="End time (HH:MM)")],
    config_file: ConfigOption = None,
    schedule_path: FileOption = None,
    verbose: VerboseOption = False,
):
    """
    Check whether an interval would fit into the schedule.
    """
    try:
        _, _, _, editor = _open_schedule(config_file, schedule_path, verbose)
        interval = _parse_interval(start, end)
    except (DayblocksError, ValueError, FileNotFoundError) as e:
        _fail(e)

    result = editor.check(interval)
    if result.valid:
        console.print(f"[green]✓ {interval} is free[/green] ({format_duration(interval.duration_minutes())})")
    else:
        console.print(f"[bold red]✗[/bold red] {result.message}")
        raise typer.Exit(1)


@app.command()
def remove(
    block_id: Annotated[str, typer.Argument(help="Id of the block to delete")],
    config_file: ConfigOption = None,
    schedule_path: FileOption = None,
    verbose: VerboseOption = False,
):
    """
    Delete a block.
    """
    try:
        _, store, name, editor = _open_schedule(config_file, schedule_path, verbose)
        block = editor.remove_block(block_id)
        store.save(name, editor.blocks)
    except (DayblocksError, ValueError, FileNotFoundError) as e:
        _fail(e)

    console.print(f"[green]✓ Removed[/green] {block}")


@app.command()
def relabel(
    block_id: Annotated[str, typer.Argument(help="Id of the block to change")],
    label: Annotated[Optional[str], typer.Option("--label", help="New label")] = None,
    color: Annotated[Optional[str], typer.Option("--color", help="New palette color")] = None,
    config_file: ConfigOption = None,
    schedule_path: FileOption = None,
    verbose: VerboseOption = False,
):
    """
    Change the label and/or color of a block.
    """
    if label is None and color is None:
        console.print("[yellow]Nothing to change, pass --label and/or --color.[/yellow]")
        raise typer.Exit(1)

    try:
        _, store, name, editor = _open_schedule(config_file, schedule_path, verbose)
        block = editor.update_block(block_id, label=label, color=color)
        store.save(name, editor.blocks)
    except (DayblocksError, ValueError, FileNotFoundError) as e:
        _fail(e)

    console.print(f"[green]✓ Updated[/green] {block}")


@app.command()
def legend(
    as_json: Annotated[bool, typer.Option("--json", help="Print export records as JSON.")] = False,
    plain: Annotated[bool, typer.Option("--plain", help="Print one legend line per range instead of a table.")] = False,
    config_file: ConfigOption = None,
    schedule_path: FileOption = None,
    verbose: VerboseOption = False,
):
    """
    Show blocks merged by label and color.
    """
    try:
        _, _, name, editor = _open_schedule(config_file, schedule_path, verbose)
    except (DayblocksError, ValueError, FileNotFoundError) as e:
        _fail(e)

    if as_json:
        console.print_json(json.dumps(editor.export_records(merged=True)))
        return

    merged = editor.merged_ranges()
    if not merged:
        console.print("[yellow]The schedule is empty.[/yellow]")
        return

    if plain:
        for item in merged:
            for line in item.legend_lines():
                console.print(f"[{item.color}]■[/] {line}", highlight=False)
        return

    table = Table(title=f"{name} - legend", show_header=True, header_style="bold cyan")
    table.add_column("Label", style="bold yellow")
    table.add_column("Ranges")
    table.add_column("Total")

    for item in merged:
        table.add_row(
            f"[{item.color}]■[/] {item.label}",
            "\n".join(item.range_descriptions()),
            format_duration(item.total_minutes()),
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def drag(
    positions: Annotated[List[float], typer.Argument(help="Pointer positions: first is the press, the rest are moves")],
    mode: Annotated[DragMode, typer.Option("--mode", "-m", help="linear: pixel offsets, dial: degrees from 12 o'clock, point: x y pixel pairs on the dial, minutes: raw minutes")] = DragMode.minutes,
    save: Annotated[bool, typer.Option("--save", help="Store the committed block.")] = False,
    label: Annotated[Optional[str], typer.Option("--label", help="Label for --save")] = None,
    color: Annotated[Optional[str], typer.Option("--color", help="Palette color for --save")] = None,
    config_file: ConfigOption = None,
    schedule_path: FileOption = None,
    verbose: VerboseOption = False,
):
    """
    Replay a pointer drag and report what it would create.

    Examples:

        dayblocks drag 600 602 604 606

        dayblocks drag 540 560 600 --mode linear

        dayblocks drag 345 350 15 --mode dial --save --label Sleep

        dayblocks drag 360 60 660 360 --mode point
    """
    if save and not label:
        console.print("[bold red]Error:[/bold red] --save needs --label")
        raise typer.Exit(1)

    try:
        config, store, name, editor = _open_schedule(config_file, schedule_path, verbose)
    except (DayblocksError, ValueError, FileNotFoundError) as e:
        _fail(e)

    raw_positions = list(positions)
    if mode is DragMode.linear:
        project = LinearProjection(top=config.timeline.top_pixels, height=config.timeline.height_pixels)
    elif mode is DragMode.dial:
        project = angle_to_minute
    elif mode is DragMode.point:
        if len(positions) % 2:
            console.print("[bold red]Error:[/bold red] --mode point needs x y pairs")
            raise typer.Exit(1)
        project = DialProjection(center_x=config.dial.center_x, center_y=config.dial.center_y)
        raw_positions = list(zip(positions[::2], positions[1::2]))
    else:
        project = float

    session = editor.new_drag_session(project)
    session.on_pointer_down(raw_positions[0])
    for position in raw_positions[1:]:
        session.on_pointer_move(position)
    outcome = editor.finish_drag(session)

    if isinstance(outcome, Discarded):
        if outcome.reason is DiscardReason.REJECTED:
            console.print(f"[bold red]✗ Discarded:[/bold red] {outcome.message}")
            raise typer.Exit(1)
        console.print("[yellow]⊘ No block: the drag did not pass the activation threshold.[/yellow]")
        return

    if not isinstance(outcome, Committed):
        console.print("[yellow]⊘ No drag in progress.[/yellow]")
        return

    interval = outcome.interval
    console.print(
        f"[green]✓ Candidate[/green] {interval} "
        f"({to_12_hour(interval.start)} - {to_12_hour(interval.end)}, "
        f"{format_duration(interval.duration_minutes())})"
    )

    if save:
        try:
            block = editor.commit_drag(outcome, label=label, color=color)
            store.save(name, editor.blocks)
        except (DayblocksError, ValueError) as e:
            _fail(e)
        console.print(f"[green]✓ Added[/green] {block}")


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]dayblocks[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
