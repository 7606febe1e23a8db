"""
Main CLI application using Typer.
"""

import json
import logging
from pathlib import Path
from typing import Annotated, Dict, Iterable, Optional, Tuple

import typer
from rich.console import Console
from rich.table import Table

from ..config import load_config
from ..domain.exceptions import ScheduleBuilderError
from ..domain.grid import compute_grid, day_label, resolve_hours, time_label
from ..domain.models import BLOCK_SIZE_CHOICES, GridLayout, SelectionMode, TimeSlot
from ..services.gesture_script import GestureScript, run_script

app = typer.Typer(
    name="schedulebuilder",
    help="Collect weekly availability on a paintable time grid",
    add_completion=False
)

console = Console()

MODE_STYLES = {
    SelectionMode.CANNOT: "white on red",
    SelectionMode.PREFER_NOT: "black on yellow",
    SelectionMode.AVAILABLE: "black on green",
    SelectionMode.PREFERRED: "white on blue",
}

MODE_GLYPHS = {
    SelectionMode.CANNOT: "✗",
    SelectionMode.PREFER_NOT: "−",
    SelectionMode.AVAILABLE: "✓",
    SelectionMode.PREFERRED: "★",
}


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """Schedule builder command line."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _hour_label(hour: float) -> str:
    """24-hour label that may run past midnight, e.g. 8.5 -> "8:30", 31 -> "31:00"."""
    hours, minutes = divmod(round(hour * 60), 60)
    return f"{hours}:{minutes:02d}"


def _render_grid(layout: GridLayout, slots: Iterable[TimeSlot] = (), title: str = "") -> Table:
    """Build a rich table with one column per day and one row per block."""
    by_key: Dict[Tuple[int, int], TimeSlot] = {slot.key: slot for slot in slots}

    table = Table(title=title or None, show_header=True, header_style="bold cyan")
    table.add_column("", style="dim", justify="right")
    for day in layout.days:
        table.add_column(day_label(day), justify="center")

    for time in layout.rows:
        cells = []
        for day in layout.days:
            slot = by_key.get((day, time))
            if slot is None:
                cells.append("")
            else:
                cells.append(f"[{MODE_STYLES[slot.mode]}] {MODE_GLYPHS[slot.mode]} [/]")
        table.add_row(time_label(time), *cells)

    return table


@app.command()
def grid(
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    start_hour: Annotated[Optional[float], typer.Option("--start-hour", help="First hour shown (0-23, fractions allowed)")] = None,
    end_hour: Annotated[Optional[float], typer.Option("--end-hour", help="Hour the grid ends (0-23, fractions allowed)")] = None,
    block_size: Annotated[Optional[int], typer.Option("--block-size", "-b", help="Block size in minutes")] = None,
    saturday: Annotated[Optional[bool], typer.Option("--saturday/--no-saturday", help="Include Saturday")] = None,
    sunday: Annotated[Optional[bool], typer.Option("--sunday/--no-sunday", help="Include Sunday")] = None,
):
    """
    Show the selectable grid for a configuration.

    Examples:

        schedulebuilder grid
        schedulebuilder grid --start-hour 9 --end-hour 15 --block-size 30 --saturday
    """
    try:
        config = load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    overrides = {
        "start_hour": start_hour,
        "end_hour": end_hour,
        "block_size_minutes": block_size,
        "include_saturday": saturday,
        "include_sunday": sunday,
    }
    grid_config = config.to_grid_config().with_changes(
        **{key: value for key, value in overrides.items() if value is not None}
    )

    if grid_config.block_size_minutes <= 0:
        console.print("[bold red]Error:[/bold red] Block size must be greater than zero.")
        raise typer.Exit(1)
    if grid_config.block_size_minutes not in BLOCK_SIZE_CHOICES:
        console.print(
            f"[yellow]⚠ Unusual block size {grid_config.block_size_minutes} min "
            f"(usual choices: {', '.join(str(c) for c in BLOCK_SIZE_CHOICES)})[/yellow]"
        )

    layout = compute_grid(grid_config)
    start, end = resolve_hours(grid_config)

    console.print()
    console.print(_render_grid(layout, title=f"{_hour_label(start)} - {_hour_label(end)}, {grid_config.block_size_minutes} min blocks"))
    console.print(f"\n{len(layout.days)} day(s) × {len(layout.rows)} row(s)\n")


@app.command()
def modes():
    """
    List the selection modes.
    """
    table = Table(
        title="Selection modes",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Id", style="bold yellow", no_wrap=True)
    table.add_column("Label")
    table.add_column("Meaning", style="dim")

    for mode in SelectionMode:
        table.add_row(
            f"[{MODE_STYLES[mode]}] {MODE_GLYPHS[mode]} [/] {mode.value}",
            mode.label,
            mode.description,
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def replay(
    script_file: Annotated[Path, typer.Argument(help="YAML gesture script to replay")],
    as_json: Annotated[bool, typer.Option("--json", help="Print the resulting schedule as JSON.")] = False,
):
    """
    Replay a gesture script and show the resulting schedule.
    """
    try:
        script = GestureScript.load_from_yaml(script_file)
        result = run_script(script)
    except (FileNotFoundError, ScheduleBuilderError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    schedule = sorted(result.schedule, key=lambda s: (s.day, s.time))

    if as_json:
        typer.echo(json.dumps([slot.to_dict() for slot in schedule], indent=2))
        return

    layout = result.session.layout
    visible = result.session.visible_slots()

    console.print()
    console.print(_render_grid(layout, visible, title=f"Replayed {len(script.events)} event(s)"))
    console.print(
        f"\n[bold green]✓ {len(schedule)} slot(s)[/bold green], "
        f"{result.emitted} change(s) emitted, gesture {result.final_state.phase.value}"
    )
    hidden = len(schedule) - len(visible)
    if hidden:
        console.print(f"[yellow]⚠ {hidden} slot(s) outside the grid are kept but not shown[/yellow]")
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]schedulebuilder[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
