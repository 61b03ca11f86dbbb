"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, List, Optional

import pendulum
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..adapters.holiday_store import HolidayStore
from ..adapters.range_store import RangeStore
from ..config import AppConfig, get_default_config_path
from ..domain.business_days import (
    add_business_days,
    count_business_days,
    is_business_day,
    subtract_business_days,
)
from ..domain.calendar_grid import build_month_grid
from ..domain.exceptions import LaunchPlannerError
from ..domain.models import Holiday
from ..services.drag_reschedule import CalendarDragController
from ..services.duration_editor import DurationEditor

app = typer.Typer(
    name="launchplanner",
    help="Business-day scheduling for product launch roadmaps",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]

WEEKDAY_HEADERS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Plan launch dates around weekends and holidays.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    """Load the config; without an explicit file a missing default is fine."""
    if config_file is not None:
        return AppConfig.load_from_yaml(config_file)

    config_path = get_default_config_path()
    if not config_path.exists():
        return AppConfig()
    return AppConfig.load_from_yaml(config_path)


def _parse_date(value: str, label: str) -> pendulum.Date:
    try:
        return pendulum.from_format(value, "YYYY-MM-DD").date()
    except ValueError as e:
        raise typer.BadParameter(f"{label} must be YYYY-MM-DD, got '{value}'") from e


def _format(config: AppConfig, day: pendulum.Date) -> str:
    return day.format(config.defaults.date_format, locale=config.locale)


def _fail(message: object) -> None:
    console.print(f"[bold red]Error:[/bold red] {escape(str(message))}")
    raise typer.Exit(1)


def _holiday_store(config: AppConfig) -> HolidayStore:
    store = config.holiday_store()
    if store is None:
        _fail("No holidays_file configured.")
    return store


def _with_config(config_file: Optional[Path]) -> tuple[AppConfig, List[Holiday]]:
    try:
        config = _load_config(config_file)
        return config, config.load_holidays()
    except (LaunchPlannerError, FileNotFoundError, ValueError) as e:
        _fail(e)


@app.command()
def check(
    day: Annotated[str, typer.Argument(help="Date (YYYY-MM-DD)")],
    config_file: ConfigOption = None,
):
    """
    Check whether a date is a business day.
    """
    config, holidays = _with_config(config_file)
    target = _parse_date(day, "DATE")

    if is_business_day(target, holidays):
        console.print(f"[green]✓ {_format(config, target)} is a business day[/green]")
        return

    holiday = next((h for h in holidays if h.date == target), None)
    if holiday is not None:
        reason = f"holiday: {holiday.name}"
    else:
        reason = "weekend"
    console.print(f"[yellow]✗ {_format(config, target)} is not a business day ({reason})[/yellow]")


@app.command()
def count(
    start: Annotated[str, typer.Argument(help="First day (YYYY-MM-DD)")],
    end: Annotated[str, typer.Argument(help="Last day (YYYY-MM-DD)")],
    config_file: ConfigOption = None,
):
    """
    Count business days between two dates, both inclusive.
    """
    _, holidays = _with_config(config_file)
    days = count_business_days(_parse_date(start, "START"), _parse_date(end, "END"), holidays)
    console.print(f"{days} business day(s)")


@app.command()
def add(
    day: Annotated[str, typer.Argument(help="Seed date (YYYY-MM-DD)")],
    n: Annotated[int, typer.Argument(min=0, help="Business days to advance")],
    config_file: ConfigOption = None,
):
    """
    Advance a date by N business days.
    """
    config, holidays = _with_config(config_file)
    result = add_business_days(_parse_date(day, "DATE"), n, holidays)
    console.print(f"{result.isoformat()}  ({_format(config, result)})")


@app.command()
def subtract(
    day: Annotated[str, typer.Argument(help="Seed date (YYYY-MM-DD)")],
    n: Annotated[int, typer.Argument(min=0, help="Business days to walk back")],
    config_file: ConfigOption = None,
):
    """
    Move a date back by N business days.
    """
    config, holidays = _with_config(config_file)
    result = subtract_business_days(_parse_date(day, "DATE"), n, holidays)
    console.print(f"{result.isoformat()}  ({_format(config, result)})")


@app.command("end-date")
def end_date(
    start: Annotated[str, typer.Argument(help="Launch start (YYYY-MM-DD)")],
    business_days: Annotated[
        Optional[int],
        typer.Argument(min=1, help="Duration in business days. Defaults to the configured value."),
    ] = None,
    config_file: ConfigOption = None,
):
    """
    Compute the end date of a launch that lasts N business days.
    """
    config, holidays = _with_config(config_file)
    editor = DurationEditor(
        holidays=holidays,
        business_days=business_days or config.defaults.business_days,
    )
    editor.set_start_date(_parse_date(start, "START"))

    launch_range = editor.as_range()
    console.print(
        launch_range.format_display(holidays, config.locale, config.defaults.date_format)
    )


@app.command()
def month(
    year_month: Annotated[str, typer.Argument(help="Month to show (YYYY-MM)")],
    config_file: ConfigOption = None,
):
    """
    Show a month with weekends and holidays marked.
    """
    config, holidays = _with_config(config_file)
    try:
        first = pendulum.from_format(year_month, "YYYY-MM")
    except ValueError as e:
        raise typer.BadParameter(f"Expected YYYY-MM, got '{year_month}'") from e

    table = Table(
        title=first.format("MMMM YYYY", locale=config.locale),
        show_header=True,
        header_style="bold cyan"
    )
    for header in WEEKDAY_HEADERS:
        table.add_column(header, justify="right")

    holiday_lines = []
    for week in build_month_grid(first.year, first.month, holidays):
        cells = []
        for cell in week:
            text = str(cell.date.day)
            if not cell.in_month:
                text = f"[dim]{text}[/dim]"
            elif cell.is_holiday:
                text = f"[bold red]{text}*[/bold red]"
                holiday_lines.append(f"  * {_format(config, cell.date)}: {cell.holiday_name}")
            elif not cell.is_business_day:
                text = f"[yellow]{text}[/yellow]"
            cells.append(text)
        table.add_row(*cells)

    console.print()
    console.print(table)
    for line in holiday_lines:
        console.print(line)
    console.print()


@app.command("holidays")
def list_holidays(
    year: Annotated[Optional[int], typer.Option("--year", "-y", help="Only this year")] = None,
    config_file: ConfigOption = None,
):
    """
    List all configured holidays.
    """
    config, holidays = _with_config(config_file)
    if year is not None:
        holidays = [h for h in holidays if h.date.year == year]

    if not holidays:
        console.print("[yellow]No holidays configured.[/yellow]")
        return

    table = Table(
        title="Holidays",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Date", style="bold yellow")
    table.add_column("Name")
    table.add_column("ID", style="dim")

    for holiday in holidays:
        table.add_row(_format(config, holiday.date), holiday.name, holiday.id)

    console.print()
    console.print(table)
    console.print()


@app.command("add-holiday")
def add_holiday(
    day: Annotated[str, typer.Argument(help="Date (YYYY-MM-DD)")],
    name: Annotated[str, typer.Argument(help="Holiday name")],
    config_file: ConfigOption = None,
):
    """
    Add a holiday to the holiday file.
    """
    config, _ = _with_config(config_file)
    target = _parse_date(day, "DATE")
    try:
        store = _holiday_store(config)
        if store.is_holiday(target):
            _fail(f"{_format(config, target)} is already a holiday.")
        holiday = store.create(name, target)
    except LaunchPlannerError as e:
        _fail(e)

    console.print(f"[green]✓ Added {holiday.name} on {_format(config, holiday.date)}[/green]")


@app.command("remove-holiday")
def remove_holiday(
    holiday_id: Annotated[str, typer.Argument(help="Holiday ID (see 'holidays')")],
    config_file: ConfigOption = None,
):
    """
    Remove a holiday from the holiday file.
    """
    config, _ = _with_config(config_file)
    try:
        _holiday_store(config).delete(holiday_id)
    except LaunchPlannerError as e:
        _fail(e)

    console.print(f"[green]✓ Removed holiday {holiday_id}[/green]")


def _range_store(config: AppConfig) -> RangeStore:
    if config.ranges_file is None:
        _fail("No ranges_file configured.")
    try:
        return RangeStore(config.ranges_file)
    except LaunchPlannerError as e:
        _fail(e)


@app.command("ranges")
def list_ranges(
    config_file: ConfigOption = None,
):
    """
    List launch ranges with their business-day durations.
    """
    config, holidays = _with_config(config_file)
    launches = _range_store(config).all()

    if not launches:
        console.print("[yellow]No launches found.[/yellow]")
        return

    table = Table(
        title="Launches",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("ID", style="dim")
    table.add_column("Name", style="bold yellow")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Business days", justify="right")

    for launch in launches:
        launch_range = launch.to_range()
        table.add_row(
            launch.id,
            launch.display_name(),
            _format(config, launch_range.start_date),
            _format(config, launch_range.end_date),
            str(launch_range.business_days(holidays)),
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def reschedule(
    launch_id: Annotated[str, typer.Argument(help="Launch ID")],
    to: Annotated[str, typer.Option("--to", help="New date for the anchor (YYYY-MM-DD)")],
    anchor: Annotated[str, typer.Option("--anchor", "-a", help="Endpoint to move: first or last")] = "first",
    config_file: ConfigOption = None,
):
    """
    Move the first or last day of a launch, keeping its business-day duration.

    Examples:

        launchplanner reschedule checkout-v2 --to 2025-01-08

        launchplanner reschedule checkout-v2 --anchor last --to 2025-02-14
    """
    config, holidays = _with_config(config_file)
    target = _parse_date(to, "--to")
    store = _range_store(config)
    controller = CalendarDragController(
        store,
        holidays,
        locale=config.locale,
        date_format=config.defaults.date_format,
        describe=store.display_name,
    )

    try:
        controller.on_drag_start(launch_id, anchor)
    except ValueError:
        _fail(f"--anchor must be 'first' or 'last', got '{anchor}'")
    except LaunchPlannerError as e:
        _fail(e)

    preview = controller.on_drag_move(target)
    if preview is not None:
        console.print(f"[dim]Preview: {preview.as_range()}[/dim]")

    outcome = asyncio.run(controller.on_drag_end(target))

    if not outcome.ok:
        _fail(outcome.message)

    console.print(f"[green]✓ {escape(outcome.message)}[/green]")


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]launchplanner[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
