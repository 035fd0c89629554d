"""Rich terminal output for the event listing CLI."""

from __future__ import annotations

import datetime
import json

from rich import box
from rich.console import Console
from rich.table import Table

from keptn_events.models import Error, KeptnContextExtendedCE

console = Console()
err_console = Console(stderr=True)


def _fmt_time(iso_str: str | None) -> str:
    """Render an event timestamp as 'YYYY-MM-DD HH:MM:SS' UTC.

    Falls back to the raw string when it is not ISO 8601.
    """
    if not iso_str:
        return ""
    try:
        dt = datetime.datetime.fromisoformat(iso_str.replace("Z", "+00:00"))
    except ValueError:
        return iso_str
    if dt.tzinfo is not None:
        dt = dt.astimezone(datetime.timezone.utc)
    return dt.strftime("%Y-%m-%d %H:%M:%S")


def _short_type(event_type: str | None) -> str:
    """Drop the 'sh.keptn.event.' prefix from an event type."""
    if not event_type:
        return ""
    return event_type.removeprefix("sh.keptn.event.")


def print_events_table(events: list[KeptnContextExtendedCE]) -> None:
    if not events:
        console.print("[yellow]No events found.[/yellow]")
        return

    tbl = Table(box=box.SIMPLE_HEAVY, show_header=True, header_style="bold magenta")
    tbl.add_column("Time (UTC)", no_wrap=True)
    tbl.add_column("Type", style="bold")
    tbl.add_column("Source")
    tbl.add_column("ID", style="dim", no_wrap=True)
    tbl.add_column("Keptn Context", style="dim", no_wrap=True)

    for e in events:
        type_str = _short_type(e.type)
        style = "red" if type_str.endswith(".finished") and _is_failed(e) else ""
        tbl.add_row(
            _fmt_time(e.time),
            type_str,
            e.source or "",
            e.id or "",
            e.shkeptncontext or "",
            style=style,
        )

    console.print(tbl)
    console.print(f"[dim]Total events: {len(events)}[/dim]")


def _is_failed(event: KeptnContextExtendedCE) -> bool:
    data = event.data if isinstance(event.data, dict) else {}
    return data.get("result") == "fail" or data.get("status") == "errored"


def print_events_json(events: list[KeptnContextExtendedCE]) -> None:
    console.print_json(json.dumps([e.to_dict() for e in events]))


def print_error(error: Error) -> None:
    err_console.print(f"[red]Error: {error}[/red]")
