#!/usr/bin/env python3
"""
View recent selection events from the SELECTION_EVENTS_FILE log.
"""

import json
from typing import Optional

import typer
from dotenv import load_dotenv

from curator.utils.event_logging import get_events_file, get_recent_events
from curator.utils.timestamp import format_timestamp

load_dotenv()

app = typer.Typer(
    add_completion=False,
    help="View recent selection events",
)


@app.command()
def main(
    n: int = typer.Option(10, "--num", "-n", help="Number of recent events to show"),
    event_type: Optional[str] = typer.Option(
        None, "--event-type", "-e", help="Filter to events of this type"
    ),
    compact: bool = typer.Option(
        False, "--compact", "-c", help="Print one event per line (no pretty formatting)"
    ),
):
    """
    Show the last n events from the selection log.

    Examples:\n

        $ python scripts/tail_events.py                          # Last 10 events

        $ python scripts/tail_events.py -e selection_failed      # Last 10 failures

        $ python scripts/tail_events.py -n 20 --compact          # One line per event
    """
    if get_events_file() is None:
        typer.secho("SELECTION_EVENTS_FILE is not set", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    events = get_recent_events(n=n, event_type=event_type)

    if not events:
        typer.secho("No events found", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(code=1)

    if not compact:
        suffix = f" [type={event_type}]" if event_type else ""
        typer.secho(f"\nShowing last {len(events)} event(s){suffix}:", fg=typer.colors.BLUE)
        typer.echo("")

    for event in events:
        if compact:
            typer.echo(json.dumps(event))
            continue

        typer.secho(
            f"{format_timestamp(event.get('timestamp', ''))}  {event.get('event_type')}",
            bold=True,
        )
        typer.echo(json.dumps(event, indent=2))
        typer.echo("")


if __name__ == "__main__":
    app()
