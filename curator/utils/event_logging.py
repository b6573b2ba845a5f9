"""
Selection event logging utilities for CURATOR (Tier 2 logging).

Appends one JSON object per curation outcome to a JSON Lines file so that
analytics collaborators can pick up provider, token and attempt details without
parsing the detailed (Tier 1) logs.

For detailed within-context logging, use curator.utils.logger instead.

Usage:
    from curator.utils.event_logging import log_selection_event

    log_selection_event(
        event_type="selection_completed",
        source="targeting",
        provider="cerebras-gpt",
        bullet_count=24,
    )
"""

import json
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from curator.utils.timestamp import now_exact

load_dotenv()


def get_events_file() -> Optional[Path]:
    """Resolve the event log path from SELECTION_EVENTS_FILE (None = disabled)."""
    path = os.getenv("SELECTION_EVENTS_FILE")
    return Path(path) if path else None


def log_selection_event(
    event_type: str,
    source: str,
    events_file: Optional[Path] = None,
    **extra_fields,
) -> Optional[dict]:
    """
    Append a selection event to the JSON Lines event log.

    Args:
        event_type: Type of event (e.g., "selection_completed", "selection_failed")
        source: Event source (e.g., "targeting", "cli")
        events_file: Explicit log path (defaults to SELECTION_EVENTS_FILE)
        **extra_fields: Event-specific fields (must be JSON serializable)

    Returns:
        The event dict written, or None when event logging is disabled
    """
    events_file = events_file or get_events_file()
    if events_file is None:
        return None

    events_file.parent.mkdir(parents=True, exist_ok=True)

    event = {
        "timestamp": now_exact(),
        "event_type": event_type,
        "source": source,
        **extra_fields,
    }

    with open(events_file, "a", encoding="utf-8") as f:
        f.write(json.dumps(event) + "\n")

    return event


def get_recent_events(
    n: int = 10,
    event_type: Optional[str] = None,
    events_file: Optional[Path] = None,
) -> list[dict]:
    """
    Get the last n events from the selection log, optionally filtered by type.

    Returns:
        List of event dicts (most recent last)
    """
    events_file = events_file or get_events_file()
    if events_file is None or not events_file.exists():
        return []

    events = []
    with open(events_file, "r", encoding="utf-8") as f:
        for line in f:
            try:
                events.append(json.loads(line.strip()))
            except json.JSONDecodeError:
                # Skip malformed lines
                continue

    if event_type:
        events = [e for e in events if e.get("event_type") == event_type]

    return events[-n:] if len(events) > n else events
