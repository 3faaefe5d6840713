"""Append-only activity ledger for Almanac."""

import json
import uuid
from collections import deque
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

from rich.console import Console

from .models.ledger import LedgerEvent, LedgerEventType
from .paths import normalize_path

console = Console(stderr=True)


class LedgerWriter:
    """Records note activity in <vault>/.almanac/ledger.jsonl.

    One JSON object per line; existing lines are never rewritten. Note
    paths are stored normalized so they can be matched on read.
    """

    def __init__(self, ledger_path: Path, run_id: str | None = None):
        """Initialize ledger writer.

        Args:
            ledger_path: Path to ledger.jsonl file
            run_id: Optional run ID; if None, generates a new uuid4
        """
        self.ledger_path = ledger_path
        self.run_id = run_id or str(uuid.uuid4())

    def append_event(
        self,
        event_type: LedgerEventType,
        payload: dict,
        note_path: str | None = None,
    ) -> LedgerEvent:
        """Append an event to the ledger.

        Args:
            event_type: Type of event
            payload: Event-specific data
            note_path: Optional note path reference

        Returns:
            The created LedgerEvent
        """
        self.ledger_path.parent.mkdir(parents=True, exist_ok=True)

        event = LedgerEvent(
            event_id=str(uuid.uuid4()),
            run_id=self.run_id,
            ts=datetime.now(timezone.utc),
            event_type=event_type,
            note_path=normalize_path(note_path) if note_path else None,
            payload=payload,
        )

        with open(self.ledger_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(event.model_dump(mode="json")) + "\n")

        return event


def _iter_events(ledger_path: Path) -> Iterator[LedgerEvent]:
    """Yield ledger events in file order, warning once about bad lines."""
    skipped = 0
    with open(ledger_path, "r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                yield LedgerEvent(**json.loads(line))
            except (json.JSONDecodeError, ValueError) as e:
                skipped += 1
                console.print(f"[yellow]Warning: Skipping malformed ledger line {line_no}: {e}[/yellow]")

    if skipped:
        console.print(f"[yellow]Skipped {skipped} malformed line(s)[/yellow]")


def read_ledger_tail(
    ledger_path: Path,
    n: int = 20,
    note_path: str | None = None,
    event_type: LedgerEventType | None = None,
) -> list[LedgerEvent]:
    """Read the most recent ledger events, oldest first.

    Args:
        ledger_path: Path to ledger.jsonl file
        n: Maximum number of events to return
        note_path: Only events about this note (normalized before matching)
        event_type: Only events of this type

    Returns:
        Up to n matching events
    """
    if not ledger_path.exists() or n <= 0:
        return []

    wanted_path = normalize_path(note_path) if note_path else None
    recent: deque[LedgerEvent] = deque(maxlen=n)
    for event in _iter_events(ledger_path):
        if wanted_path is not None and event.note_path != wanted_path:
            continue
        if event_type is not None and event.event_type != event_type:
            continue
        recent.append(event)
    return list(recent)
