"""Open-or-create flow for periodic notes.

One request runs strictly in sequence: resolve the path, look it up,
optionally confirm, optionally create, open. Host errors raised while
creating are caught once here and turned into a single user notice.
"""

import logging
from datetime import datetime
from typing import Protocol

from .host import Clock, Confirm, HostError, NoteStore, Workspace
from .ledger import LedgerWriter
from .models.notes import NoteFile, OpenOutcome, OpenResult
from .models.settings import PERIOD_KINDS, PeriodicNoteConfig, Settings
from .notes import NoteService
from .paths import note_path_for
from .periods import start_of_period

logger = logging.getLogger(__name__)

COMMAND_IDS = {
    "daily": "open-daily-note",
    "weekly": "open-weekly-note",
    "monthly": "open-monthly-note",
    "quarterly": "open-quarterly-note",
    "yearly": "open-yearly-note",
}

CREATE_FAILED_NOTICE = "Failed to create note"


class PeriodicNoteCommands(Protocol):
    """Note-opening capability handed to the calendar navigator."""

    async def open_daily_note(self, date: datetime | None = None, new_split: bool = False) -> OpenResult:
        ...

    async def open_weekly_note(self, date: datetime | None = None, new_split: bool = False) -> OpenResult:
        ...

    async def open_monthly_note(self, date: datetime | None = None, new_split: bool = False) -> OpenResult:
        ...

    async def open_quarterly_note(self, date: datetime | None = None, new_split: bool = False) -> OpenResult:
        ...

    async def open_yearly_note(self, date: datetime | None = None, new_split: bool = False) -> OpenResult:
        ...


class PeriodicNoteOpener:
    """Opens periodic notes, creating them on first use."""

    def __init__(
        self,
        settings: Settings,
        store: NoteStore,
        workspace: Workspace,
        confirm: Confirm,
        clock: Clock,
        ledger_writer: LedgerWriter | None = None,
    ):
        """Initialize the opener.

        Args:
            settings: Shared settings instance (read only)
            store: Host file store
            workspace: Host workspace used to open panes and show notices
            confirm: Async yes/no prompt used before creating a note
            clock: Source of "now" for commands without a date
            ledger_writer: Optional ledger for activity events
        """
        self.settings = settings
        self.notes = NoteService(store)
        self.workspace = workspace
        self.confirm = confirm
        self.clock = clock
        self.ledger_writer = ledger_writer

    def _record(self, event_type, path: str, payload: dict | None = None) -> None:
        if self.ledger_writer is not None:
            self.ledger_writer.append_event(event_type=event_type, payload=payload or {}, note_path=path)

    async def open_or_create(
        self,
        config: PeriodicNoteConfig,
        date: datetime,
        new_split: bool = False,
    ) -> OpenResult:
        """Open the note for date, creating it first if needed.

        Args:
            config: Periodic note config giving folder, format and template
            date: Date the note represents (already normalized by the caller)
            new_split: Open in a new split instead of the current unpinned pane

        Returns:
            OpenResult describing how the request ended
        """
        path = note_path_for(config, date, self.settings.week_start)

        file: NoteFile | None = await self.notes.exists(path)
        created = False

        if file is None:
            if self.settings.should_confirm_before_create:
                should_create = await self.confirm(
                    "Create Note",
                    f"File {path} does not exist. Would you like to create it?",
                )
                if not should_create:
                    logger.info(f"Creation of {path} declined")
                    self._record("NOTE_CREATE_DECLINED", path)
                    return OpenResult(outcome=OpenOutcome.DECLINED, path=path)

            try:
                file, created = await self.notes.create_note(path, config.folder, config.template)
            except (HostError, OSError) as e:
                logger.error(f"Failed to create note {path}: {e}")
                self.workspace.notify(CREATE_FAILED_NOTICE)
                self._record("NOTE_CREATE_FAILED", path, {"error": str(e)})
                return OpenResult(outcome=OpenOutcome.FAILED, path=path, error=str(e))

            if created:
                self._record("NOTE_CREATED", file.path, {"template": config.template})

        await self.workspace.open_file(file, new_split=new_split, make_active=True)
        self._record("NOTE_OPENED", file.path, {"new_split": new_split})

        outcome = OpenOutcome.CREATED if created else OpenOutcome.OPENED
        return OpenResult(outcome=outcome, path=file.path, file=file)

    async def open_periodic_note(
        self,
        kind: str,
        date: datetime | None = None,
        new_split: bool = False,
    ) -> OpenResult:
        """Open the note of a period kind for date (default: now).

        Non-daily dates are moved to the start of their period first.
        Returns a DISABLED result without any I/O when the kind is disabled.
        """
        if kind not in PERIOD_KINDS:
            raise ValueError(f"Unknown period kind: {kind}")

        config = self.settings.note_config(kind)
        if not config.enabled:
            logger.debug(f"{COMMAND_IDS[kind]} ignored: {kind} notes are disabled")
            return OpenResult(outcome=OpenOutcome.DISABLED)

        if date is None:
            date = self.clock.now()
        if kind != "daily":
            date = start_of_period(date, kind, self.settings.week_start)

        return await self.open_or_create(config, date, new_split)

    async def open_daily_note(self, date: datetime | None = None, new_split: bool = False) -> OpenResult:
        return await self.open_periodic_note("daily", date, new_split)

    async def open_weekly_note(self, date: datetime | None = None, new_split: bool = False) -> OpenResult:
        return await self.open_periodic_note("weekly", date, new_split)

    async def open_monthly_note(self, date: datetime | None = None, new_split: bool = False) -> OpenResult:
        return await self.open_periodic_note("monthly", date, new_split)

    async def open_quarterly_note(self, date: datetime | None = None, new_split: bool = False) -> OpenResult:
        return await self.open_periodic_note("quarterly", date, new_split)

    async def open_yearly_note(self, date: datetime | None = None, new_split: bool = False) -> OpenResult:
        return await self.open_periodic_note("yearly", date, new_split)

    def commands(self) -> dict:
        """Map command ids ("open-daily-note", ...) to their coroutine functions."""
        return {command_id: getattr(self, f"open_{kind}_note") for kind, command_id in COMMAND_IDS.items()}
