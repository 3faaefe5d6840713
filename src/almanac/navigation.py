"""Calendar navigation state.

Holds the view mode, the displayed date and "today" for one calendar view.
Stepping always works on a copy of the displayed date. Two behaviours are
kept on purpose:

- set_view_mode does not renormalize the displayed date; a week-start date
  stays a week-start date after switching to month view until the next step.
- navigate_today stores the raw current instant, not the period start.
"""

import math
from datetime import datetime

from .formatting import format_date
from .host import Clock
from .models.notes import OpenOutcome, OpenResult
from .models.settings import VIEW_MODES, Settings
from .orchestrator import PeriodicNoteCommands
from .periods import end_of_week, shift, start_of_week


class CalendarNavigator:
    """Navigation state machine for the calendar view.

    The note-opening capability is injected at construction and never
    replaced afterwards.
    """

    def __init__(
        self,
        notes: PeriodicNoteCommands,
        settings: Settings,
        clock: Clock,
        view_mode: str | None = None,
    ):
        self.notes = notes
        self.settings = settings
        self.clock = clock
        self.view_mode: str = view_mode or settings.default_view
        self.displayed_date: datetime | None = None
        self.today: datetime | None = None

    def activate(self) -> None:
        """Set "today" and show the current date if nothing is displayed yet."""
        now = self.clock.now()
        self.set_today(now)
        if self.displayed_date is None:
            self.set_displayed_date(now)

    def set_view_mode(self, mode: str) -> None:
        if mode not in VIEW_MODES:
            raise ValueError(f"Unknown view mode: {mode}")
        self.view_mode = mode

    def set_displayed_date(self, date: datetime) -> None:
        # datetimes are immutable, so storing the value is already a copy
        self.displayed_date = date

    def set_today(self, date: datetime) -> None:
        self.today = date

    def navigate_previous(self) -> None:
        if self.displayed_date is None:
            return
        self.set_displayed_date(shift(self.displayed_date, self.view_mode, -1))

    def navigate_next(self) -> None:
        if self.displayed_date is None:
            return
        self.set_displayed_date(shift(self.displayed_date, self.view_mode, 1))

    def navigate_today(self) -> None:
        self.set_displayed_date(self.clock.now())

    @property
    def year_title(self) -> str:
        if self.displayed_date is None:
            return ""
        return format_date(self.displayed_date, "YYYY")

    @property
    def title(self) -> str:
        """Period label for the header: "2024年", "2024年 Q2", "3月11日 - 3月17日" or "2024年3月"."""
        date = self.displayed_date
        if date is None:
            return ""

        if self.view_mode == "year":
            return f"{date.year}年"
        if self.view_mode == "quarter":
            quarter = math.ceil(date.month / 3)
            return f"{date.year}年 Q{quarter}"
        if self.view_mode == "week":
            week_start = self.settings.week_start
            start = start_of_week(date, week_start)
            end = end_of_week(date, week_start)
            return f"{format_date(start, 'M月D日')} - {format_date(end, 'M月D日')}"
        return format_date(date, "YYYY年M月")

    async def _open(self, kind: str, date: datetime, new_split: bool) -> OpenResult:
        if not self.settings.note_config(kind).enabled:
            return OpenResult(outcome=OpenOutcome.DISABLED)
        opener = getattr(self.notes, f"open_{kind}_note")
        return await opener(date, new_split)

    async def open_daily_note(self, date: datetime, new_split: bool = False) -> OpenResult:
        return await self._open("daily", date, new_split)

    async def open_weekly_note(self, date: datetime, new_split: bool = False) -> OpenResult:
        return await self._open("weekly", date, new_split)

    async def open_monthly_note(self, date: datetime, new_split: bool = False) -> OpenResult:
        return await self._open("monthly", date, new_split)

    async def open_quarterly_note(self, date: datetime, new_split: bool = False) -> OpenResult:
        return await self._open("quarterly", date, new_split)

    async def open_yearly_note(self, date: datetime, new_split: bool = False) -> OpenResult:
        return await self._open("yearly", date, new_split)
