"""Pydantic models for plugin settings."""

from typing import Literal

from pydantic import BaseModel, Field

PeriodKind = Literal["daily", "weekly", "monthly", "quarterly", "yearly"]
ViewMode = Literal["year", "quarter", "month", "week"]
WeekStart = Literal["sunday", "monday", "locale"]

PERIOD_KINDS: tuple[str, ...] = ("daily", "weekly", "monthly", "quarterly", "yearly")
VIEW_MODES: tuple[str, ...] = ("year", "quarter", "month", "week")


class PeriodicNoteConfig(BaseModel):
    """Settings for one kind of periodic note.

    The format's granularity defines the period: every date that renders
    to the same stem maps to the same note.
    """

    enabled: bool = Field(default=False, description="Whether notes of this kind can be opened")
    folder: str = Field(default="", description="Vault-relative folder, empty for the vault root")
    format: str = Field(default="YYYY-MM-DD", description="Date pattern used for the file stem")
    template: str = Field(default="", description="Vault-relative path of a seed file, empty for none")

    model_config = {"validate_assignment": True}


DEFAULT_NOTE_CONFIGS: dict[str, PeriodicNoteConfig] = {
    "daily": PeriodicNoteConfig(enabled=True, folder="", format="YYYY-MM-DD"),
    "weekly": PeriodicNoteConfig(enabled=False, folder="weeks", format="YYYY-[W]ww"),
    "monthly": PeriodicNoteConfig(enabled=False, folder="months", format="YYYY-MM"),
    "quarterly": PeriodicNoteConfig(enabled=False, folder="quarters", format="YYYY-[Q]Q"),
    "yearly": PeriodicNoteConfig(enabled=False, folder="years", format="YYYY"),
}


def default_note_config(kind: str) -> PeriodicNoteConfig:
    """Return a fresh copy of the default config for a period kind."""
    return DEFAULT_NOTE_CONFIGS[kind].model_copy()


class Settings(BaseModel):
    """Process-wide calendar settings.

    Read by every component; written only through SettingsStore.
    """

    # General
    words_per_dot: int = Field(default=250)
    week_start: WeekStart = Field(default="locale")
    should_confirm_before_create: bool = Field(default=True)
    default_view: ViewMode = Field(default="month")
    locale_override: str = Field(default="system-default")

    # Periodic notes
    daily_note: PeriodicNoteConfig = Field(default_factory=lambda: default_note_config("daily"))
    weekly_note: PeriodicNoteConfig = Field(default_factory=lambda: default_note_config("weekly"))
    monthly_note: PeriodicNoteConfig = Field(default_factory=lambda: default_note_config("monthly"))
    quarterly_note: PeriodicNoteConfig = Field(default_factory=lambda: default_note_config("quarterly"))
    yearly_note: PeriodicNoteConfig = Field(default_factory=lambda: default_note_config("yearly"))

    model_config = {"validate_assignment": True}

    def note_config(self, kind: str) -> PeriodicNoteConfig:
        """Get the config for a period kind ("daily", "weekly", ...)."""
        if kind not in PERIOD_KINDS:
            raise KeyError(f"Unknown period kind: {kind}")
        return getattr(self, f"{kind}_note")
