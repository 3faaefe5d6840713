"""Pydantic models for Almanac."""

from .ledger import LedgerEvent, LedgerEventType
from .notes import NoteFile, NoteFolder, OpenOutcome, OpenResult
from .settings import (
    DEFAULT_NOTE_CONFIGS,
    PERIOD_KINDS,
    VIEW_MODES,
    PeriodicNoteConfig,
    PeriodKind,
    Settings,
    ViewMode,
    WeekStart,
    default_note_config,
)

__all__ = [
    "LedgerEvent",
    "LedgerEventType",
    # Vault entries
    "NoteFile",
    "NoteFolder",
    "OpenOutcome",
    "OpenResult",
    # Settings
    "DEFAULT_NOTE_CONFIGS",
    "PERIOD_KINDS",
    "VIEW_MODES",
    "PeriodKind",
    "ViewMode",
    "WeekStart",
    "PeriodicNoteConfig",
    "Settings",
    "default_note_config",
]
