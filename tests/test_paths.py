"""Tests for note path resolution."""

from datetime import datetime

import pytest

from almanac.models.settings import PeriodicNoteConfig
from almanac.paths import VaultPaths, normalize_path, note_path_for, resolve_note_path
from almanac.periods import start_of_week


def test_daily_note_in_vault_root():
    assert resolve_note_path("", "YYYY-MM-DD", datetime(2024, 3, 15)) == "2024-03-15.md"


def test_weekly_note_in_folder():
    """Friday 2024-03-15 with Monday week start resolves to weeks/2024-W11.md."""
    week_start = start_of_week(datetime(2024, 3, 15), "monday")
    assert week_start == datetime(2024, 3, 11)
    assert resolve_note_path("weeks", "YYYY-[W]ww", week_start, "monday") == "weeks/2024-W11.md"


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("notes//daily///2024.md", "notes/daily/2024.md"),
        ("/notes/daily/", "notes/daily"),
        ("notes\\daily\\2024.md", "notes/daily/2024.md"),
        ("./notes/./2024.md", "notes/2024.md"),
        ("", "/"),
        ("///", "/"),
        ("a b.md", "a b.md"),
        ("../../2024.md", "2024.md"),
        ("weeks/../2024.md", "weeks/2024.md"),
        ("..", "/"),
    ],
)
def test_normalize_path(raw, expected):
    assert normalize_path(raw) == expected


def test_folder_slashes_are_normalized():
    assert resolve_note_path("/journal//daily/", "YYYY-MM-DD", datetime(2024, 3, 15)) == "journal/daily/2024-03-15.md"


def test_format_with_separators_stays_under_folder():
    assert resolve_note_path("daily", "YYYY/MM/YYYY-MM-DD", datetime(2024, 3, 15)) == "daily/2024/03/2024-03-15.md"


def test_same_rendered_stem_means_same_path():
    monthly = PeriodicNoteConfig(enabled=True, folder="months", format="YYYY-MM")
    first = note_path_for(monthly, datetime(2024, 3, 1))
    last = note_path_for(monthly, datetime(2024, 3, 31, 23, 59))
    assert first == last == "months/2024-03.md"


def test_distinct_rendered_stems_mean_distinct_paths():
    daily = PeriodicNoteConfig(enabled=True, folder="", format="YYYY-MM-DD")
    dates = [datetime(2024, 3, day) for day in range(1, 32)]
    paths = {note_path_for(daily, d) for d in dates}
    assert len(paths) == len(dates)


def test_vault_paths_layout(temp_vault):
    paths = VaultPaths(temp_vault)
    assert paths.settings_file == temp_vault / ".almanac" / "data.json"
    assert paths.ledger_file == temp_vault / ".almanac" / "ledger.jsonl"
    assert paths.absolute("weeks//2024-W11.md") == temp_vault / "weeks" / "2024-W11.md"
    assert paths.absolute("") == temp_vault


def test_format_with_parent_segments_stays_under_folder():
    assert resolve_note_path("weeks", "[../../]YYYY", datetime(2024, 3, 15)) == "weeks/2024.md"
    assert resolve_note_path("../outside", "YYYY", datetime(2024, 3, 15)) == "outside/2024.md"


def test_vault_contains(temp_vault):
    paths = VaultPaths(temp_vault)
    assert paths.contains(paths.absolute("weeks/2024-W11.md"))
    assert paths.contains(paths.absolute("../escape.md"))
    assert not paths.contains(temp_vault.parent / "escape.md")
