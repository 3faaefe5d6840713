"""Pytest fixtures for Almanac tests."""

from datetime import datetime

import pytest

from almanac.host import LocalVaultStore
from almanac.ledger import LedgerWriter
from almanac.models.notes import NoteFile
from almanac.models.settings import Settings
from almanac.orchestrator import PeriodicNoteOpener
from almanac.paths import VaultPaths


class FakeClock:
    """Clock frozen at a fixed instant."""

    def __init__(self, now: datetime):
        self.current = now

    def now(self) -> datetime:
        return self.current


class RecordingWorkspace:
    """Workspace that records opened panes and notices."""

    def __init__(self):
        self.opened: list[tuple[NoteFile, bool, bool]] = []
        self.notices: list[str] = []

    async def open_file(self, file: NoteFile, *, new_split: bool, make_active: bool) -> None:
        self.opened.append((file, new_split, make_active))

    def notify(self, message: str) -> None:
        self.notices.append(message)


class RecordingConfirm:
    """Confirmation prompt with a canned answer that records its calls."""

    def __init__(self, answer: bool):
        self.answer = answer
        self.calls: list[tuple[str, str]] = []

    async def __call__(self, title: str, message: str) -> bool:
        self.calls.append((title, message))
        return self.answer


class CountingStore(LocalVaultStore):
    """LocalVaultStore that counts mutations."""

    def __init__(self, vault_root):
        super().__init__(vault_root)
        self.files_created: list[str] = []
        self.folders_created: list[str] = []

    async def create_folder(self, path):
        folder = await super().create_folder(path)
        self.folders_created.append(folder.path)
        return folder

    async def create_file(self, path, content):
        file = await super().create_file(path, content)
        self.files_created.append(file.path)
        return file


@pytest.fixture
def temp_vault(tmp_path):
    """Create a temporary vault for testing.

    Args:
        tmp_path: pytest's built-in temporary directory fixture

    Returns:
        Path to temporary vault root
    """
    vault_root = tmp_path / "test_vault"
    vault_root.mkdir()
    return vault_root


@pytest.fixture
def vault_paths(temp_vault):
    """Create VaultPaths for temporary vault."""
    paths = VaultPaths(temp_vault)
    for directory in paths.get_all_directories():
        directory.mkdir(parents=True, exist_ok=True)
    paths.ledger_file.touch()
    return paths


@pytest.fixture
def store(temp_vault):
    return CountingStore(temp_vault)


@pytest.fixture
def workspace():
    return RecordingWorkspace()


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 15, 9, 30))


@pytest.fixture
def settings():
    """Default settings with confirmation turned off and every kind enabled."""
    settings = Settings(should_confirm_before_create=False, week_start="monday")
    settings.weekly_note.enabled = True
    settings.monthly_note.enabled = True
    settings.quarterly_note.enabled = True
    settings.yearly_note.enabled = True
    return settings


@pytest.fixture
def ledger_writer(vault_paths):
    return LedgerWriter(vault_paths.ledger_file)


@pytest.fixture
def make_opener(settings, store, workspace, clock, ledger_writer):
    """Build a PeriodicNoteOpener with a given confirmation answer."""

    def _make(confirm=None):
        return PeriodicNoteOpener(
            settings=settings,
            store=store,
            workspace=workspace,
            confirm=confirm or RecordingConfirm(True),
            clock=clock,
            ledger_writer=ledger_writer,
        )

    return _make
