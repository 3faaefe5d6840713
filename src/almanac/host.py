"""Host capabilities consumed by the note core.

The core never touches the filesystem, the UI or the clock directly; it
awaits these capabilities instead. LocalVaultStore, ConsoleWorkspace,
console_confirm and SystemClock are the implementations used by the CLI.
"""

import asyncio
import logging
import os
import shlex
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Awaitable, Callable, Protocol

import typer
from rich.console import Console

from .models.notes import NoteFile, NoteFolder
from .paths import VaultPaths, normalize_path

logger = logging.getLogger(__name__)

VaultEntry = NoteFile | NoteFolder


class AlmanacError(Exception):
    """Base exception for Almanac errors."""
    pass


class HostError(AlmanacError):
    """Raised when the host store cannot complete a mutation."""
    pass


class NoteStore(Protocol):
    async def get_entry(self, path: str) -> VaultEntry | None:
        ...

    async def create_folder(self, path: str) -> NoteFolder:
        ...

    async def create_file(self, path: str, content: str) -> NoteFile:
        ...

    async def read_file(self, file: NoteFile) -> str:
        ...


class Workspace(Protocol):
    async def open_file(self, file: NoteFile, *, new_split: bool, make_active: bool) -> None:
        ...

    def notify(self, message: str) -> None:
        ...


class Clock(Protocol):
    def now(self) -> datetime:
        ...


Confirm = Callable[[str, str], Awaitable[bool]]


class SystemClock:
    """Local wall-clock time with the system timezone attached."""

    def now(self) -> datetime:
        return datetime.now().astimezone()


class LocalVaultStore:
    """Host store backed by a vault directory on disk.

    Paths are vault-relative and normalized before use. Mutations never
    overwrite: creating an existing entry raises HostError.
    """

    def __init__(self, vault_root: Path):
        self.paths = VaultPaths(vault_root)

    def _target(self, normalized: str) -> Path:
        target = self.paths.absolute(normalized)
        if not self.paths.contains(target):
            raise HostError(f"Path {normalized} is outside the vault")
        return target

    async def get_entry(self, path: str) -> VaultEntry | None:
        normalized = normalize_path(path)
        target = self.paths.absolute(normalized)
        if target.is_file():
            return NoteFile(path=normalized)
        if target.is_dir():
            return NoteFolder(path=normalized)
        return None

    async def create_folder(self, path: str) -> NoteFolder:
        normalized = normalize_path(path)
        target = self._target(normalized)
        try:
            target.mkdir(parents=True, exist_ok=False)
        except FileExistsError as e:
            raise HostError(f"Entry already exists at {normalized}") from e
        except OSError as e:
            raise HostError(f"Failed to create folder {normalized}: {e}") from e
        logger.debug(f"Created folder {normalized}")
        return NoteFolder(path=normalized)

    async def create_file(self, path: str, content: str) -> NoteFile:
        normalized = normalize_path(path)
        target = self._target(normalized)
        try:
            # "x" mode refuses to clobber an existing file
            with open(target, "x", encoding="utf-8") as f:
                f.write(content)
        except FileExistsError as e:
            raise HostError(f"File already exists: {normalized}") from e
        except OSError as e:
            raise HostError(f"Failed to create file {normalized}: {e}") from e
        logger.debug(f"Created file {normalized} ({len(content)} chars)")
        return NoteFile(path=normalized)

    async def read_file(self, file: NoteFile) -> str:
        target = self._target(file.path)
        try:
            return target.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise HostError(f"Failed to read {file.path}: {e}") from e


class ConsoleWorkspace:
    """Workspace that reports opened notes on the console.

    With an editor command (or $EDITOR when launch_editor is set) the note
    is handed to that editor; new_split is advisory only on a terminal.
    """

    def __init__(
        self,
        vault_root: Path,
        console: Console | None = None,
        editor: str | None = None,
        launch_editor: bool = False,
    ):
        self.paths = VaultPaths(vault_root)
        self.console = console or Console()
        self.editor = editor or (os.environ.get("EDITOR") if launch_editor else None)
        self.opened: list[NoteFile] = []

    async def open_file(self, file: NoteFile, *, new_split: bool, make_active: bool) -> None:
        target = self.paths.absolute(file.path)
        self.opened.append(file)
        where = "new split" if new_split else "current pane"
        self.console.print(f"[green]Opened[/green] {file.path} [dim]({where})[/dim]")
        if self.editor:
            command = shlex.split(self.editor) + [str(target)]
            await asyncio.to_thread(subprocess.run, command, check=False)

    def notify(self, message: str) -> None:
        self.console.print(f"[red]{message}[/red]")


async def console_confirm(title: str, message: str) -> bool:
    """Ask the user on the terminal; the default answer is no."""
    return typer.confirm(f"{title}: {message}", default=False)


def auto_confirm(answer: bool) -> Confirm:
    """Build a confirmation capability that always answers the same way."""

    async def _confirm(title: str, message: str) -> bool:
        logger.debug(f"Auto-answered confirmation '{title}' with {answer}")
        return answer

    return _confirm
