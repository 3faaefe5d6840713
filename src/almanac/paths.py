"""Note path resolution and vault structure for Almanac."""

import re
from datetime import datetime
from pathlib import Path

from .formatting import format_date
from .models.settings import PeriodicNoteConfig

_SEPARATORS_RE = re.compile(r"/+")


def normalize_path(path: str) -> str:
    """Normalize a vault-relative path.

    Backslashes become forward slashes, repeated separators collapse,
    "." and ".." segments are dropped and leading/trailing slashes are
    stripped, so a path never climbs above the folder it starts in.
    An empty or root-only path normalizes to "/".
    """
    cleaned = path.replace("\\", "/").replace("\u00a0", " ")
    cleaned = _SEPARATORS_RE.sub("/", cleaned)
    segments = [segment for segment in cleaned.split("/") if segment not in ("", ".", "..")]
    if not segments:
        return "/"
    return "/".join(segments)


def resolve_note_path(folder: str, fmt: str, date: datetime, week_start: str = "locale") -> str:
    """Get the vault-relative file path for a periodic note.

    Args:
        folder: Vault-relative folder, empty for the vault root
        fmt: Date pattern for the file stem
        date: Date the note represents
        week_start: Week convention used by locale week tokens

    Returns:
        Normalized path such as "weeks/2024-W11.md"
    """
    filename = format_date(date, fmt, week_start)
    if folder:
        return normalize_path(f"{folder}/{filename}.md")
    return normalize_path(f"{filename}.md")


def note_path_for(config: PeriodicNoteConfig, date: datetime, week_start: str = "locale") -> str:
    """Resolve the note path for a periodic note config."""
    return resolve_note_path(config.folder, config.format, date, week_start)


class VaultPaths:
    """Manages Almanac's own files within a vault."""

    def __init__(self, vault_root: Path):
        """Initialize vault paths from root directory.

        Args:
            vault_root: Root directory of the Markdown vault
        """
        self.root = vault_root

        # Plugin data directory
        self.system = vault_root / ".almanac"

        # System files
        self.settings_file = self.system / "data.json"
        self.ledger_file = self.system / "ledger.jsonl"

    def get_all_directories(self) -> list[Path]:
        """Get list of all directories Almanac keeps in the vault."""
        return [self.system]

    def absolute(self, vault_path: str) -> Path:
        """Map a normalized vault-relative path onto the filesystem."""
        normalized = normalize_path(vault_path)
        if normalized == "/":
            return self.root
        return self.root.joinpath(*normalized.split("/"))

    def contains(self, target: Path) -> bool:
        """Whether target, with symlinks resolved, lies inside the vault."""
        return target.resolve().is_relative_to(self.root.resolve())
