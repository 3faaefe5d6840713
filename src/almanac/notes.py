"""Existence checks and idempotent creation of periodic notes."""

import logging

from .host import HostError, NoteStore
from .models.notes import NoteFile
from .paths import normalize_path

logger = logging.getLogger(__name__)


class NoteService:
    """Creates notes through the host store without ever duplicating one.

    Existence is looked up live on every call; nothing is cached.
    """

    def __init__(self, store: NoteStore):
        self.store = store

    async def exists(self, path: str) -> NoteFile | None:
        """Return the file at path, or None if absent or a folder."""
        entry = await self.store.get_entry(normalize_path(path))
        return entry if isinstance(entry, NoteFile) else None

    async def ensure_folder(self, folder: str) -> None:
        """Create folder when nothing exists at that path.

        An existing entry of either kind is left untouched; errors from the
        host creating the folder propagate unchanged.
        """
        if not folder:
            return
        normalized = normalize_path(folder)
        if normalized == "/":
            return
        entry = await self.store.get_entry(normalized)
        if entry is None:
            await self.store.create_folder(normalized)
            logger.info(f"Created folder {normalized}")

    async def load_template(self, template_path: str) -> str:
        """Read template content.

        A missing template is treated as "no template": empty paths,
        absent entries, folders and read failures all give "".
        """
        if not template_path:
            return ""
        entry = await self.store.get_entry(normalize_path(template_path))
        if not isinstance(entry, NoteFile):
            logger.warning(f"Template {template_path} not found, creating note without template")
            return ""
        try:
            return await self.store.read_file(entry)
        except (HostError, OSError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to read template {template_path}: {e}")
            return ""

    async def create_note(self, path: str, folder: str, template_path: str) -> tuple[NoteFile, bool]:
        """Create a note, or return the existing one at path.

        Args:
            path: Resolved note path
            folder: Folder to create first if missing
            template_path: Seed file for the note body, empty for none

        Returns:
            Handle to the note, and whether this call created it

        Raises:
            HostError: If the host fails to create the folder or the file
        """
        existing = await self.exists(path)
        if existing:
            logger.debug(f"Note {existing.path} already exists")
            return existing, False

        await self.ensure_folder(folder)
        content = await self.load_template(template_path)
        file = await self.store.create_file(normalize_path(path), content)
        logger.info(f"Created note {file.path}")
        return file, True
