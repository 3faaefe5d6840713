"""Tests for note existence checks and idempotent creation."""

import pytest

from almanac.host import HostError
from almanac.models.notes import NoteFile
from almanac.notes import NoteService


@pytest.mark.asyncio
async def test_exists_returns_file_handle(store, temp_vault):
    (temp_vault / "2024-03-15.md").write_text("hello", encoding="utf-8")
    service = NoteService(store)

    assert await service.exists("2024-03-15.md") == NoteFile(path="2024-03-15.md")


@pytest.mark.asyncio
async def test_exists_ignores_folders_and_missing(store, temp_vault):
    (temp_vault / "weeks").mkdir()
    service = NoteService(store)

    assert await service.exists("weeks") is None
    assert await service.exists("missing.md") is None


@pytest.mark.asyncio
async def test_ensure_folder_creates_missing(store, temp_vault):
    service = NoteService(store)

    await service.ensure_folder("journal/weeks")

    assert (temp_vault / "journal" / "weeks").is_dir()
    assert store.folders_created == ["journal/weeks"]


@pytest.mark.asyncio
async def test_ensure_folder_is_idempotent(store, temp_vault):
    (temp_vault / "weeks").mkdir()
    service = NoteService(store)

    await service.ensure_folder("weeks")
    await service.ensure_folder("")

    assert store.folders_created == []


@pytest.mark.asyncio
async def test_ensure_folder_leaves_same_named_file_alone(store, temp_vault):
    (temp_vault / "weeks").write_text("not a folder", encoding="utf-8")
    service = NoteService(store)

    await service.ensure_folder("weeks")

    assert (temp_vault / "weeks").is_file()
    assert store.folders_created == []


@pytest.mark.asyncio
async def test_load_template(store, temp_vault):
    (temp_vault / "templates").mkdir()
    (temp_vault / "templates" / "daily.md").write_text("# Daily\n\n- [ ] ", encoding="utf-8")
    service = NoteService(store)

    assert await service.load_template("templates/daily.md") == "# Daily\n\n- [ ] "


@pytest.mark.asyncio
async def test_load_template_missing_is_empty(store, temp_vault):
    (temp_vault / "templates").mkdir()
    service = NoteService(store)

    assert await service.load_template("") == ""
    assert await service.load_template("templates/nope.md") == ""
    assert await service.load_template("templates") == ""


@pytest.mark.asyncio
async def test_create_note_with_template(store, temp_vault):
    (temp_vault / "tpl.md").write_text("## Plan\n", encoding="utf-8")
    service = NoteService(store)

    file, created = await service.create_note("weeks/2024-W11.md", "weeks", "tpl.md")

    assert file == NoteFile(path="weeks/2024-W11.md")
    assert created is True
    assert (temp_vault / "weeks" / "2024-W11.md").read_text(encoding="utf-8") == "## Plan\n"


@pytest.mark.asyncio
async def test_create_note_twice_creates_once(store, temp_vault):
    service = NoteService(store)

    first, first_created = await service.create_note("2024-03-15.md", "", "")
    second, second_created = await service.create_note("2024-03-15.md", "", "")

    assert first == second
    assert (first_created, second_created) == (True, False)
    assert store.files_created == ["2024-03-15.md"]
    assert (temp_vault / "2024-03-15.md").read_text(encoding="utf-8") == ""


@pytest.mark.asyncio
async def test_create_note_returns_existing_without_touching_it(store, temp_vault):
    (temp_vault / "2024-03-15.md").write_text("keep me", encoding="utf-8")
    service = NoteService(store)

    file, created = await service.create_note("2024-03-15.md", "", "")

    assert file.path == "2024-03-15.md"
    assert created is False
    assert store.files_created == []
    assert (temp_vault / "2024-03-15.md").read_text(encoding="utf-8") == "keep me"


@pytest.mark.asyncio
async def test_create_note_folder_collision_propagates(store, temp_vault):
    # A file named like the target folder makes the host fail to create the note
    (temp_vault / "weeks").write_text("", encoding="utf-8")
    service = NoteService(store)

    with pytest.raises(HostError):
        await service.create_note("weeks/2024-W11.md", "weeks", "")

    assert store.files_created == []


@pytest.mark.asyncio
async def test_undecodable_template_gives_empty_note(store, temp_vault):
    (temp_vault / "tpl.md").write_bytes(b"\xff\xfe bad bytes")
    service = NoteService(store)

    assert await service.load_template("tpl.md") == ""

    file, created = await service.create_note("2024-03-15.md", "", "tpl.md")

    assert created is True
    assert (temp_vault / "2024-03-15.md").read_text(encoding="utf-8") == ""


@pytest.mark.asyncio
async def test_undecodable_template_read_raises_host_error(store, temp_vault):
    (temp_vault / "tpl.md").write_bytes(b"\xff\xfe bad bytes")

    with pytest.raises(HostError):
        await store.read_file(NoteFile(path="tpl.md"))


@pytest.mark.asyncio
async def test_parent_segments_cannot_leave_the_vault(store, temp_vault):
    service = NoteService(store)

    file, created = await service.create_note("weeks/../../2024.md", "weeks/../..", "")

    assert created is True
    assert file.path == "weeks/2024.md"
    assert (temp_vault / "weeks" / "2024.md").is_file()
    assert not (temp_vault.parent / "2024.md").exists()


@pytest.mark.asyncio
async def test_store_refuses_writes_through_links_outside_vault(store, temp_vault, tmp_path_factory):
    outside = tmp_path_factory.mktemp("outside")
    (temp_vault / "escape").symlink_to(outside, target_is_directory=True)

    with pytest.raises(HostError):
        await store.create_file("escape/2024-03-15.md", "")

    assert list(outside.iterdir()) == []
