"""Typer-based CLI for Almanac."""

import asyncio
import json
import logging
from datetime import datetime
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import SettingsError, SettingsStore, apply_env_overrides, resolve_vault_root
from .host import ConsoleWorkspace, LocalVaultStore, SystemClock, auto_confirm, console_confirm
from .ledger import LedgerWriter, read_ledger_tail
from .models.notes import OpenOutcome
from .models.settings import PERIOD_KINDS, VIEW_MODES, Settings
from .navigation import CalendarNavigator
from .orchestrator import PeriodicNoteOpener
from .paths import VaultPaths, note_path_for
from .periods import start_of_period

app = typer.Typer(
    name="almanac",
    help="Almanac - periodic notes and calendar navigation for Markdown vaults",
    add_completion=False,
)

console = Console()

VAULT_HELP = "Path to vault directory (default: ALMANAC_VAULT env or current directory)"

_VIEW_TO_KIND = {
    "year": "yearly",
    "quarter": "quarterly",
    "month": "monthly",
    "week": "weekly",
}


@app.callback()
def main_callback(
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Almanac command line."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_vault(vault_path: str | None) -> tuple[VaultPaths, SettingsStore, LedgerWriter]:
    try:
        vault_root = resolve_vault_root(vault_path)
    except FileNotFoundError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    paths = VaultPaths(vault_root)
    ledger_writer = LedgerWriter(paths.ledger_file)
    store = SettingsStore(paths.settings_file, ledger_writer=ledger_writer)
    try:
        store.load()
    except SettingsError as e:
        console.print(f"[red]Error: {e}[/red]")
        console.print(f"[yellow]Fix or remove {paths.settings_file}[/yellow]")
        raise typer.Exit(code=1)
    return paths, store, ledger_writer


def _parse_date(date: str | None) -> datetime | None:
    if not date:
        return None
    try:
        # naive -> local timezone
        return datetime.strptime(date, "%Y-%m-%d").astimezone()
    except ValueError:
        console.print(f"[red]Error: Invalid date '{date}' (expected YYYY-MM-DD)[/red]")
        raise typer.Exit(code=1)


def _open_note(kind: str, date: str | None, new_split: bool, vault_path: str | None, yes: bool, edit: bool) -> None:
    paths, store, ledger_writer = _load_vault(vault_path)
    try:
        settings = apply_env_overrides(store.settings)
    except SettingsError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    opener = PeriodicNoteOpener(
        settings=settings,
        store=LocalVaultStore(paths.root),
        workspace=ConsoleWorkspace(paths.root, console=console, launch_editor=edit),
        confirm=auto_confirm(True) if yes else console_confirm,
        clock=SystemClock(),
        ledger_writer=ledger_writer,
    )

    result = asyncio.run(opener.open_periodic_note(kind, _parse_date(date), new_split))

    if result.outcome == OpenOutcome.DISABLED:
        console.print(f"[yellow]{kind.capitalize()} notes are disabled[/yellow]")
        console.print(f"[dim]Enable with: almanac settings note {kind} --enabled[/dim]")
    elif result.outcome == OpenOutcome.DECLINED:
        console.print(f"[dim]Not created: {result.path}[/dim]")
    elif result.outcome == OpenOutcome.FAILED:
        console.print(f"[dim]{result.error}[/dim]")
        raise typer.Exit(code=1)
    elif result.outcome == OpenOutcome.CREATED:
        console.print(f"[green]+[/green] Created {result.path}")


def _register_open_command(kind: str) -> None:
    def command(
        date: str = typer.Option(None, "--date", "-d", help="Date of the note (YYYY-MM-DD, default: today)"),
        new_split: bool = typer.Option(False, "--new-split", help="Open in a new split instead of the current pane"),
        vault_path: str = typer.Option(None, "--vault", "-v", help=VAULT_HELP),
        yes: bool = typer.Option(False, "--yes", "-y", help="Create without asking for confirmation"),
        edit: bool = typer.Option(False, "--edit", "-e", help="Open the note in $EDITOR"),
    ):
        _open_note(kind, date, new_split, vault_path, yes, edit)

    command.__doc__ = f"Open the {kind} note, creating it if it does not exist."
    app.command(f"open-{kind}-note")(command)


for _kind in PERIOD_KINDS:
    _register_open_command(_kind)


@app.command()
def calendar(
    mode: str = typer.Option(None, "--mode", "-m", help="View mode: year, quarter, month or week (default: settings)"),
    date: str = typer.Option(None, "--date", "-d", help="Displayed date (YYYY-MM-DD, default: today)"),
    offset: int = typer.Option(0, "--offset", "-o", help="Steps to move forward (positive) or back (negative)"),
    open_note: bool = typer.Option(False, "--open", help="Open (or create) the periodic note of the displayed period"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Create without asking for confirmation"),
    vault_path: str = typer.Option(None, "--vault", "-v", help=VAULT_HELP),
):
    """Show the calendar title for a period and its periodic note."""
    paths, store, ledger_writer = _load_vault(vault_path)
    try:
        settings = apply_env_overrides(store.settings)
    except SettingsError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    if mode is not None and mode not in VIEW_MODES:
        console.print(f"[red]Error: Unknown view mode '{mode}'[/red]")
        raise typer.Exit(code=1)

    opener = PeriodicNoteOpener(
        settings=settings,
        store=LocalVaultStore(paths.root),
        workspace=ConsoleWorkspace(paths.root, console=console),
        confirm=auto_confirm(True) if yes else console_confirm,
        clock=SystemClock(),
        ledger_writer=ledger_writer,
    )
    navigator = CalendarNavigator(opener, settings, SystemClock(), view_mode=mode)
    navigator.activate()

    displayed = _parse_date(date)
    if displayed is not None:
        navigator.set_displayed_date(displayed)

    for _ in range(abs(offset)):
        if offset > 0:
            navigator.navigate_next()
        else:
            navigator.navigate_previous()

    kind = _VIEW_TO_KIND[navigator.view_mode]
    config = settings.note_config(kind)
    period_start = start_of_period(navigator.displayed_date, kind, settings.week_start)

    console.print(f"[bold]{navigator.title}[/bold]")
    if config.enabled:
        note_path = note_path_for(config, period_start, settings.week_start)
        exists = paths.absolute(note_path).is_file()
        status = "[green]exists[/green]" if exists else "[dim]not created[/dim]"
        console.print(f"  {kind} note: {note_path} ({status})")
    else:
        console.print(f"  [dim]{kind} notes are disabled[/dim]")

    if open_note and config.enabled:
        open_for_period = getattr(navigator, f"open_{kind}_note")
        result = asyncio.run(open_for_period(period_start))
        if result.outcome == OpenOutcome.FAILED:
            raise typer.Exit(code=1)


settings_app = typer.Typer(help="Settings commands")
app.add_typer(settings_app, name="settings")


def _settings_table(settings: Settings) -> Table:
    table = Table(title="Periodic Notes")
    table.add_column("Kind", style="cyan", no_wrap=True)
    table.add_column("Enabled")
    table.add_column("Folder", style="yellow")
    table.add_column("Format", style="magenta")
    table.add_column("Template", style="dim")

    for kind in PERIOD_KINDS:
        config = settings.note_config(kind)
        table.add_row(
            kind,
            "yes" if config.enabled else "no",
            config.folder or "(root)",
            escape(config.format),
            config.template or "-",
        )
    return table


@settings_app.command("show")
def settings_show(
    vault_path: str = typer.Option(None, "--vault", "-v", help=VAULT_HELP),
    as_json: bool = typer.Option(False, "--json", help="Print the raw settings document"),
):
    """Display the current settings."""
    paths, store, _ = _load_vault(vault_path)
    settings = store.settings

    if as_json:
        console.print_json(json.dumps(settings.model_dump(mode="json")))
        return

    console.print(f"[dim]Settings file:[/dim] {paths.settings_file}")
    console.print(f"  [dim]Week start:[/dim]          {settings.week_start}")
    console.print(f"  [dim]Confirm before create:[/dim] {settings.should_confirm_before_create}")
    console.print(f"  [dim]Default view:[/dim]        {settings.default_view}")
    console.print(f"  [dim]Words per dot:[/dim]       {settings.words_per_dot}")
    console.print(f"  [dim]Locale override:[/dim]     {settings.locale_override}")
    console.print()
    console.print(_settings_table(settings))


@settings_app.command("set")
def settings_set(
    key: str = typer.Argument(..., help="Setting name, e.g. week_start"),
    value: str = typer.Argument(..., help="New value"),
    vault_path: str = typer.Option(None, "--vault", "-v", help=VAULT_HELP),
):
    """Change a general setting (week_start, should_confirm_before_create, default_view, ...)."""
    _, store, _ = _load_vault(vault_path)
    try:
        store.update(**{key: value})
    except SettingsError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]+[/green] {key} = {getattr(store.settings, key)}")


@settings_app.command("note")
def settings_note(
    kind: str = typer.Argument(..., help="Period kind: daily, weekly, monthly, quarterly or yearly"),
    enabled: Optional[bool] = typer.Option(None, "--enabled/--disabled", help="Enable or disable this kind of note"),
    folder: str = typer.Option(None, "--folder", help="Folder for new notes (empty for vault root)"),
    fmt: str = typer.Option(None, "--format", help="Date format for the note filename"),
    template: str = typer.Option(None, "--template", help="Path to template file (empty for none)"),
    vault_path: str = typer.Option(None, "--vault", "-v", help=VAULT_HELP),
):
    """Change the settings of one kind of periodic note."""
    _, store, _ = _load_vault(vault_path)

    changes = {
        key: value
        for key, value in (("enabled", enabled), ("folder", folder), ("format", fmt), ("template", template))
        if value is not None
    }
    if not changes:
        console.print("[yellow]Nothing to change[/yellow]")
        return

    try:
        config = store.update_note(kind, **changes)
    except SettingsError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    console.print(
        f"[green]+[/green] {kind}: enabled={config.enabled} folder='{config.folder}' "
        f"format='{escape(config.format)}' template='{config.template}'"
    )


ledger_app = typer.Typer(help="Ledger commands")
app.add_typer(ledger_app, name="ledger")


@ledger_app.command("tail")
def ledger_tail(
    n: int = typer.Option(20, "--n", help="Number of recent events to display"),
    note: str = typer.Option(None, "--note", help="Only events about this note path"),
    event_type: str = typer.Option(None, "--type", help="Only events of this type, e.g. NOTE_CREATED"),
    vault_path: str = typer.Option(None, "--vault", "-v", help=VAULT_HELP),
):
    """Display the last N events from the ledger."""
    paths, _, _ = _load_vault(vault_path)

    events = read_ledger_tail(paths.ledger_file, n=n, note_path=note, event_type=event_type)
    if not events:
        console.print("[dim]No events in ledger[/dim]")
        return

    table = Table(title=f"Last {len(events)} Ledger Event(s)")
    table.add_column("Timestamp (UTC)", style="cyan", no_wrap=True)
    table.add_column("Event Type", style="magenta")
    table.add_column("Note", style="yellow")
    table.add_column("Payload", style="dim")

    for event in events:
        payload_str = str(event.payload)
        if len(payload_str) > 60:
            payload_str = payload_str[:57] + "..."
        table.add_row(
            event.ts.strftime("%Y-%m-%d %H:%M:%S"),
            event.event_type,
            event.note_path or "-",
            payload_str,
        )

    console.print(table)


@app.command()
def version():
    """Show Almanac version."""
    from . import __version__
    console.print(f"Almanac v{__version__}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
