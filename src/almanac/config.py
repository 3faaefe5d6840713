"""Configuration management for Almanac.

Settings are persisted as JSON at <vault>/.almanac/data.json and merged
over the built-in defaults on load.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from .host import AlmanacError
from .ledger import LedgerWriter
from .models.settings import PERIOD_KINDS, PeriodicNoteConfig, Settings, default_note_config

logger = logging.getLogger(__name__)

_GENERAL_FIELDS = (
    "words_per_dot",
    "week_start",
    "should_confirm_before_create",
    "default_view",
    "locale_override",
)


class SettingsError(AlmanacError):
    """Raised for invalid settings values."""
    pass


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def resolve_vault_root(cli_vault_path: Optional[str] = None) -> Path:
    """Resolve vault root path with the following precedence:

    1. CLI --vault option (if provided)
    2. ALMANAC_VAULT environment variable
    3. Current working directory

    Args:
        cli_vault_path: Vault path from CLI --vault option

    Returns:
        Absolute path to vault root directory

    Raises:
        FileNotFoundError: If the resolved vault directory does not exist
    """
    if cli_vault_path:
        vault_path = Path(cli_vault_path).resolve()
        source = "--vault"
    elif os.environ.get("ALMANAC_VAULT"):
        vault_path = Path(os.environ["ALMANAC_VAULT"]).resolve()
        source = "ALMANAC_VAULT"
    else:
        vault_path = Path.cwd()
        source = "current directory"

    if not vault_path.is_dir():
        raise FileNotFoundError(f"Vault path from {source} does not exist: {vault_path}")
    return vault_path


def merge_note_config(kind: str, saved: Any) -> PeriodicNoteConfig:
    """Merge one saved periodic note record over its defaults, field by field."""
    defaults = default_note_config(kind)
    if saved is None:
        return defaults
    if not isinstance(saved, dict):
        raise SettingsError(f"Settings for {kind} notes must be an object, got {type(saved).__name__}")
    known = {key: value for key, value in saved.items() if key in PeriodicNoteConfig.model_fields}
    try:
        return PeriodicNoteConfig(**{**defaults.model_dump(), **known})
    except ValidationError as e:
        raise SettingsError(f"Invalid settings for {kind} notes: {e}") from e


def merge_settings(saved: Optional[dict]) -> Settings:
    """Build Settings from persisted data merged over the defaults.

    General options override the defaults one by one. Each periodic note
    record is merged per field over its own defaults, so fields added to a
    default record survive old persisted data that lacks them. Unknown keys
    are ignored.

    Raises:
        SettingsError: If a saved value has the wrong type
    """
    saved = saved or {}
    defaults = Settings()

    general = {key: saved[key] for key in _GENERAL_FIELDS if key in saved}
    notes = {
        f"{kind}_note": merge_note_config(kind, saved.get(f"{kind}_note"))
        for kind in PERIOD_KINDS
    }

    try:
        return Settings(**{**defaults.model_dump(), **general, **notes})
    except ValidationError as e:
        raise SettingsError(f"Invalid settings: {e}") from e


def apply_env_overrides(settings: Settings) -> Settings:
    """Apply ALMANAC_* environment overrides in place (not persisted)."""
    if os.environ.get("ALMANAC_CONFIRM_BEFORE_CREATE") is not None:
        settings.should_confirm_before_create = _env_bool("ALMANAC_CONFIRM_BEFORE_CREATE", True)
    week_start = os.environ.get("ALMANAC_WEEK_START")
    if week_start:
        try:
            settings.week_start = week_start.strip().lower()
        except ValidationError as e:
            raise SettingsError(f"Invalid ALMANAC_WEEK_START: {week_start}") from e
    return settings


class SettingsStore:
    """Loads, mutates and persists the single Settings instance.

    Every mutation is written back to disk immediately.
    """

    def __init__(self, settings_file: Path, ledger_writer: LedgerWriter | None = None):
        self.settings_file = settings_file
        self.ledger_writer = ledger_writer
        self.settings = Settings()

    def load(self) -> Settings:
        """Load settings from disk, falling back to defaults."""
        data = None
        if self.settings_file.exists():
            try:
                with open(self.settings_file, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Failed to load settings file {self.settings_file}: {e}, using defaults")
                data = None
        else:
            logger.info(f"Settings file {self.settings_file} does not exist, using defaults")

        if data is not None and not isinstance(data, dict):
            logger.warning(f"Settings file {self.settings_file} is not an object, using defaults")
            data = None

        self.settings = merge_settings(data)
        return self.settings

    def save(self) -> None:
        """Save settings to JSON file atomically."""
        self.settings_file.parent.mkdir(parents=True, exist_ok=True)

        temp_file = self.settings_file.with_suffix(".tmp")
        try:
            with open(temp_file, "w", encoding="utf-8") as f:
                json.dump(self.settings.model_dump(mode="json"), f, indent=2, ensure_ascii=False)
            temp_file.replace(self.settings_file)
            logger.debug(f"Saved settings to {self.settings_file}")
        except OSError as e:
            logger.error(f"Failed to save settings to {self.settings_file}: {e}")
            temp_file.unlink(missing_ok=True)
            raise

        if self.ledger_writer is not None:
            self.ledger_writer.append_event(
                event_type="SETTINGS_SAVED",
                payload={"settings_file": str(self.settings_file)},
            )

    def update(self, **changes: Any) -> Settings:
        """Change general options and persist.

        All changes are validated before any is applied, so a rejected
        value leaves the settings untouched.

        Raises:
            SettingsError: If a key is unknown or a value is invalid
        """
        candidate = self.settings.model_copy()
        for key, value in changes.items():
            if key not in _GENERAL_FIELDS:
                raise SettingsError(f"Unknown setting: {key}")
            try:
                setattr(candidate, key, value)
            except ValidationError as e:
                raise SettingsError(f"Invalid value for {key}: {value!r}") from e

        for key in changes:
            setattr(self.settings, key, getattr(candidate, key))
        self.save()
        return self.settings

    def update_note(self, kind: str, **changes: Any) -> PeriodicNoteConfig:
        """Change one periodic note config and persist.

        An empty format falls back to the default format for that kind.
        Nothing is applied unless every change is valid.
        """
        if kind not in PERIOD_KINDS:
            raise SettingsError(f"Unknown period kind: {kind}")
        config = self.settings.note_config(kind)
        candidate = config.model_copy()
        for key, value in changes.items():
            if key not in PeriodicNoteConfig.model_fields:
                raise SettingsError(f"Unknown {kind} note setting: {key}")
            if key == "format" and not value:
                value = default_note_config(kind).format
            try:
                setattr(candidate, key, value)
            except ValidationError as e:
                raise SettingsError(f"Invalid value for {kind} {key}: {value!r}") from e

        for key in changes:
            setattr(config, key, getattr(candidate, key))
        self.save()
        return config
