"""Filesystem-backed ConfigStore for the tools' files under a home directory."""

import json
import logging
from pathlib import Path
from typing import Any

from skills_hub.errors import ConfigValidationError, HubIOError
from skills_hub.io.atomic import write_json_atomic, write_text_atomic
from skills_hub.live_config.documents import (
    ClaudeLiveConfig,
    CodexLiveConfig,
    GeminiLiveConfig,
    LiveConfig,
    normalize_codex_auth,
)
from skills_hub.live_config.env_file import parse_env_text, stringify_env
from skills_hub.live_config.store.abc import ConfigStore
from skills_hub.models.app_type import AppType

logger = logging.getLogger(__name__)

CLAUDE_SETTINGS = ".claude/settings.json"
CODEX_AUTH = ".codex/auth.json"
CODEX_CONFIG = ".codex/config.toml"
GEMINI_ENV = ".gemini/.env"
GEMINI_SETTINGS = ".gemini/settings.json"


class FilesystemConfigStore(ConfigStore):
    """Production implementation reading and writing files under ``home``."""

    def __init__(self, home: Path) -> None:
        self._home = home

    def live_paths(self, app_type: AppType) -> list[Path]:
        """Files backing the live configuration of app_type."""
        match app_type:
            case AppType.CLAUDE:
                relative = [CLAUDE_SETTINGS]
            case AppType.CODEX:
                relative = [CODEX_AUTH, CODEX_CONFIG]
            case AppType.GEMINI:
                relative = [GEMINI_ENV, GEMINI_SETTINGS]
        return [self._home / entry for entry in relative]

    def read_live(self, app_type: AppType) -> LiveConfig:
        logger.debug("Reading live config: app_type=%s", app_type.value)
        match app_type:
            case AppType.CLAUDE:
                return ClaudeLiveConfig(settings=self._read_json_object(CLAUDE_SETTINGS))
            case AppType.CODEX:
                return CodexLiveConfig(
                    auth=normalize_codex_auth(self._read_json_object(CODEX_AUTH)),
                    config_text=self._read_text(CODEX_CONFIG),
                )
            case AppType.GEMINI:
                return GeminiLiveConfig(
                    env=parse_env_text(self._read_text(GEMINI_ENV)),
                    settings=self._read_json_object(GEMINI_SETTINGS),
                )

    def write_live(self, live: LiveConfig) -> None:
        logger.debug("Writing live config: app_type=%s", live.app_type.value)
        match live:
            case ClaudeLiveConfig():
                self._write_json(CLAUDE_SETTINGS, live.settings)
            case CodexLiveConfig():
                # auth.json and config.toml are replaced one after the other, not together
                if live.auth is not None:
                    self._write_json(CODEX_AUTH, live.auth)
                if live.config_text is not None:
                    self._write_text(CODEX_CONFIG, live.config_text)
            case GeminiLiveConfig():
                if live.env is not None:
                    self._write_text(GEMINI_ENV, stringify_env(live.env))
                if live.settings is not None:
                    self._write_json(GEMINI_SETTINGS, live.settings)

    def _read_text(self, relative: str) -> str:
        path = self._home / relative
        if not path.exists():
            return ""
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise HubIOError(f"Failed to read {path}", path, e) from e

    def _read_json_object(self, relative: str) -> dict[str, Any]:
        path = self._home / relative
        content = self._read_text(relative)
        if not content.strip():
            return {}
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid JSON in {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError(f"Expected a JSON object in {path}")
        return data

    def _write_json(self, relative: str, data: dict[str, Any]) -> None:
        path = self._home / relative
        try:
            write_json_atomic(path, data)
        except OSError as e:
            raise HubIOError(f"Failed to write {path}", path, e) from e

    def _write_text(self, relative: str, content: str) -> None:
        path = self._home / relative
        try:
            write_text_atomic(path, content)
        except OSError as e:
            raise HubIOError(f"Failed to write {path}", path, e) from e
