"""Tests for FilesystemConfigStore against a temporary home directory."""

import json
from pathlib import Path

import pytest

from skills_hub.errors import ConfigValidationError
from skills_hub.live_config.documents import (
    ClaudeLiveConfig,
    CodexLiveConfig,
    GeminiLiveConfig,
)
from skills_hub.live_config.store.real import FilesystemConfigStore
from skills_hub.models.app_type import AppType


def test_missing_files_read_as_empty(tmp_path: Path) -> None:
    """A fresh home has empty live configs for every tool."""
    store = FilesystemConfigStore(tmp_path)

    assert store.read_live(AppType.CLAUDE) == ClaudeLiveConfig(settings={})
    assert store.read_live(AppType.CODEX) == CodexLiveConfig(auth={}, config_text="")
    assert store.read_live(AppType.GEMINI) == GeminiLiveConfig(env={}, settings={})


def test_claude_settings_written_with_sorted_keys(tmp_path: Path) -> None:
    store = FilesystemConfigStore(tmp_path)

    store.write_live(ClaudeLiveConfig(settings={"theme": "dark", "env": {"B": "2", "A": "1"}}))

    settings_path = tmp_path / ".claude" / "settings.json"
    content = settings_path.read_text(encoding="utf-8")
    assert content.endswith("\n")
    assert content.index('"env"') < content.index('"theme"')
    assert json.loads(content) == {"env": {"A": "1", "B": "2"}, "theme": "dark"}
    assert not (tmp_path / ".claude" / "settings.json.tmp").exists()


def test_codex_only_present_fields_written(tmp_path: Path) -> None:
    """An absent config text leaves config.toml untouched."""
    config_path = tmp_path / ".codex" / "config.toml"
    config_path.parent.mkdir(parents=True)
    config_path.write_text('model = "keep"\n', encoding="utf-8")
    store = FilesystemConfigStore(tmp_path)

    store.write_live(CodexLiveConfig(auth={"OPENAI_API_KEY": "sk"}))

    assert config_path.read_text(encoding="utf-8") == 'model = "keep"\n'
    assert json.loads((tmp_path / ".codex" / "auth.json").read_text(encoding="utf-8")) == {
        "OPENAI_API_KEY": "sk"
    }


def test_codex_auth_read_is_normalized(tmp_path: Path) -> None:
    auth_path = tmp_path / ".codex" / "auth.json"
    auth_path.parent.mkdir(parents=True)
    auth_path.write_text('{"api_key": "sk-legacy"}', encoding="utf-8")

    live = FilesystemConfigStore(tmp_path).read_live(AppType.CODEX)

    assert isinstance(live, CodexLiveConfig)
    assert live.auth == {"api_key": "sk-legacy", "OPENAI_API_KEY": "sk-legacy"}


def test_gemini_env_round_trip(tmp_path: Path) -> None:
    store = FilesystemConfigStore(tmp_path)

    store.write_live(GeminiLiveConfig(env={"GEMINI_API_KEY": "g"}, settings={"a": 1}))

    assert (tmp_path / ".gemini" / ".env").read_text(encoding="utf-8") == "GEMINI_API_KEY=g\n"
    assert store.read_live(AppType.GEMINI) == GeminiLiveConfig(
        env={"GEMINI_API_KEY": "g"}, settings={"a": 1}
    )


def test_invalid_json_raises_validation_error(tmp_path: Path) -> None:
    settings_path = tmp_path / ".claude" / "settings.json"
    settings_path.parent.mkdir(parents=True)
    settings_path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigValidationError, match="Invalid JSON"):
        FilesystemConfigStore(tmp_path).read_live(AppType.CLAUDE)


def test_non_object_json_raises_validation_error(tmp_path: Path) -> None:
    settings_path = tmp_path / ".claude" / "settings.json"
    settings_path.parent.mkdir(parents=True)
    settings_path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ConfigValidationError, match="Expected a JSON object"):
        FilesystemConfigStore(tmp_path).read_live(AppType.CLAUDE)


def test_live_paths_per_tool(tmp_path: Path) -> None:
    store = FilesystemConfigStore(tmp_path)

    assert store.live_paths(AppType.GEMINI) == [
        tmp_path / ".gemini" / ".env",
        tmp_path / ".gemini" / "settings.json",
    ]
