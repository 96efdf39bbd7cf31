"""Tests for enum parsing."""

import pytest

from skills_hub.errors import ConfigValidationError
from skills_hub.models.app_type import AppType
from skills_hub.models.kit import SyncMode


def test_app_type_parse() -> None:
    assert AppType.parse("codex") is AppType.CODEX


def test_app_type_parse_rejects_unknown() -> None:
    with pytest.raises(ConfigValidationError, match="Unsupported app type: cursor"):
        AppType.parse("cursor")


def test_sync_mode_parse() -> None:
    assert SyncMode.parse("link") is SyncMode.LINK
    with pytest.raises(ConfigValidationError, match="Unsupported sync mode: move"):
        SyncMode.parse("move")
