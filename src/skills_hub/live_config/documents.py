"""Typed live documents and conversion from/to provider documents.

A provider document is the untyped JSON object stored on a ProviderRecord. It
is converted into exactly one of the typed documents below at every boundary
(read-live, merge, write-live); everything past that boundary works on the
typed form.
"""

import copy
from dataclasses import dataclass
from typing import Any

from skills_hub.errors import ConfigValidationError
from skills_hub.models.app_type import AppType
from skills_hub.models.provider import PROFILE_KEY

OPENAI_API_KEY = "OPENAI_API_KEY"
LEGACY_API_KEY = "api_key"


@dataclass(frozen=True)
class ClaudeLiveConfig:
    """Contents of ~/.claude/settings.json."""

    settings: dict[str, Any]

    @property
    def app_type(self) -> AppType:
        return AppType.CLAUDE


@dataclass(frozen=True)
class CodexLiveConfig:
    """Contents of ~/.codex/auth.json and ~/.codex/config.toml.

    ``None`` means the field is absent, which is different from an empty
    object or empty text.
    """

    auth: dict[str, Any] | None = None
    config_text: str | None = None

    @property
    def app_type(self) -> AppType:
        return AppType.CODEX


@dataclass(frozen=True)
class GeminiLiveConfig:
    """Contents of ~/.gemini/.env and ~/.gemini/settings.json."""

    env: dict[str, Any] | None = None
    settings: dict[str, Any] | None = None

    @property
    def app_type(self) -> AppType:
        return AppType.GEMINI


LiveConfig = ClaudeLiveConfig | CodexLiveConfig | GeminiLiveConfig


def strip_profile(document: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of a provider document without the _profile side-car."""
    return {key: value for key, value in document.items() if key != PROFILE_KEY}


def preserve_profile(next_document: dict[str, Any], previous: dict[str, Any]) -> dict[str, Any]:
    """Carry the previous document's _profile (if an object) over to next_document."""
    result = dict(next_document)
    profile = previous.get(PROFILE_KEY)
    if isinstance(profile, dict):
        result[PROFILE_KEY] = copy.deepcopy(profile)
    return result


def normalize_codex_auth(auth: Any) -> dict[str, Any] | None:
    """Copy a legacy ``api_key`` forward to ``OPENAI_API_KEY`` when missing.

    ``api_key`` itself is kept. Returns None when auth is not an object.
    """
    if not isinstance(auth, dict):
        return None

    normalized = copy.deepcopy(auth)
    if not isinstance(normalized.get(OPENAI_API_KEY), str):
        api_key = normalized.get(LEGACY_API_KEY)
        if isinstance(api_key, str):
            normalized[OPENAI_API_KEY] = api_key
    return normalized


def extract_codex_config_text(document: dict[str, Any]) -> str | None:
    """Return ``config`` text, falling back to the legacy ``configToml`` field."""
    for key in ("config", "configToml"):
        value = document.get(key)
        if isinstance(value, str):
            return value
    return None


def live_config_from_document(app_type: AppType, document: Any) -> LiveConfig:
    """Convert a provider document into the typed live document for app_type.

    The _profile side-car is dropped. Fields of the wrong JSON type are treated
    as absent.

    Raises:
        ConfigValidationError: If the document is not an object
    """
    if not isinstance(document, dict):
        raise ConfigValidationError("Provider config must be an object.")

    sanitized = strip_profile(document)
    match app_type:
        case AppType.CLAUDE:
            return ClaudeLiveConfig(settings=copy.deepcopy(sanitized))
        case AppType.CODEX:
            return CodexLiveConfig(
                auth=normalize_codex_auth(sanitized.get("auth")),
                config_text=extract_codex_config_text(sanitized),
            )
        case AppType.GEMINI:
            env = sanitized.get("env")
            settings = sanitized.get("settings")
            return GeminiLiveConfig(
                env=copy.deepcopy(env) if isinstance(env, dict) else None,
                settings=copy.deepcopy(settings) if isinstance(settings, dict) else None,
            )


def live_config_to_document(live: LiveConfig) -> dict[str, Any]:
    """Convert a typed live document back to the untyped provider document form."""
    match live:
        case ClaudeLiveConfig():
            return copy.deepcopy(live.settings)
        case CodexLiveConfig():
            document: dict[str, Any] = {}
            if live.auth is not None:
                document["auth"] = copy.deepcopy(live.auth)
            if live.config_text is not None:
                document["config"] = live.config_text
            return document
        case GeminiLiveConfig():
            document = {}
            if live.env is not None:
                document["env"] = copy.deepcopy(live.env)
            if live.settings is not None:
                document["settings"] = copy.deepcopy(live.settings)
            return document


def sanitize_official_capture(live: LiveConfig) -> LiveConfig:
    """Scrub the real key from a captured codex login.

    ``OPENAI_API_KEY`` is set to null and ``api_key`` removed so captured
    official records never store a live secret. Other tools are unchanged.
    """
    if not isinstance(live, CodexLiveConfig):
        return live

    auth = copy.deepcopy(live.auth) if live.auth is not None else {}
    auth[OPENAI_API_KEY] = None
    auth.pop(LEGACY_API_KEY, None)
    return CodexLiveConfig(auth=auth, config_text=live.config_text)
