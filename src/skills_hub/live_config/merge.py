"""Merge and validation rules for live documents."""

import copy
from typing import Any

from skills_hub.errors import ConfigValidationError
from skills_hub.live_config.documents import (
    ClaudeLiveConfig,
    CodexLiveConfig,
    GeminiLiveConfig,
    LiveConfig,
)


def deep_merge(base: Any, patch: Any) -> Any:
    """Recursively merge patch into base.

    Where both sides hold an object under the same key the objects are merged;
    otherwise the patch value wins. Inputs are not mutated.
    """
    if not isinstance(base, dict) or not isinstance(patch, dict):
        return copy.deepcopy(patch)

    merged = copy.deepcopy(base)
    for key, patch_value in patch.items():
        base_value = merged.get(key)
        if isinstance(base_value, dict) and isinstance(patch_value, dict):
            merged[key] = deep_merge(base_value, patch_value)
        else:
            merged[key] = copy.deepcopy(patch_value)
    return merged


def merge_live_config(live: LiveConfig, patch: LiveConfig) -> LiveConfig:
    """Merge a (sanitized) provider document into the current live document.

    - claude: settings are deep-merged
    - codex: auth and config text are each taken from the patch when present,
      otherwise from live; auth objects are never merged with each other
    - gemini: env is a shallow overlay, settings are deep-merged

    Raises:
        ConfigValidationError: If the two documents belong to different tools
    """
    if live.app_type != patch.app_type:
        raise ConfigValidationError(
            f"Cannot merge {patch.app_type.value} config into {live.app_type.value} live config."
        )

    match live, patch:
        case ClaudeLiveConfig(), ClaudeLiveConfig():
            return ClaudeLiveConfig(settings=deep_merge(live.settings, patch.settings))
        case CodexLiveConfig(), CodexLiveConfig():
            return CodexLiveConfig(
                auth=copy.deepcopy(patch.auth if patch.auth is not None else live.auth),
                config_text=(
                    patch.config_text if patch.config_text is not None else live.config_text
                ),
            )
        case GeminiLiveConfig(), GeminiLiveConfig():
            env = dict(live.env or {})
            env.update(patch.env or {})
            return GeminiLiveConfig(
                env=env,
                settings=deep_merge(live.settings or {}, patch.settings or {}),
            )

    raise ConfigValidationError(f"Unsupported live config: {type(live).__name__}")


def validate_live_config(live: LiveConfig) -> None:
    """Check the structural requirement for writing live.

    Raises:
        ConfigValidationError: codex with neither auth nor config, or gemini
            with neither env nor settings
    """
    match live:
        case CodexLiveConfig(auth=None, config_text=None):
            raise ConfigValidationError("Codex provider config must include auth and/or config.")
        case GeminiLiveConfig(env=None, settings=None):
            raise ConfigValidationError(
                "Gemini provider config must include env and/or settings."
            )
