"""Parsing and serialization of ``KEY=VALUE`` env files."""

import json
from typing import Any


def parse_env_text(raw: str) -> dict[str, str]:
    """Parse env file text into a flat string map.

    Blank lines, ``#`` comments, lines without ``=`` and lines with an empty
    key are ignored. Values are trimmed and stripped of surrounding double
    quotes.
    """
    result: dict[str, str] = {}
    for line in raw.splitlines():
        trimmed = line.strip()
        if not trimmed or trimmed.startswith("#"):
            continue

        eq_index = trimmed.find("=")
        if eq_index <= 0:
            continue

        key = trimmed[:eq_index].strip()
        if not key:
            continue

        result[key] = trimmed[eq_index + 1 :].strip().strip('"')

    return result


def _stringify_env_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    return json.dumps(value)


def stringify_env(env: dict[str, Any]) -> str:
    """Serialize an env map with keys sorted; an empty map yields ""."""
    lines = [f"{key}={_stringify_env_value(env[key])}" for key in sorted(env)]
    if not lines:
        return ""
    return "\n".join(lines) + "\n"
