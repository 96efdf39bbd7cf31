"""Supported CLI tools."""

from enum import Enum

from skills_hub.errors import ConfigValidationError


class AppType(str, Enum):
    """A CLI tool whose live configuration skills-hub manages."""

    CLAUDE = "claude"
    CODEX = "codex"
    GEMINI = "gemini"

    @classmethod
    def parse(cls, raw: str) -> "AppType":
        """Parse an app type name, raising ConfigValidationError if unknown."""
        for app_type in cls:
            if app_type.value == raw:
                return app_type
        raise ConfigValidationError(f"Unsupported app type: {raw}")
