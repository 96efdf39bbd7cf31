"""Global configuration data structures and loading.

Provides immutable global settings loaded from ~/.skills-hub/config.toml.
Missing keys (or a missing file) fall back to defaults.
"""

import os
import tomllib
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from pathlib import Path

import tomlkit

from skills_hub.errors import ConfigValidationError
from skills_hub.io.state_store import STATE_DIR_NAME, default_state_path
from skills_hub.models.kit import SyncMode
from skills_hub.models.snapshot import DEFAULT_SNAPSHOT_RETENTION, parse_retention

CONFIG_FILE_NAME = "config.toml"
DEFAULT_LOCK_TIMEOUT_SECONDS = 5.0

CONFIG_KEYS = (
    "state_path",
    "lock_timeout_seconds",
    "default_sync_mode",
    "snapshot_retention",
)


@dataclass(frozen=True)
class GlobalConfig:
    """Immutable global configuration data.

    Loaded once at CLI entry point and stored in HubContext.
    """

    state_path: Path
    lock_timeout_seconds: float
    default_sync_mode: SyncMode
    snapshot_retention: int = DEFAULT_SNAPSHOT_RETENTION

    @staticmethod
    def default(home: Path) -> "GlobalConfig":
        return GlobalConfig(
            state_path=default_state_path(home),
            lock_timeout_seconds=DEFAULT_LOCK_TIMEOUT_SECONDS,
            default_sync_mode=SyncMode.COPY,
            snapshot_retention=DEFAULT_SNAPSHOT_RETENTION,
        )

    def with_value(self, key: str, raw: str) -> "GlobalConfig":
        """Return a copy with one setting parsed from its string form.

        Raises:
            ConfigValidationError: If the key is unknown or the value invalid
        """
        match key:
            case "state_path":
                return replace(self, state_path=Path(raw).expanduser())
            case "lock_timeout_seconds":
                return replace(self, lock_timeout_seconds=_parse_timeout(raw))
            case "default_sync_mode":
                return replace(self, default_sync_mode=SyncMode.parse(raw))
            case "snapshot_retention":
                return replace(self, snapshot_retention=parse_retention(raw))
        raise ConfigValidationError(
            f"Unknown config key: {key} (must be one of {', '.join(CONFIG_KEYS)})"
        )


def _parse_timeout(raw: object) -> float:
    try:
        value = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ConfigValidationError(f"lock_timeout_seconds must be a number, got {raw!r}") from None
    if value <= 0:
        raise ConfigValidationError("lock_timeout_seconds must be positive")
    return value


class GlobalConfigOps(ABC):
    """Abstract interface for global config operations.

    Provides dependency injection for global config access, enabling
    in-memory implementations for tests without touching filesystem.
    """

    @abstractmethod
    def exists(self) -> bool:
        """Check if global config exists."""
        ...

    @abstractmethod
    def load(self) -> GlobalConfig:
        """Load global config.

        Raises:
            FileNotFoundError: If config doesn't exist
            ConfigValidationError: If config values are malformed
        """
        ...

    @abstractmethod
    def save(self, config: GlobalConfig) -> None:
        """Save global config."""
        ...

    @abstractmethod
    def path(self) -> Path:
        """Get the path to the global config file (for error messages)."""
        ...

    def load_or_default(self, home: Path) -> GlobalConfig:
        if not self.exists():
            return GlobalConfig.default(home)
        return self.load()


class FilesystemGlobalConfigOps(GlobalConfigOps):
    """Production implementation that reads/writes ~/.skills-hub/config.toml."""

    def __init__(self, home: Path) -> None:
        self._home = home

    def exists(self) -> bool:
        return self.path().exists()

    def load(self) -> GlobalConfig:
        config_path = self.path()
        if not config_path.exists():
            raise FileNotFoundError(f"Global config not found at {config_path}")

        try:
            data = tomllib.loads(config_path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise ConfigValidationError(f"Invalid TOML in {config_path}: {e}") from e

        defaults = GlobalConfig.default(self._home)
        state_path = data.get("state_path")
        sync_mode = data.get("default_sync_mode")
        timeout = data.get("lock_timeout_seconds")
        retention = data.get("snapshot_retention")
        return GlobalConfig(
            state_path=Path(state_path).expanduser() if state_path else defaults.state_path,
            lock_timeout_seconds=(
                _parse_timeout(timeout) if timeout is not None else defaults.lock_timeout_seconds
            ),
            default_sync_mode=(
                SyncMode.parse(str(sync_mode)) if sync_mode else defaults.default_sync_mode
            ),
            snapshot_retention=(
                parse_retention(retention)
                if retention is not None
                else defaults.snapshot_retention
            ),
        )

    def save(self, config: GlobalConfig) -> None:
        """Save global config, preserving formatting and comments of an existing file.

        Raises:
            PermissionError: If directory or file cannot be written
        """
        config_path = self.path()
        parent = config_path.parent

        if parent.exists() and not os.access(parent, os.W_OK):
            raise PermissionError(
                f"Cannot write to directory: {parent}\n"
                f"The directory exists but is not writable."
            )
        parent.mkdir(parents=True, exist_ok=True)

        if config_path.exists():
            doc = tomlkit.parse(config_path.read_text(encoding="utf-8"))
        else:
            doc = tomlkit.document()
            doc.add(tomlkit.comment("Global skills-hub configuration"))

        doc["state_path"] = str(config.state_path)
        doc["lock_timeout_seconds"] = config.lock_timeout_seconds
        doc["default_sync_mode"] = config.default_sync_mode.value
        doc["snapshot_retention"] = config.snapshot_retention

        config_path.write_text(tomlkit.dumps(doc), encoding="utf-8")

    def path(self) -> Path:
        return self._home / STATE_DIR_NAME / CONFIG_FILE_NAME


class InMemoryGlobalConfigOps(GlobalConfigOps):
    """Test implementation that stores config in memory without touching filesystem."""

    def __init__(self, config: GlobalConfig | None = None) -> None:
        """Initialize in-memory config ops.

        Args:
            config: Initial config state (None = config doesn't exist)
        """
        self._config = config

    def exists(self) -> bool:
        return self._config is not None

    def load(self) -> GlobalConfig:
        if self._config is None:
            raise FileNotFoundError(f"Global config not found at {self.path()}")
        return self._config

    def save(self, config: GlobalConfig) -> None:
        self._config = config

    def path(self) -> Path:
        return Path("/fake/skills-hub/config.toml")
