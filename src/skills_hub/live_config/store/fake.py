"""Fake in-memory ConfigStore for testing."""

from skills_hub.errors import HubIOError
from skills_hub.live_config.documents import (
    ClaudeLiveConfig,
    CodexLiveConfig,
    GeminiLiveConfig,
    LiveConfig,
)
from skills_hub.live_config.store.abc import ConfigStore
from skills_hub.models.app_type import AppType


def _empty_live(app_type: AppType) -> LiveConfig:
    match app_type:
        case AppType.CLAUDE:
            return ClaudeLiveConfig(settings={})
        case AppType.CODEX:
            return CodexLiveConfig(auth={}, config_text="")
        case AppType.GEMINI:
            return GeminiLiveConfig(env={}, settings={})


class FakeConfigStore(ConfigStore):
    """In-memory fake implementation.

    This class has NO public setup methods. All state is provided via constructor
    or captured during execution.
    """

    def __init__(
        self,
        live: dict[AppType, LiveConfig] | None = None,
        write_error: HubIOError | None = None,
    ) -> None:
        """Create FakeConfigStore.

        Args:
            live: Initial live documents per tool (missing tools read as empty)
            write_error: If set, every write_live() raises this error
        """
        self._live: dict[AppType, LiveConfig] = dict(live or {})
        self._write_error = write_error
        self._written: list[LiveConfig] = []
        self._read_calls: list[AppType] = []

    @property
    def written(self) -> list[LiveConfig]:
        """Documents passed to write_live(), in order.

        This property is for test assertions only.
        """
        return list(self._written)

    @property
    def read_calls(self) -> list[AppType]:
        """Tools passed to read_live(), in order.

        This property is for test assertions only.
        """
        return list(self._read_calls)

    def current(self, app_type: AppType) -> LiveConfig:
        """Current live document for test assertions."""
        return self._live.get(app_type, _empty_live(app_type))

    def read_live(self, app_type: AppType) -> LiveConfig:
        self._read_calls.append(app_type)
        return self.current(app_type)

    def write_live(self, live: LiveConfig) -> None:
        if self._write_error is not None:
            raise self._write_error
        self._written.append(live)

        # Mirror the filesystem store: absent fields leave the old file content alone
        previous = self.current(live.app_type)
        match live, previous:
            case CodexLiveConfig(), CodexLiveConfig():
                live = CodexLiveConfig(
                    auth=live.auth if live.auth is not None else previous.auth,
                    config_text=(
                        live.config_text if live.config_text is not None else previous.config_text
                    ),
                )
            case GeminiLiveConfig(), GeminiLiveConfig():
                live = GeminiLiveConfig(
                    env=live.env if live.env is not None else previous.env,
                    settings=live.settings if live.settings is not None else previous.settings,
                )
        self._live[live.app_type] = live
