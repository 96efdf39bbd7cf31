"""Abstract interface for reading and writing live tool configuration."""

from abc import ABC, abstractmethod

from skills_hub.live_config.documents import LiveConfig
from skills_hub.live_config.merge import merge_live_config, validate_live_config
from skills_hub.models.app_type import AppType


class ConfigStore(ABC):
    """Translates each tool's on-disk files to and from one typed document.

    Implementations include:
    - FilesystemConfigStore: files under a home directory
    - FakeConfigStore: in-memory for testing

    ``merge`` and ``validate`` are pure and shared by every implementation.
    """

    @abstractmethod
    def read_live(self, app_type: AppType) -> LiveConfig:
        """Read the tool's live configuration.

        Missing files read as empty documents, not errors.

        Raises:
            HubIOError: If a file exists but cannot be read
            ConfigValidationError: If a JSON file does not hold an object
        """
        ...

    @abstractmethod
    def write_live(self, live: LiveConfig) -> None:
        """Write a live document back to the tool's files.

        Only fields present on the document are written.

        Raises:
            HubIOError: If a file cannot be written
        """
        ...

    def merge(self, live: LiveConfig, patch: LiveConfig) -> LiveConfig:
        return merge_live_config(live, patch)

    def validate(self, live: LiveConfig) -> None:
        validate_live_config(live)
