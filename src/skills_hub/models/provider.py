"""Provider records, universal providers and switch results."""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from skills_hub.models.app_type import AppType

PROFILE_KEY = "_profile"


class ProviderRecord(BaseModel):
    """A named, stored configuration profile for one tool.

    ``config`` is the provider document. Besides the tool-specific fields it may
    carry a ``_profile`` side-car with provenance metadata, which is never
    written to the tool's live files.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    app_type: AppType
    name: str
    config: dict[str, Any] = Field(default_factory=dict)
    is_current: bool = False
    created_at: int
    updated_at: int

    @property
    def profile(self) -> dict[str, Any] | None:
        value = self.config.get(PROFILE_KEY)
        if isinstance(value, dict):
            return value
        return None

    @property
    def universal_id(self) -> str | None:
        """Id of the universal provider this record was synthesized from."""
        profile = self.profile
        if profile is None:
            return None
        value = profile.get("universalId")
        if isinstance(value, str):
            return value
        return None


class ProviderBackupEntry(BaseModel):
    """Snapshot of a displaced provider, taken when a switch replaced it."""

    model_config = ConfigDict(frozen=True)

    backup_id: int
    provider: ProviderRecord


class UniversalProviderApps(BaseModel):
    """Which tools a universal provider fans out to."""

    model_config = ConfigDict(frozen=True)

    claude: bool = True
    codex: bool = True
    gemini: bool = True

    def is_enabled(self, app_type: AppType) -> bool:
        return bool(getattr(self, app_type.value))


class ModelConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    model: str | None = None


class UniversalProviderModels(BaseModel):
    """Per-tool model override for a universal provider."""

    model_config = ConfigDict(frozen=True)

    claude: ModelConfig | None = None
    codex: ModelConfig | None = None
    gemini: ModelConfig | None = None

    def model_for(self, app_type: AppType) -> str | None:
        config: ModelConfig | None = getattr(self, app_type.value)
        if config is None:
            return None
        return config.model


class UniversalProviderRecord(BaseModel):
    """One credential/endpoint shared across tools."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    base_url: str
    api_key: str
    website_url: str | None = None
    notes: str | None = None
    apps: UniversalProviderApps = Field(default_factory=UniversalProviderApps)
    models: UniversalProviderModels = Field(default_factory=UniversalProviderModels)
    created_at: int
    updated_at: int


@dataclass(frozen=True)
class SwitchResult:
    """Outcome of a switch or restore."""

    app_type: AppType
    current_provider_id: str
    backup_id: int
    switched_from: str | None
    switched_to: str
