"""Whole-state snapshot persisted after every mutating operation."""

from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from skills_hub.models.app_type import AppType
from skills_hub.models.config import AppConfig, default_app_config
from skills_hub.models.kit import KitLoadoutRecord, KitPolicyRecord, KitRecord
from skills_hub.models.provider import (
    ProviderBackupEntry,
    ProviderRecord,
    UniversalProviderRecord,
)
from skills_hub.models.skill import SkillRecord


class HubState(BaseModel):
    """Everything skills-hub remembers between runs.

    ``skills`` is a cached scan result; it is recomputed after any operation
    that can change skill placement.
    """

    model_config = ConfigDict(frozen=True)

    config: AppConfig
    skills: list[SkillRecord] = Field(default_factory=list)
    providers: list[ProviderRecord] = Field(default_factory=list)
    universal_providers: list[UniversalProviderRecord] = Field(default_factory=list)
    kit_policies: list[KitPolicyRecord] = Field(default_factory=list)
    kit_loadouts: list[KitLoadoutRecord] = Field(default_factory=list)
    kits: list[KitRecord] = Field(default_factory=list)
    provider_backups: dict[AppType, list[ProviderBackupEntry]] = Field(default_factory=dict)
    agents_md_applied: dict[str, bool] = Field(default_factory=dict)

    @staticmethod
    def seed(home: Path) -> "HubState":
        """Initial state used when nothing has been persisted yet."""
        return HubState(config=default_app_config(home))


@dataclass
class StateDraft:
    """Mutable working copy of HubState for one operation.

    Operations mutate the draft; the caller persists ``build()`` and swaps it
    in only when the whole operation succeeded.
    """

    config: AppConfig
    skills: list[SkillRecord]
    providers: list[ProviderRecord]
    universal_providers: list[UniversalProviderRecord]
    kit_policies: list[KitPolicyRecord]
    kit_loadouts: list[KitLoadoutRecord]
    kits: list[KitRecord]
    provider_backups: dict[AppType, list[ProviderBackupEntry]]
    agents_md_applied: dict[str, bool]

    @staticmethod
    def from_state(state: HubState) -> "StateDraft":
        return StateDraft(
            config=state.config,
            skills=list(state.skills),
            providers=list(state.providers),
            universal_providers=list(state.universal_providers),
            kit_policies=list(state.kit_policies),
            kit_loadouts=list(state.kit_loadouts),
            kits=list(state.kits),
            provider_backups={
                app_type: list(entries) for app_type, entries in state.provider_backups.items()
            },
            agents_md_applied=dict(state.agents_md_applied),
        )

    def build(self) -> HubState:
        return HubState(
            config=self.config,
            skills=self.skills,
            providers=self.providers,
            universal_providers=self.universal_providers,
            kit_policies=self.kit_policies,
            kit_loadouts=self.kit_loadouts,
            kits=self.kits,
            provider_backups=self.provider_backups,
            agents_md_applied=self.agents_md_applied,
        )
