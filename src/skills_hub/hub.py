"""SkillsHub facade: the operations exposed to the CLI.

All state lives in one HubState guarded by one lock. Mutating operations run
inside ``_transaction()``, which hands out a StateDraft, persists the result
and swaps it in only when the operation and the save both succeeded.
"""

import logging
import threading
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from skills_hub.errors import LockUnavailableError, NotFoundError
from skills_hub.ids import IdGenerator
from skills_hub.integrations.clock.abc import Clock
from skills_hub.io.state_store import STATE_DIR_NAME, StateStore
from skills_hub.live_config.store.abc import ConfigStore
from skills_hub.models.app_type import AppType
from skills_hub.models.config import AgentConfig, AppConfig
from skills_hub.models.kit import (
    KitApplyResult,
    KitLoadoutRecord,
    KitPolicyRecord,
    KitRecord,
    SyncMode,
)
from skills_hub.models.provider import (
    ProviderBackupEntry,
    ProviderRecord,
    SwitchResult,
    UniversalProviderApps,
    UniversalProviderModels,
    UniversalProviderRecord,
)
from skills_hub.models.skill import SkillDocument, SkillRecord
from skills_hub.models.snapshot import (
    DEFAULT_SNAPSHOT_RETENTION,
    SnapshotOperation,
    SnapshotRecord,
)
from skills_hub.models.state import HubState, StateDraft
from skills_hub.operations import app_config, kits, providers, skills, universal
from skills_hub.operations.kit_apply import (
    KitApplyPreview,
    apply_kit,
    preview_kit_apply,
    record_kit_application,
    resolve_kit,
)
from skills_hub.operations.kits import LoadoutItemInput
from skills_hub.operations.registry import ProviderRegistry
from skills_hub.operations.skill_conflicts import ConflictReport, collect_conflicts
from skills_hub.operations.skill_index import scan_skills
from skills_hub.operations.skill_sync import SyncPlan, preview_sync, sync_skill
from skills_hub.operations.snapshots import (
    SNAPSHOTS_DIR_NAME,
    RollbackResult,
    SnapshotCreateResult,
    SnapshotStore,
)
from skills_hub.operations.switch import SwitchEngine
from skills_hub.paths import normalize_path

logger = logging.getLogger(__name__)


class SkillsHub:
    """Provider lifecycle, skills, kits and app config over one persisted state."""

    def __init__(
        self,
        state_store: StateStore,
        config_store: ConfigStore,
        clock: Clock,
        ids: IdGenerator,
        home: Path,
        lock_timeout_seconds: float = 5.0,
        snapshots: SnapshotStore | None = None,
        snapshot_retention: int = DEFAULT_SNAPSHOT_RETENTION,
    ) -> None:
        self._state_store = state_store
        self._clock = clock
        self._ids = ids
        self._home = home
        self._lock_timeout_seconds = lock_timeout_seconds
        self._lock = threading.Lock()
        self._engine = SwitchEngine(config_store, clock, ids)
        self._snapshots = (
            snapshots
            if snapshots is not None
            else SnapshotStore(home / STATE_DIR_NAME / SNAPSHOTS_DIR_NAME, clock, ids)
        )
        self._snapshot_retention = snapshot_retention

        loaded = state_store.load()
        if loaded is None:
            logger.debug("Seeding new state at %s", state_store.path())
            seeded = HubState.seed(home)
            seeded = seeded.model_copy(update={"skills": scan_skills(seeded.config)})
            state_store.save(seeded)
            self._state = seeded
        else:
            self._state = loaded.model_copy(update={"skills": scan_skills(loaded.config)})

    @property
    def state(self) -> HubState:
        return self._state

    @contextmanager
    def _locked(self) -> Generator[None]:
        if not self._lock.acquire(timeout=self._lock_timeout_seconds):
            raise LockUnavailableError(
                f"State lock not acquired within {self._lock_timeout_seconds}s"
            )
        try:
            yield
        finally:
            self._lock.release()

    @contextmanager
    def _transaction(self) -> Generator[StateDraft]:
        with self._locked():
            draft = StateDraft.from_state(self._state)
            yield draft
            next_state = draft.build()
            self._state_store.save(next_state)
            self._state = next_state

    @staticmethod
    def _registry(draft: StateDraft) -> ProviderRegistry:
        return ProviderRegistry(draft.providers, draft.provider_backups)

    # Providers

    def provider_list(self, app_type: AppType | None = None) -> list[ProviderRecord]:
        with self._locked():
            registry = ProviderRegistry(list(self._state.providers), {})
            return registry.list_providers(app_type)

    def provider_current(self, app_type: AppType) -> ProviderRecord | None:
        with self._locked():
            return ProviderRegistry(list(self._state.providers), {}).current(app_type)

    def provider_get(self, provider_id: str) -> ProviderRecord:
        with self._locked():
            return ProviderRegistry(list(self._state.providers), {}).get(provider_id)

    def provider_add(self, app_type: AppType, name: str, config: dict[str, Any]) -> ProviderRecord:
        with self._transaction() as draft:
            return providers.add_provider(
                self._registry(draft), self._ids, self._clock, app_type, name, config
            )

    def provider_update(
        self,
        provider_id: str,
        name: str | None = None,
        config: dict[str, Any] | None = None,
    ) -> ProviderRecord:
        with self._transaction() as draft:
            return providers.update_provider(
                self._registry(draft), self._engine, self._clock, provider_id, name, config
            )

    def provider_delete(self, provider_id: str) -> bool:
        with self._transaction() as draft:
            providers.delete_provider(self._registry(draft), self._clock, provider_id)
            return True

    def provider_switch(self, app_type: AppType, provider_id: str) -> SwitchResult:
        with self._transaction() as draft:
            return self._engine.switch(self._registry(draft), app_type, provider_id)

    def provider_latest_backup(self, app_type: AppType) -> ProviderBackupEntry | None:
        with self._locked():
            entries = self._state.provider_backups.get(app_type, [])
            return entries[-1] if entries else None

    def provider_restore_latest_backup(self, app_type: AppType) -> SwitchResult:
        with self._transaction() as draft:
            return self._engine.restore_latest_backup(self._registry(draft), app_type)

    def provider_capture_live(
        self, app_type: AppType, name: str, profile: dict[str, Any] | None = None
    ) -> ProviderRecord:
        with self._transaction() as draft:
            return self._engine.capture_live(self._registry(draft), app_type, name, profile)

    # Universal providers

    def universal_provider_list(self) -> list[UniversalProviderRecord]:
        with self._locked():
            return list(self._state.universal_providers)

    def universal_provider_get(self, universal_id: str) -> UniversalProviderRecord:
        for record in self.universal_provider_list():
            if record.id == universal_id:
                return record
        raise NotFoundError("Universal provider not found.")

    def universal_provider_add(
        self,
        name: str,
        base_url: str,
        api_key: str,
        website_url: str | None = None,
        notes: str | None = None,
        apps: UniversalProviderApps | None = None,
        models: UniversalProviderModels | None = None,
    ) -> UniversalProviderRecord:
        with self._transaction() as draft:
            return universal.add_universal_provider(
                draft.universal_providers,
                self._ids,
                self._clock,
                name,
                base_url,
                api_key,
                website_url=website_url,
                notes=notes,
                apps=apps,
                models=models,
            )

    def universal_provider_update(
        self,
        universal_id: str,
        name: str | None = None,
        base_url: str | None = None,
        api_key: str | None = None,
        website_url: str | None = None,
        notes: str | None = None,
        apps: UniversalProviderApps | None = None,
        models: UniversalProviderModels | None = None,
    ) -> UniversalProviderRecord:
        with self._transaction() as draft:
            return universal.update_universal_provider(
                draft.universal_providers,
                self._clock,
                universal_id,
                name=name,
                base_url=base_url,
                api_key=api_key,
                website_url=website_url,
                notes=notes,
                apps=apps,
                models=models,
            )

    def universal_provider_delete(self, universal_id: str) -> bool:
        with self._transaction() as draft:
            return universal.delete_universal_provider(draft.universal_providers, universal_id)

    def universal_provider_apply(self, universal_id: str) -> list[ProviderRecord]:
        with self._transaction() as draft:
            return universal.apply_universal_provider(
                draft.universal_providers,
                self._registry(draft),
                self._ids,
                self._clock,
                universal_id,
            )

    # Kits

    def kit_policy_list(self) -> list[KitPolicyRecord]:
        with self._locked():
            return list(self._state.kit_policies)

    def kit_policy_add(
        self, name: str, content: str, description: str | None = None
    ) -> KitPolicyRecord:
        with self._transaction() as draft:
            return kits.add_policy(draft, self._ids, self._clock, name, content, description)

    def kit_policy_update(
        self,
        policy_id: str,
        name: str | None = None,
        description: str | None = None,
        content: str | None = None,
    ) -> KitPolicyRecord:
        with self._transaction() as draft:
            return kits.update_policy(draft, self._clock, policy_id, name, description, content)

    def kit_policy_delete(self, policy_id: str) -> bool:
        with self._transaction() as draft:
            return kits.delete_policy(draft, policy_id)

    def kit_loadout_list(self) -> list[KitLoadoutRecord]:
        with self._locked():
            return list(self._state.kit_loadouts)

    def kit_loadout_add(
        self, name: str, items: list[LoadoutItemInput], description: str | None = None
    ) -> KitLoadoutRecord:
        with self._transaction() as draft:
            return kits.add_loadout(draft, self._ids, self._clock, name, items, description)

    def kit_loadout_update(
        self,
        loadout_id: str,
        name: str | None = None,
        description: str | None = None,
        items: list[LoadoutItemInput] | None = None,
    ) -> KitLoadoutRecord:
        with self._transaction() as draft:
            return kits.update_loadout(draft, self._clock, loadout_id, name, description, items)

    def kit_loadout_delete(self, loadout_id: str) -> bool:
        with self._transaction() as draft:
            return kits.delete_loadout(draft, loadout_id)

    def kit_list(self) -> list[KitRecord]:
        with self._locked():
            return list(self._state.kits)

    def kit_add(
        self, name: str, policy_id: str, loadout_id: str, description: str | None = None
    ) -> KitRecord:
        with self._transaction() as draft:
            return kits.add_kit(
                draft, self._ids, self._clock, name, policy_id, loadout_id, description
            )

    def kit_update(
        self,
        kit_id: str,
        name: str | None = None,
        description: str | None = None,
        policy_id: str | None = None,
        loadout_id: str | None = None,
    ) -> KitRecord:
        with self._transaction() as draft:
            return kits.update_kit(
                draft, self._clock, kit_id, name, description, policy_id, loadout_id
            )

    def kit_delete(self, kit_id: str) -> bool:
        with self._transaction() as draft:
            return kits.delete_kit(draft, kit_id)

    def kit_apply(
        self,
        kit_id: str,
        project_path: str,
        agent_name: str,
        mode: SyncMode | None = None,
        overwrite_policy: bool = False,
    ) -> KitApplyResult:
        with self._transaction() as draft:
            resolved = resolve_kit(draft, kit_id, agent_name)
            result = apply_kit(
                resolved,
                project_path,
                agent_name,
                self._clock.now_millis(),
                mode_override=mode,
                overwrite_policy=overwrite_policy,
            )
            record_kit_application(draft, result)
            draft.skills = scan_skills(draft.config)
            return result

    def kit_apply_preview(
        self,
        kit_id: str,
        project_path: str,
        agent_name: str,
        mode: SyncMode | None = None,
        overwrite_policy: bool = False,
    ) -> KitApplyPreview:
        with self._locked():
            resolved = resolve_kit(StateDraft.from_state(self._state), kit_id, agent_name)
        return preview_kit_apply(
            resolved,
            project_path,
            agent_name,
            mode_override=mode,
            overwrite_policy=overwrite_policy,
        )

    # Skills

    def skill_list(self) -> list[SkillRecord]:
        with self._locked():
            config = self._state.config
        return scan_skills(config)

    def skill_sync(self, source_path: str, dest_parent: str, mode: SyncMode = SyncMode.COPY) -> str:
        with self._transaction() as draft:
            destination = sync_skill(
                Path(normalize_path(source_path)), Path(normalize_path(dest_parent)), mode
            )
            draft.skills = scan_skills(draft.config)
            return destination

    def skill_sync_preview(
        self, source_path: str, dest_parent: str, mode: SyncMode = SyncMode.COPY
    ) -> SyncPlan:
        return preview_sync(
            Path(normalize_path(source_path)), Path(normalize_path(dest_parent)), mode
        )

    def skill_collect_to_hub(self, source_path: str) -> str:
        with self._transaction() as draft:
            destination = sync_skill(
                Path(normalize_path(source_path)), Path(draft.config.hub_path), SyncMode.COPY
            )
            draft.skills = scan_skills(draft.config)
            return destination

    def skill_delete(self, path: str) -> bool:
        with self._transaction() as draft:
            skills.delete_skill(path)
            draft.skills = scan_skills(draft.config)
            return True

    def skill_get_content(self, path: str) -> SkillDocument:
        return skills.read_skill_content(path)

    def skill_create(self, name: str, description: str, content: str) -> str:
        with self._transaction() as draft:
            target = skills.create_skill(Path(draft.config.hub_path), name, description, content)
            draft.skills = scan_skills(draft.config)
            return normalize_path(target)

    def skill_conflicts(self) -> ConflictReport:
        with self._locked():
            config = self._state.config
        return collect_conflicts(config)

    # Snapshots

    def snapshot_create(
        self,
        operation: SnapshotOperation,
        target: str,
        mode: SyncMode,
        affected_paths: list[str],
    ) -> SnapshotCreateResult:
        with self._locked():
            return self._snapshots.create(
                operation, target, mode, affected_paths, retention=self._snapshot_retention
            )

    def snapshot_list(self) -> list[SnapshotRecord]:
        return self._snapshots.list_snapshots()

    def snapshot_get(self, snapshot_id: str) -> SnapshotRecord:
        return self._snapshots.get(snapshot_id)

    def snapshot_rollback(self, snapshot_id: str) -> RollbackResult:
        with self._transaction() as draft:
            result = self._snapshots.rollback(snapshot_id)
            draft.skills = scan_skills(draft.config)
            return result

    def snapshot_rollback_latest(self) -> RollbackResult:
        latest = self._snapshots.latest()
        if latest is None:
            raise NotFoundError("No snapshots found.")
        return self.snapshot_rollback(latest.id)

    # App config

    def config_get(self) -> AppConfig:
        with self._locked():
            return self._state.config

    def agent_update(self, agent: AgentConfig) -> None:
        with self._transaction() as draft:
            draft.config = app_config.update_agent(draft.config, agent)
            draft.skills = scan_skills(draft.config)

    def agent_remove(self, agent_name: str) -> bool:
        with self._transaction() as draft:
            draft.config, removed = app_config.remove_agent(draft.config, agent_name)
            if removed:
                draft.skills = scan_skills(draft.config)
            return removed

    def project_add(self, project_path: str) -> str:
        with self._transaction() as draft:
            draft.config, normalized = app_config.add_project(draft.config, project_path)
            draft.skills = scan_skills(draft.config)
            return normalized

    def project_remove(self, project_path: str) -> bool:
        with self._transaction() as draft:
            draft.config, removed = app_config.remove_project(draft.config, project_path)
            if removed:
                draft.skills = scan_skills(draft.config)
            return removed

    def scan_root_add(self, root_path: str) -> str:
        with self._transaction() as draft:
            draft.config, normalized = app_config.add_scan_root(draft.config, root_path)
            return normalized

    def scan_root_remove(self, root_path: str) -> bool:
        with self._transaction() as draft:
            draft.config, removed = app_config.remove_scan_root(draft.config, root_path)
            return removed

    def scan_projects(self) -> list[str]:
        with self._locked():
            config = self._state.config
        return app_config.scan_projects(config, self._home)

    def scanned_projects_add(self, project_paths: list[str]) -> int:
        with self._transaction() as draft:
            draft.config, added = app_config.add_projects(draft.config, project_paths)
            if added:
                draft.skills = scan_skills(draft.config)
            return added

    def scan_and_add_projects(self) -> int:
        return self.scanned_projects_add(self.scan_projects())
