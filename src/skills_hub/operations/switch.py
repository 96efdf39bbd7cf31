"""Provider switch, restore and live capture.

Every path that touches live files follows the same sequence: read live,
merge the sanitized provider document, validate, write. Registry changes are
made only after the write succeeded.
"""

import copy
import logging
from typing import Any

from skills_hub.errors import NotFoundError
from skills_hub.ids import IdGenerator
from skills_hub.integrations.clock.abc import Clock
from skills_hub.live_config.documents import (
    live_config_from_document,
    live_config_to_document,
    preserve_profile,
    sanitize_official_capture,
)
from skills_hub.live_config.store.abc import ConfigStore
from skills_hub.models.app_type import AppType
from skills_hub.models.provider import (
    PROFILE_KEY,
    ProviderBackupEntry,
    ProviderRecord,
    SwitchResult,
)
from skills_hub.operations.registry import ProviderRegistry

logger = logging.getLogger(__name__)


class SwitchEngine:
    """Orchestrates switch/restore/capture over a ConfigStore and a registry."""

    def __init__(self, config_store: ConfigStore, clock: Clock, ids: IdGenerator) -> None:
        self._config_store = config_store
        self._clock = clock
        self._ids = ids

    def reconcile(self, app_type: AppType, document: dict[str, Any]) -> None:
        """Apply a provider document on top of the live config and write it.

        Raises:
            ConfigValidationError: If the merged document is not writable
        """
        live = self._config_store.read_live(app_type)
        merged = self._config_store.merge(live, live_config_from_document(app_type, document))
        self._config_store.validate(merged)
        self._config_store.write_live(merged)

    def switch(self, registry: ProviderRegistry, app_type: AppType, target_id: str) -> SwitchResult:
        """Make target_id the current provider of app_type.

        A different outgoing provider is snapshotted from the live files (keeping
        its _profile), updated in place and pushed onto the backup history.
        Switching to the already-current provider re-applies it without a backup.

        Raises:
            NotFoundError: If the target does not exist for app_type
            ConfigValidationError: If the merged document is not writable
        """
        backup_id = self._clock.now_millis()
        target = registry.find(app_type, target_id)
        if target is None:
            raise NotFoundError("Target provider does not exist for this app.")

        current = registry.current(app_type)
        live = self._config_store.read_live(app_type)
        logger.debug(
            "Switching %s: from=%s to=%s",
            app_type.value,
            current.id if current else None,
            target.id,
        )

        snapshot: ProviderRecord | None = None
        if current is not None and current.id != target.id:
            snapshot = current.model_copy(
                update={
                    "config": preserve_profile(live_config_to_document(live), current.config),
                    "is_current": False,
                    "updated_at": self._clock.now_millis(),
                }
            )

        merged = self._config_store.merge(live, live_config_from_document(app_type, target.config))
        self._config_store.validate(merged)
        self._config_store.write_live(merged)

        if snapshot is not None:
            registry.replace(snapshot)
            registry.push_backup(
                app_type, ProviderBackupEntry(backup_id=backup_id, provider=snapshot)
            )
            logger.debug("Backed up %s as backup %s", snapshot.id, backup_id)

        registry.set_current(app_type, target.id, self._clock.now_millis())

        return SwitchResult(
            app_type=app_type,
            current_provider_id=target.id,
            backup_id=backup_id,
            switched_from=current.id if current else None,
            switched_to=target.id,
        )

    def restore_latest_backup(self, registry: ProviderRegistry, app_type: AppType) -> SwitchResult:
        """Re-apply the newest backup of app_type without removing it.

        The backed-up provider is refreshed in place when it still exists,
        otherwise recreated under a new id. It becomes the only current provider.

        Raises:
            NotFoundError: If app_type has no backups
        """
        entry = registry.latest_backup(app_type)
        if entry is None:
            raise NotFoundError("No backup found for this app.")

        live = self._config_store.read_live(app_type)
        merged = self._config_store.merge(
            live, live_config_from_document(app_type, entry.provider.config)
        )
        self._config_store.validate(merged)
        self._config_store.write_live(merged)

        now = self._clock.now_millis()
        current = registry.current(app_type)
        registry.clear_current(app_type, now)

        existing = registry.find(app_type, entry.provider.id)
        if existing is not None:
            restored = existing.model_copy(
                update={
                    "name": entry.provider.name,
                    "config": copy.deepcopy(entry.provider.config),
                    "is_current": True,
                    "updated_at": now,
                }
            )
            registry.replace(restored)
        else:
            restored = registry.insert(
                ProviderRecord(
                    id=self._ids.next_id(f"provider-{app_type.value}-restored"),
                    app_type=app_type,
                    name=entry.provider.name,
                    config=copy.deepcopy(entry.provider.config),
                    is_current=True,
                    created_at=now,
                    updated_at=now,
                )
            )
        logger.debug("Restored backup %s into %s", entry.backup_id, restored.id)

        return SwitchResult(
            app_type=app_type,
            current_provider_id=restored.id,
            backup_id=self._clock.now_millis(),
            switched_from=current.id if current else None,
            switched_to=restored.id,
        )

    def capture_live(
        self,
        registry: ProviderRegistry,
        app_type: AppType,
        name: str,
        profile: dict[str, Any] | None = None,
    ) -> ProviderRecord:
        """Store the currently logged-in live config as a non-current provider.

        Secrets are scrubbed and the profile is tagged ``kind = "official"``.
        Live files are not touched.
        """
        live = sanitize_official_capture(self._config_store.read_live(app_type))
        document = live_config_to_document(live)

        captured_profile: dict[str, Any] = {"kind": "official"}
        captured_profile.update(copy.deepcopy(profile or {}))
        captured_profile["kind"] = "official"
        document[PROFILE_KEY] = captured_profile

        now = self._clock.now_millis()
        return registry.insert(
            ProviderRecord(
                id=self._ids.next_id(f"provider-{app_type.value}-official"),
                app_type=app_type,
                name=name.strip() or f"{app_type.value} official",
                config=document,
                is_current=False,
                created_at=now,
                updated_at=now,
            )
        )
