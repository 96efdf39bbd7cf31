"""Provider add, update and delete."""

import logging
from typing import Any

from skills_hub.errors import ConfigValidationError
from skills_hub.ids import IdGenerator
from skills_hub.integrations.clock.abc import Clock
from skills_hub.models.app_type import AppType
from skills_hub.models.provider import ProviderRecord
from skills_hub.operations.registry import ProviderRegistry
from skills_hub.operations.switch import SwitchEngine

logger = logging.getLogger(__name__)


def _require_object(config: Any) -> dict[str, Any]:
    if not isinstance(config, dict):
        raise ConfigValidationError("Provider config must be an object.")
    return config


def add_provider(
    registry: ProviderRegistry,
    ids: IdGenerator,
    clock: Clock,
    app_type: AppType,
    name: str,
    config: dict[str, Any],
) -> ProviderRecord:
    """Add a provider; it becomes current when its type has none yet."""
    now = clock.now_millis()
    record = registry.add(
        ProviderRecord(
            id=ids.next_id(f"provider-{app_type.value}"),
            app_type=app_type,
            name=name.strip() or f"{app_type.value} provider",
            config=_require_object(config),
            created_at=now,
            updated_at=now,
        )
    )
    logger.debug("Added provider %s (current=%s)", record.id, record.is_current)
    return record


def update_provider(
    registry: ProviderRegistry,
    engine: SwitchEngine,
    clock: Clock,
    provider_id: str,
    name: str | None = None,
    config: dict[str, Any] | None = None,
) -> ProviderRecord:
    """Rename a provider and/or replace its config.

    Replacing the config of the current provider reconciles the live files
    first, so the edit takes effect immediately. Renaming never writes live files.
    """
    provider = registry.get(provider_id)
    update: dict[str, Any] = {"updated_at": clock.now_millis()}

    if name is not None and name.strip():
        update["name"] = name.strip()

    if config is not None:
        document = _require_object(config)
        if provider.is_current:
            logger.debug("Reconciling live config for current provider %s", provider.id)
            engine.reconcile(provider.app_type, document)
        update["config"] = document

    updated = provider.model_copy(update=update)
    registry.replace(updated)
    return updated


def delete_provider(registry: ProviderRegistry, clock: Clock, provider_id: str) -> ProviderRecord:
    """Delete a provider, promoting another of its type if it was current.

    Raises:
        NotFoundError: If the provider does not exist
    """
    removed = registry.delete(provider_id, clock.now_millis())
    logger.debug("Deleted provider %s", removed.id)
    return removed
