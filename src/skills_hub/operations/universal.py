"""Universal providers: one credential fanned out to every enabled tool."""

import logging
from typing import Any

from skills_hub.errors import ConfigValidationError, NotFoundError
from skills_hub.ids import IdGenerator
from skills_hub.integrations.clock.abc import Clock
from skills_hub.models.app_type import AppType
from skills_hub.models.provider import (
    PROFILE_KEY,
    ProviderRecord,
    UniversalProviderApps,
    UniversalProviderModels,
    UniversalProviderRecord,
)
from skills_hub.operations.registry import ProviderRegistry

logger = logging.getLogger(__name__)

DEFAULT_CODEX_MODEL = "gpt-5.2"


def _optional_trim(value: str | None) -> str | None:
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None


def _find(records: list[UniversalProviderRecord], universal_id: str) -> int:
    for index, record in enumerate(records):
        if record.id == universal_id:
            return index
    raise NotFoundError("Universal provider not found.")


def add_universal_provider(
    records: list[UniversalProviderRecord],
    ids: IdGenerator,
    clock: Clock,
    name: str,
    base_url: str,
    api_key: str,
    website_url: str | None = None,
    notes: str | None = None,
    apps: UniversalProviderApps | None = None,
    models: UniversalProviderModels | None = None,
) -> UniversalProviderRecord:
    trimmed_name = name.strip()
    trimmed_base_url = base_url.strip()
    trimmed_api_key = api_key.strip()
    if not trimmed_name or not trimmed_base_url or not trimmed_api_key:
        raise ConfigValidationError("Universal provider name/baseUrl/apiKey are required.")

    now = clock.now_millis()
    record = UniversalProviderRecord(
        id=ids.next_id("universal"),
        name=trimmed_name,
        base_url=trimmed_base_url,
        api_key=trimmed_api_key,
        website_url=_optional_trim(website_url),
        notes=_optional_trim(notes),
        apps=apps if apps is not None else UniversalProviderApps(),
        models=models if models is not None else UniversalProviderModels(),
        created_at=now,
        updated_at=now,
    )
    records.append(record)
    return record


def update_universal_provider(
    records: list[UniversalProviderRecord],
    clock: Clock,
    universal_id: str,
    name: str | None = None,
    base_url: str | None = None,
    api_key: str | None = None,
    website_url: str | None = None,
    notes: str | None = None,
    apps: UniversalProviderApps | None = None,
    models: UniversalProviderModels | None = None,
) -> UniversalProviderRecord:
    """Update fields that are given and non-blank; apps/models replace whole."""
    index = _find(records, universal_id)
    update: dict[str, Any] = {"updated_at": clock.now_millis()}

    for field_name, value in (
        ("name", name),
        ("base_url", base_url),
        ("api_key", api_key),
        ("website_url", website_url),
        ("notes", notes),
    ):
        trimmed = _optional_trim(value)
        if trimmed is not None:
            update[field_name] = trimmed
    if apps is not None:
        update["apps"] = apps
    if models is not None:
        update["models"] = models

    updated = records[index].model_copy(update=update)
    records[index] = updated
    return updated


def delete_universal_provider(records: list[UniversalProviderRecord], universal_id: str) -> bool:
    before = len(records)
    records[:] = [record for record in records if record.id != universal_id]
    return len(records) != before


def build_provider_config(app_type: AppType, universal: UniversalProviderRecord) -> dict[str, Any]:
    """Synthesize the provider document for one tool from a universal provider."""
    model = universal.models.model_for(app_type)

    profile: dict[str, Any] = {
        "kind": "api",
        "vendorKey": "universal",
        "universalId": universal.id,
    }
    if universal.website_url is not None:
        profile["website"] = universal.website_url
    if universal.notes is not None:
        profile["note"] = universal.notes
    if model is not None:
        profile["model"] = model
    profile["endpoint"] = universal.base_url

    if app_type == AppType.CODEX:
        codex_model = model or DEFAULT_CODEX_MODEL
        return {
            PROFILE_KEY: profile,
            "auth": {"OPENAI_API_KEY": universal.api_key},
            "config": f'model = "{codex_model}"\napi_base_url = "{universal.base_url}"\n',
        }

    config: dict[str, Any] = {
        PROFILE_KEY: profile,
        "apiKey": universal.api_key,
        "endpoint": universal.base_url,
    }
    if model is not None:
        config["model"] = model
    return config


def apply_universal_provider(
    records: list[UniversalProviderRecord],
    registry: ProviderRegistry,
    ids: IdGenerator,
    clock: Clock,
    universal_id: str,
) -> list[ProviderRecord]:
    """Create or refresh one provider per enabled tool.

    Providers already tagged with this universal id are updated in place;
    new ones are added as non-current.
    """
    universal = records[_find(records, universal_id)]
    applied: list[ProviderRecord] = []

    for app_type in AppType:
        if not universal.apps.is_enabled(app_type):
            continue

        config = build_provider_config(app_type, universal)
        name = f"{universal.name} ({app_type.value})"
        now = clock.now_millis()

        existing = registry.find_by_universal_id(app_type, universal.id)
        if existing is not None:
            refreshed = existing.model_copy(
                update={"name": name, "config": config, "updated_at": now}
            )
            registry.replace(refreshed)
            applied.append(refreshed)
            continue

        created = registry.insert(
            ProviderRecord(
                id=ids.next_id(f"provider-{app_type.value}-universal"),
                app_type=app_type,
                name=name,
                config=config,
                is_current=False,
                created_at=now,
                updated_at=now,
            )
        )
        applied.append(created)

    logger.debug("Applied universal provider %s to %d tool(s)", universal.id, len(applied))
    return applied
