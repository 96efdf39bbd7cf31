"""Kit policies, loadouts and kits."""

from dataclasses import dataclass
from typing import Any, TypeVar

from skills_hub.errors import ConfigValidationError, NotFoundError
from skills_hub.ids import IdGenerator
from skills_hub.integrations.clock.abc import Clock
from skills_hub.models.kit import (
    KitLoadoutItem,
    KitLoadoutRecord,
    KitPolicyRecord,
    KitRecord,
    SyncMode,
)
from skills_hub.models.state import StateDraft
from skills_hub.paths import normalize_path


@dataclass(frozen=True)
class LoadoutItemInput:
    """Loadout item as supplied by a caller, before defaults are applied."""

    skill_path: str
    mode: str | None = None
    sort_order: int | None = None


def _optional_trim(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


T = TypeVar("T", KitPolicyRecord, KitLoadoutRecord, KitRecord)


def _index_of(
    records: list[T], record_id: str, message: str
) -> int:
    for index, record in enumerate(records):
        if record.id == record_id:
            return index
    raise NotFoundError(message)


def parse_loadout_items(items: list[LoadoutItemInput]) -> list[KitLoadoutItem]:
    """Apply defaults: mode copy, sort_order = position; skill paths normalized.

    Raises:
        ConfigValidationError: If items is empty or a mode is unknown
    """
    if not items:
        raise ConfigValidationError("Loadout requires at least one skill.")

    return [
        KitLoadoutItem(
            skill_path=normalize_path(item.skill_path),
            mode=SyncMode.parse(item.mode) if item.mode is not None else SyncMode.COPY,
            sort_order=item.sort_order if item.sort_order is not None else index,
        )
        for index, item in enumerate(items)
    ]


def add_policy(
    draft: StateDraft,
    ids: IdGenerator,
    clock: Clock,
    name: str,
    content: str,
    description: str | None = None,
) -> KitPolicyRecord:
    trimmed_name = name.strip()
    if not trimmed_name or not content.strip():
        raise ConfigValidationError("Policy name/content are required.")

    now = clock.now_millis()
    record = KitPolicyRecord(
        id=ids.next_id("kit-policy"),
        name=trimmed_name,
        description=_optional_trim(description),
        content=content,
        created_at=now,
        updated_at=now,
    )
    draft.kit_policies.append(record)
    return record


def update_policy(
    draft: StateDraft,
    clock: Clock,
    policy_id: str,
    name: str | None = None,
    description: str | None = None,
    content: str | None = None,
) -> KitPolicyRecord:
    index = _index_of(draft.kit_policies, policy_id, "Policy not found.")
    update: dict[str, Any] = {"updated_at": clock.now_millis()}
    if (trimmed := _optional_trim(name)) is not None:
        update["name"] = trimmed
    if (trimmed := _optional_trim(description)) is not None:
        update["description"] = trimmed
    if content is not None:
        update["content"] = content

    updated = draft.kit_policies[index].model_copy(update=update)
    draft.kit_policies[index] = updated
    return updated


def delete_policy(draft: StateDraft, policy_id: str) -> bool:
    """Delete a policy that no kit references."""
    if any(kit.policy_id == policy_id for kit in draft.kits):
        raise ConfigValidationError("Policy is used by a kit and cannot be deleted.")

    before = len(draft.kit_policies)
    draft.kit_policies = [policy for policy in draft.kit_policies if policy.id != policy_id]
    return len(draft.kit_policies) != before


def add_loadout(
    draft: StateDraft,
    ids: IdGenerator,
    clock: Clock,
    name: str,
    items: list[LoadoutItemInput],
    description: str | None = None,
) -> KitLoadoutRecord:
    trimmed_name = name.strip()
    if not trimmed_name:
        raise ConfigValidationError("Loadout name is required.")

    parsed_items = parse_loadout_items(items)
    now = clock.now_millis()
    record = KitLoadoutRecord(
        id=ids.next_id("kit-loadout"),
        name=trimmed_name,
        description=_optional_trim(description),
        items=parsed_items,
        created_at=now,
        updated_at=now,
    )
    draft.kit_loadouts.append(record)
    return record


def update_loadout(
    draft: StateDraft,
    clock: Clock,
    loadout_id: str,
    name: str | None = None,
    description: str | None = None,
    items: list[LoadoutItemInput] | None = None,
) -> KitLoadoutRecord:
    index = _index_of(draft.kit_loadouts, loadout_id, "Loadout not found.")
    update: dict[str, Any] = {"updated_at": clock.now_millis()}
    if (trimmed := _optional_trim(name)) is not None:
        update["name"] = trimmed
    if (trimmed := _optional_trim(description)) is not None:
        update["description"] = trimmed
    if items is not None:
        update["items"] = parse_loadout_items(items)

    updated = draft.kit_loadouts[index].model_copy(update=update)
    draft.kit_loadouts[index] = updated
    return updated


def delete_loadout(draft: StateDraft, loadout_id: str) -> bool:
    """Delete a loadout that no kit references."""
    if any(kit.loadout_id == loadout_id for kit in draft.kits):
        raise ConfigValidationError("Loadout is used by a kit and cannot be deleted.")

    before = len(draft.kit_loadouts)
    draft.kit_loadouts = [loadout for loadout in draft.kit_loadouts if loadout.id != loadout_id]
    return len(draft.kit_loadouts) != before


def add_kit(
    draft: StateDraft,
    ids: IdGenerator,
    clock: Clock,
    name: str,
    policy_id: str,
    loadout_id: str,
    description: str | None = None,
) -> KitRecord:
    trimmed_name = name.strip()
    if not trimmed_name:
        raise ConfigValidationError("Kit name is required.")

    now = clock.now_millis()
    record = KitRecord(
        id=ids.next_id("kit"),
        name=trimmed_name,
        description=_optional_trim(description),
        policy_id=policy_id,
        loadout_id=loadout_id,
        created_at=now,
        updated_at=now,
    )
    draft.kits.append(record)
    return record


def update_kit(
    draft: StateDraft,
    clock: Clock,
    kit_id: str,
    name: str | None = None,
    description: str | None = None,
    policy_id: str | None = None,
    loadout_id: str | None = None,
) -> KitRecord:
    index = _index_of(draft.kits, kit_id, "Kit not found.")
    update: dict[str, Any] = {"updated_at": clock.now_millis()}
    if (trimmed := _optional_trim(name)) is not None:
        update["name"] = trimmed
    if (trimmed := _optional_trim(description)) is not None:
        update["description"] = trimmed
    if policy_id is not None:
        update["policy_id"] = policy_id
    if loadout_id is not None:
        update["loadout_id"] = loadout_id

    updated = draft.kits[index].model_copy(update=update)
    draft.kits[index] = updated
    return updated


def delete_kit(draft: StateDraft, kit_id: str) -> bool:
    before = len(draft.kits)
    draft.kits = [kit for kit in draft.kits if kit.id != kit_id]
    return len(draft.kits) != before
