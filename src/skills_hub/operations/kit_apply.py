"""Apply a kit to a project: policy file plus an ordered batch of skill syncs."""

import logging
from dataclasses import dataclass
from pathlib import Path

from skills_hub.errors import (
    AlreadyExistsError,
    ConfigValidationError,
    HubError,
    HubIOError,
    NotFoundError,
)
from skills_hub.models.config import DEFAULT_AGENT_PROJECT_PATH
from skills_hub.models.kit import (
    POLICY_FILENAME,
    ApplyStatus,
    KitApplyResult,
    KitApplySkillResult,
    KitApplyTarget,
    KitLoadoutRecord,
    KitPolicyRecord,
    KitRecord,
    SyncMode,
)
from skills_hub.models.state import StateDraft
from skills_hub.operations.skill_sync import ChangeType, SyncChange, preview_sync, sync_skill
from skills_hub.paths import normalize_path, path_tail

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedKit:
    kit: KitRecord
    policy: KitPolicyRecord
    loadout: KitLoadoutRecord
    agent_relative_path: str


@dataclass(frozen=True)
class KitApplyPreview:
    """Changes a kit apply would make, and the paths it would touch."""

    kit_id: str
    kit_name: str
    project_path: str
    agent_name: str
    mode: SyncMode | None
    policy_path: str
    policy_blocked: bool
    changes: list[SyncChange]
    warnings: list[str]
    affected_paths: list[str]


def applied_flag_key(project_path: str, agent_name: str) -> str:
    return f"{project_path}::{agent_name}"


def resolve_kit(draft: StateDraft, kit_id: str, agent_name: str) -> ResolvedKit:
    """Look up a kit, its policy and loadout, and the agent's project skill dir.

    Unknown agents fall back to ``.agent/skills``.

    Raises:
        NotFoundError: If the kit, its policy or its loadout is missing
    """
    kit = next((entry for entry in draft.kits if entry.id == kit_id), None)
    if kit is None:
        raise NotFoundError("Kit not found.")

    policy = next((entry for entry in draft.kit_policies if entry.id == kit.policy_id), None)
    loadout = next((entry for entry in draft.kit_loadouts if entry.id == kit.loadout_id), None)
    if policy is None or loadout is None:
        raise NotFoundError("Kit references missing policy/loadout.")

    agent = draft.config.find_agent(agent_name)
    agent_relative_path = agent.project_path if agent is not None else DEFAULT_AGENT_PROJECT_PATH
    return ResolvedKit(
        kit=kit, policy=policy, loadout=loadout, agent_relative_path=agent_relative_path
    )


def apply_kit(
    resolved: ResolvedKit,
    project_path: str,
    agent_name: str,
    applied_at: int,
    mode_override: SyncMode | None = None,
    overwrite_policy: bool = False,
) -> KitApplyResult:
    """Write the policy file and sync every loadout item into the project.

    Skill sync failures are recorded per item and never stop the batch.

    Raises:
        ConfigValidationError: If project_path is blank
        AlreadyExistsError: If the policy file exists and overwrite_policy is
            False; nothing has been written in that case
        HubIOError: If the project, policy file or skill directory cannot be written
    """
    normalized_project = normalize_path(project_path)
    if normalized_project == "/":
        raise ConfigValidationError("Project path is required.")

    project_dir = Path(normalized_project)
    _mkdir(project_dir)

    policy_path = project_dir / POLICY_FILENAME
    normalized_policy_path = normalize_path(policy_path)
    if policy_path.exists() and not overwrite_policy:
        raise AlreadyExistsError(
            f"{POLICY_FILENAME} already exists at {normalized_policy_path}. "
            f"Use --overwrite-policy to replace it.",
            normalized_policy_path,
        )

    try:
        policy_path.write_text(resolved.policy.content, encoding="utf-8")
    except OSError as e:
        raise HubIOError(
            f"Failed to write {POLICY_FILENAME} at {policy_path}", policy_path, e
        ) from e

    destination_parent = project_dir / resolved.agent_relative_path
    _mkdir(destination_parent)
    destination_parent_normalized = normalize_path(destination_parent)

    results: list[KitApplySkillResult] = []
    for item in sorted(resolved.loadout.items, key=lambda entry: entry.sort_order):
        mode = mode_override if mode_override is not None else item.mode
        try:
            destination = sync_skill(
                Path(normalize_path(item.skill_path)), destination_parent, mode
            )
        except (HubError, OSError) as e:
            logger.debug("Loadout item %s failed: %s", item.skill_path, e)
            results.append(
                KitApplySkillResult(
                    skill_path=item.skill_path,
                    mode=mode,
                    destination=f"{destination_parent_normalized}/{path_tail(item.skill_path)}",
                    status=ApplyStatus.FAILED,
                    error=str(e),
                )
            )
            continue

        results.append(
            KitApplySkillResult(
                skill_path=item.skill_path,
                mode=mode,
                destination=destination,
                status=ApplyStatus.SUCCESS,
            )
        )

    return KitApplyResult(
        kit_id=resolved.kit.id,
        kit_name=resolved.kit.name,
        policy_path=normalized_policy_path,
        project_path=normalized_project,
        agent_name=agent_name,
        applied_at=applied_at,
        overwrote_policy=overwrite_policy,
        loadout_results=results,
    )


def preview_kit_apply(
    resolved: ResolvedKit,
    project_path: str,
    agent_name: str,
    mode_override: SyncMode | None = None,
    overwrite_policy: bool = False,
) -> KitApplyPreview:
    """Plan a kit apply without writing anything.

    A policy file that would block the apply and loadout items that would fail
    are reported as warnings.

    Raises:
        ConfigValidationError: If project_path is blank
    """
    normalized_project = normalize_path(project_path)
    if normalized_project == "/":
        raise ConfigValidationError("Project path is required.")

    project_dir = Path(normalized_project)
    policy_path = project_dir / POLICY_FILENAME
    normalized_policy_path = normalize_path(policy_path)
    changes: list[SyncChange] = []
    warnings: list[str] = []
    affected_paths = [normalized_policy_path]
    policy_blocked = False

    if not policy_path.exists():
        changes.append(
            SyncChange(
                ChangeType.ADD, normalized_policy_path, normalized_policy_path, "write policy file"
            )
        )
    elif overwrite_policy:
        changes.append(
            SyncChange(
                ChangeType.UPDATE,
                normalized_policy_path,
                normalized_policy_path,
                "overwrite existing policy file",
            )
        )
    else:
        policy_blocked = True
        warnings.append(
            f"{POLICY_FILENAME} already exists at {normalized_policy_path}. "
            f"Use --overwrite-policy to replace it."
        )

    destination_parent = project_dir / resolved.agent_relative_path
    destination_parent_normalized = normalize_path(destination_parent)
    for item in sorted(resolved.loadout.items, key=lambda entry: entry.sort_order):
        mode = mode_override if mode_override is not None else item.mode
        try:
            plan = preview_sync(Path(normalize_path(item.skill_path)), destination_parent, mode)
        except HubError as e:
            warnings.append(f"{item.skill_path}: {e}")
            affected_paths.append(
                f"{destination_parent_normalized}/{path_tail(item.skill_path)}"
            )
            continue
        changes.extend(plan.changes)
        affected_paths.append(plan.destination)

    return KitApplyPreview(
        kit_id=resolved.kit.id,
        kit_name=resolved.kit.name,
        project_path=normalized_project,
        agent_name=agent_name,
        mode=mode_override,
        policy_path=normalized_policy_path,
        policy_blocked=policy_blocked,
        changes=changes,
        warnings=warnings,
        affected_paths=affected_paths,
    )


def record_kit_application(draft: StateDraft, result: KitApplyResult) -> None:
    """Stamp the kit with its last target and mark the policy as applied there."""
    draft.agents_md_applied[applied_flag_key(result.project_path, result.agent_name)] = True
    for index, kit in enumerate(draft.kits):
        if kit.id != result.kit_id:
            continue
        draft.kits[index] = kit.model_copy(
            update={
                "last_applied_at": result.applied_at,
                "last_applied_target": KitApplyTarget(
                    project_path=result.project_path, agent_name=result.agent_name
                ),
                "updated_at": result.applied_at,
            }
        )


def _mkdir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise HubIOError(f"Failed to create directory {path}", path, e) from e
