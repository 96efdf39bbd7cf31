"""Detect the same skill installed from more than one place.

Two kinds of conflict are reported: a plugin id declared by several skill
directories, and a skill directory name present in more than one location
type (hub, agent, project).
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from skills_hub.io.skill_document import read_plugin_id
from skills_hub.models.config import AppConfig
from skills_hub.models.skill import SkillLocation, SkillRecord
from skills_hub.operations.skill_index import scan_skills
from skills_hub.paths import path_tail

LOCATION_ORDER = {SkillLocation.HUB: 0, SkillLocation.AGENT: 1, SkillLocation.PROJECT: 2}

PLUGIN_ID_RESOLUTION = (
    "Keep one canonical plugin id. Rename one plugin id in SKILL.md, "
    "or disable/remove duplicate sources."
)
SKILL_NAME_RESOLUTION = (
    "Keep one canonical skill directory name. Rename one skill directory, "
    "or disable/remove duplicate sources."
)


class ConflictType(str, Enum):
    DUPLICATE_PLUGIN_ID = "duplicate_plugin_id"
    DUPLICATE_SKILL_NAME = "duplicate_skill_name"


@dataclass(frozen=True)
class ConflictItem:
    path: str
    skill_name: str
    plugin_id: str
    location: SkillLocation
    source_label: str
    agent_name: str | None = None
    project_name: str | None = None


@dataclass(frozen=True)
class SkillConflict:
    type: ConflictType
    key: str
    items: list[ConflictItem]
    resolution: str


@dataclass(frozen=True)
class ConflictReport:
    item_count: int
    conflict_count: int
    conflicts: list[SkillConflict]


def source_label(record: SkillRecord) -> str:
    """``hub``, ``agent:<name>`` or ``project:<name>@<agent>``."""
    match record.location:
        case SkillLocation.HUB:
            return "hub"
        case SkillLocation.AGENT:
            return f"agent:{record.agent_name or 'unknown'}"
        case SkillLocation.PROJECT:
            suffix = f"@{record.agent_name}" if record.agent_name else ""
            return f"project:{record.project_name or 'unknown'}{suffix}"


def conflict_item(record: SkillRecord) -> ConflictItem:
    return ConflictItem(
        path=record.path,
        skill_name=path_tail(record.path),
        plugin_id=read_plugin_id(Path(record.path)),
        location=record.location,
        source_label=source_label(record),
        agent_name=record.agent_name,
        project_name=record.project_name,
    )


def _sorted_items(items: list[ConflictItem]) -> list[ConflictItem]:
    return sorted(items, key=lambda item: (LOCATION_ORDER[item.location], item.path))


def detect_conflicts(items: list[ConflictItem]) -> list[SkillConflict]:
    """Group items by plugin id and by directory name, case-insensitively.

    A shared directory name only counts when it spans at least two location
    types; nested hub groups may reuse a name.
    """
    by_plugin_id: dict[str, list[ConflictItem]] = {}
    by_skill_name: dict[str, list[ConflictItem]] = {}
    for item in items:
        plugin_key = item.plugin_id.strip().lower()
        if plugin_key:
            by_plugin_id.setdefault(plugin_key, []).append(item)
        name_key = item.skill_name.strip().lower()
        if name_key:
            by_skill_name.setdefault(name_key, []).append(item)

    conflicts: list[SkillConflict] = []
    for group in by_plugin_id.values():
        if len(group) < 2:
            continue
        conflicts.append(
            SkillConflict(
                ConflictType.DUPLICATE_PLUGIN_ID,
                group[0].plugin_id,
                _sorted_items(group),
                PLUGIN_ID_RESOLUTION,
            )
        )

    for group in by_skill_name.values():
        if len(group) < 2 or len({item.location for item in group}) < 2:
            continue
        conflicts.append(
            SkillConflict(
                ConflictType.DUPLICATE_SKILL_NAME,
                group[0].skill_name,
                _sorted_items(group),
                SKILL_NAME_RESOLUTION,
            )
        )

    return sorted(conflicts, key=lambda conflict: (conflict.type.value, conflict.key.lower()))


def collect_conflicts(config: AppConfig) -> ConflictReport:
    items = [conflict_item(record) for record in scan_skills(config)]
    conflicts = detect_conflicts(items)
    return ConflictReport(
        item_count=len(items), conflict_count=len(conflicts), conflicts=conflicts
    )
