"""Tests for duplicate plugin id and skill name detection."""

from pathlib import Path

from skills_hub.models.config import AgentConfig, AppConfig
from skills_hub.models.skill import SkillLocation
from skills_hub.operations.skill_conflicts import (
    ConflictItem,
    ConflictType,
    collect_conflicts,
    detect_conflicts,
)


def _skill(path: Path, frontmatter: str = "") -> Path:
    path.mkdir(parents=True)
    (path / "SKILL.md").write_text(f"{frontmatter}# {path.name}\n", encoding="utf-8")
    return path


def _config(tmp_path: Path, projects: list[str] | None = None) -> AppConfig:
    return AppConfig(
        hub_path=str(tmp_path / "hub"),
        projects=projects or [],
        agents=[
            AgentConfig(
                name="Codex",
                global_path=str(tmp_path / "codex-global"),
                project_path=".codex/skills",
            )
        ],
    )


def _item(path: str, location: SkillLocation, plugin_id: str = "") -> ConflictItem:
    return ConflictItem(
        path=path,
        skill_name=path.rsplit("/", 1)[-1],
        plugin_id=plugin_id,
        location=location,
        source_label=location.value,
    )


def test_duplicate_plugin_id_across_hub_and_agent(tmp_path: Path) -> None:
    _skill(tmp_path / "hub" / "writer", "---\nplugin_id: acme.writer\n---\n")
    _skill(tmp_path / "codex-global" / "scribe", "---\npluginId: ACME.writer\n---\n")

    report = collect_conflicts(_config(tmp_path))

    assert report.item_count == 2
    assert report.conflict_count == 1
    conflict = report.conflicts[0]
    assert conflict.type == ConflictType.DUPLICATE_PLUGIN_ID
    assert [item.source_label for item in conflict.items] == ["hub", "agent:Codex"]
    assert "disable/remove duplicate sources" in conflict.resolution


def test_same_name_in_hub_and_project_is_a_conflict(tmp_path: Path) -> None:
    project = tmp_path / "app"
    _skill(tmp_path / "hub" / "Linter")
    _skill(project / ".codex" / "skills" / "linter")

    report = collect_conflicts(_config(tmp_path, projects=[str(project)]))

    assert [(c.type, c.key) for c in report.conflicts] == [
        (ConflictType.DUPLICATE_SKILL_NAME, "Linter")
    ]
    assert [item.source_label for item in report.conflicts[0].items] == [
        "hub",
        "project:app@Codex",
    ]


def test_nested_hub_groups_may_reuse_a_name(tmp_path: Path) -> None:
    _skill(tmp_path / "hub" / "team-a" / "review")
    _skill(tmp_path / "hub" / "team-b" / "review")

    report = collect_conflicts(_config(tmp_path))

    assert report.item_count == 2
    assert report.conflicts == []


def test_no_skills_no_conflicts(tmp_path: Path) -> None:
    report = collect_conflicts(_config(tmp_path))

    assert report.item_count == 0
    assert report.conflict_count == 0


def test_conflicts_sorted_by_type_then_key() -> None:
    items = [
        _item("/hub/zeta", SkillLocation.HUB, plugin_id="p"),
        _item("/agent/zeta", SkillLocation.AGENT),
        _item("/hub/alpha", SkillLocation.HUB),
        _item("/project/alpha", SkillLocation.PROJECT, plugin_id="p"),
    ]

    conflicts = detect_conflicts(items)

    assert [(c.type, c.key.lower()) for c in conflicts] == [
        (ConflictType.DUPLICATE_PLUGIN_ID, "p"),
        (ConflictType.DUPLICATE_SKILL_NAME, "alpha"),
        (ConflictType.DUPLICATE_SKILL_NAME, "zeta"),
    ]
    assert [item.path for item in conflicts[0].items] == ["/hub/zeta", "/project/alpha"]
