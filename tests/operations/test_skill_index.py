"""Tests for skill discovery."""

from pathlib import Path

from skills_hub.models.config import AgentConfig, AppConfig
from skills_hub.models.skill import SkillLocation
from skills_hub.operations.skill_index import collect_skill_dirs, project_skill_parents, scan_skills


def _skill(path: Path, frontmatter: str = "") -> Path:
    path.mkdir(parents=True)
    (path / "SKILL.md").write_text(f"{frontmatter}# {path.name}\n", encoding="utf-8")
    return path


def test_collect_finds_nested_skills_up_to_depth_three(tmp_path: Path) -> None:
    _skill(tmp_path / "a")
    _skill(tmp_path / "group" / "b")
    _skill(tmp_path / "1" / "2" / "3" / "c")
    _skill(tmp_path / "1" / "2" / "3" / "4" / "too-deep")

    found = [path.name for path in collect_skill_dirs(tmp_path)]

    assert sorted(found) == ["a", "b", "c"]


def test_collect_skips_hidden_and_build_directories(tmp_path: Path) -> None:
    _skill(tmp_path / ".hidden" / "x")
    _skill(tmp_path / "node_modules" / "y")
    _skill(tmp_path / "visible")

    assert [path.name for path in collect_skill_dirs(tmp_path)] == ["visible"]


def test_collect_does_not_descend_into_a_skill(tmp_path: Path) -> None:
    outer = _skill(tmp_path / "outer")
    _skill(outer / "inner")

    assert collect_skill_dirs(tmp_path) == [outer]


def test_collect_missing_base_is_empty(tmp_path: Path) -> None:
    assert collect_skill_dirs(tmp_path / "missing") == []


def test_codex_reads_agents_alias_in_projects() -> None:
    codex = AgentConfig(name="Codex", global_path="/g", project_path=".codex/skills")

    assert project_skill_parents("/p", codex) == [
        Path("/p/.codex/skills"),
        Path("/p/.agents/skills"),
    ]


def test_scan_reports_each_location(tmp_path: Path) -> None:
    hub = tmp_path / "hub"
    agent_dir = tmp_path / "agent-global"
    project = tmp_path / "project"
    _skill(hub / "writer", "---\nname: Writer\ndescription: Writes things\n---\n")
    _skill(agent_dir / "linter")
    _skill(project / ".claude" / "skills" / "local")
    config = AppConfig(
        hub_path=str(hub),
        projects=[str(project)],
        agents=[
            AgentConfig(
                name="Claude Code", global_path=str(agent_dir), project_path=".claude/skills"
            ),
            AgentConfig(
                name="Disabled", global_path=str(tmp_path / "off"), project_path=".x", enabled=False
            ),
        ],
    )
    _skill(tmp_path / "off" / "ignored")

    skills = scan_skills(config)

    by_name = {skill.name: skill for skill in skills}
    assert set(by_name) == {"Writer", "linter", "local"}
    assert by_name["Writer"].location == SkillLocation.HUB
    assert by_name["Writer"].description == "Writes things"
    assert by_name["linter"].location == SkillLocation.AGENT
    assert by_name["linter"].agent_name == "Claude Code"
    assert by_name["linter"].description == "linter"
    assert by_name["local"].location == SkillLocation.PROJECT
    assert by_name["local"].project_name == "project"
    assert [skill.path for skill in skills] == sorted(skill.path for skill in skills)


def test_scan_reports_shared_directory_once(tmp_path: Path) -> None:
    """An agent whose global dir is the hub does not duplicate hub skills."""
    hub = tmp_path / "hub"
    _skill(hub / "writer")
    config = AppConfig(
        hub_path=str(hub),
        agents=[AgentConfig(name="Same", global_path=str(hub), project_path=".s")],
    )

    skills = scan_skills(config)

    assert len(skills) == 1
    assert skills[0].location == SkillLocation.HUB
