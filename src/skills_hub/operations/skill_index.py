"""Skill discovery across the hub, agent directories and projects."""

from pathlib import Path

from skills_hub.io.skill_document import read_skill_summary
from skills_hub.models.config import AgentConfig, AppConfig
from skills_hub.models.skill import SKILL_MARKER, SkillLocation, SkillRecord
from skills_hub.paths import normalize_path, path_tail

MAX_SCAN_DEPTH = 3
SKIPPED_DIR_NAMES = frozenset({"node_modules", "dist", "build", "target", "__pycache__"})
CODEX_PROJECT_ALIAS = ".agents/skills"


def _should_skip(name: str) -> bool:
    return name.startswith(".") or name in SKIPPED_DIR_NAMES


def _scan_dir(base_path: Path, depth: int, output: list[Path]) -> None:
    if depth > MAX_SCAN_DEPTH:
        return

    try:
        entries = sorted(base_path.iterdir())
    except OSError:
        return

    for entry in entries:
        if _should_skip(entry.name):
            continue
        if not (entry.is_dir() or entry.is_symlink()):
            continue

        if (entry / SKILL_MARKER).exists():
            output.append(entry)
            continue

        _scan_dir(entry, depth + 1, output)


def collect_skill_dirs(base_path: Path) -> list[Path]:
    """Directories under base_path (max depth 3) that contain SKILL.md."""
    if not base_path.exists():
        return []
    result: list[Path] = []
    _scan_dir(base_path, 0, result)
    return result


def project_skill_parents(project_path: str, agent: AgentConfig) -> list[Path]:
    """Project directories where an agent looks for skills.

    Codex also reads ``.agents/skills`` in project roots.
    """
    relative_paths = [agent.project_path.strip()]
    if agent.name.lower() == "codex":
        relative_paths.append(CODEX_PROJECT_ALIAS)

    parents: list[Path] = []
    for relative_path in dict.fromkeys(relative_paths):
        parents.append(Path(project_path) / relative_path)
    return parents


def scan_skills(config: AppConfig) -> list[SkillRecord]:
    """Index every skill reachable from the app config, sorted by path.

    A skill reachable from several locations is reported once, under the
    first location scanned (hub, then agent, then project).
    """
    active_agents = [agent for agent in config.agents if agent.enabled]
    skills: dict[str, SkillRecord] = {}

    def push(
        path: Path,
        location: SkillLocation,
        agent_name: str | None = None,
        project_name: str | None = None,
    ) -> None:
        normalized = normalize_path(path)
        if normalized in skills:
            return
        name, description = read_skill_summary(Path(normalized))
        skills[normalized] = SkillRecord(
            id=normalized,
            name=name,
            description=description,
            path=normalized,
            location=location,
            agent_name=agent_name,
            project_name=project_name,
        )

    for path in collect_skill_dirs(Path(config.hub_path)):
        push(path, SkillLocation.HUB)

    for agent in active_agents:
        for path in collect_skill_dirs(Path(agent.global_path)):
            push(path, SkillLocation.AGENT, agent_name=agent.name)

    for project_path in config.projects:
        project_name = path_tail(project_path)
        for agent in active_agents:
            for parent in project_skill_parents(project_path, agent):
                for path in collect_skill_dirs(parent):
                    push(path, SkillLocation.PROJECT, agent.name, project_name)

    return sorted(skills.values(), key=lambda skill: skill.path)
