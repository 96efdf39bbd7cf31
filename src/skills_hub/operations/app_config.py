"""Agents, registered projects and project scan roots."""

import logging
from pathlib import Path

from skills_hub.errors import ConfigValidationError
from skills_hub.models.config import AgentConfig, AppConfig
from skills_hub.paths import normalize_path

logger = logging.getLogger(__name__)

MAX_PROJECT_SCAN_DEPTH = 5
SKIPPED_PROJECT_DIR_NAMES = frozenset({"node_modules", "dist", "build", "out"})


def is_git_repo_root(directory: Path) -> bool:
    """A .git directory or a .git file (worktrees, submodules) marks a repo root."""
    git_path = directory / ".git"
    return git_path.is_dir() or git_path.is_file()


def is_inside_git_work_tree(path: Path) -> bool:
    if not path.exists():
        return False
    return any(is_git_repo_root(candidate) for candidate in (path, *path.parents))


def update_agent(config: AppConfig, agent: AgentConfig) -> AppConfig:
    """Replace the agent with the same name, or append it.

    Raises:
        ConfigValidationError: If name, global path or project path is blank
    """
    name = agent.name.strip()
    if not name:
        raise ConfigValidationError("Agent name is required.")

    global_path = normalize_path(agent.global_path)
    if global_path == "/":
        raise ConfigValidationError("Agent global path is required.")

    project_path = agent.project_path.strip()
    if not project_path:
        raise ConfigValidationError("Agent project path is required.")

    normalized = AgentConfig(
        name=name,
        global_path=global_path,
        project_path=project_path,
        enabled=agent.enabled,
        is_custom=agent.is_custom,
    )

    agents = list(config.agents)
    for index, existing in enumerate(agents):
        if existing.name == name:
            agents[index] = normalized
            break
    else:
        agents.append(normalized)

    return config.model_copy(update={"agents": agents})


def remove_agent(config: AppConfig, agent_name: str) -> tuple[AppConfig, bool]:
    name = agent_name.strip()
    if not name:
        raise ConfigValidationError("Agent name is required.")

    agents = [agent for agent in config.agents if agent.name != name]
    return config.model_copy(update={"agents": agents}), len(agents) != len(config.agents)


def add_project(config: AppConfig, project_path: str) -> tuple[AppConfig, str]:
    """Register a git work tree as a project.

    Raises:
        ConfigValidationError: If the path is blank or not inside a git work tree
    """
    normalized = normalize_path(project_path)
    if normalized == "/":
        raise ConfigValidationError("Project path is required.")
    if not is_inside_git_work_tree(Path(normalized)):
        raise ConfigValidationError("Only git repositories can be added as projects.")

    return _with_projects(config, [*config.projects, normalized]), normalized


def add_projects(config: AppConfig, project_paths: list[str]) -> tuple[AppConfig, int]:
    """Register several projects, silently skipping invalid or known ones."""
    existing = {normalize_path(entry) for entry in config.projects}
    added: list[str] = []
    for raw in sorted({normalize_path(entry) for entry in project_paths}):
        if raw == "/" or raw in existing or not is_inside_git_work_tree(Path(raw)):
            continue
        added.append(raw)

    if not added:
        return config, 0
    return _with_projects(config, [*config.projects, *added]), len(added)


def remove_project(config: AppConfig, project_path: str) -> tuple[AppConfig, bool]:
    normalized = normalize_path(project_path)
    projects = [entry for entry in config.projects if normalize_path(entry) != normalized]
    return config.model_copy(update={"projects": projects}), len(projects) != len(config.projects)


def add_scan_root(config: AppConfig, root_path: str) -> tuple[AppConfig, str]:
    normalized = normalize_path(root_path)
    if normalized == "/":
        raise ConfigValidationError("Workspace path is required.")

    roots = {normalize_path(entry) for entry in config.scan_roots}
    roots.add(normalized)
    return config.model_copy(update={"scan_roots": sorted(roots)}), normalized


def remove_scan_root(config: AppConfig, root_path: str) -> tuple[AppConfig, bool]:
    normalized = normalize_path(root_path)
    roots = [entry for entry in config.scan_roots if normalize_path(entry) != normalized]
    return config.model_copy(update={"scan_roots": roots}), len(roots) != len(config.scan_roots)


def _with_projects(config: AppConfig, projects: list[str]) -> AppConfig:
    return config.model_copy(update={"projects": sorted(set(projects))})


def scan_projects(config: AppConfig, home: Path) -> list[str]:
    """Find git repository roots under the scan roots that are not registered yet.

    Walks at most five levels deep, skipping hidden and build directories and
    the home directory itself.
    """
    existing = {normalize_path(entry) for entry in config.projects}
    home_normalized = normalize_path(home)
    found: set[str] = set()
    stack = [(Path(normalize_path(root)), 0) for root in config.scan_roots]

    while stack:
        directory, depth = stack.pop()
        if depth > MAX_PROJECT_SCAN_DEPTH or not directory.exists():
            continue

        normalized = normalize_path(directory)
        if normalized == home_normalized:
            continue

        if is_git_repo_root(directory) and normalized not in existing:
            found.add(normalized)

        try:
            entries = list(directory.iterdir())
        except OSError:
            continue

        for entry in entries:
            if entry.name.startswith(".") or entry.name in SKIPPED_PROJECT_DIR_NAMES:
                continue
            if entry.is_dir() or entry.is_symlink():
                stack.append((entry, depth + 1))

    logger.debug("Project scan found %d candidate(s)", len(found))
    return sorted(found)
