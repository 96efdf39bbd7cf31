"""Agent definitions and the app configuration stored in the hub state."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from skills_hub.paths import join_home_path

DEFAULT_AGENT_PROJECT_PATH = ".agent/skills"


class AgentConfig(BaseModel):
    """An agent whose skills live in a global and a project-relative directory."""

    model_config = ConfigDict(frozen=True)

    name: str
    global_path: str
    project_path: str
    enabled: bool = True
    is_custom: bool = False


class AppConfig(BaseModel):
    """Hub location, agents, registered projects and project scan roots."""

    model_config = ConfigDict(frozen=True)

    hub_path: str
    projects: list[str] = Field(default_factory=list)
    scan_roots: list[str] = Field(default_factory=list)
    agents: list[AgentConfig] = Field(default_factory=list)

    def find_agent(self, name: str) -> AgentConfig | None:
        for agent in self.agents:
            if agent.name == name:
                return agent
        return None


def default_agents(home: Path) -> list[AgentConfig]:
    """Agents known out of the box."""
    return [
        AgentConfig(
            name="Antigravity",
            global_path=join_home_path(home, ".gemini/antigravity/skills"),
            project_path=DEFAULT_AGENT_PROJECT_PATH,
        ),
        AgentConfig(
            name="Claude Code",
            global_path=join_home_path(home, ".claude/skills"),
            project_path=".claude/skills",
        ),
        AgentConfig(
            name="Cursor",
            global_path=join_home_path(home, ".cursor/skills"),
            project_path=".cursor/skills",
        ),
        AgentConfig(
            name="Codex",
            global_path=join_home_path(home, ".codex/skills"),
            project_path=".codex/skills",
        ),
        AgentConfig(
            name="Gemini CLI",
            global_path=join_home_path(home, ".gemini/skills"),
            project_path=".gemini/skills",
            enabled=False,
        ),
    ]


def default_app_config(home: Path) -> AppConfig:
    return AppConfig(
        hub_path=join_home_path(home, "skills-hub"),
        agents=default_agents(home),
    )
