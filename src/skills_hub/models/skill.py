"""Skill index entries and parsed skill documents."""

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict

SKILL_MARKER = "SKILL.md"


class SkillLocation(str, Enum):
    HUB = "hub"
    AGENT = "agent"
    PROJECT = "project"


class SkillRecord(BaseModel):
    """A skill found by scanning. Derived from the filesystem, never edited."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    path: str
    location: SkillLocation
    agent_name: str | None = None
    project_name: str | None = None


@dataclass(frozen=True)
class SkillDocument:
    """SKILL.md split into frontmatter metadata and markdown body."""

    metadata: dict[str, str] = field(default_factory=dict)
    content: str = ""
