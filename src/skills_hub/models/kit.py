"""Kit policies, loadouts, kits and apply results."""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from skills_hub.errors import ConfigValidationError

POLICY_FILENAME = "AGENTS.md"


class SyncMode(str, Enum):
    """How a skill directory is materialized at its destination."""

    COPY = "copy"
    LINK = "link"

    @classmethod
    def parse(cls, raw: str) -> "SyncMode":
        for mode in cls:
            if mode.value == raw:
                return mode
        raise ConfigValidationError(f"Unsupported sync mode: {raw}")


class ApplyStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"


class KitPolicyRecord(BaseModel):
    """Free-form policy text written to AGENTS.md at a project root."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str | None = None
    content: str
    created_at: int
    updated_at: int


class KitLoadoutItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    skill_path: str
    mode: SyncMode = SyncMode.COPY
    sort_order: int = 0


class KitLoadoutRecord(BaseModel):
    """An ordered list of skills to materialize together."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str | None = None
    items: list[KitLoadoutItem] = Field(default_factory=list)
    created_at: int
    updated_at: int


class KitApplyTarget(BaseModel):
    model_config = ConfigDict(frozen=True)

    project_path: str
    agent_name: str


class KitRecord(BaseModel):
    """Binds one policy and one loadout."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str | None = None
    policy_id: str
    loadout_id: str
    last_applied_at: int | None = None
    last_applied_target: KitApplyTarget | None = None
    created_at: int
    updated_at: int


@dataclass(frozen=True)
class KitApplySkillResult:
    """Outcome of materializing a single loadout item."""

    skill_path: str
    mode: SyncMode
    destination: str
    status: ApplyStatus
    error: str | None = None


@dataclass(frozen=True)
class KitApplyResult:
    kit_id: str
    kit_name: str
    policy_path: str
    project_path: str
    agent_name: str
    applied_at: int
    overwrote_policy: bool
    loadout_results: list[KitApplySkillResult]
