"""SKILL.md parsing and rendering."""

from pathlib import Path
from typing import Any

import frontmatter
import yaml

from skills_hub.models.skill import SKILL_MARKER, SkillDocument
from skills_hub.paths import path_tail

MAX_DESCRIPTION_LENGTH = 200


def _metadata_value_to_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, list):
        parts = [_metadata_value_to_str(item) for item in value]
        return ", ".join(part for part in parts if part)
    if isinstance(value, dict):
        return yaml.safe_dump(value, default_flow_style=False, sort_keys=False).strip()
    return str(value)


def parse_skill_document(raw: str) -> SkillDocument:
    """Split SKILL.md content into string metadata and markdown body.

    Content whose frontmatter is not valid YAML is returned whole as the body.
    """
    # Gracefully handle YAML parsing errors (third-party API exception handling)
    try:
        post = frontmatter.loads(raw.replace("\r\n", "\n"))
    except (yaml.YAMLError, ValueError):
        return SkillDocument(metadata={}, content=raw)

    metadata: dict[str, str] = {}
    for key, value in post.metadata.items():
        if not isinstance(key, str) or not key.strip():
            continue
        metadata[key.strip()] = _metadata_value_to_str(value)

    return SkillDocument(metadata=metadata, content=post.content)


def infer_description(markdown: str) -> str:
    """First non-empty line with leading ``#`` removed."""
    for line in markdown.splitlines():
        trimmed = line.strip()
        if trimmed:
            return trimmed.lstrip("#").strip()
    return ""


def read_skill_summary(skill_dir: Path) -> tuple[str, str]:
    """Return (name, description) for a skill directory.

    Falls back to the directory name and the first body line when the
    frontmatter has no usable name or description.
    """
    fallback_name = path_tail(skill_dir)
    try:
        content = (skill_dir / SKILL_MARKER).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return fallback_name, "Error parsing SKILL.md"

    document = parse_skill_document(content)
    name = document.metadata.get("name", "").strip() or fallback_name
    description = document.metadata.get("description", "").strip() or infer_description(
        document.content
    )
    return name, description[:MAX_DESCRIPTION_LENGTH]


def render_skill_document(name: str, description: str, content: str) -> str:
    """Prefix markdown content with a name/description frontmatter block.

    Content that already starts with a frontmatter fence is returned unchanged.
    """
    if content.lstrip().startswith("---"):
        return content

    fm_yaml = yaml.safe_dump(
        {"name": name.strip(), "description": description.strip().replace("\n", " ")},
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )
    return f"---\n{fm_yaml}---\n\n{content}\n"


PLUGIN_ID_KEYS = ("plugin_id", "pluginId", "plugin-id", "plugin", "id")


def read_plugin_id(skill_dir: Path) -> str:
    """First non-empty plugin id key in the SKILL.md frontmatter, or ""."""
    try:
        content = (skill_dir / SKILL_MARKER).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return ""

    metadata = parse_skill_document(content).metadata
    for key in PLUGIN_ID_KEYS:
        value = metadata.get(key, "").strip()
        if value:
            return value
    return ""
