"""Skill creation, deletion and content lookup in the hub."""

import logging
from pathlib import Path

from skills_hub.errors import AlreadyExistsError, ConfigValidationError, HubIOError, NotFoundError
from skills_hub.io.skill_document import parse_skill_document, render_skill_document
from skills_hub.models.skill import SKILL_MARKER, SkillDocument
from skills_hub.operations.skill_sync import path_exists_or_symlink, remove_path
from skills_hub.paths import normalize_path

logger = logging.getLogger(__name__)

FALLBACK_SKILL_NAME = "imported-skill"


def sanitize_skill_name(raw: str) -> str:
    """Turn a display name into a directory name.

    Lowercase ASCII letters, digits, ``_`` and ``-`` are kept; every run of
    other characters becomes a single ``-``.
    """
    characters: list[str] = []
    previous_dash = False
    for character in raw.strip().lower():
        if (character.isascii() and character.isalnum()) or character in "_-":
            characters.append(character)
            previous_dash = False
            continue
        if not previous_dash:
            characters.append("-")
            previous_dash = True

    value = "".join(characters).strip("-")
    return value or FALLBACK_SKILL_NAME


def create_skill(hub_path: Path, name: str, description: str, content: str) -> Path:
    """Create ``<hub>/<sanitized name>/SKILL.md``.

    Raises:
        ConfigValidationError: If name or content is blank
        AlreadyExistsError: If the skill directory already exists
    """
    if not name.strip():
        raise ConfigValidationError("Name is required.")
    if not content.strip():
        raise ConfigValidationError("Content is required.")

    safe_name = sanitize_skill_name(name)
    target_path = hub_path / safe_name
    if path_exists_or_symlink(target_path):
        raise AlreadyExistsError(
            f"Skill '{safe_name}' already exists.", normalize_path(target_path)
        )

    skill_md_path = target_path / SKILL_MARKER
    try:
        target_path.mkdir(parents=True)
        skill_md_path.write_text(
            render_skill_document(name, description, content), encoding="utf-8"
        )
    except OSError as e:
        raise HubIOError(f"Failed to write {skill_md_path}", skill_md_path, e) from e

    logger.debug("Created skill %s", target_path)
    return target_path


def delete_skill(path: str) -> str:
    """Remove a skill directory (or the symlink pointing at it).

    Raises:
        ConfigValidationError: If path is blank
        NotFoundError: If path is neither a symlink nor a directory holding SKILL.md
    """
    normalized = normalize_path(path)
    if normalized == "/":
        raise ConfigValidationError("Skill path is required.")

    target = Path(normalized)
    if not target.is_symlink():
        if not path_exists_or_symlink(target):
            raise NotFoundError(f"Skill not found: {normalized}")
        if not (target / SKILL_MARKER).is_file():
            raise NotFoundError(f"Not a skill directory ({SKILL_MARKER} missing): {normalized}")

    remove_path(target)
    logger.debug("Deleted skill %s", normalized)
    return normalized


def read_skill_content(path: str) -> SkillDocument:
    """Parse the SKILL.md of a skill directory.

    Raises:
        NotFoundError: If the directory has no SKILL.md
    """
    normalized = normalize_path(path)
    skill_md_path = Path(normalized) / SKILL_MARKER
    if not skill_md_path.exists():
        raise NotFoundError(f"Skill not found: {normalized}")

    try:
        raw_content = skill_md_path.read_text(encoding="utf-8")
    except OSError as e:
        raise HubIOError(f"Failed to read {skill_md_path}", skill_md_path, e) from e
    return parse_skill_document(raw_content)
