"""Tests for skill creation, deletion and content lookup."""

from pathlib import Path

import pytest

from skills_hub.errors import AlreadyExistsError, ConfigValidationError, NotFoundError
from skills_hub.operations.skills import (
    create_skill,
    delete_skill,
    read_skill_content,
    sanitize_skill_name,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Code Review", "code-review"),
        ("  spaced  out  ", "spaced-out"),
        ("snake_case-ok", "snake_case-ok"),
        ("Ünïcode!!", "n-code"),
        ("***", "imported-skill"),
    ],
)
def test_sanitize_skill_name(raw: str, expected: str) -> None:
    assert sanitize_skill_name(raw) == expected


def test_create_writes_frontmatter(tmp_path: Path) -> None:
    target = create_skill(tmp_path, "Code Review", "Reviews diffs", "Check every line.")

    assert target == tmp_path / "code-review"
    document = read_skill_content(str(target))
    assert document.metadata == {"name": "Code Review", "description": "Reviews diffs"}
    assert document.content == "Check every line."


def test_create_keeps_existing_frontmatter(tmp_path: Path) -> None:
    content = "---\nname: custom\n---\nBody\n"

    target = create_skill(tmp_path, "x", "ignored", content)

    assert (target / "SKILL.md").read_text(encoding="utf-8") == content


def test_create_existing_skill_raises(tmp_path: Path) -> None:
    create_skill(tmp_path, "review", "", "body")

    with pytest.raises(AlreadyExistsError, match="Skill 'review' already exists."):
        create_skill(tmp_path, "Review", "", "other body")


def test_create_requires_name_and_content(tmp_path: Path) -> None:
    with pytest.raises(ConfigValidationError, match="Name is required."):
        create_skill(tmp_path, " ", "", "body")
    with pytest.raises(ConfigValidationError, match="Content is required."):
        create_skill(tmp_path, "name", "", "  ")


def test_read_missing_skill_raises(tmp_path: Path) -> None:
    with pytest.raises(NotFoundError, match="Skill not found"):
        read_skill_content(str(tmp_path / "nothing"))


def test_delete_removes_directory(tmp_path: Path) -> None:
    target = create_skill(tmp_path, "review", "", "body")

    delete_skill(str(target))

    assert not target.exists()


def test_delete_removes_symlinked_skill_only(tmp_path: Path) -> None:
    target = create_skill(tmp_path / "hub", "review", "", "body")
    link = tmp_path / "agent" / "review"
    link.parent.mkdir()
    link.symlink_to(target, target_is_directory=True)

    delete_skill(str(link))

    assert not link.is_symlink()
    assert (target / "SKILL.md").exists()


@pytest.mark.parametrize("blank", ["", "   ", "/"])
def test_delete_blank_path_is_rejected(blank: str) -> None:
    with pytest.raises(ConfigValidationError, match="Skill path is required."):
        delete_skill(blank)


def test_delete_refuses_directory_without_skill_marker(tmp_path: Path) -> None:
    plain = tmp_path / "documents"
    plain.mkdir()
    (plain / "notes.txt").write_text("keep me\n", encoding="utf-8")

    with pytest.raises(NotFoundError, match="Not a skill directory"):
        delete_skill(str(plain))

    assert (plain / "notes.txt").exists()


def test_delete_missing_path_raises(tmp_path: Path) -> None:
    with pytest.raises(NotFoundError, match="Skill not found"):
        delete_skill(str(tmp_path / "nothing"))
