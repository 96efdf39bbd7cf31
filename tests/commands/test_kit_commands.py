"""CLI tests for kit and skill commands."""

from pathlib import Path

from click.testing import CliRunner

from skills_hub.cli import cli
from skills_hub.context import HubContext


def _context_with_kit(tmp_path: Path) -> tuple[HubContext, str]:
    ctx = HubContext.for_test(home=tmp_path)
    skill = ctx.hub.skill_create("writer", "Writes", "Write well.")
    runner = CliRunner()
    runner.invoke(cli, ["kit", "policy-add", "--name", "rules", "--content", "Be kind.\n"], obj=ctx)
    runner.invoke(cli, ["kit", "loadout-add", "--name", "base", "--skill", skill], obj=ctx)
    policy = ctx.hub.kit_policy_list()[0]
    loadout = ctx.hub.kit_loadout_list()[0]
    runner.invoke(
        cli,
        ["kit", "add", "--name", "starter", "--policy", policy.id, "--loadout", loadout.id],
        obj=ctx,
    )
    return ctx, ctx.hub.kit_list()[0].id


def test_kit_apply_writes_project(tmp_path: Path) -> None:
    runner = CliRunner()
    ctx, kit_id = _context_with_kit(tmp_path)
    project = tmp_path / "project"

    result = runner.invoke(
        cli, ["kit", "apply", kit_id, "--project", str(project), "--agent", "Codex"], obj=ctx
    )

    assert result.exit_code == 0, result.output
    assert (project / "AGENTS.md").read_text(encoding="utf-8") == "Be kind.\n"
    assert (project / ".codex" / "skills" / "writer" / "SKILL.md").exists()
    assert "ok" in result.output


def test_kit_apply_dry_run_writes_nothing(tmp_path: Path) -> None:
    runner = CliRunner()
    ctx, kit_id = _context_with_kit(tmp_path)
    project = tmp_path / "project"

    result = runner.invoke(
        cli,
        ["kit", "apply", kit_id, "--project", str(project), "--agent", "Codex", "--dry-run"],
        obj=ctx,
    )

    assert result.exit_code == 0, result.output
    assert not project.exists()
    assert "write policy file" in result.output
    assert "Dry run summary: total=2 add=2 update=0 delete=0 link=0" in result.output
    assert ctx.hub.snapshot_list() == []


def test_kit_apply_snapshot_rolls_back_project(tmp_path: Path) -> None:
    runner = CliRunner()
    ctx, kit_id = _context_with_kit(tmp_path)
    project = tmp_path / "project"

    applied = runner.invoke(
        cli, ["kit", "apply", kit_id, "--project", str(project), "--agent", "Codex"], obj=ctx
    )
    rolled_back = runner.invoke(cli, ["snapshot", "rollback", "--last"], obj=ctx)

    assert "Snapshot created: snapshot-" in applied.output
    assert rolled_back.exit_code == 0, rolled_back.output
    assert "restored=0 removed=2" in rolled_back.output
    assert not (project / "AGENTS.md").exists()
    assert not (project / ".codex" / "skills" / "writer").exists()


def test_kit_apply_refuses_existing_policy(tmp_path: Path) -> None:
    runner = CliRunner()
    ctx, kit_id = _context_with_kit(tmp_path)
    project = tmp_path / "project"
    project.mkdir()
    (project / "AGENTS.md").write_text("mine\n", encoding="utf-8")
    args = ["kit", "apply", kit_id, "--project", str(project), "--agent", "Codex"]

    refused = runner.invoke(cli, args, obj=ctx)
    forced = runner.invoke(cli, [*args, "--overwrite-policy"], obj=ctx)

    assert refused.exit_code == 1
    assert "AGENTS.md already exists" in refused.output
    assert "--overwrite-policy" in refused.output
    assert forced.exit_code == 0, forced.output
    assert (project / "AGENTS.md").read_text(encoding="utf-8") == "Be kind.\n"


def test_policy_delete_in_use_is_rejected(tmp_path: Path) -> None:
    runner = CliRunner()
    ctx, _ = _context_with_kit(tmp_path)
    policy_id = ctx.hub.kit_policy_list()[0].id

    result = runner.invoke(cli, ["kit", "policy-delete", policy_id], obj=ctx)

    assert result.exit_code == 1
    assert "Policy is used by a kit and cannot be deleted." in result.output


def test_kit_list_shows_last_target(tmp_path: Path) -> None:
    runner = CliRunner()
    ctx, kit_id = _context_with_kit(tmp_path)
    project = tmp_path / "p"
    runner.invoke(
        cli, ["kit", "apply", kit_id, "--project", str(project), "--agent", "Cursor"], obj=ctx
    )

    result = runner.invoke(cli, ["kit", "list"], obj=ctx)

    assert result.exit_code == 0
    assert "starter" in result.output
    assert "(Cursor)" in result.output


def test_skill_create_and_show(tmp_path: Path) -> None:
    runner = CliRunner()
    ctx = HubContext.for_test(home=tmp_path)

    created = runner.invoke(
        cli,
        [
            "skill",
            "create",
            "--name",
            "Code Review",
            "--description",
            "Reviews",
            "--content",
            "Body",
        ],
        obj=ctx,
    )
    skill_path = str(tmp_path / "skills-hub" / "code-review")
    shown = runner.invoke(cli, ["skill", "show", skill_path], obj=ctx)

    assert created.exit_code == 0, created.output
    assert "name: Code Review" in shown.output
    assert "Body" in shown.output


def test_skill_create_duplicate(tmp_path: Path) -> None:
    runner = CliRunner()
    ctx = HubContext.for_test(home=tmp_path)
    args = ["skill", "create", "--name", "dup", "--content", "Body"]

    runner.invoke(cli, args, obj=ctx)
    result = runner.invoke(cli, args, obj=ctx)

    assert result.exit_code == 1
    assert "Error: Skill 'dup' already exists." in result.output


def test_skill_sync_uses_configured_default_mode(tmp_path: Path) -> None:
    runner = CliRunner()
    ctx = HubContext.for_test(home=tmp_path)
    ctx = HubContext.for_test(
        hub=ctx.hub,
        home=tmp_path,
        global_config=ctx.global_config.with_value("default_sync_mode", "link"),
    )
    skill = ctx.hub.skill_create("linked", "", "Body")

    result = runner.invoke(cli, ["skill", "sync", skill, str(tmp_path / "agent")], obj=ctx)

    assert result.exit_code == 0, result.output
    assert (tmp_path / "agent" / "linked").is_symlink()


def test_skill_delete_requires_confirmation(tmp_path: Path) -> None:
    runner = CliRunner()
    ctx = HubContext.for_test(home=tmp_path)
    skill = ctx.hub.skill_create("gone", "", "Body")

    aborted = runner.invoke(cli, ["skill", "delete", skill], input="n\n", obj=ctx)
    forced = runner.invoke(cli, ["skill", "delete", skill, "--force"], obj=ctx)

    assert aborted.exit_code == 1
    assert forced.exit_code == 0
    assert not Path(skill).exists()
