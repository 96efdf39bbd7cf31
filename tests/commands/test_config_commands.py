"""CLI tests for config, project and agent commands."""

from pathlib import Path

from click.testing import CliRunner

from skills_hub.cli import cli
from skills_hub.context import HubContext
from skills_hub.models.kit import SyncMode


def test_config_set_saves_value() -> None:
    runner = CliRunner()
    ctx = HubContext.for_test()

    result = runner.invoke(cli, ["config", "set", "default_sync_mode", "link"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert ctx.global_config_ops.load().default_sync_mode == SyncMode.LINK


def test_config_set_rejects_bad_value() -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli, ["config", "set", "lock_timeout_seconds", "soon"], obj=HubContext.for_test()
    )

    assert result.exit_code == 1
    assert "lock_timeout_seconds must be a number" in result.output


def test_config_show() -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["config", "show"], obj=HubContext.for_test())

    assert result.exit_code == 0
    assert "default_sync_mode=copy" in result.output
    assert "snapshot_retention=20" in result.output
    assert "hub_path=/fake/home/skills-hub" in result.output


def test_config_set_snapshot_retention() -> None:
    runner = CliRunner()
    ctx = HubContext.for_test()

    saved = runner.invoke(cli, ["config", "set", "snapshot_retention", "5"], obj=ctx)
    rejected = runner.invoke(cli, ["config", "set", "snapshot_retention", "0"], obj=ctx)

    assert saved.exit_code == 0, saved.output
    assert ctx.global_config_ops.load().snapshot_retention == 5
    assert rejected.exit_code == 1
    assert "snapshot_retention must be a positive integer" in rejected.output


def test_project_add_requires_git_repo(tmp_path: Path) -> None:
    runner = CliRunner()
    ctx = HubContext.for_test(home=tmp_path)
    (tmp_path / "plain").mkdir()

    result = runner.invoke(cli, ["project", "add", str(tmp_path / "plain")], obj=ctx)

    assert result.exit_code == 1
    assert "Only git repositories can be added as projects." in result.output


def test_project_scan_and_add(tmp_path: Path) -> None:
    runner = CliRunner()
    ctx = HubContext.for_test(home=tmp_path / "home")
    repo = tmp_path / "code" / "app"
    (repo / ".git").mkdir(parents=True)

    runner.invoke(cli, ["project", "scan-root-add", str(tmp_path / "code")], obj=ctx)
    result = runner.invoke(cli, ["project", "scan", "--add"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert str(repo) in result.output
    assert ctx.hub.config_get().projects == [str(repo)]


def test_agent_set_adds_custom_agent() -> None:
    runner = CliRunner()
    ctx = HubContext.for_test()

    result = runner.invoke(
        cli, ["agent", "set", "Mine", "--global-path", "/fake/home/.mine/skills"], obj=ctx
    )

    assert result.exit_code == 0, result.output
    agent = ctx.hub.config_get().find_agent("Mine")
    assert agent is not None
    assert agent.is_custom
    assert agent.project_path == ".agent/skills"


def test_agent_set_disables_existing_agent() -> None:
    runner = CliRunner()
    ctx = HubContext.for_test()

    result = runner.invoke(cli, ["agent", "set", "Cursor", "--disable"], obj=ctx)

    assert result.exit_code == 0, result.output
    agent = ctx.hub.config_get().find_agent("Cursor")
    assert agent is not None and not agent.enabled


def test_no_subcommand_prints_help() -> None:
    runner = CliRunner()

    result = runner.invoke(cli, [], obj=HubContext.for_test())

    assert result.exit_code == 0
    assert "provider" in result.output
