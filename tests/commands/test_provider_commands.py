"""CLI tests for provider and universal commands."""

import json
from pathlib import Path

from click.testing import CliRunner

from skills_hub.cli import cli
from skills_hub.context import HubContext
from skills_hub.models.app_type import AppType


def test_add_and_list_providers(tmp_path: Path) -> None:
    runner = CliRunner()
    ctx = HubContext.for_test(home=tmp_path)

    result = runner.invoke(
        cli,
        ["provider", "add", "claude", "--name", "Work", "--config", '{"env": {"K": "v"}}'],
        obj=ctx,
    )

    assert result.exit_code == 0, result.output
    assert "(current)" in result.output

    provider_id = ctx.hub.provider_list()[0].id
    result = runner.invoke(cli, ["provider", "list"], obj=ctx)

    assert result.exit_code == 0
    assert provider_id in result.output
    assert "Work" in result.output


def test_list_without_providers(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["provider", "list"], obj=HubContext.for_test(home=tmp_path))

    assert result.exit_code == 0
    assert "No providers" in result.output


def test_show_masks_secrets_unless_raw(tmp_path: Path) -> None:
    runner = CliRunner()
    ctx = HubContext.for_test(home=tmp_path)
    record = ctx.hub.provider_add(
        AppType.CLAUDE, "Work", {"env": {"ANTHROPIC_API_KEY": "sk-ant-0123456789"}}
    )

    masked = runner.invoke(cli, ["provider", "show", record.id], obj=ctx)
    raw = runner.invoke(cli, ["provider", "show", record.id, "--raw"], obj=ctx)

    assert masked.exit_code == 0
    assert json.loads(masked.output)["config"]["env"]["ANTHROPIC_API_KEY"] == "sk-a****89"
    assert json.loads(raw.output)["config"]["env"]["ANTHROPIC_API_KEY"] == "sk-ant-0123456789"


def test_switch_and_restore(tmp_path: Path) -> None:
    runner = CliRunner()
    ctx = HubContext.for_test(home=tmp_path)
    first = ctx.hub.provider_add(AppType.CODEX, "first", {"auth": {"OPENAI_API_KEY": "1"}})
    second = ctx.hub.provider_add(AppType.CODEX, "second", {"auth": {"OPENAI_API_KEY": "2"}})

    result = runner.invoke(cli, ["provider", "switch", "codex", second.id], obj=ctx)

    assert result.exit_code == 0, result.output
    assert f"{first.id} -> {second.id}" in result.output

    result = runner.invoke(cli, ["provider", "restore", "codex"], obj=ctx)

    assert result.exit_code == 0, result.output
    current = ctx.hub.provider_current(AppType.CODEX)
    assert current is not None and current.id == first.id


def test_switch_unknown_provider_reports_error(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli, ["provider", "switch", "claude", "nope"], obj=HubContext.for_test(home=tmp_path)
    )

    assert result.exit_code == 1
    assert "Error: Target provider does not exist for this app." in result.output


def test_restore_without_backup_reports_error(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli, ["provider", "restore", "gemini"], obj=HubContext.for_test(home=tmp_path)
    )

    assert result.exit_code == 1
    assert "Error: No backup found for this app." in result.output


def test_add_rejects_invalid_json(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli,
        ["provider", "add", "claude", "--config", "{nope"],
        obj=HubContext.for_test(home=tmp_path),
    )

    assert result.exit_code == 1
    assert "Error: Invalid JSON for --config" in result.output


def test_unknown_app_type_is_usage_error(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli, ["provider", "current", "cursor"], obj=HubContext.for_test(home=tmp_path)
    )

    assert result.exit_code == 2


def test_capture_stores_official_provider(tmp_path: Path) -> None:
    runner = CliRunner()
    ctx = HubContext.for_test(home=tmp_path)

    result = runner.invoke(cli, ["provider", "capture", "gemini", "--name", "Login"], obj=ctx)

    assert result.exit_code == 0, result.output
    record = ctx.hub.provider_list(AppType.GEMINI)[0]
    assert record.name == "Login"
    assert record.profile == {"kind": "official"}
    assert not record.is_current


def test_universal_add_and_apply(tmp_path: Path) -> None:
    runner = CliRunner()
    ctx = HubContext.for_test(home=tmp_path)

    result = runner.invoke(
        cli,
        [
            "universal",
            "add",
            "--name",
            "relay",
            "--base-url",
            "https://relay.test",
            "--api-key",
            "sk-relay-secret",
            "--disable-app",
            "gemini",
            "--model",
            "claude=opus",
        ],
        obj=ctx,
    )
    assert result.exit_code == 0, result.output
    universal = ctx.hub.universal_provider_list()[0]
    assert universal.models.model_for(AppType.CLAUDE) == "opus"

    listed = runner.invoke(cli, ["universal", "list"], obj=ctx)
    assert "sk-****" in listed.output
    assert "sk-relay-secret" not in listed.output

    applied = runner.invoke(cli, ["universal", "apply", universal.id], obj=ctx)
    assert applied.exit_code == 0, applied.output
    assert {p.app_type for p in ctx.hub.provider_list()} == {AppType.CLAUDE, AppType.CODEX}


def test_universal_bad_model_flag(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli,
        ["universal", "add", "--name", "r", "--base-url", "u", "--api-key", "k", "--model", "x"],
        obj=HubContext.for_test(home=tmp_path),
    )

    assert result.exit_code == 1
    assert "Expected APP=MODEL" in result.output
