"""Tests for the cck command line."""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from claude_config_kit.cli import app

WriteJson = Callable[[Path, Any], Path]
ReadJson = Callable[[Path], Any]


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def source_project(
    home_dir: Path,
    temp_project_dir: Path,
    write_json: WriteJson,
    sample_settings: dict,
    sample_mcp_servers: dict,
) -> Path:
    """Project with shared settings, local settings and two MCP servers."""
    write_json(temp_project_dir / ".claude" / "settings.json", sample_settings)
    write_json(
        temp_project_dir / ".claude" / "settings.local.json",
        {"env": {"NODE_ENV": "test", "API_KEY": "k"}},
    )
    write_json(temp_project_dir / ".mcp.json", sample_mcp_servers)
    return temp_project_dir


@pytest.fixture
def target_project(tmp_path: Path) -> Path:
    """Empty project to import into."""
    target = tmp_path / "target"
    target.mkdir()
    return target


def test_version(cli_runner: CliRunner) -> None:
    """Test version command."""
    result = cli_runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert "claude-config-kit" in result.stdout


# =============================================================================
# effective
# =============================================================================


def test_effective_json(
    cli_runner: CliRunner, source_project: Path, home_dir: Path, write_json: WriteJson
) -> None:
    """Test effective --json reports values with their source scopes."""
    write_json(
        home_dir / ".claude" / "settings.json",
        {"permissions": {"allow": ["Read(src/**)", "WebSearch"]}, "env": {"NODE_ENV": "global"}},
    )

    result = cli_runner.invoke(app, ["effective", str(source_project), "--json"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["permissions"]["allow"] == [
        {"value": "Read(src/**)", "source": "global"},
        {"value": "WebSearch", "source": "global"},
        {"value": "Bash(npm run *)", "source": "projectShared"},
    ]
    assert data["env"]["NODE_ENV"] == {
        "value": "test",
        "source": "projectLocal",
        "overridden": [
            {"value": "global", "source": "global"},
            {"value": "development", "source": "projectShared"},
        ],
    }
    assert data["disallowedTools"] == [{"value": "WebFetch", "source": "projectShared"}]
    assert data["attribution"]["source"] == "projectShared"


def test_effective_table(cli_runner: CliRunner, source_project: Path) -> None:
    """Test the default rich output lists rules and env vars."""
    result = cli_runner.invoke(app, ["effective", str(source_project)])

    assert result.exit_code == 0
    assert "Bash(npm run *)" in result.stdout
    assert "NODE_ENV" in result.stdout


def test_effective_empty_project(
    cli_runner: CliRunner, home_dir: Path, target_project: Path
) -> None:
    """Test a project without configuration is reported as such."""
    result = cli_runner.invoke(app, ["effective", str(target_project)])

    assert result.exit_code == 0
    assert "No configuration found" in result.stdout


def test_effective_missing_project(cli_runner: CliRunner, home_dir: Path, tmp_path: Path) -> None:
    """Test a missing project directory fails."""
    result = cli_runner.invoke(app, ["effective", str(tmp_path / "nope")])

    assert result.exit_code == 1


def test_effective_malformed_settings(
    cli_runner: CliRunner, home_dir: Path, target_project: Path
) -> None:
    """Test a corrupt settings file fails without a traceback."""
    (target_project / ".claude").mkdir()
    (target_project / ".claude" / "settings.json").write_text("{oops", encoding="utf-8")

    result = cli_runner.invoke(app, ["effective", str(target_project)])

    assert result.exit_code == 1
    assert not isinstance(result.exception, json.JSONDecodeError)


def test_effective_non_utf8_settings(
    cli_runner: CliRunner, home_dir: Path, target_project: Path
) -> None:
    """Test undecodable local settings fail without a traceback."""
    (target_project / ".claude").mkdir()
    (target_project / ".claude" / "settings.local.json").write_bytes(b"\xff{}")

    result = cli_runner.invoke(app, ["effective", str(target_project)])

    assert result.exit_code == 1
    assert not isinstance(result.exception, UnicodeDecodeError)


def test_effective_ignores_unusual_mcp_entries(
    cli_runner: CliRunner, home_dir: Path, target_project: Path, write_json: WriteJson
) -> None:
    """Test an MCP entry without command or url does not break effective settings."""
    write_json(target_project / ".claude" / "settings.json", {"env": {"A": "1"}})
    write_json(target_project / ".mcp.json", {"mcpServers": {"odd": {"type": "stdio"}}})

    result = cli_runner.invoke(app, ["effective", str(target_project), "--json"])

    assert result.exit_code == 0
    assert json.loads(result.stdout)["env"]["A"]["value"] == "1"


# =============================================================================
# export / import
# =============================================================================


def test_export_defaults(
    cli_runner: CliRunner, source_project: Path, tmp_path: Path, read_json: ReadJson
) -> None:
    """Test export writes settings and redacted MCP servers by default."""
    output = tmp_path / "team"

    result = cli_runner.invoke(app, ["export", str(output), "--project", str(source_project)])

    assert result.exit_code == 0
    bundle = read_json(tmp_path / "team.claudeconfig")
    assert bundle["version"] == 1
    assert bundle["projectName"] == source_project.name
    assert "localSettings" not in bundle
    github = bundle["mcpServers"]["mcpServers"]["github"]
    assert github["env"]["GITHUB_TOKEN"] == "<YOUR_GITHUB_TOKEN>"


def test_export_components_without_redaction(
    cli_runner: CliRunner, source_project: Path, tmp_path: Path, read_json: ReadJson
) -> None:
    """Test explicit components and --no-redact."""
    output = tmp_path / "all.claudeconfig"

    result = cli_runner.invoke(
        app,
        [
            "export",
            str(output),
            "-p",
            str(source_project),
            "-c",
            "local-settings",
            "-c",
            "mcp-servers",
            "--no-redact",
        ],
    )

    assert result.exit_code == 0
    bundle = read_json(output)
    assert "settings" not in bundle
    assert bundle["localSettings"]["env"]["API_KEY"] == "k"
    assert bundle["mcpServers"]["mcpServers"]["github"]["env"]["GITHUB_TOKEN"] == "ghp_secret"


def test_export_unknown_component(
    cli_runner: CliRunner, source_project: Path, tmp_path: Path
) -> None:
    """Test an unknown component name fails."""
    result = cli_runner.invoke(
        app, ["export", str(tmp_path / "x.claudeconfig"), "-p", str(source_project), "-c", "nope"]
    )

    assert result.exit_code == 1
    assert not (tmp_path / "x.claudeconfig").exists()


@pytest.fixture
def bundle_file(cli_runner: CliRunner, source_project: Path, tmp_path: Path) -> Path:
    """Bundle exported from the source project with every component."""
    output = tmp_path / "bundle.claudeconfig"
    result = cli_runner.invoke(
        app,
        [
            "export",
            str(output),
            "-p",
            str(source_project),
            "-c",
            "settings",
            "-c",
            "local-settings",
            "-c",
            "mcp-servers",
            "--no-redact",
        ],
    )
    assert result.exit_code == 0
    return output


def test_import_into_empty_project(
    cli_runner: CliRunner,
    bundle_file: Path,
    target_project: Path,
    read_json: ReadJson,
    sample_settings: dict,
) -> None:
    """Test importing a bundle into a project without configuration."""
    result = cli_runner.invoke(
        app,
        ["import", str(bundle_file), "-p", str(target_project), "--acknowledge-sensitive"],
    )

    assert result.exit_code == 0
    assert "Successfully imported 3 component(s)" in result.stdout
    assert read_json(target_project / ".claude" / "settings.json") == sample_settings
    assert read_json(target_project / ".claude" / "settings.local.json")["env"]["API_KEY"] == "k"
    assert set(read_json(target_project / ".mcp.json")["mcpServers"]) == {"docs", "github"}


def test_import_local_settings_requires_acknowledgement(
    cli_runner: CliRunner, bundle_file: Path, target_project: Path
) -> None:
    """Test local settings are not imported without --acknowledge-sensitive."""
    result = cli_runner.invoke(app, ["import", str(bundle_file), "-p", str(target_project)])

    assert result.exit_code == 1
    assert not (target_project / ".claude").exists()


def test_import_selected_components(
    cli_runner: CliRunner, bundle_file: Path, target_project: Path
) -> None:
    """Test --component limits what is imported."""
    result = cli_runner.invoke(
        app, ["import", str(bundle_file), "-p", str(target_project), "-c", "mcp-servers"]
    )

    assert result.exit_code == 0
    assert (target_project / ".mcp.json").exists()
    assert not (target_project / ".claude").exists()


def test_import_conflict_needs_resolution(
    cli_runner: CliRunner,
    bundle_file: Path,
    target_project: Path,
    write_json: WriteJson,
    read_json: ReadJson,
) -> None:
    """Test a conflict without a resolution aborts, and merge keeps both servers."""
    mcp_path = write_json(
        target_project / ".mcp.json", {"mcpServers": {"jira": {"command": "jira-mcp"}}}
    )
    write_json(target_project / ".claude" / "settings.json", {"env": {"PORT": "1"}})

    failed = cli_runner.invoke(
        app, ["import", str(bundle_file), "-p", str(target_project), "-c", "settings"]
    )
    assert failed.exit_code == 1
    assert read_json(target_project / ".claude" / "settings.json") == {"env": {"PORT": "1"}}

    merged = cli_runner.invoke(
        app,
        [
            "import",
            str(bundle_file),
            "-p",
            str(target_project),
            "-c",
            "settings",
            "-c",
            "mcp-servers",
            "-r",
            "settings=merge",
        ],
    )
    assert merged.exit_code == 0
    settings = read_json(target_project / ".claude" / "settings.json")
    assert settings["env"] == {"PORT": "1", "NODE_ENV": "development"}
    assert set(read_json(mcp_path)["mcpServers"]) == {"docs", "github", "jira"}


def test_import_default_resolution_preference(
    cli_runner: CliRunner,
    bundle_file: Path,
    target_project: Path,
    home_dir: Path,
    write_json: WriteJson,
    read_json: ReadJson,
) -> None:
    """Test the preferences file can supply a default resolution."""
    (home_dir / ".claude").mkdir(exist_ok=True)
    (home_dir / ".claude" / "config-kit.yaml").write_text(
        "import:\n  default_resolution: skip\n", encoding="utf-8"
    )
    write_json(target_project / ".claude" / "settings.json", {"env": {"PORT": "1"}})

    result = cli_runner.invoke(
        app, ["import", str(bundle_file), "-p", str(target_project), "-c", "settings"]
    )

    assert result.exit_code == 0
    assert read_json(target_project / ".claude" / "settings.json") == {"env": {"PORT": "1"}}


def test_import_dry_run(cli_runner: CliRunner, bundle_file: Path, target_project: Path) -> None:
    """Test --dry-run writes nothing."""
    result = cli_runner.invoke(
        app, ["import", str(bundle_file), "-p", str(target_project), "-c", "mcp-servers", "-d"]
    )

    assert result.exit_code == 0
    assert "Dry run" in result.stdout
    assert not (target_project / ".mcp.json").exists()


def test_import_invalid_resolution(
    cli_runner: CliRunner, bundle_file: Path, target_project: Path
) -> None:
    """Test a malformed --resolution value fails."""
    result = cli_runner.invoke(
        app, ["import", str(bundle_file), "-p", str(target_project), "-r", "settings=maybe"]
    )

    assert result.exit_code == 1


def test_import_corrupt_bundle(
    cli_runner: CliRunner, home_dir: Path, target_project: Path, tmp_path: Path
) -> None:
    """Test a corrupt bundle fails cleanly."""
    bundle = tmp_path / "broken.claudeconfig"
    bundle.write_text("not json", encoding="utf-8")

    result = cli_runner.invoke(app, ["import", str(bundle), "-p", str(target_project)])

    assert result.exit_code == 1


# =============================================================================
# mcp
# =============================================================================


def test_mcp_copy_rename_on_conflict(
    cli_runner: CliRunner,
    source_project: Path,
    target_project: Path,
    write_json: WriteJson,
    read_json: ReadJson,
) -> None:
    """Test copying onto an existing name with the rename strategy."""
    write_json(target_project / ".mcp.json", {"mcpServers": {"github": {"command": "gh"}}})

    result = cli_runner.invoke(
        app,
        [
            "mcp",
            "copy",
            "github",
            "--from-project",
            str(source_project),
            "--to-project",
            str(target_project),
            "--on-conflict",
            "rename",
        ],
    )

    assert result.exit_code == 0
    servers = read_json(target_project / ".mcp.json")["mcpServers"]
    assert servers["github"] == {"command": "gh"}
    assert servers["github-copy"]["command"] == "npx"


def test_mcp_copy_prompt(
    cli_runner: CliRunner,
    source_project: Path,
    target_project: Path,
    write_json: WriteJson,
    read_json: ReadJson,
) -> None:
    """Test the interactive prompt on a conflict."""
    write_json(target_project / ".mcp.json", {"mcpServers": {"github": {"command": "gh"}}})

    result = cli_runner.invoke(
        app,
        [
            "mcp",
            "copy",
            "github",
            "--from-project",
            str(source_project),
            "--to-project",
            str(target_project),
        ],
        input="rename\ngithub-work\n",
    )

    assert result.exit_code == 0
    assert set(read_json(target_project / ".mcp.json")["mcpServers"]) == {
        "github",
        "github-work",
    }


def test_mcp_copy_to_global(
    cli_runner: CliRunner, source_project: Path, home_dir: Path, read_json: ReadJson
) -> None:
    """Test copying a project server into ~/.claude.json."""
    result = cli_runner.invoke(
        app, ["mcp", "copy", "docs", "--from-project", str(source_project), "--to-global"]
    )

    assert result.exit_code == 0
    servers = read_json(home_dir / ".claude.json")["mcpServers"]
    assert servers["docs"]["url"] == "https://mcp.example.com/docs"


def test_mcp_copy_rename_to_existing_name(
    cli_runner: CliRunner,
    source_project: Path,
    target_project: Path,
    write_json: WriteJson,
) -> None:
    """Test --rename-to an existing name fails without writing."""
    mcp_path = write_json(
        target_project / ".mcp.json", {"mcpServers": {"jira": {"command": "jira-mcp"}}}
    )
    before = mcp_path.read_bytes()

    result = cli_runner.invoke(
        app,
        [
            "mcp",
            "copy",
            "github",
            "--from-project",
            str(source_project),
            "--to-project",
            str(target_project),
            "--rename-to",
            "jira",
        ],
    )

    assert result.exit_code == 1
    assert mcp_path.read_bytes() == before


def test_mcp_copy_unknown_server(
    cli_runner: CliRunner, source_project: Path, target_project: Path
) -> None:
    """Test copying a server that does not exist fails."""
    result = cli_runner.invoke(
        app,
        [
            "mcp",
            "copy",
            "missing",
            "--from-project",
            str(source_project),
            "--to-project",
            str(target_project),
        ],
    )

    assert result.exit_code == 1


def test_mcp_share_redacted(cli_runner: CliRunner, source_project: Path) -> None:
    """Test share prints redacted .mcp.json content."""
    result = cli_runner.invoke(
        app, ["mcp", "share", "github", "--project", str(source_project), "--redact"]
    )

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data == {
        "mcpServers": {
            "github": {
                "args": ["-y", "@modelcontextprotocol/server-github"],
                "command": "npx",
                "env": {"GITHUB_TOKEN": "<YOUR_GITHUB_TOKEN>", "LOG_LEVEL": "info"},
            }
        }
    }


def test_mcp_share_and_paste(
    cli_runner: CliRunner,
    source_project: Path,
    target_project: Path,
    tmp_path: Path,
    write_json: WriteJson,
    read_json: ReadJson,
) -> None:
    """Test sharing to a file and pasting it into another project."""
    shared = tmp_path / "servers.json"
    write_json(target_project / ".mcp.json", {"mcpServers": {"docs": {"command": "local"}}})

    share = cli_runner.invoke(
        app, ["mcp", "share", "-p", str(source_project), "--output", str(shared)]
    )
    paste = cli_runner.invoke(
        app, ["mcp", "paste", str(shared), "--to-project", str(target_project)]
    )

    assert share.exit_code == 0
    assert paste.exit_code == 0
    servers = read_json(target_project / ".mcp.json")["mcpServers"]
    assert servers["docs"] == {"command": "local"}
    assert servers["github"]["env"]["GITHUB_TOKEN"] == "ghp_secret"


def test_mcp_paste_stdin(
    cli_runner: CliRunner, home_dir: Path, target_project: Path, read_json: ReadJson
) -> None:
    """Test pasting a single server from stdin."""
    result = cli_runner.invoke(
        app,
        ["mcp", "paste", "-", "--to-project", str(target_project)],
        input='{"command": "uvx", "args": ["mcp-server-time"]}',
    )

    assert result.exit_code == 0
    assert read_json(target_project / ".mcp.json") == {
        "mcpServers": {"server": {"command": "uvx", "args": ["mcp-server-time"]}}
    }


def test_mcp_paste_missing_file(
    cli_runner: CliRunner, home_dir: Path, target_project: Path, tmp_path: Path
) -> None:
    """Test pasting from a missing file fails."""
    result = cli_runner.invoke(
        app, ["mcp", "paste", str(tmp_path / "nope.json"), "--to-project", str(target_project)]
    )

    assert result.exit_code == 1


# =============================================================================
# permissions
# =============================================================================


def test_permissions_promote(
    cli_runner: CliRunner, source_project: Path, home_dir: Path, read_json: ReadJson
) -> None:
    """Test promoting a shared rule to the global settings."""
    result = cli_runner.invoke(
        app,
        [
            "permissions",
            "promote",
            "Read(src/**)",
            "--from",
            "shared",
            "-p",
            str(source_project),
        ],
    )

    assert result.exit_code == 0
    assert read_json(home_dir / ".claude" / "settings.json") == {
        "permissions": {"allow": ["Read(src/**)"]}
    }
    shared = read_json(source_project / ".claude" / "settings.json")
    assert shared["permissions"]["allow"] == ["Bash(npm run *)"]


def test_permissions_promote_missing_rule(
    cli_runner: CliRunner, source_project: Path, home_dir: Path
) -> None:
    """Test promoting a rule the scope does not have fails."""
    result = cli_runner.invoke(
        app, ["permissions", "promote", "Bash(rm *)", "-p", str(source_project)]
    )

    assert result.exit_code == 1
    assert not (home_dir / ".claude" / "settings.json").exists()


def test_permissions_copy(
    cli_runner: CliRunner, source_project: Path, read_json: ReadJson
) -> None:
    """Test copying a deny rule into local settings."""
    result = cli_runner.invoke(
        app,
        [
            "permissions",
            "copy",
            "Read(.env)",
            "--to",
            "local",
            "--type",
            "deny",
            "-p",
            str(source_project),
        ],
    )

    assert result.exit_code == 0
    local = read_json(source_project / ".claude" / "settings.local.json")
    assert local["permissions"] == {"deny": ["Read(.env)"]}
    assert local["env"]["API_KEY"] == "k"
