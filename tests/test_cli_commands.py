"""Tests for CLI commands and argument parsing."""

import json
import shutil
from pathlib import Path

from chartdoc.cli import app

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _tutorial(tmp_path, monkeypatch) -> str:
    shutil.copy(FIXTURES_DIR / "tutorial.md", tmp_path / "README.md")
    monkeypatch.chdir(tmp_path)
    return "README.md"


class TestBasicCLICommands:
    """Test basic CLI commands work correctly."""

    def test_help_command(self, cli_runner):
        """Test --help shows all commands."""
        result = cli_runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("lint", "snippets", "extract", "duplicates", "chart", "scaffold", "config", "version"):
            assert command in result.output

    def test_version_command(self, cli_runner):
        """Test version command returns version info."""
        result = cli_runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "chartdoc version" in result.output


class TestLintCommand:
    """Test the lint command."""

    def test_lint_tutorial_passes(self, cli_runner, tmp_path, monkeypatch):
        """Warnings do not fail the default run."""
        name = _tutorial(tmp_path, monkeypatch)
        result = cli_runner.invoke(app, ["lint", name])
        assert result.exit_code == 0
        assert "1 warning(s)" in result.output

    def test_lint_fail_on_warning(self, cli_runner, tmp_path, monkeypatch):
        name = _tutorial(tmp_path, monkeypatch)
        result = cli_runner.invoke(app, ["lint", name, "--fail-on", "warning"])
        assert result.exit_code == 1

    def test_lint_ignore_option(self, cli_runner, tmp_path, monkeypatch):
        name = _tutorial(tmp_path, monkeypatch)
        result = cli_runner.invoke(app, ["lint", name, "--fail-on", "warning", "--ignore", "duplicate_section"])
        assert result.exit_code == 0

    def test_lint_json_output(self, cli_runner, tmp_path, monkeypatch):
        name = _tutorial(tmp_path, monkeypatch)
        result = cli_runner.invoke(app, ["lint", name, "--format", "json", "--no-duplicates"])
        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload[0]["source"] == name
        assert payload[0]["ok"] is True
        assert payload[0]["findings"] == []
        assert payload[0]["snippet_kinds"]["shell"] == 4

    def test_lint_errors_exit_code(self, cli_runner, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        Path("bad.md").write_text("```bash\nhelm instal web ./chart\n```\n")
        result = cli_runner.invoke(app, ["lint", "bad.md", "--format", "json"])
        assert result.exit_code == 1
        payload = json.loads(result.output)
        assert payload[0]["findings"][0]["code"] == "UNKNOWN_SUBCOMMAND"
        assert payload[0]["findings"][0]["line"] == 2

    def test_lint_unknown_format(self, cli_runner, tmp_path, monkeypatch):
        name = _tutorial(tmp_path, monkeypatch)
        result = cli_runner.invoke(app, ["lint", name, "--format", "xml"])
        assert result.exit_code == 2

    def test_lint_uses_config_file(self, cli_runner, tmp_path, monkeypatch):
        name = _tutorial(tmp_path, monkeypatch)
        config_dir = tmp_path / ".chartdoc"
        config_dir.mkdir()
        (config_dir / "config.json").write_text(json.dumps({"fail_on": "warning"}))
        result = cli_runner.invoke(app, ["lint", name])
        assert result.exit_code == 1

    def test_lint_requires_file_argument(self, cli_runner):
        result = cli_runner.invoke(app, ["lint"])
        assert result.exit_code != 0
        assert "Missing argument" in result.output or "FILE" in result.output


class TestErrorHandling:
    """Test error handling for various scenarios."""

    def test_missing_file_error(self, cli_runner, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = cli_runner.invoke(app, ["lint", "missing.md"])
        assert result.exit_code == 1
        assert "FILE_NOT_FOUND" in result.output

    def test_invalid_config_error(self, cli_runner, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".chartdoc").mkdir()
        (tmp_path / ".chartdoc" / "config.json").write_text("[]")
        result = cli_runner.invoke(app, ["config", "show"])
        assert result.exit_code == 1
        assert "CONFIG_INVALID" in result.output

    def test_missing_chart_error(self, cli_runner, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = cli_runner.invoke(app, ["chart", "nope"])
        assert result.exit_code == 1
        assert "CHART_NOT_FOUND" in result.output


class TestOtherCommands:
    """Test snippets, extract, duplicates, chart, scaffold and config."""

    def test_snippets_command(self, cli_runner, tmp_path, monkeypatch):
        name = _tutorial(tmp_path, monkeypatch)
        result = cli_runner.invoke(app, ["snippets", name])
        assert result.exit_code == 0
        assert "helm-values" in result.output

    def test_snippets_none(self, cli_runner, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        Path("empty.md").write_text("# Nothing\n")
        result = cli_runner.invoke(app, ["snippets", "empty.md"])
        assert result.exit_code == 0
        assert "No code snippets" in result.output

    def test_extract_command(self, cli_runner, tmp_path, monkeypatch):
        name = _tutorial(tmp_path, monkeypatch)
        result = cli_runner.invoke(app, ["extract", name, "-o", "out"])
        assert result.exit_code == 0
        assert "Extracted 8 snippet(s)" in result.output
        assert (tmp_path / "out" / "00-shell.sh").exists()

    def test_duplicates_command(self, cli_runner, tmp_path, monkeypatch):
        name = _tutorial(tmp_path, monkeypatch)
        result = cli_runner.invoke(app, ["duplicates", name])
        assert result.exit_code == 0
        assert "1 repeated section(s)" in result.output

    def test_scaffold_then_chart(self, cli_runner, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = cli_runner.invoke(
            app, ["scaffold", "web", "--repo-url", "https://github.com/example/web.git", "-o", "out"]
        )
        assert result.exit_code == 0
        assert (tmp_path / "out" / "argocd" / "web-application.yaml").exists()

        result = cli_runner.invoke(app, ["chart", "out/charts/web"])
        assert result.exit_code == 0
        assert "0 error(s)" in result.output

    def test_scaffold_invalid_name(self, cli_runner, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = cli_runner.invoke(app, ["scaffold", "Web_App", "--repo-url", "https://github.com/example/web.git"])
        assert result.exit_code == 1
        assert "SCAFFOLD_INVALID" in result.output

    def test_config_init_and_show(self, cli_runner, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = cli_runner.invoke(app, ["config", "init"])
        assert result.exit_code == 0
        assert (tmp_path / ".chartdoc" / "config.json").exists()

        result = cli_runner.invoke(app, ["config", "init"])
        assert result.exit_code == 1
        assert "--force" in result.output

        result = cli_runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        assert "fail_on: error" in result.output
