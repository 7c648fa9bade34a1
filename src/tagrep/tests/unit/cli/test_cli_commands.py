"""
Tests for the tagrep CLI commands.

Commands are invoked through typer's CliRunner. Tag output goes to stdout;
errors and log records go to stderr, which CliRunner folds into
``result.output``.
"""

import json
import sys
from unittest.mock import Mock, patch

import pytest
from typer.testing import CliRunner

from tagrep.cli import app, cli_main
from tagrep.cli.commands import build_tag_config, split_tag_list
from tagrep.core.tag_parser import OutputFormat
from tagrep.exceptions import PlatformNotFoundError, TagConfigurationError
from tagrep.platform import PlatformType

DESCRIPTION = """A description of a PR.

TAG_1=my-tag-value1
TAG_1=my-tag-value2
TAG_2=123143
"""


@pytest.fixture
def runner():
    """Create a CLI runner for testing."""
    return CliRunner()


class TestCLIApplication:
    """Tests for the top-level application."""

    def test_help(self, runner):
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("request", "issue", "parse", "version"):
            assert command in result.output

    def test_version(self, runner):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "tagrep" in result.output
        assert "0.1.0" in result.output

    def test_invalid_log_format(self, runner):
        result = runner.invoke(app, ["--log-format", "xml", "version"])

        assert result.exit_code == 1
        assert "log format" in result.output

    def test_missing_dotenv_file(self, runner, tmp_path):
        result = runner.invoke(app, ["--dotenv", str(tmp_path / "missing.env"), "version"])

        assert result.exit_code == 1

    def test_dotenv_file_sets_defaults(self, runner, tmp_path, monkeypatch):
        """Test that TAGREP_* values from a dotenv file act as option defaults."""
        env_file = tmp_path / "tagrep.env"
        env_file.write_text("TAGREP_FORMAT=json\n", encoding="utf-8")
        # load_dotenv writes to os.environ; unset again on teardown
        monkeypatch.setenv("TAGREP_FORMAT", "raw")
        monkeypatch.delenv("TAGREP_FORMAT")

        result = runner.invoke(app, ["--dotenv", str(env_file), "parse"], input="A=1\n")

        assert result.exit_code == 0
        assert result.stdout == '{"A":"1"}\n'


class TestParseCommand:
    """Tests for `tagrep parse`."""

    def test_raw_from_stdin(self, runner):
        result = runner.invoke(app, ["parse", "--array-tags", "TAG_1"], input=DESCRIPTION)

        assert result.exit_code == 0
        assert result.stdout == "TAG_1=my-tag-value1,my-tag-value2\nTAG_2=123143\n"

    def test_pretty_json(self, runner):
        result = runner.invoke(
            app,
            ["parse", "--format", "json", "--pretty-print", "--array-tags", "TAG_1"],
            input=DESCRIPTION,
        )

        assert result.exit_code == 0
        assert result.stdout == (
            '{\n'
            '  "TAG_1": [\n'
            '    "my-tag-value1",\n'
            '    "my-tag-value2"\n'
            '  ],\n'
            '  "TAG_2": "123143"\n'
            '}\n'
        )

    def test_from_file(self, runner, tmp_path):
        description = tmp_path / "description.md"
        description.write_text("READY=yes\nNOTE=hi\n", encoding="utf-8")

        result = runner.invoke(
            app, ["parse", str(description), "--bool-tags", "ready", "--no-output-all", "-f", "json"]
        )

        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"READY": True}

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(app, ["parse", str(tmp_path / "nope.md")])

        assert result.exit_code == 1
        assert "File Not Found" in result.output

    def test_directory_path(self, runner, tmp_path):
        """Test that a directory argument is reported as a read failure."""
        result = runner.invoke(app, ["parse", str(tmp_path)])

        assert result.exit_code == 1
        assert "Failed to read input" in result.output
        assert not isinstance(result.exception, IsADirectoryError)

    def test_non_utf8_file(self, runner, tmp_path):
        description = tmp_path / "description.md"
        description.write_bytes(b"A=\xff\xfe\n")

        result = runner.invoke(app, ["parse", str(description)])

        assert result.exit_code == 1
        assert "Failed to read input" in result.output
        assert not isinstance(result.exception, UnicodeDecodeError)

    def test_invalid_format(self, runner):
        """Test that an unsupported format fails before reading input."""
        result = runner.invoke(app, ["parse", "--format", "xml"], input="A=1\n")

        assert result.exit_code == 1
        assert "xml" in result.output
        assert "A=1" not in result.output

    def test_invalid_bool(self, runner):
        """Test that a bad bool value fails with no tag output."""
        result = runner.invoke(app, ["parse", "--bool-tags", "WANT_LGTM"], input="A=1\nWANT_LGTM=all\n")

        assert result.exit_code == 1
        assert "WANT_LGTM" in result.output
        assert "A=1" not in result.output

    def test_no_tags(self, runner):
        result = runner.invoke(app, ["parse"], input="just prose\n")

        assert result.exit_code == 0
        assert result.stdout == ""

    def test_format_from_environment(self, runner):
        result = runner.invoke(app, ["parse"], input="A=1\n", env={"TAGREP_FORMAT": "json"})

        assert result.exit_code == 0
        assert result.stdout == '{"A":"1"}\n'

    def test_output_env_file(self, runner, tmp_path):
        """Test that raw output is appended to the env file."""
        env_file = tmp_path / "github_env"
        env_file.write_text("EXISTING=1\n", encoding="utf-8")

        result = runner.invoke(app, ["parse", "--output-env-file", str(env_file)], input="A=1\nB=x,y\n")

        assert result.exit_code == 0
        assert result.stdout == ""
        assert env_file.read_text(encoding="utf-8") == "EXISTING=1\nA=1\nB=x,y\n"

    def test_output_env_file_requires_raw(self, runner, tmp_path):
        env_file = tmp_path / "github_env"

        result = runner.invoke(
            app, ["parse", "--format", "json", "--output-env-file", str(env_file)], input="A=1\n"
        )

        assert result.exit_code == 1
        assert not env_file.exists()


class TestPlatformCommands:
    """Tests for `tagrep request` and `tagrep issue`."""

    @patch("tagrep.cli.commands.create_platform")
    def test_request(self, mock_create_platform, runner):
        mock_platform = Mock()
        mock_platform.get_request_body.return_value = DESCRIPTION
        mock_create_platform.return_value = mock_platform

        result = runner.invoke(
            app,
            ["request", "--platform", "github", "--token", "t", "--repository", "octo/repo",
             "-n", "12", "--array-tags", "TAG_1"],
        )

        assert result.exit_code == 0
        assert result.stdout == "TAG_1=my-tag-value1,my-tag-value2\nTAG_2=123143\n"
        config = mock_create_platform.call_args.args[0]
        assert config.type is PlatformType.GITHUB
        assert config.repository == "octo/repo"
        assert config.request_number == 12
        assert config.issue_number is None

    @patch("tagrep.cli.commands.create_platform")
    def test_issue(self, mock_create_platform, runner):
        mock_platform = Mock()
        mock_platform.get_issue_body.return_value = "SEVERITY=high\n"
        mock_create_platform.return_value = mock_platform

        result = runner.invoke(
            app,
            ["issue", "--platform", "gitlab", "--token", "t", "--repository", "group/project",
             "-n", "3", "-f", "json"],
        )

        assert result.exit_code == 0
        assert result.stdout == '{"SEVERITY":"high"}\n'
        config = mock_create_platform.call_args.args[0]
        assert config.type is PlatformType.GITLAB
        assert config.issue_number == 3

    @patch("tagrep.cli.commands.create_platform")
    def test_config_validated_before_fetch(self, mock_create_platform, runner):
        """Test that the platform is not contacted when the tag options are invalid."""
        result = runner.invoke(app, ["request", "--platform", "github", "--format", "xml"])

        assert result.exit_code == 1
        mock_create_platform.assert_not_called()

    @patch("tagrep.cli.commands.create_platform")
    def test_platform_error(self, mock_create_platform, runner):
        mock_platform = Mock()
        mock_platform.get_request_body.side_effect = PlatformNotFoundError("Not Found")
        mock_create_platform.return_value = mock_platform

        result = runner.invoke(app, ["request", "--platform", "github", "-n", "1"])

        assert result.exit_code == 1
        assert "Not Found" in result.output

    def test_no_platform_outside_ci(self, runner):
        result = runner.invoke(app, ["request", "-n", "1"])

        assert result.exit_code == 1
        assert "platform" in result.output

    def test_missing_token(self, runner):
        result = runner.invoke(app, ["request", "--platform", "github", "--repository", "o/r", "-n", "1"])

        assert result.exit_code == 1
        assert "token" in result.output


class TestOptionHelpers:
    """Tests for option parsing helpers."""

    def test_split_tag_list(self):
        assert split_tag_list(["tag_1,TAG_2", " tag_3 ", "TAG_1", ""]) == ["TAG_1", "TAG_2", "TAG_3"]
        assert split_tag_list(None) == []

    def test_build_tag_config(self):
        config = build_tag_config("JSON", True, False, ["a"], None, ["b,c"])

        assert config.format is OutputFormat.JSON
        assert config.array_tags == ["A"]
        assert config.bool_tags == ["B", "C"]
        assert config.output_all is False

    def test_build_tag_config_env_file_with_json(self, tmp_path):
        with pytest.raises(TagConfigurationError):
            build_tag_config("json", False, True, None, None, None, tmp_path / "env")


class TestCLIMain:
    """Tests for the console script entry point."""

    def test_non_utf8_file_exits_without_traceback(self, tmp_path, monkeypatch, capsys):
        """Test that a read error ends with exit status 1 and a one-line message."""
        description = tmp_path / "description.md"
        description.write_bytes(b"A=\xff\xfe\n")
        monkeypatch.setattr(sys, "argv", ["tagrep", "parse", str(description)])

        with pytest.raises(SystemExit) as exc_info:
            cli_main()

        captured = capsys.readouterr()
        assert exc_info.value.code == 1
        assert "Failed to read input" in captured.err
        assert "Traceback" not in captured.err + captured.out
        assert captured.out == ""

    def test_success_exits_zero(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["tagrep", "version"])

        with pytest.raises(SystemExit) as exc_info:
            cli_main()

        assert exc_info.value.code == 0
        assert "tagrep" in capsys.readouterr().out

    @patch("tagrep.cli.cli.app", side_effect=RuntimeError("boom"))
    def test_unexpected_error(self, mock_app, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli_main()

        captured = capsys.readouterr()
        assert exc_info.value.code == 1
        assert "boom" in captured.err
        assert "Traceback" not in captured.err

    @patch("tagrep.cli.cli.app", side_effect=KeyboardInterrupt)
    def test_keyboard_interrupt(self, mock_app, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli_main()

        assert exc_info.value.code == 130
        assert "cancelled" in capsys.readouterr().err
