"""
Tests for utils.py module.

Tests the external command runner.
"""

import sys
from unittest.mock import MagicMock, patch

import pytest

from release_tagger.errors import ExternalCommandFailed
from release_tagger.utils import format_command_line, run_command, run_command_one_line


class TestRunCommand:
    """Test running external commands."""

    @patch('release_tagger.utils.subprocess.run')
    def test_run_command_returns_stdout(self, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout="tag: v1.0.0\n", stderr="")

        assert run_command(["git", "log", "--format=%D"]) == "tag: v1.0.0\n"
        mock_run.assert_called_once_with(
            ["git", "log", "--format=%D"],
            capture_output=True, text=True, encoding='utf-8', errors='replace'
        )

    @patch('release_tagger.utils.subprocess.run')
    def test_run_command_nonzero_exit(self, mock_run):
        mock_run.return_value = MagicMock(returncode=128, stdout="", stderr="fatal: not a git repository\n")

        with pytest.raises(ExternalCommandFailed) as exc_info:
            run_command(["git", "log"])

        assert exc_info.value.returncode == 128
        assert exc_info.value.command == ["git", "log"]
        assert "exit status 128" in str(exc_info.value)
        assert "fatal: not a git repository" in str(exc_info.value)

    @patch('release_tagger.utils.subprocess.run')
    def test_run_command_missing_program(self, mock_run):
        mock_run.side_effect = FileNotFoundError(2, "No such file or directory", "gti")

        with pytest.raises(ExternalCommandFailed) as exc_info:
            run_command(["gti", "log"])

        assert exc_info.value.returncode is None
        assert "gti log" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)

    def test_run_command_real_process(self):
        """Test against a real process started through the same interpreter."""
        output = run_command([sys.executable, "-c", "print('hello')"])
        assert output.strip() == "hello"

    def test_run_command_real_failure(self):
        with pytest.raises(ExternalCommandFailed):
            run_command([sys.executable, "-c", "import sys; sys.exit(3)"])


class TestHelpers:
    """Test small helpers."""

    def test_run_command_one_line(self):
        runner = MagicMock(return_value="  /home/dev/widget \r\n")
        assert run_command_one_line(runner, ["git", "rev-parse", "--show-toplevel"]) == "/home/dev/widget"
        runner.assert_called_once_with(["git", "rev-parse", "--show-toplevel"])

    def test_format_command_line(self):
        assert format_command_line(["git", "tag", "v1.0.0"]) == "git tag v1.0.0"
