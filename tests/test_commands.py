"""
Unit tests for cargo_janitor/utils/commands.py - the subprocess boundary.
"""

import subprocess
from unittest.mock import MagicMock, patch

from cargo_janitor.utils.commands import CommandResult, run_command


class TestCommandResult:
    def test_success_requires_zero_exit(self):
        assert CommandResult(return_code=0).success is True
        assert CommandResult(return_code=1).success is False

    def test_not_launched_is_never_success(self):
        assert CommandResult(return_code=0, launched=False).success is False


class TestRunCommand:
    def test_captures_output(self, tmp_path):
        mock_proc = MagicMock()
        mock_proc.returncode = 0
        mock_proc.stdout = "cleaned"
        mock_proc.stderr = ""

        with patch("subprocess.run", return_value=mock_proc) as mock_run:
            result = run_command(["cargo", "clean"], cwd=tmp_path)

        assert result.success
        assert result.stdout == "cleaned"
        args, kwargs = mock_run.call_args
        assert args[0] == ["cargo", "clean"]
        assert kwargs["cwd"] == str(tmp_path)
        assert kwargs["capture_output"] is True
        assert kwargs["timeout"] is None

    def test_nonzero_exit(self):
        mock_proc = MagicMock()
        mock_proc.returncode = 101
        mock_proc.stdout = ""
        mock_proc.stderr = "error: could not find `Cargo.toml`"

        with patch("subprocess.run", return_value=mock_proc):
            result = run_command(["cargo", "clean"])

        assert result.launched
        assert not result.success
        assert result.return_code == 101
        assert "Cargo.toml" in result.stderr

    def test_missing_tool(self):
        with patch("subprocess.run", side_effect=FileNotFoundError("No such file")):
            result = run_command(["cargo", "machete"])

        assert not result.launched
        assert not result.success
        assert "cargo" in result.error

    def test_timeout(self):
        with patch("subprocess.run", side_effect=subprocess.TimeoutExpired("cargo", 5)):
            result = run_command(["cargo", "udeps"], timeout=5)

        assert result.launched
        assert not result.success
        assert result.error == "Command timed out"

    def test_other_os_error(self):
        with patch("subprocess.run", side_effect=OSError("exec format error")):
            result = run_command(["cargo", "remove", "serde"])

        assert not result.launched
        assert "exec format error" in result.error
