"""
Unit tests for ProcessRunner (mocked subprocess).

Every test mocks subprocess.run so no real command is started.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from brewdeps.core.errors import CommandFailureError
from brewdeps.core.services.process_runner import ProcessRunner, Stdio

_RUN = "brewdeps.core.services.process_runner.subprocess.run"


def _mock_result(stdout: str | None = None, rc: int = 0):
    return subprocess.CompletedProcess(args=["brew"], returncode=rc, stdout=stdout)


class TestRun:
    @pytest.mark.parametrize("stdio, stdout, stderr", [
        (Stdio.INHERIT, None, None),
        (Stdio.QUIET, subprocess.DEVNULL, None),
        (Stdio.SILENT, subprocess.DEVNULL, subprocess.DEVNULL),
    ])
    def test_stdio_policies(self, stdio, stdout, stderr):
        with patch(_RUN, return_value=_mock_result()) as run:
            ProcessRunner().run(["brew", "tap", "a/b"], stdio=stdio)
        kwargs = run.call_args.kwargs
        assert kwargs["stdout"] is stdout
        assert kwargs["stderr"] is stderr

    def test_stdio_by_name(self):
        with patch(_RUN, return_value=_mock_result()) as run:
            ProcessRunner().run(["brew", "link", "x"], stdio="silent")
        assert run.call_args.kwargs["stderr"] is subprocess.DEVNULL

    def test_cwd_passed_as_string(self, tmp_path: Path):
        with patch(_RUN, return_value=_mock_result()) as run:
            ProcessRunner().run(["brew", "install", "x"], cwd=tmp_path)
        assert run.call_args.kwargs["cwd"] == str(tmp_path)

    def test_nonzero_exit_raises_with_command(self):
        with patch(_RUN, return_value=_mock_result(rc=3)):
            with pytest.raises(CommandFailureError) as exc:
                ProcessRunner().run(["brew", "rm", "--force", "zlib"])
        assert exc.value.returncode == 3
        assert exc.value.cmd == ["brew", "rm", "--force", "zlib"]
        assert "brew rm --force zlib" in str(exc.value)

    def test_missing_executable(self):
        with patch(_RUN, side_effect=FileNotFoundError("no such file: brew")):
            with pytest.raises(CommandFailureError) as exc:
                ProcessRunner().run(["brew", "list"])
        assert exc.value.returncode == 127


class TestRead:
    def test_returns_stdout_without_trailing_newline(self):
        with patch(_RUN, return_value=_mock_result(stdout="a 1.0\nb 2.0\n")) as run:
            out = ProcessRunner().read(["brew", "list", "--versions"])
        assert out == "a 1.0\nb 2.0"
        assert run.call_args.kwargs["stdout"] is subprocess.PIPE
        assert "stderr" not in run.call_args.kwargs

    def test_empty_output(self):
        with patch(_RUN, return_value=_mock_result(stdout="")):
            assert ProcessRunner().read(["brew", "outdated"]) == ""

    def test_nonzero_exit_raises(self):
        with patch(_RUN, return_value=_mock_result(stdout="", rc=1)):
            with pytest.raises(CommandFailureError):
                ProcessRunner().read(["brew", "info", "--json=v1", "nope"])


class TestCommandFailureError:
    def test_for_package_tags_name(self):
        err = CommandFailureError(["brew", "install", "x"], 1, "boom")
        tagged = err.for_package("x")
        assert tagged.package == "x"
        assert tagged.cmd == err.cmd
        assert str(tagged).startswith("x: Command failed (exit 1)")
        assert "boom" in str(tagged)
