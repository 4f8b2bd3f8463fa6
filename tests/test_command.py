"""Tests for the external command runner."""
import subprocess

import pytest

from risc0_gpu_setup.lib import command
from risc0_gpu_setup.lib.command import CommandError, run_cmd, run_shell, wrap_as_user


class TestRunCmd:
    def test_successful_command(self, recorder):
        recorder.stdout = "ok\n"

        result = run_cmd(["echo", "hi"])

        assert result.returncode == 0
        assert result.stdout == "ok\n"
        assert recorder.calls == [["echo", "hi"]]
        assert recorder.kwargs[0]["stdout"] == subprocess.PIPE

    def test_failure_raises_command_error(self, recorder):
        recorder.fail_when("false", returncode=7, stderr="nope")

        with pytest.raises(CommandError, match=r"(?s)Command failed \(7\).*nope") as exc:
            run_cmd(["false"])

        assert exc.value.returncode == 7
        assert exc.value.argv == ["false"]

    def test_failure_ignored_without_check(self, recorder):
        recorder.fail_when("false", returncode=2)

        result = run_cmd(["false"], check=False)

        assert result.returncode == 2

    def test_dry_run_does_not_execute(self, recorder):
        result = run_cmd(["reboot"], dry_run=True)

        assert result.returncode == 0
        assert recorder.calls == []

    def test_env_is_merged_into_process_environment(self, recorder, monkeypatch):
        monkeypatch.setenv("KEEP_ME", "1")

        run_cmd(["true"], env={"RUST_LOG": "info"})

        env = recorder.kwargs[0]["env"]
        assert env["RUST_LOG"] == "info"
        assert env["KEEP_ME"] == "1"

    def test_uncaptured_output_streams_to_console(self, recorder):
        run_cmd(["cargo", "install"], capture=False)

        assert recorder.kwargs[0]["stdout"] is None
        assert recorder.kwargs[0]["stderr"] is None

    def test_runs_as_other_user_through_sudo(self, recorder):
        run_cmd(["rustc", "--version"], user="ubuntu", env={"PATH": "/x"})

        assert recorder.calls[0] == ["sudo", "-u", "ubuntu", "-H", "env", "PATH=/x", "rustc", "--version"]

    def test_same_user_is_not_wrapped(self, recorder, monkeypatch):
        monkeypatch.setattr(command, "_current_user", lambda: "ubuntu")

        run_cmd(["rustc", "--version"], user="ubuntu")

        assert recorder.calls[0] == ["rustc", "--version"]


def test_wrap_as_user_without_env():
    assert wrap_as_user(["git", "fetch"], "ubuntu") == ["sudo", "-u", "ubuntu", "-H", "git", "fetch"]


def test_run_shell_uses_pipefail(recorder):
    run_shell("curl -L x | bash")

    assert recorder.calls[0] == ["bash", "-o", "pipefail", "-c", "curl -L x | bash"]


class TestMissingExecutable:
    def test_raises_command_error_with_shell_status(self, recorder):
        recorder.raise_when("/snap/bin/just", FileNotFoundError(2, "No such file or directory", "/snap/bin/just"))

        with pytest.raises(CommandError, match="No such file or directory") as exc:
            run_cmd(["/snap/bin/just", "bento", "up"])

        assert exc.value.returncode == command.COMMAND_NOT_FOUND == 127

    def test_not_executable_is_reported_the_same_way(self, recorder):
        recorder.raise_when("setup.sh", PermissionError(13, "Permission denied"))

        with pytest.raises(CommandError) as exc:
            run_cmd(["./scripts/setup.sh"])

        assert exc.value.returncode == 127

    def test_without_check_returns_status(self, recorder):
        recorder.raise_when("snap", FileNotFoundError(2, "No such file or directory"))

        result = run_cmd(["snap", "refresh", "core"], check=False)

        assert result.returncode == 127
        assert "No such file" in result.stderr
