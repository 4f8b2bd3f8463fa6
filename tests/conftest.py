"""
Pytest configuration and shared fixtures for risc0-gpu-setup tests.

No test touches the real host: subprocess, uid, disk usage and sleeps are faked.
"""

import subprocess
from pathlib import Path
from typing import Callable, List, Optional

import pytest

from risc0_gpu_setup.config import ProvisionConfig
from risc0_gpu_setup.context import Phase, ProvisionCtx
from risc0_gpu_setup.lib import command, host
from risc0_gpu_setup.lib.tools import ToolPaths


class CommandRecorder:
    """Stands in for subprocess.run and remembers every argv it was given."""

    def __init__(self) -> None:
        self.calls: List[List[str]] = []
        self.kwargs: List[dict] = []
        self._failures: List[tuple] = []
        self._effects: List[tuple] = []
        self._raises: List[tuple] = []
        self.stdout = ""

    def fail_when(self, needle: str, returncode: int = 1, stderr: str = "boom") -> None:
        self._failures.append((needle, returncode, stderr))

    def raise_when(self, needle: str, exc: BaseException) -> None:
        """Make subprocess.run raise, as it does for a missing executable."""
        self._raises.append((needle, exc))

    def on(self, needle: str, effect: Callable[[List[str], dict], None]) -> None:
        self._effects.append((needle, effect))

    @property
    def commands(self) -> List[str]:
        return [" ".join(c) for c in self.calls]

    def index_of(self, needle: str) -> int:
        for i, cmd in enumerate(self.commands):
            if needle in cmd:
                return i
        raise AssertionError(f"{needle!r} was never run; ran: {self.commands}")

    def ran(self, needle: str) -> bool:
        return any(needle in cmd for cmd in self.commands)

    def __call__(self, argv, **kwargs):
        argv = list(argv)
        self.calls.append(argv)
        self.kwargs.append(kwargs)
        joined = " ".join(argv)
        for needle, exc in self._raises:
            if needle in joined:
                raise exc
        for needle, effect in self._effects:
            if needle in joined:
                effect(argv, kwargs)
        for needle, rc, stderr in self._failures:
            if needle in joined:
                return subprocess.CompletedProcess(argv, rc, stdout="", stderr=stderr)
        return subprocess.CompletedProcess(argv, 0, stdout=self.stdout, stderr="")


@pytest.fixture
def recorder(monkeypatch) -> CommandRecorder:
    rec = CommandRecorder()
    monkeypatch.setattr(command.subprocess, "run", rec)
    monkeypatch.setattr(command, "_current_user", lambda: "root")
    return rec


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    monkeypatch.setattr("risc0_gpu_setup.steps.step_90_reboot.time.sleep", lambda s: None)


@pytest.fixture
def os_release(tmp_path) -> Path:
    p = tmp_path / "os-release"
    p.write_text('NAME="Ubuntu"\nVERSION_ID="22.04"\nID=ubuntu\n', encoding="utf-8")
    return p


@pytest.fixture
def healthy_host(monkeypatch):
    """Root, plenty of disk."""
    monkeypatch.setattr(host, "effective_uid", lambda: 0)
    monkeypatch.setattr(host, "free_space_gb", lambda mount: 500)


@pytest.fixture
def operator_home(tmp_path) -> Path:
    home = tmp_path / "home" / "ubuntu"
    home.mkdir(parents=True)
    return home


@pytest.fixture
def make_ctx(tmp_path, os_release, operator_home):
    def _make(phase: Phase = Phase.PRE_REBOOT, *, dry_run: bool = False, **raw) -> ProvisionCtx:
        base = {
            "operator_user": "ubuntu",
            "os": {"release_path": str(os_release)},
            "reboot": {"delay_s": 0},
        }
        base.update(raw)
        cfg = ProvisionConfig(raw=base)
        return ProvisionCtx(cfg=cfg, phase=phase, tools=ToolPaths(home=str(operator_home)), dry_run=dry_run)

    return _make


def make_checkout(path: str, setup_script: Optional[str] = "scripts/setup.sh") -> None:
    """Lay out what a successful clone of the Boundless repo leaves behind."""
    root = Path(path)
    root.mkdir(parents=True, exist_ok=True)
    if setup_script:
        script = root / setup_script
        script.parent.mkdir(parents=True, exist_ok=True)
        script.write_text("#!/bin/sh\nexit 0\n", encoding="utf-8")


@pytest.fixture
def clone_creates_checkout(recorder):
    """Make a faked `git clone` create the destination directory."""

    def _effect(argv, kwargs):
        make_checkout(argv[-1])

    recorder.on("git clone", _effect)
    return recorder
