from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import Mapping, Sequence

logger = logging.getLogger(__name__)

COMMAND_NOT_FOUND = 127


class CommandError(RuntimeError):
    """An external command exited non-zero."""

    def __init__(self, argv: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        msg = f"Command failed ({returncode}): {_fmt_argv(self.argv)}"
        if stderr.strip():
            msg += f"\n{stderr.strip()}"
        super().__init__(msg)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str


def _fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def _current_user() -> str | None:
    try:
        import pwd

        return pwd.getpwuid(os.geteuid()).pw_name
    except (ImportError, KeyError):
        return None


def wrap_as_user(argv: Sequence[str], user: str, env: Mapping[str, str] | None = None) -> list[str]:
    """Build argv that runs as another user with a login-style HOME.

    sudo resets the environment, so extra variables are passed through env(1).
    """

    wrapped = ["sudo", "-u", user, "-H"]
    if env:
        wrapped += ["env", *[f"{k}={v}" for k, v in env.items()]]
    return [*wrapped, *argv]


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    env: Mapping[str, str] | None = None,
    cwd: str | None = None,
    input_text: str | None = None,
    user: str | None = None,
    capture: bool = True,
    dry_run: bool = False,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command.
    - ``user`` runs the command as that account (via sudo) unless we already are it.
    - ``capture=False`` streams output to the console, for long installers.
    - dry_run logs but does not execute.
    """

    argv_list = list(argv)
    if user and user != _current_user():
        argv_list = wrap_as_user(argv_list, user, env)
        env = None

    logger.info("CMD %s%s", _fmt_argv(argv_list), f" (cwd={cwd})" if cwd else "")

    if dry_run:
        return CmdResult(argv=argv_list, returncode=0, stdout="", stderr="")

    try:
        p = subprocess.run(
            argv_list,
            input=input_text,
            text=True,
            stdout=subprocess.PIPE if capture else None,
            stderr=subprocess.PIPE if capture else None,
            cwd=cwd,
            env=dict(os.environ, **(env or {})),
        )
    except OSError as e:
        # Missing or non-executable binary: report it like the shell does.
        logger.debug("EXEC %s", e)
        if check:
            raise CommandError(argv_list, COMMAND_NOT_FOUND, str(e)) from e
        return CmdResult(argv=argv_list, returncode=COMMAND_NOT_FOUND, stdout="", stderr=str(e))

    stdout = p.stdout or ""
    stderr = p.stderr or ""
    if stdout:
        logger.debug("STDOUT %s", stdout.strip())
    if stderr:
        logger.debug("STDERR %s", stderr.strip())

    if check and p.returncode != 0:
        raise CommandError(argv_list, p.returncode, stderr)

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=stdout, stderr=stderr)


def run_shell(script: str, **kwargs) -> CmdResult:
    """Run a small bash pipeline (fetch-and-execute installers) with pipefail."""

    return run_cmd(["bash", "-o", "pipefail", "-c", script], **kwargs)
