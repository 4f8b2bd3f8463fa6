from __future__ import annotations

import logging
from typing import Sequence

from .command import run_cmd

logger = logging.getLogger(__name__)

APT_ENV = {"DEBIAN_FRONTEND": "noninteractive"}


def apt_update(*, dry_run: bool = False) -> None:
    run_cmd(["apt-get", "update"], env=APT_ENV, dry_run=dry_run)


def apt_upgrade(*, dry_run: bool = False) -> None:
    run_cmd(["apt-get", "upgrade", "-y"], env=APT_ENV, dry_run=dry_run)


def apt_install(packages: Sequence[str], *, dry_run: bool = False) -> None:
    """Install packages; a no-op for apt when they are already current."""
    if not packages:
        return
    run_cmd(["apt-get", "install", "-y", *packages], env=APT_ENV, dry_run=dry_run)


def snap_install(
    name: str,
    *,
    classic: bool = False,
    channel: str | None = None,
    check: bool = True,
    dry_run: bool = False,
) -> bool:
    argv = ["snap", "install", name]
    if classic:
        argv.append("--classic")
    if channel:
        argv.append(f"--channel={channel}")
    r = run_cmd(argv, check=check, dry_run=dry_run)
    return r.returncode == 0


def snap_refresh(name: str, *, check: bool = True, dry_run: bool = False) -> bool:
    # "snap refresh" exits non-zero when the snap is already at the latest revision
    r = run_cmd(["snap", "refresh", name], check=check, dry_run=dry_run)
    return r.returncode == 0
