"""Checks gating entry to a phase.

Every check raises PreconditionError with a message that names both the
detected and the expected value; nothing here mutates the host.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Protocol

from .context import Phase, ProvisionCtx
from .lib import host

logger = logging.getLogger(__name__)


class PreconditionError(RuntimeError):
    pass


class Precondition(Protocol):
    check_id: str
    label: str

    def check(self, ctx: ProvisionCtx) -> None:
        ...


class RequireRoot:
    check_id = "root"
    label = "running as root"

    def check(self, ctx: ProvisionCtx) -> None:
        uid = host.effective_uid()
        if uid != 0:
            raise PreconditionError(
                f"This must be run as root (or via sudo); effective uid is {uid}."
            )


class RequireOS:
    check_id = "os"
    label = "supported operating system"

    def check(self, ctx: ProvisionCtx) -> None:
        cfg = ctx.cfg
        path = cfg.os_release_path
        if not Path(path).is_file():
            raise PreconditionError(f"{path} not found. Cannot verify OS version.")

        try:
            release = host.read_os_release(path)
        except (OSError, UnicodeDecodeError) as e:
            raise PreconditionError(f"Cannot read {path}: {e}. Cannot verify OS version.") from e
        name = release.get("NAME", "")
        version = release.get("VERSION_ID", "")
        if name != cfg.os_name or version != cfg.os_version_id:
            raise PreconditionError(
                f"This provisioner is designed for {cfg.os_name} {cfg.os_version_id}. "
                f"Detected: {name or '?'} {version or '?'}"
            )
        logger.info("OS check passed: %s %s", name, version)


class RequireFreeSpace:
    check_id = "disk"
    label = "free disk space"

    def check(self, ctx: ProvisionCtx) -> None:
        mount = ctx.cfg.disk_mount
        required = ctx.cfg.min_free_gb
        try:
            free = host.free_space_gb(mount)
        except OSError as e:
            raise PreconditionError(f"Cannot read free space on {mount!r}: {e}") from e
        if free < required:
            raise PreconditionError(
                f"Not enough free space on {mount!r}. Required: >={required} GB. Found: {free} GB."
            )
        logger.info("Free space check passed: %s GB available on %r", free, mount)


class RequireArtifact:
    """The clone left behind by the pre-reboot phase is the only hand-off."""

    check_id = "artifact"
    label = "pre-reboot checkout present"

    def check(self, ctx: ProvisionCtx) -> None:
        path = ctx.boundless_dir
        if not Path(path).is_dir():
            raise PreconditionError(
                f"Directory {path!r} not found. Did you run the pre-reboot phase and reboot?"
            )


def build_preconditions(phase: Phase) -> List[Precondition]:
    if phase is Phase.PRE_REBOOT:
        return [RequireRoot(), RequireOS(), RequireFreeSpace()]
    return [RequireRoot(), RequireArtifact()]
