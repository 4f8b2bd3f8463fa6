from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

SNAP_BIN = "/snap/bin"
SYSTEM_PATH = "/usr/local/sbin:/usr/local/bin:/usr/sbin:/usr/bin:/sbin:/bin"


def user_home(user: str) -> str:
    import pwd

    try:
        return pwd.getpwnam(user).pw_dir
    except KeyError as e:
        raise RuntimeError(f"Operator user {user!r} does not exist on this host") from e


@dataclass(frozen=True)
class ToolPaths:
    """Absolute locations of tools that earlier steps install.

    Later steps call these paths directly rather than relying on a re-sourced
    shell profile picking them up.
    """

    home: str

    @classmethod
    def for_user(cls, user: str) -> "ToolPaths":
        return cls(home=user_home(user))

    @property
    def cargo_bin_dir(self) -> str:
        return str(Path(self.home) / ".cargo" / "bin")

    @property
    def risc0_bin_dir(self) -> str:
        return str(Path(self.home) / ".risc0" / "bin")

    @property
    def cargo(self) -> str:
        return str(Path(self.cargo_bin_dir) / "cargo")

    @property
    def rustc(self) -> str:
        return str(Path(self.cargo_bin_dir) / "rustc")

    @property
    def rzup(self) -> str:
        return str(Path(self.risc0_bin_dir) / "rzup")

    @property
    def just(self) -> str:
        return str(Path(SNAP_BIN) / "just")

    def cargo_binary(self, name: str) -> str:
        return str(Path(self.cargo_bin_dir) / name)

    def path_env(self, base: str | None = None) -> str:
        base = base if base is not None else os.environ.get("PATH", SYSTEM_PATH)
        return os.pathsep.join([self.risc0_bin_dir, self.cargo_bin_dir, SNAP_BIN, base])
