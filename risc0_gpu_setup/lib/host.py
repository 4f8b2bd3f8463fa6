from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Dict

GIB = 1024**3


def effective_uid() -> int:
    return os.geteuid()


def read_os_release(path: str = "/etc/os-release") -> Dict[str, str]:
    """Parse os-release(5) KEY=value lines, stripping optional quotes."""

    data: Dict[str, str] = {}
    for line in Path(path).read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
            value = value[1:-1]
        data[key.strip()] = value
    return data


def free_space_gb(mount: str) -> int:
    # Integer division, same rounding as `df` output divided down to GB.
    return shutil.disk_usage(mount).free // GIB
