from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from .command import run_cmd

logger = logging.getLogger(__name__)


def clone_or_update(
    repo: str,
    dest: str,
    branch: str,
    *,
    run: Callable[..., object] = run_cmd,
) -> str:
    """Clone ``repo`` at ``branch`` into ``dest``, or refresh an existing checkout.

    ``run`` executes each git command (a step context's runner, normally).
    Returns "cloned" or "updated".
    """

    if Path(dest).is_dir():
        logger.info("%s already exists; updating branch %s", dest, branch)
        run(["git", "fetch"], cwd=dest)
        run(["git", "checkout", branch], cwd=dest)
        run(["git", "pull", "origin", branch], cwd=dest)
        return "updated"

    run(["git", "clone", repo, dest])
    run(["git", "checkout", branch], cwd=dest)
    return "cloned"
