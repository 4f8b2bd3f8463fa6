from __future__ import annotations

import logging
import shlex
from pathlib import Path

from ..context import ProvisionCtx
from ..sequencer import BaseStep, StepError

logger = logging.getLogger(__name__)


class InstallDriversStep(BaseStep):
    step_id = "80_install_drivers"
    label = "Install NVIDIA drivers and Docker via the Boundless setup script"

    def run(self, ctx: ProvisionCtx) -> None:
        repo_dir = ctx.boundless_dir
        rel = ctx.cfg.boundless_setup_script
        script = Path(repo_dir) / rel
        if not ctx.dry_run and not script.is_file():
            raise StepError(f"Setup script missing: {script}")

        ctx.cmd(["chmod", "+x", str(script)])
        # Answer yes to every prompt. No pipefail: `yes` always dies of SIGPIPE,
        # the script's own status is the one that counts.
        ctx.cmd(
            ["bash", "-c", f"yes | ./{shlex.quote(rel)}"],
            cwd=repo_dir,
            env={"PATH": ctx.tools.path_env()},
            capture=False,
        )
        logger.info("NVIDIA drivers, Docker and nvidia-docker installed; a reboot is required")
