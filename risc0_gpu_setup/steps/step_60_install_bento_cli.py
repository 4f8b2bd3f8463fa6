from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..sequencer import BaseStep

logger = logging.getLogger(__name__)


class InstallBentoCliStep(BaseStep):
    step_id = "60_install_bento_cli"
    label = "Build and install the benchmark client with cargo"
    run_as_operator = True

    def run(self, ctx: ProvisionCtx) -> None:
        cfg = ctx.cfg
        ctx.cmd(
            [
                ctx.tools.cargo,
                "install",
                "--git",
                cfg.bento_repo,
                "--branch",
                cfg.bento_branch,
                cfg.bento_package,
                "--bin",
                cfg.bento_bin,
            ],
            capture=False,
        )
        logger.info("%s installed at %s (branch %s)", cfg.bento_bin, ctx.tools.cargo_binary(cfg.bento_bin), cfg.bento_branch)
