from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..sequencer import BaseStep

logger = logging.getLogger(__name__)


class StackUpStep(BaseStep):
    step_id = "110_stack_up"
    label = "Bring up the Bento container stack"

    def run(self, ctx: ProvisionCtx) -> None:
        argv = list(ctx.cfg.stack_up_command)
        if argv and argv[0] == "just":
            argv[0] = ctx.tools.just
        ctx.cmd(
            argv,
            cwd=ctx.boundless_dir,
            env={"PATH": ctx.tools.path_env()},
            capture=False,
        )
        logger.info("Docker containers are now running")
