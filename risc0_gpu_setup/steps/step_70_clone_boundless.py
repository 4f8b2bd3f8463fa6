from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..lib.git import clone_or_update
from ..sequencer import BaseStep

logger = logging.getLogger(__name__)


class CloneBoundlessStep(BaseStep):
    step_id = "70_clone_boundless"
    label = "Clone or update the Boundless repository"
    run_as_operator = True

    def run(self, ctx: ProvisionCtx) -> None:
        cfg = ctx.cfg
        action = clone_or_update(cfg.boundless_repo, ctx.boundless_dir, cfg.boundless_branch, run=ctx.cmd)
        logger.info("Boundless %s at %s (branch %s)", action, ctx.boundless_dir, cfg.boundless_branch)
