from __future__ import annotations

import logging
import time

from ..context import ProvisionCtx
from ..logging_utils import flush_logging
from ..sequencer import BaseStep

logger = logging.getLogger(__name__)


class RebootStep(BaseStep):
    step_id = "90_reboot"
    label = "Reboot to activate the GPU drivers"
    terminal = True

    def run(self, ctx: ProvisionCtx) -> None:
        logger.info("The system must reboot to finish the driver install.")
        logger.info("After reboot, SSH back in and run:  sudo risc0-gpu-setup post-reboot")

        delay = ctx.cfg.reboot_delay_s
        if delay > 0 and not ctx.dry_run:
            logger.info("Rebooting in %.0fs...", delay)
            time.sleep(delay)

        flush_logging()
        ctx.cmd(["sync"])
        ctx.cmd(["reboot"])
