from __future__ import annotations

import logging
import shlex

from ..context import ProvisionCtx
from ..sequencer import BaseStep

logger = logging.getLogger(__name__)


class InstallRiscZeroStep(BaseStep):
    step_id = "50_install_risczero"
    label = "Install RiscZero (rzup + cargo-risczero) for the operator user"
    run_as_operator = True

    def run(self, ctx: ProvisionCtx) -> None:
        cfg = ctx.cfg

        ctx.shell(f"curl -L {shlex.quote(cfg.risczero_installer_url)} | bash", capture=False)

        rzup = ctx.tools.rzup
        ctx.cmd([rzup, "install", "cargo-risczero", cfg.cargo_risczero_version], capture=False)
        if cfg.install_risc0_rust:
            ctx.cmd([rzup, "install", "rust"], capture=False)

        logger.info("RiscZero installed (cargo-risczero v%s)", cfg.cargo_risczero_version)
