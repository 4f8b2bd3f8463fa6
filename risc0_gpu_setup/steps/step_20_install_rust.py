from __future__ import annotations

import logging
import shlex

from ..context import ProvisionCtx
from ..sequencer import BaseStep

logger = logging.getLogger(__name__)


class InstallRustStep(BaseStep):
    step_id = "20_install_rust"
    label = "Install Rust (rustup) for the operator user"
    run_as_operator = True

    def run(self, ctx: ProvisionCtx) -> None:
        url = shlex.quote(ctx.cfg.rustup_url)
        # rustup-init with -y is safe to re-run over an existing toolchain.
        ctx.shell(f"curl --proto '=https' --tlsv1.2 -sSf {url} | sh -s -- -y", capture=False)
        r = ctx.cmd([ctx.tools.rustc, "--version"])
        logger.info("Rust installed under %s (%s)", ctx.tools.cargo_bin_dir, r.stdout.strip() or "version unknown")
