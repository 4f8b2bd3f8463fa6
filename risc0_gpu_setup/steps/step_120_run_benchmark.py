from __future__ import annotations

import logging
import time

from ..context import ProvisionCtx
from ..sequencer import BaseStep

logger = logging.getLogger(__name__)


class RunBenchmarkStep(BaseStep):
    step_id = "120_run_benchmark"
    label = "Run the multi-GPU benchmark"
    benchmark = True

    def run(self, ctx: ProvisionCtx) -> None:
        cfg = ctx.cfg
        argv = [
            ctx.tools.cargo_binary(cfg.bento_bin),
            *cfg.benchmark_extra_args,
            "-c",
            str(cfg.benchmark_concurrency),
        ]
        logger.info("Logging output as RUST_LOG=%s; this may take a few minutes the first time.", cfg.benchmark_rust_log)

        started = time.monotonic()
        try:
            ctx.cmd(
                argv,
                cwd=ctx.boundless_dir,
                env={"RUST_LOG": cfg.benchmark_rust_log, "PATH": ctx.tools.path_env()},
                capture=False,
            )
        finally:
            logger.info("Benchmark wall time: %.1fs", time.monotonic() - started)
        logger.info("RiscZero multi-GPU test completed successfully")
