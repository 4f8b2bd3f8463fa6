from __future__ import annotations

import argparse
import logging
from typing import Any, Dict, List, Optional

from .config import ProvisionConfig, load_config
from .context import Phase, ProvisionCtx
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .preconditions import build_preconditions
from .sequencer import RunOutcome, Step, run_phase, select_steps
from .steps import (
    CloneBoundlessStep,
    InstallBentoCliStep,
    InstallBuildDepsStep,
    InstallDriversStep,
    InstallMonitoringStep,
    InstallRiscZeroStep,
    InstallRustStep,
    RebootStep,
    RunBenchmarkStep,
    StackUpStep,
)

logger = logging.getLogger(__name__)


def build_steps(phase: Phase, cfg: ProvisionConfig) -> List[Step]:
    if phase is Phase.PRE_REBOOT:
        return [
            InstallRustStep(),
            InstallBuildDepsStep(),
            InstallMonitoringStep(required=cfg.monitoring_required),
            InstallRiscZeroStep(),
            InstallBentoCliStep(),
            CloneBoundlessStep(),
            InstallDriversStep(),
            RebootStep(),
        ]
    return [
        StackUpStep(),
        RunBenchmarkStep(),
    ]


def run(
    phase: Phase,
    cfg: ProvisionConfig,
    *,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    dry_run: bool = False,
    ctx: Optional[ProvisionCtx] = None,
) -> RunOutcome:
    """Run one provisioning phase and log a per-step summary.

    Raises ValueError for an unknown or reversed start_at/stop_after pair.
    """

    steps = select_steps(build_steps(phase, cfg), start_at=start_at, stop_after=stop_after)

    if ctx is None:
        try:
            ctx = ProvisionCtx.create(cfg, phase, dry_run=dry_run)
        except RuntimeError as e:
            logger.error("ERROR: %s", e)
            return RunOutcome(phase=phase, precondition_error=str(e))

    banner = "=" * 68
    logger.info(banner)
    logger.info("RiscZero Multi-GPU Setup: %s PHASE%s", phase.value.upper(), " (dry run)" if ctx.dry_run else "")
    logger.info(banner)

    try:
        outcome = run_phase(
            ctx,
            preconditions=build_preconditions(phase),
            steps=steps,
        )
    except Exception:
        logger.exception("Provisioning failed unexpectedly")
        raise

    for line in outcome.summary_lines():
        if outcome.exit_code == 0:
            logger.info("%s", line)
        else:
            logger.warning("%s", line)
    return outcome


def _overrides(args: argparse.Namespace) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if args.user:
        out["operator_user"] = args.user
    if args.min_free_gb is not None:
        out["disk"] = {"min_free_gb": args.min_free_gb}
    return out


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(
        prog="risc0-gpu-setup",
        description="Provision a multi-GPU Ubuntu host for RiscZero proving in two phases around a reboot.",
    )
    p.add_argument(
        "phase",
        nargs="?",
        default=None,
        choices=[ph.value for ph in Phase],
        help="Phase to run (default: pre-reboot)",
    )
    p.add_argument("--config", default=None, help="Path to provisioning options (yaml)")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to provisioning log")
    p.add_argument("--user", default=None, help="Unprivileged operator account (default: ubuntu)")
    p.add_argument("--min-free-gb", type=int, default=None, help="Minimum free space on the checked mount")
    p.add_argument("--start-at", default=None, help="Start at step_id (e.g. 120_run_benchmark)")
    p.add_argument("--stop-after", default=None, help="Stop after step_id")
    p.add_argument("--dry-run", action="store_true", help="Log commands without running them")
    p.add_argument("-v", "--verbose", action="store_true", help="Log command output")

    args = p.parse_args(argv)

    configure_logging(log_path=args.log, verbose=args.verbose)

    phase = Phase.from_arg(args.phase)
    try:
        cfg = load_config(args.config, overrides=_overrides(args))
    except (FileNotFoundError, ValueError) as e:
        p.error(f"cannot load config: {e}")

    try:
        outcome = run(
            phase,
            cfg,
            start_at=args.start_at,
            stop_after=args.stop_after,
            dry_run=args.dry_run,
        )
    except ValueError as e:
        p.error(str(e))
    return outcome.exit_code
