from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence

from .context import Phase, ProvisionCtx
from .lib.command import CommandError
from .preconditions import Precondition, PreconditionError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_PRECONDITION = 1
EXIT_STEP_FAILED = 3
EXIT_BENCHMARK_FAILED = 4

PASSED = "passed"
FAILED = "failed"
TOLERATED = "tolerated"
WARNING = "warning"


class StepError(RuntimeError):
    """A step could not complete for a reason other than a command exit code."""


class Step(Protocol):
    """A single idempotent step."""

    step_id: str
    label: str
    tolerate_failure: bool
    benchmark: bool
    terminal: bool
    run_as_operator: bool

    def run(self, ctx: ProvisionCtx) -> None:
        ...


class BaseStep:
    step_id = ""
    label = ""
    # Failure is logged and the phase continues.
    tolerate_failure = False
    # Failure is reported as a warning distinct from infrastructure failures.
    benchmark = False
    # Nothing may run after this step (the host is going down).
    terminal = False
    # Commands run through ctx.cmd drop to the unprivileged operator account.
    run_as_operator = False

    def run(self, ctx: ProvisionCtx) -> None:
        raise NotImplementedError


@dataclass
class StepOutcome:
    step_id: str
    label: str
    status: str
    duration_s: float = 0.0
    error: Optional[str] = None


@dataclass
class RunOutcome:
    phase: Phase
    steps: List[StepOutcome] = field(default_factory=list)
    precondition_error: Optional[str] = None
    rebooted: bool = False

    @property
    def infrastructure_ok(self) -> bool:
        return self.precondition_error is None and all(s.status != FAILED for s in self.steps)

    @property
    def benchmark_failed(self) -> bool:
        return any(s.status == WARNING for s in self.steps)

    @property
    def exit_code(self) -> int:
        if self.precondition_error is not None:
            return EXIT_PRECONDITION
        if not self.infrastructure_ok:
            return EXIT_STEP_FAILED
        if self.benchmark_failed:
            return EXIT_BENCHMARK_FAILED
        return EXIT_OK

    def step_ids(self, status: Optional[str] = None) -> List[str]:
        return [s.step_id for s in self.steps if status is None or s.status == status]

    def summary_lines(self) -> List[str]:
        lines = [f"{self.phase.value} summary:"]
        if self.precondition_error is not None:
            lines.append(f"  precondition failed: {self.precondition_error}")
        for s in self.steps:
            line = f"  [{s.status}] {s.step_id} ({s.label}) {s.duration_s:.1f}s"
            if s.error:
                line += f": {s.error.splitlines()[0]}"
            lines.append(line)
        if self.precondition_error is None:
            if not self.infrastructure_ok:
                lines.append("  result: infrastructure step failed; fix the cause and re-run this phase")
            elif self.benchmark_failed:
                lines.append("  result: infrastructure succeeded, benchmark failed")
            elif self.rebooted:
                lines.append("  result: rebooting")
            else:
                lines.append("  result: success")
        return lines


def select_steps(
    steps: Sequence[Step],
    *,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
) -> List[Step]:
    ids = [s.step_id for s in steps]
    for wanted in (start_at, stop_after):
        if wanted is not None and wanted not in ids:
            raise ValueError(f"Unknown step_id {wanted!r} (known: {', '.join(ids)})")
    if start_at is not None and stop_after is not None and ids.index(start_at) > ids.index(stop_after):
        raise ValueError(f"--start-at {start_at!r} comes after --stop-after {stop_after!r}")

    selected: List[Step] = []
    started = start_at is None
    for step in steps:
        if not started:
            if step.step_id == start_at:
                started = True
            else:
                continue
        selected.append(step)
        if stop_after is not None and step.step_id == stop_after:
            break
    return selected


def check_preconditions(ctx: ProvisionCtx, preconditions: Sequence[Precondition]) -> None:
    for pre in preconditions:
        logger.info("Checking %s", pre.label)
        pre.check(ctx)


def run_phase(
    ctx: ProvisionCtx,
    *,
    preconditions: Sequence[Precondition],
    steps: Sequence[Step],
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
) -> RunOutcome:
    """Check preconditions, then run steps in order, stopping at the first fatal failure."""

    outcome = RunOutcome(phase=ctx.phase)
    selected = select_steps(steps, start_at=start_at, stop_after=stop_after)

    try:
        check_preconditions(ctx, preconditions)
    except PreconditionError as e:
        logger.error("ERROR: %s", e)
        outcome.precondition_error = str(e)
        return outcome

    for step in selected:
        logger.info("=== Step %s: %s ===", step.step_id, step.label)
        started = time.monotonic()
        try:
            step.run(ctx.for_step(step))
        except Exception as e:
            elapsed = time.monotonic() - started
            if not isinstance(e, (CommandError, StepError)):
                logger.exception("Step %s raised unexpectedly", step.step_id)
            if step.benchmark:
                logger.warning("WARNING: %s exited with a failure: %s", step.step_id, e)
                logger.warning("You may want to inspect logs or rerun the benchmark manually.")
                outcome.steps.append(StepOutcome(step.step_id, step.label, WARNING, elapsed, str(e)))
                continue
            if step.tolerate_failure:
                logger.warning("Step %s failed, continuing: %s", step.step_id, e)
                outcome.steps.append(StepOutcome(step.step_id, step.label, TOLERATED, elapsed, str(e)))
                continue
            logger.error("ERROR: step %s failed: %s", step.step_id, e)
            outcome.steps.append(StepOutcome(step.step_id, step.label, FAILED, elapsed, str(e)))
            return outcome

        outcome.steps.append(StepOutcome(step.step_id, step.label, PASSED, time.monotonic() - started))
        if step.terminal:
            outcome.rebooted = True
            break

    return outcome
