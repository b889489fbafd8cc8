from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

from .context import StepCtx
from .lib.command import CommandError
from .outcome import Outcome, Status

logger = logging.getLogger(__name__)


class Step(Protocol):
    """A single idempotent step."""

    step_id: str
    requires: Tuple[str, ...]

    def run(self, ctx: StepCtx) -> Outcome:
        ...


class PipelineError(ValueError):
    pass


class StepError(RuntimeError):
    """A step cannot reach its desired state for a reason it can name."""


@dataclass
class PipelineResult:
    outcomes: Dict[str, Outcome] = field(default_factory=dict)
    not_run: List[str] = field(default_factory=list)
    halted_by: Optional[str] = None

    def _ids(self, status: Status) -> List[str]:
        return [sid for sid, o in self.outcomes.items() if o.status is status]

    @property
    def applied(self) -> List[str]:
        return self._ids(Status.APPLIED)

    @property
    def skipped(self) -> List[str]:
        return self._ids(Status.SKIPPED)

    @property
    def failed(self) -> List[str]:
        return self._ids(Status.FAILED)

    @property
    def ok(self) -> bool:
        return not self.failed


def validate_steps(steps: Sequence[Step]) -> None:
    """Reject duplicate ids and prerequisites that are unknown or not earlier."""

    seen: List[str] = []
    all_ids = [s.step_id for s in steps]
    for step in steps:
        if step.step_id in seen:
            raise PipelineError(f"Duplicate step id: {step.step_id}")
        for req in step.requires:
            if req not in all_ids:
                raise PipelineError(f"Step {step.step_id} requires unknown step {req}")
            if req not in seen:
                raise PipelineError(f"Step {step.step_id} requires {req}, which runs after it")
        seen.append(step.step_id)


def _blocked_by(step: Step, outcomes: Dict[str, Outcome], disabled: Iterable[str]) -> Optional[Outcome]:
    disabled = set(disabled)
    for req in step.requires:
        if req in disabled:
            return Outcome.skipped(f"prerequisite {req} disabled")
        prior = outcomes.get(req)
        if prior is None:
            return Outcome.failed(f"prerequisite {req} did not run")
        if prior.status is Status.FAILED:
            return Outcome.failed(f"prerequisite {req} failed")
    return None


def run_step(ctx: StepCtx, step: Step) -> Outcome:
    """Run one step, turning command and filesystem errors into a failed outcome."""

    try:
        return step.run(ctx)
    except (CommandError, StepError) as e:
        logger.error("Step %s failed: %s", step.step_id, e)
        return Outcome.failed(str(e))
    except OSError as e:
        logger.error("Step %s failed: %s", step.step_id, e)
        return Outcome.failed(f"{type(e).__name__}: {e}")


def run_pipeline(
    *,
    ctx: StepCtx,
    steps: Sequence[Step],
    fail_fast: bool = True,
    disabled: Sequence[str] = (),
) -> PipelineResult:
    """Run steps in order.

    fail_fast stops at the first failure. A halting outcome always stops the
    run (successfully). Everything not reached is listed in not_run.
    """

    validate_steps(steps)
    unknown = sorted(set(disabled) - {s.step_id for s in steps})
    if unknown:
        logger.warning("Unknown steps in disabled_steps: %s", ", ".join(unknown))

    result = PipelineResult()
    for idx, step in enumerate(steps):
        if step.step_id in disabled:
            logger.info("Skipping step %s (disabled)", step.step_id)
            outcome = Outcome.skipped("disabled")
        else:
            blocked = _blocked_by(step, result.outcomes, disabled)
            if blocked is not None:
                logger.warning("Not running step %s: %s", step.step_id, blocked.reason)
                outcome = blocked
            else:
                logger.info("Running step %s", step.step_id)
                outcome = run_step(ctx, step)
        result.outcomes[step.step_id] = outcome

        if outcome.halt:
            logger.info("Step %s asks to stop the run", step.step_id)
            result.halted_by = step.step_id
        elif outcome.status is Status.FAILED and fail_fast:
            logger.error("Stopping after failed step %s", step.step_id)

        if result.halted_by or (outcome.status is Status.FAILED and fail_fast):
            result.not_run = [s.step_id for s in steps[idx + 1 :]]
            break

    return result


def report_lines(result: PipelineResult) -> List[str]:
    lines = [
        f"applied={len(result.applied)} skipped={len(result.skipped)} "
        f"failed={len(result.failed)} not_run={len(result.not_run)}"
    ]
    for sid, o in result.outcomes.items():
        line = f"  {sid:<22} {o.status.value}"
        if o.reason:
            line += f": {o.reason}"
        lines.append(line)
    for sid in result.not_run:
        lines.append(f"  {sid:<22} not run")
    return lines


def log_report(result: PipelineResult) -> None:
    for line in report_lines(result):
        if line.strip().split(" ")[0] in result.failed:
            logger.error(line)
        else:
            logger.info(line)
    if result.halted_by:
        logger.warning("Run stopped by %s. Run again to continue.", result.halted_by)
    elif result.ok:
        logger.info("Great Success!")
