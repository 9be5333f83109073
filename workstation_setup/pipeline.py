from __future__ import annotations

import enum
import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Sequence

from .context import RunContext
from .logging_utils import section

logger = logging.getLogger(__name__)


class Step(Protocol):
    """A single idempotent step.

    probe() reports whether the target is already present; install() is
    only called when it is not.
    """

    step_id: str
    title: str

    def probe(self, ctx: RunContext) -> bool:
        ...

    def install(self, ctx: RunContext) -> None:
        ...


class StepOutcome(str, enum.Enum):
    INSTALLED = "installed"
    ALREADY_PRESENT = "already_present"
    FAILED = "failed"


@dataclass(frozen=True)
class StepRecord:
    step_id: str
    outcome: StepOutcome
    detail: str = ""

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["outcome"] = self.outcome.value
        return d


@dataclass(frozen=True)
class PipelineResult:
    records: List[StepRecord] = field(default_factory=list)

    @property
    def installed(self) -> List[str]:
        return [r.step_id for r in self.records if r.outcome is StepOutcome.INSTALLED]

    @property
    def already_present(self) -> List[str]:
        return [r.step_id for r in self.records if r.outcome is StepOutcome.ALREADY_PRESENT]


class PipelineAborted(RuntimeError):
    def __init__(self, step_id: str, records: List[StepRecord], cause: BaseException) -> None:
        self.step_id = step_id
        self.records = records
        self.cause = cause
        super().__init__(f"Step {step_id} failed: {cause}")


def decide(step: Step, ctx: RunContext) -> Optional[Step]:
    """Return the step if it has work to do, None if its target is present."""

    return None if step.probe(ctx) else step


def select_window(
    steps: Sequence[Step],
    *,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
) -> List[Step]:
    ids = [s.step_id for s in steps]
    for wanted in (start_at, stop_after):
        if wanted is not None and wanted not in ids:
            raise ValueError(f"Unknown step id: {wanted}")

    out: List[Step] = []
    started = start_at is None
    for step in steps:
        if not started:
            if step.step_id != start_at:
                continue
            started = True
        out.append(step)
        if stop_after is not None and step.step_id == stop_after:
            break
    return out


def run_pipeline(
    *,
    ctx: RunContext,
    steps: Sequence[Step],
    state: Optional[Dict[str, Any]] = None,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
) -> PipelineResult:
    """Run steps in order; stop at the first failure."""

    records: List[StepRecord] = []
    exe = (state if state is not None else {}).setdefault("execution", {})

    for step in select_window(steps, start_at=start_at, stop_after=stop_after):
        exe["current_step"] = step.step_id
        section(step.title, logger)
        try:
            action = decide(step, ctx)
            if action is None:
                logger.info("%s: already present, skipping", step.step_id)
                on_present = getattr(step, "on_present", None)
                if on_present is not None:
                    on_present(ctx)
                records.append(StepRecord(step.step_id, StepOutcome.ALREADY_PRESENT))
            else:
                logger.info("Running step %s", step.step_id)
                action.install(ctx)
                records.append(StepRecord(step.step_id, StepOutcome.INSTALLED))
        except Exception as e:
            records.append(StepRecord(step.step_id, StepOutcome.FAILED, detail=str(e)))
            exe["records"] = [r.to_dict() for r in records]
            raise PipelineAborted(step.step_id, records, e) from e
        exe["records"] = [r.to_dict() for r in records]

    exe["current_step"] = None
    return PipelineResult(records=records)
