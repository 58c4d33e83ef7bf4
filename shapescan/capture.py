# shapescan/capture.py
"""
Capture workflow as an explicit state machine.

    idle       --start-->    capturing
    capturing  --sample-->   capturing
    capturing  --analyze-->  analyzing
    analyzing  --complete--> done
    capturing, analyzing  --fail--> error
    done, error           --reset--> idle

Sessions are immutable; every step returns a new ``CaptureSession``.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from shapescan.aggregate import AggregateResult, Sample, aggregate_samples, collect_sample
from shapescan.errors import AnalysisFailure


class Phase(str, Enum):
    IDLE = "idle"
    CAPTURING = "capturing"
    ANALYZING = "analyzing"
    DONE = "done"
    ERROR = "error"


class Event(str, Enum):
    START = "start"
    SAMPLE = "sample"
    ANALYZE = "analyze"
    COMPLETE = "complete"
    FAIL = "fail"
    RESET = "reset"


class InvalidTransition(Exception):
    def __init__(self, phase: Phase, event: Event):
        super().__init__(f"Cannot {event.value} while {phase.value}")
        self.phase = phase
        self.event = event


TRANSITIONS: Dict[Tuple[Phase, Event], Phase] = {
    (Phase.IDLE, Event.START): Phase.CAPTURING,
    (Phase.CAPTURING, Event.SAMPLE): Phase.CAPTURING,
    (Phase.CAPTURING, Event.ANALYZE): Phase.ANALYZING,
    (Phase.CAPTURING, Event.FAIL): Phase.ERROR,
    (Phase.ANALYZING, Event.COMPLETE): Phase.DONE,
    (Phase.ANALYZING, Event.FAIL): Phase.ERROR,
    (Phase.DONE, Event.RESET): Phase.IDLE,
    (Phase.ERROR, Event.RESET): Phase.IDLE,
}


def transition(phase: Phase, event: Event) -> Phase:
    try:
        return TRANSITIONS[(phase, event)]
    except KeyError:
        raise InvalidTransition(phase, event) from None


@dataclass(frozen=True)
class CaptureSession:
    phase: Phase = Phase.IDLE
    samples: Tuple[Sample, ...] = ()
    frames_seen: int = 0
    result: Optional[AggregateResult] = None
    failure: Optional[AnalysisFailure] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phase": self.phase.value,
            "frames_seen": self.frames_seen,
            "samples": len(self.samples),
            "result": None if self.result is None else self.result.to_dict(),
            "failure": None if self.failure is None else self.failure.message,
        }


def start(session: CaptureSession) -> CaptureSession:
    return replace(session, phase=transition(session.phase, Event.START),
                   samples=(), frames_seen=0, result=None, failure=None)


def add_frame(session: CaptureSession, landmarks) -> CaptureSession:
    """Record one detected frame; ``None`` means the detector saw no face."""
    phase = transition(session.phase, Event.SAMPLE)
    samples = session.samples
    if landmarks is not None:
        sample = collect_sample(landmarks)
        if sample.face is not None:
            samples = samples + (sample,)
    return replace(session, phase=phase, samples=samples, frames_seen=session.frames_seen + 1)


def fail(session: CaptureSession, failure: AnalysisFailure) -> CaptureSession:
    return replace(session, phase=transition(session.phase, Event.FAIL), failure=failure)


def finish(session: CaptureSession) -> CaptureSession:
    """Aggregate the collected samples and land in ``done`` or ``error``."""
    analyzing = replace(session, phase=transition(session.phase, Event.ANALYZE))
    out = aggregate_samples(analyzing.samples)
    if isinstance(out, AnalysisFailure):
        return fail(analyzing, out)
    return replace(analyzing, phase=transition(analyzing.phase, Event.COMPLETE), result=out)


def reset(session: CaptureSession) -> CaptureSession:
    return CaptureSession(phase=transition(session.phase, Event.RESET))
