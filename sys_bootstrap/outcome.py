from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable


class Status(str, Enum):
    SKIPPED = "skipped"
    APPLIED = "applied"
    FAILED = "failed"


@dataclass(frozen=True)
class Outcome:
    """Result of one step.

    halt marks a successful step after which the run must stop and be
    started again (self-update merged, docker group needs a new login).
    """

    status: Status
    reason: str = ""
    halt: bool = False

    @classmethod
    def skipped(cls, reason: str = "") -> "Outcome":
        return cls(Status.SKIPPED, reason)

    @classmethod
    def applied(cls, reason: str = "", *, halt: bool = False) -> "Outcome":
        return cls(Status.APPLIED, reason, halt)

    @classmethod
    def failed(cls, reason: str) -> "Outcome":
        return cls(Status.FAILED, reason)

    @property
    def ok(self) -> bool:
        return self.status is not Status.FAILED

    @classmethod
    def combine(cls, outcomes: Iterable["Outcome"]) -> "Outcome":
        """Fold target outcomes into a step outcome: first failure wins, any change is applied."""

        outs = list(outcomes)
        for o in outs:
            if o.status is Status.FAILED:
                return o
        applied = [o for o in outs if o.status is Status.APPLIED]
        if applied:
            reasons = [o.reason for o in applied if o.reason]
            return cls.applied(", ".join(reasons), halt=any(o.halt for o in applied))
        return cls.skipped()
