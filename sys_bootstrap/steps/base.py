from __future__ import annotations

import logging
from typing import List, Tuple

from ..context import StepCtx
from ..outcome import Outcome
from ..targets import Target, check_install_all

logger = logging.getLogger(__name__)


class TargetsStep:
    """A step that is nothing but a list of desired-state targets."""

    step_id = ""
    requires: Tuple[str, ...] = ()

    def targets(self, ctx: StepCtx) -> List[Target]:
        raise NotImplementedError

    def run(self, ctx: StepCtx) -> Outcome:
        targets = self.targets(ctx)
        if not targets:
            return Outcome.skipped("nothing configured")
        return check_install_all(ctx, targets)
