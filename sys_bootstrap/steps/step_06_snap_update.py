from __future__ import annotations

import logging
import shutil

from ..context import StepCtx
from ..lib.pkg import snap_refresh
from ..outcome import Outcome

logger = logging.getLogger(__name__)


class SnapUpdateStep:
    step_id = "06_snap_update"
    requires = ()

    def run(self, ctx: StepCtx) -> Outcome:
        if shutil.which("snap") is None:
            logger.warning("snap not installed, skipping snap refresh.")
            return Outcome.skipped("snap not installed")

        logger.info("Checking for snap packages updates...")
        snap_refresh(ctx.runner)
        logger.info("snap packages up to date.")
        return Outcome.applied("snap refresh")
