from __future__ import annotations

import logging

from ..context import StepCtx
from ..lib.pkg import apt_update_all
from ..outcome import Outcome

logger = logging.getLogger(__name__)


class AptUpdateStep:
    step_id = "05_apt_update"
    requires = ()

    def run(self, ctx: StepCtx) -> Outcome:
        logger.info("Checking for APT packages updates...")
        apt_update_all(ctx.runner)
        logger.info("APT packages up to date.")
        return Outcome.applied("apt update, dist-upgrade, autoremove")
