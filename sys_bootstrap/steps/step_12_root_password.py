from __future__ import annotations

import logging

from ..context import StepCtx
from ..lib.system import lock_root_password, root_password_status
from ..outcome import Outcome

logger = logging.getLogger(__name__)


class RootPasswordStep:
    step_id = "12_root_password"
    requires = ()

    def run(self, ctx: StepCtx) -> Outcome:
        if not ctx.os_info.is_linux:
            return Outcome.skipped("not linux")

        logger.info("Checking root password...")
        if root_password_status(ctx.runner) == "P":
            logger.info("Root password is enabled, locking now...")
            lock_root_password(ctx.runner)
            logger.info("Root password is locked.")
            return Outcome.applied("root password locked")
        logger.info("Root password is locked.")
        return Outcome.skipped()
