from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..context import StepCtx
from ..lib.system import reboot_required
from ..outcome import Outcome

logger = logging.getLogger(__name__)

BANNER = """
!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!
!!!                                                 !!!
!!!        /var/run/reboot-required says            !!!
!!!        *** System restart required ***          !!!
!!!                                                 !!!
!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!"""


class RebootRequiredStep:
    """Advisory: warn and wait for the operator when a reboot is pending."""

    step_id = "10_reboot_required"
    requires = ()

    def __init__(self, marker: Optional[Path] = None) -> None:
        self.marker = marker

    def run(self, ctx: StepCtx) -> Outcome:
        if not ctx.os_info.is_ubuntu:
            return Outcome.skipped("not ubuntu")
        if not reboot_required(self.marker):
            return Outcome.skipped("no reboot pending")

        logger.warning(BANNER)
        try:
            ctx.prompt("Press Enter to continue or Ctrl+C to exit. ")
        except EOFError:
            logger.error("No operator to confirm the pending reboot.")
            return Outcome.failed("no operator to confirm pending reboot; use --yes")
        return Outcome.skipped("reboot pending, continued")
