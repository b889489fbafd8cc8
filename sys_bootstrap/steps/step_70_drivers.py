from __future__ import annotations

import logging
from typing import List

from ..context import StepCtx
from ..lib.pkg import recommended_drivers
from ..targets import AptPackage, Target
from .base import TargetsStep

logger = logging.getLogger(__name__)


class DriversStep(TargetsStep):
    """Configured driver packages plus, with drivers.autoinstall, the ones
    `ubuntu-drivers` recommends. Each is installed only when missing."""

    step_id = "70_drivers"
    requires = ("05_apt_update",)

    def targets(self, ctx: StepCtx) -> List[Target]:
        packages = list(ctx.cfg.driver_packages)
        if ctx.cfg.drivers_autoinstall:
            logger.info("Checking recommended drivers...")
            packages += [p for p in recommended_drivers(ctx.runner) if p not in packages]
        return [AptPackage(p) for p in packages]
