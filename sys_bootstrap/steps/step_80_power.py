from __future__ import annotations

from pathlib import Path
from typing import List

from ..context import StepCtx
from ..targets import AcpiWakeupDisabled, FileLine, Target
from .base import TargetsStep

LOGIND_CONF = Path("/etc/systemd/logind.conf")


class PowerStep(TargetsStep):
    """logind settings (e.g. HandleLidSwitch=ignore) and ACPI wakeup sources."""

    step_id = "80_power"
    requires = ()

    def targets(self, ctx: StepCtx) -> List[Target]:
        targets: List[Target] = [
            FileLine(LOGIND_CONF, line, elevated=True, label=f"logind {line}")
            for line in ctx.cfg.logind_lines
        ]
        targets += [AcpiWakeupDisabled(device) for device in ctx.cfg.acpi_wakeup_disable]
        return targets
