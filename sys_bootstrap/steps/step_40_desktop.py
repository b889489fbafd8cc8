from __future__ import annotations

from typing import List

from ..context import StepCtx
from ..targets import AptPackage, SnapPackage, Target
from .base import TargetsStep


class DesktopStep(TargetsStep):
    step_id = "40_desktop"
    requires = ("05_apt_update",)

    def targets(self, ctx: StepCtx) -> List[Target]:
        targets: List[Target] = [
            AptPackage("i3", "i3"),
            AptPackage("vim", "Vim"),
            AptPackage("ubuntu-restricted-extras", "Ubuntu Restricted Extras"),
            AptPackage("chromium-browser", "Chromium"),
        ]
        targets += [SnapPackage(s.package, s.label, tuple(s.options)) for s in ctx.cfg.snaps]
        return targets
