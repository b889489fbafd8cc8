from __future__ import annotations

from typing import List

from ..context import StepCtx
from ..targets import AptPackage, Target
from .base import TargetsStep


class BaseToolsStep(TargetsStep):
    step_id = "20_base_tools"
    requires = ("05_apt_update",)

    def targets(self, ctx: StepCtx) -> List[Target]:
        return [
            AptPackage("curl", "cURL"),
            AptPackage("openssh-client", "SSH Client"),
            AptPackage("openssh-server", "SSH Server"),
            AptPackage("autossh", "auto SSH"),
            AptPackage("rsync", "Rsync"),
            AptPackage("git", "Git"),
            AptPackage("gitk", "GitK"),
        ]
