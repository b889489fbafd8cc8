from __future__ import annotations

from typing import List

from ..context import StepCtx
from ..targets import AptPackage, Target
from .base import TargetsStep


class CliUtilsStep(TargetsStep):
    step_id = "60_cli_utils"
    requires = ("05_apt_update",)

    def targets(self, ctx: StepCtx) -> List[Target]:
        return [
            AptPackage("tmux", "tmux"),
            AptPackage("jq", "jq"),
            AptPackage("httpie", "HTTPie"),
            AptPackage("silversearcher-ag", "Silver Searcher"),
        ]
