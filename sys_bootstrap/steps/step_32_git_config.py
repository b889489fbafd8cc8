from __future__ import annotations

from typing import List

from ..context import StepCtx
from ..targets import GitConfigValue, Target
from .base import TargetsStep


class GitConfigStep(TargetsStep):
    step_id = "32_git_config"
    requires = ("20_base_tools",)

    def targets(self, ctx: StepCtx) -> List[Target]:
        return [GitConfigValue(k, v) for k, v in ctx.cfg.git_settings.items()]
