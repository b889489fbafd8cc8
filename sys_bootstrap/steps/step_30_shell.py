from __future__ import annotations

from typing import List

from ..context import StepCtx
from ..targets import AptPackage, FileLine, Target
from .base import TargetsStep


class ShellStep(TargetsStep):
    step_id = "30_shell"
    requires = ("20_base_tools",)

    def targets(self, ctx: StepCtx) -> List[Target]:
        cfg = ctx.cfg
        targets: List[Target] = [AptPackage("zsh", "Zsh")]

        lines = list(cfg.zshrc_lines)
        if cfg.xrandr_enabled:
            lines += [
                "# xrandr",
                f"xrandr_hires() {{ xrandr --output {cfg.xrandr_output} --primary --mode {cfg.xrandr_mode} ; }}",
            ]
        targets += [FileLine(cfg.zshrc, line, label=f"~/.zshrc: {line}") for line in lines]
        return targets
