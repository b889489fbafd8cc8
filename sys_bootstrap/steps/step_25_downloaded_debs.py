from __future__ import annotations

from typing import List

from ..context import StepCtx
from ..targets import DownloadedInstaller, Target
from .base import TargetsStep


class DownloadedDebsStep(TargetsStep):
    """Packages shipped only as .deb downloads (config: downloads)."""

    step_id = "25_downloaded_debs"
    requires = ("20_base_tools",)

    def targets(self, ctx: StepCtx) -> List[Target]:
        return [
            DownloadedInstaller(package=d.package, label=d.label, url=d.url)
            for d in ctx.cfg.downloads
        ]
