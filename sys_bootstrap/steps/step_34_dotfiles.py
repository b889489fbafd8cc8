from __future__ import annotations

from typing import List

from ..context import StepCtx
from ..targets import GitClone, InstalledFile, SshId, Target
from .base import TargetsStep


class DotfilesStep(TargetsStep):
    """Personal files, SSH ids on known servers and working copies."""

    step_id = "34_dotfiles"
    requires = ("32_git_config",)

    def targets(self, ctx: StepCtx) -> List[Target]:
        cfg = ctx.cfg
        targets: List[Target] = [
            InstalledFile(f.source, f.destination, f.mode, gpg_recipient=cfg.gpg_recipient)
            for f in cfg.files
        ]
        targets += [SshId(server) for server in cfg.ssh_ids]
        targets += [GitClone(r.url, r.destination) for r in cfg.repos]
        return targets
