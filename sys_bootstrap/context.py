from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from .config import BootstrapConfig
from .lib.command import Runner
from .lib.osinfo import OsInfo


def no_prompt(message: str) -> str:
    return ""


@dataclass(frozen=True)
class StepCtx:
    cfg: BootstrapConfig
    runner: Runner
    os_info: OsInfo
    # blocking operator prompt; input() in interactive runs
    prompt: Callable[[str], str] = field(default=no_prompt)

    @property
    def dry_run(self) -> bool:
        return self.runner.dry_run
