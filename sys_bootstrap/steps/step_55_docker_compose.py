from __future__ import annotations

import platform
from typing import List

from ..context import StepCtx
from ..targets import DownloadedBinary, Target
from .base import TargetsStep

COMPOSE_URL = "https://github.com/docker/compose/releases/download/{version}/docker-compose-{system}-{machine}"


class DockerComposeStep(TargetsStep):
    step_id = "55_docker_compose"
    requires = ("50_docker",)

    def targets(self, ctx: StepCtx) -> List[Target]:
        uname = platform.uname()
        url = COMPOSE_URL.format(
            version=ctx.cfg.docker_compose_version,
            system=uname.system,
            machine=uname.machine,
        )
        return [
            DownloadedBinary(
                command="docker-compose",
                label="Docker Compose",
                url=url,
                path="/usr/local/bin/docker-compose",
            )
        ]
