from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from ..context import StepCtx
from ..lib.files import sudo_write_file
from ..lib.pkg import add_apt_source, apt_install, apt_package_installed, apt_update, dpkg_architecture
from ..outcome import Outcome
from ..pipeline import StepError

logger = logging.getLogger(__name__)

DOCKER_KEY_URL = "https://download.docker.com/linux/ubuntu/gpg"
DOCKER_KEYRING = Path("/etc/apt/keyrings/docker.gpg")
DOCKER_LIST = Path("/etc/apt/sources.list.d/docker.list")
DAEMON_JSON = Path("/etc/docker/daemon.json")
ETC_GROUP = Path("/etc/group")

PREREQUISITES = [
    "apt-transport-https",
    "ca-certificates",
    "curl",
    "software-properties-common",
    "gnupg",
]

RESTART_BANNER = """
!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!
!!!                                                 !!!
!!!        YOU NEED TO RESTART TO USE DOCKER        !!!
!!!                                                 !!!
!!!        RESTART AND RUN AGAIN                    !!!
!!!                                                 !!!
!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!!"""


def group_exists(name: str, group_file: Optional[Path] = None) -> bool:
    try:
        text = (group_file or ETC_GROUP).read_text(encoding="utf-8", errors="ignore")
    except FileNotFoundError:
        return False
    return any(line.split(":", 1)[0] == name for line in text.splitlines())


class DockerStep:
    """Docker CE from Docker's apt repository.

    Group membership only applies to new logins, so a fresh install stops
    the run and asks for a restart.
    """

    step_id = "50_docker"
    requires = ("20_base_tools",)

    def __init__(self, group_file: Optional[Path] = None) -> None:
        self.group_file = group_file

    def run(self, ctx: StepCtx) -> Outcome:
        runner = ctx.runner
        logger.info("Checking Docker...")
        if apt_package_installed(runner, "docker-ce"):
            logger.info("Docker is installed.")
            return Outcome.skipped()

        codename = ctx.os_info.codename
        if not codename:
            raise StepError("cannot determine the distribution codename for the Docker repository")
        user = ctx.cfg.user
        if not user:
            raise StepError("USER is not set; cannot add it to the docker group")

        logger.info("Installing Docker...")
        apt_install(runner, PREREQUISITES)
        arch = dpkg_architecture(runner)
        add_apt_source(
            runner,
            key_url=DOCKER_KEY_URL,
            keyring=DOCKER_KEYRING,
            list_file=DOCKER_LIST,
            line=(
                f"deb [arch={arch} signed-by={DOCKER_KEYRING}] "
                f"https://download.docker.com/linux/ubuntu {codename} {ctx.cfg.docker_channel}"
            ),
        )
        apt_update(runner)
        apt_install(runner, ["docker-ce"])

        if not group_exists("docker", self.group_file):
            runner.run(["groupadd", "docker"], sudo=True)
        runner.run(["usermod", "-aG", "docker", user], sudo=True)

        sudo_write_file(runner, DAEMON_JSON, json.dumps(ctx.cfg.docker_daemon, indent=2) + "\n")
        runner.run(["systemctl", "enable", "docker"], sudo=True)

        logger.warning(RESTART_BANNER)
        return Outcome.applied("docker installed, restart required", halt=True)
