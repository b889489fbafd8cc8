from __future__ import annotations

import logging
from pathlib import Path

from ..context import StepCtx
from ..lib.pkg import add_apt_source, apt_install, apt_package_installed, apt_update, dpkg_architecture
from ..outcome import Outcome

logger = logging.getLogger(__name__)

NVIDIA_KEY_URL = "https://nvidia.github.io/libnvidia-container/gpgkey"
NVIDIA_KEYRING = Path("/usr/share/keyrings/nvidia-container-toolkit-keyring.gpg")
NVIDIA_LIST = Path("/etc/apt/sources.list.d/nvidia-container-toolkit.list")


class NvidiaDockerStep:
    """NVIDIA container runtime for docker (config: nvidia_docker)."""

    step_id = "58_nvidia_docker"
    requires = ("50_docker",)

    def run(self, ctx: StepCtx) -> Outcome:
        if not ctx.cfg.nvidia_docker:
            return Outcome.skipped("not enabled")

        runner = ctx.runner
        logger.info("Checking NVIDIA container toolkit...")
        if apt_package_installed(runner, "nvidia-container-toolkit"):
            logger.info("NVIDIA container toolkit is installed.")
            return Outcome.skipped()

        logger.info("Installing NVIDIA container toolkit...")
        arch = dpkg_architecture(runner)
        add_apt_source(
            runner,
            key_url=NVIDIA_KEY_URL,
            keyring=NVIDIA_KEYRING,
            list_file=NVIDIA_LIST,
            line=f"deb [signed-by={NVIDIA_KEYRING}] https://nvidia.github.io/libnvidia-container/stable/deb/{arch} /",
        )
        apt_update(runner)
        apt_install(runner, ["nvidia-container-toolkit"])
        runner.run(["nvidia-ctk", "runtime", "configure", "--runtime=docker"], sudo=True)
        runner.run(["systemctl", "restart", "docker"], sudo=True)
        logger.info("NVIDIA container toolkit is installed.")
        return Outcome.applied("nvidia-container-toolkit")
