from __future__ import annotations

import logging

from .command import Runner

logger = logging.getLogger(__name__)


def ssh_id_installed(runner: Runner, server: str) -> bool:
    """True if key-based login to server already works."""

    r = runner.run(
        ["ssh", "-o", "PasswordAuthentication=no", "-o", "BatchMode=yes", server, "exit"],
        check=False,
        readonly=True,
    )
    return r.returncode == 0


def ssh_copy_id(runner: Runner, server: str) -> None:
    # interactive: asks for the remote password
    runner.run(["ssh-copy-id", server], capture=False)
