from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence

from .command import Runner
from .files import sudo_add_line

logger = logging.getLogger(__name__)


def apt_update_all(runner: Runner) -> None:
    runner.run(["apt", "update"], sudo=True, capture=False)
    runner.run(["apt", "dist-upgrade", "-y"], sudo=True, capture=False)
    runner.run(["apt", "autoremove", "-y"], sudo=True, capture=False)


def apt_update(runner: Runner) -> None:
    runner.run(["apt", "update"], sudo=True, capture=False)


def apt_package_installed(runner: Runner, package: str) -> bool:
    r = runner.run(["dpkg", "-s", package], check=False, readonly=True)
    return r.returncode == 0


def apt_install(runner: Runner, packages: Sequence[str]) -> None:
    if not packages:
        return
    runner.run(["apt", "install", "-y", *packages], sudo=True, capture=False)


def install_deb_from_url(runner: Runner, url: str, local_file: str) -> None:
    """Download a .deb and hand it to apt so its dependencies get resolved.

    The download is removed afterwards even when apt fails.
    """

    runner.run(["wget", "-c", url, "-O", local_file], capture=False)
    try:
        # apt only treats the argument as a file when it looks like a path
        path = local_file if "/" in local_file else f"./{local_file}"
        runner.run(["apt", "install", "-y", path], sudo=True, capture=False)
    finally:
        if not runner.dry_run:
            Path(local_file).unlink(missing_ok=True)


def snap_refresh(runner: Runner) -> None:
    runner.run(["snap", "refresh"], sudo=True, capture=False)


def snap_package_installed(runner: Runner, package: str) -> bool:
    r = runner.run(["snap", "list"], sudo=True, check=False, readonly=True)
    if r.returncode != 0:
        return False
    prefix = f"{package} "
    return any(line.startswith(prefix) for line in r.stdout.splitlines())


def snap_install(runner: Runner, package: str, options: Sequence[str] = ()) -> None:
    runner.run(["snap", "install", package, *options], sudo=True, capture=False)


def dpkg_architecture(runner: Runner) -> str:
    r = runner.run(["dpkg", "--print-architecture"], readonly=True)
    return r.stdout.strip() or "amd64"


def add_apt_source(
    runner: Runner,
    *,
    key_url: str,
    keyring: Path,
    list_file: Path,
    line: str,
) -> None:
    """Install a repository signing key and its sources line (both idempotent)."""

    if not keyring.exists():
        key = runner.run(["curl", "-fsSL", key_url])
        runner.run(["mkdir", "-p", str(keyring.parent)], sudo=True)
        runner.run(["gpg", "--batch", "--yes", "--dearmor", "-o", str(keyring)], sudo=True, input_text=key.stdout)

    sudo_add_line(runner, list_file, line)


def recommended_drivers(runner: Runner) -> List[str]:
    """Driver packages `ubuntu-drivers` recommends for this hardware.

    Lines look like `nvidia-driver-535, (kernel modules provided by ...)`.
    """

    r = runner.run(["ubuntu-drivers", "list", "--recommended"], readonly=True)
    out: List[str] = []
    for line in r.stdout.splitlines():
        package = line.split(",", 1)[0].strip()
        if package:
            out.append(package)
    return out
