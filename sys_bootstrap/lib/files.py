from __future__ import annotations

import logging
import os
import shutil
import stat
from pathlib import Path
from typing import Optional

from .command import Runner

logger = logging.getLogger(__name__)


def file_contains_line(path: Path, line: str) -> bool:
    """Whole-line fixed-string match, like `grep -q -x -F`."""

    try:
        text = path.read_text(encoding="utf-8", errors="ignore")
    except FileNotFoundError:
        return False
    return any(existing == line for existing in text.splitlines())


def add_line(path: Path, line: str, *, dry_run: bool = False) -> bool:
    """Append line unless already present. Returns True when the file changed."""

    if file_contains_line(path, line):
        return False
    if dry_run:
        logger.info("Would append to %s: %s", str(path), line)
        return True

    path.parent.mkdir(parents=True, exist_ok=True)
    prefix = ""
    if path.exists():
        existing = path.read_text(encoding="utf-8", errors="ignore")
        if existing and not existing.endswith("\n"):
            prefix = "\n"
    with path.open("a", encoding="utf-8") as f:
        f.write(prefix + line + "\n")
    return True


def sudo_file_contains_line(runner: Runner, path: Path, line: str) -> bool:
    r = runner.run(["grep", "-q", "-x", "-F", line, str(path)], sudo=True, check=False, readonly=True)
    return r.returncode == 0


def sudo_add_line(runner: Runner, path: Path, line: str) -> bool:
    if sudo_file_contains_line(runner, path, line):
        return False
    runner.run(["tee", "-a", str(path)], sudo=True, input_text=line + "\n")
    return True


def sudo_write_file(runner: Runner, path: Path, contents: str) -> None:
    runner.run(["mkdir", "-p", str(path.parent)], sudo=True)
    runner.run(["tee", str(path)], sudo=True, input_text=contents)


def file_mode(path: Path) -> int:
    return stat.S_IMODE(path.stat().st_mode)


def has_permissions(path: Path, mode: int) -> bool:
    try:
        return file_mode(path) == mode
    except FileNotFoundError:
        return False


def check_permissions(path: Path, mode: int, *, dry_run: bool = False) -> bool:
    if file_mode(path) == mode:
        return False
    if dry_run:
        logger.info("Would chmod %o %s", mode, str(path))
        return True
    os.chmod(path, mode)
    logger.info("chmod %o %s", mode, str(path))
    return True


def gpg_decrypt_file(runner: Runner, source: Path, destination: Path) -> None:
    runner.run(
        ["gpg", "--batch", "--yes", "--output", str(destination), "--decrypt", str(source)],
        capture=False,
    )


def gpg_encrypt_file(
    runner: Runner,
    source: Path,
    destination: Path,
    *,
    recipient: Optional[str] = None,
) -> None:
    argv = ["gpg", "--batch", "--yes", "--output", str(destination)]
    if recipient:
        argv += ["--encrypt", "--recipient", recipient]
    else:
        argv.append("--symmetric")
    runner.run([*argv, str(source)], capture=False)


def install_file(
    runner: Runner,
    source: Path,
    destination: Path,
    mode: int,
    *,
    gpg_recipient: Optional[str] = None,
) -> None:
    """Put source at destination (decrypting or encrypting by suffix) and fix its mode.

    An existing destination is never overwritten.
    """

    if not destination.is_file():
        src_gpg = source.suffix == ".gpg"
        dst_gpg = destination.suffix == ".gpg"
        if not runner.dry_run:
            destination.parent.mkdir(parents=True, exist_ok=True)
        if src_gpg and not dst_gpg:
            gpg_decrypt_file(runner, source, destination)
        elif dst_gpg and not src_gpg:
            gpg_encrypt_file(runner, source, destination, recipient=gpg_recipient)
        elif runner.dry_run:
            logger.info("Would copy %s -> %s", str(source), str(destination))
        else:
            if not source.exists():
                raise FileNotFoundError(str(source))
            shutil.copyfile(source, destination)

    if runner.dry_run and not destination.exists():
        return
    check_permissions(destination, mode, dry_run=runner.dry_run)
