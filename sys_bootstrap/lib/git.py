from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Optional

from .command import Runner

logger = logging.getLogger(__name__)


def git_available() -> bool:
    return shutil.which("git") is not None


def is_working_copy(runner: Runner, repo_dir: Path) -> bool:
    r = runner.run(
        ["git", "rev-parse", "--is-inside-work-tree"],
        check=False,
        readonly=True,
        cwd=str(repo_dir),
    )
    return r.returncode == 0 and r.stdout.strip() == "true"


def has_local_changes(runner: Runner, repo_dir: Path) -> bool:
    """Tracked files modified or staged. Untracked files do not count."""

    r = runner.run(
        ["git", "status", "--porcelain", "--untracked-files=no"],
        readonly=True,
        cwd=str(repo_dir),
    )
    return bool(r.stdout.strip())


def fetch(runner: Runner, repo_dir: Path, remote: str) -> None:
    # updates remote-tracking refs, so a dry run compares against the last fetch
    runner.run(["git", "fetch", remote], cwd=str(repo_dir))


def incoming_commits(runner: Runner, repo_dir: Path, upstream: str) -> list[str]:
    r = runner.run(
        ["git", "log", f"HEAD..{upstream}", "--oneline"],
        readonly=True,
        cwd=str(repo_dir),
    )
    return [line for line in r.stdout.splitlines() if line.strip()]


def merge(runner: Runner, repo_dir: Path, upstream: str) -> None:
    runner.run(["git", "merge", upstream], cwd=str(repo_dir))


def config_get(runner: Runner, key: str) -> Optional[str]:
    r = runner.run(["git", "config", "--global", "--get", key], check=False, readonly=True)
    if r.returncode != 0:
        return None
    return r.stdout.strip()


def config_set(runner: Runner, key: str, value: str) -> None:
    runner.run(["git", "config", "--global", key, value])


def clone(runner: Runner, url: str, destination: Path) -> None:
    if not runner.dry_run:
        destination.parent.mkdir(parents=True, exist_ok=True)
    runner.run(["git", "clone", url, str(destination)], capture=False)
