from __future__ import annotations

import logging

from ..context import StepCtx
from ..lib import git
from ..outcome import Outcome

logger = logging.getLogger(__name__)


class SelfUpdateStep:
    step_id = "00_self_update"
    requires = ()

    def run(self, ctx: StepCtx) -> Outcome:
        logger.info("Checking for self updates...")
        if not git.git_available():
            # the checkout may have been copied to a machine without git
            logger.warning("Git not installed, skipping self-update.")
            return Outcome.skipped("git not installed")

        repo_dir = ctx.cfg.repo_dir
        if not git.is_working_copy(ctx.runner, repo_dir):
            # e.g. installed from a wheel; set repo_dir to a checkout to self-update
            logger.warning("%s is not a git working copy, skipping self-update.", repo_dir)
            return Outcome.skipped("not a git working copy")

        if git.has_local_changes(ctx.runner, repo_dir):
            logger.warning("Local changes detected, skipping self-update.")
            return Outcome.skipped("local changes")

        remote = ctx.cfg.self_update_remote
        upstream = f"{remote}/{ctx.cfg.self_update_branch}"
        git.fetch(ctx.runner, repo_dir, remote)
        incoming = git.incoming_commits(ctx.runner, repo_dir, upstream)
        if not incoming:
            logger.info("Up to date.")
            return Outcome.skipped("up to date")

        logger.info("Self updating (%d new commits)...", len(incoming))
        git.merge(ctx.runner, repo_dir, upstream)
        logger.info("Self update done. Run sys-bootstrap again.")
        return Outcome.applied(f"merged {upstream}", halt=True)
