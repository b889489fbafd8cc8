from __future__ import annotations

import argparse
import logging
import sys
from typing import List, NoReturn, Optional, Sequence

from .config import ConfigError, load_config
from .context import StepCtx, no_prompt
from .lib.command import Runner
from .lib.osinfo import OsInfo, detect_os
from .lib.system import is_root
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import PipelineError, PipelineResult, Step, log_report, run_pipeline
from .steps import (
    AptUpdateStep,
    BaseToolsStep,
    CliUtilsStep,
    DesktopStep,
    DockerComposeStep,
    DockerStep,
    DotfilesStep,
    DownloadedDebsStep,
    DriversStep,
    GitConfigStep,
    NvidiaDockerStep,
    PowerStep,
    RebootRequiredStep,
    RootPasswordStep,
    SelfUpdateStep,
    ShellStep,
    SnapUpdateStep,
)

logger = logging.getLogger(__name__)

USAGE = """
Usage:
    sys-bootstrap [options] install         check/install everything

Options:
    --config PATH   YAML config (default ~/.config/sys-bootstrap/config.yaml)
    --log PATH      log file
    --dry-run       probe only, change nothing
    --keep-going    do not stop at the first failed step
    --yes           do not wait at prompts

Set DEBUG=1 to trace every command and its output.
"""


def build_steps() -> List[Step]:
    return [
        # base system
        SelfUpdateStep(),
        AptUpdateStep(),
        SnapUpdateStep(),
        RebootRequiredStep(),
        RootPasswordStep(),
        BaseToolsStep(),
        DownloadedDebsStep(),
        # personal config
        ShellStep(),
        GitConfigStep(),
        DotfilesStep(),
        # system/desktop tools
        DesktopStep(),
        # dev packages
        DockerStep(),
        DockerComposeStep(),
        NvidiaDockerStep(),
        CliUtilsStep(),
        # hardware
        DriversStep(),
        PowerStep(),
    ]


def run(
    *,
    config_path: Optional[str] = None,
    log_path: str = DEFAULT_LOG_PATH,
    dry_run: bool = False,
    keep_going: bool = False,
    assume_yes: bool = False,
    runner: Optional[Runner] = None,
    os_info: Optional[OsInfo] = None,
    steps: Optional[Sequence[Step]] = None,
) -> PipelineResult:
    """Run the bootstrap sequence and log a report of every step."""

    actual_log_path = configure_logging(log_path=log_path)
    logger.debug("Logging to %s", actual_log_path)

    cfg = load_config(config_path)
    ctx = StepCtx(
        cfg=cfg,
        runner=runner or Runner(dry_run=dry_run, sudo_cmd=cfg.sudo_cmd),
        os_info=os_info or detect_os(),
        prompt=no_prompt if assume_yes else input,
    )
    if ctx.dry_run:
        logger.info("Dry run: probing only, no changes will be made")

    try:
        result = run_pipeline(
            ctx=ctx,
            steps=list(steps) if steps is not None else build_steps(),
            fail_fast=not keep_going,
            disabled=cfg.disabled_steps,
        )
    except Exception:
        logger.exception("Bootstrap failed")
        raise

    log_report(result)
    return result


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        sys.stderr.write(f"{self.prog}: {message}\n")
        print(USAGE)
        raise SystemExit(1)


def build_parser() -> argparse.ArgumentParser:
    p = _Parser(prog="sys-bootstrap", usage=argparse.SUPPRESS, add_help=False)
    p.add_argument("operation", nargs="?", default=None)
    p.add_argument("--config", default=None, help="Path to YAML config")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to log file")
    p.add_argument("--dry-run", action="store_true", help="Probe only, change nothing")
    p.add_argument("--keep-going", action="store_true", help="Continue after a failed step")
    p.add_argument("--yes", action="store_true", help="Do not wait at prompts")
    return p


def main(argv: Optional[list[str]] = None) -> int:
    if is_root():
        sys.stderr.write("Refusing to run as root.\n")
        return 1

    args = build_parser().parse_args(argv)
    if args.operation != "install":
        print(USAGE)
        return 1

    try:
        result = run(
            config_path=args.config,
            log_path=args.log,
            dry_run=args.dry_run,
            keep_going=args.keep_going,
            assume_yes=args.yes,
        )
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return 130
    except (ConfigError, FileNotFoundError, PipelineError) as e:
        logger.error("%s", e)
        return 1

    return 0 if result.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
