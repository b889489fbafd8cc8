"""Desired-state targets.

Each target answers "does the system already look like this?" and knows how
to make it so. check_install() wraps both halves in the log-probe-apply-log
pattern every step uses, which keeps every target safe to re-run.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Sequence

from .context import StepCtx
from .lib import files, git, pkg, ssh, system
from .outcome import Outcome

logger = logging.getLogger(__name__)


class Target(Protocol):
    label: str
    verb: str
    done: str

    def is_satisfied(self, ctx: StepCtx) -> bool:
        ...

    def apply(self, ctx: StepCtx) -> None:
        ...


def check_install(ctx: StepCtx, target: Target) -> Outcome:
    logger.info("Checking %s...", target.label)
    if target.is_satisfied(ctx):
        logger.info("%s %s.", target.label, target.done)
        return Outcome.skipped()

    logger.info("%s %s...", target.verb, target.label)
    target.apply(ctx)
    logger.info("%s %s.", target.label, target.done)
    return Outcome.applied(target.label)


def check_install_all(ctx: StepCtx, targets: Sequence[Target]) -> Outcome:
    return Outcome.combine(check_install(ctx, t) for t in targets)


@dataclass(frozen=True)
class AptPackage:
    package: str
    label: str = ""
    verb = "Installing"
    done = "is installed"

    def __post_init__(self) -> None:
        if not self.label:
            object.__setattr__(self, "label", self.package)

    def is_satisfied(self, ctx: StepCtx) -> bool:
        return pkg.apt_package_installed(ctx.runner, self.package)

    def apply(self, ctx: StepCtx) -> None:
        pkg.apt_install(ctx.runner, [self.package])


@dataclass(frozen=True)
class SnapPackage:
    package: str
    label: str = ""
    options: Sequence[str] = ()
    verb = "Installing"
    done = "is installed"

    def __post_init__(self) -> None:
        if not self.label:
            object.__setattr__(self, "label", self.package)

    def is_satisfied(self, ctx: StepCtx) -> bool:
        return pkg.snap_package_installed(ctx.runner, self.package)

    def apply(self, ctx: StepCtx) -> None:
        pkg.snap_install(ctx.runner, self.package, self.options)


@dataclass(frozen=True)
class DownloadedInstaller:
    """A .deb that is not in any configured repository."""

    package: str
    label: str
    url: str
    local_file: str = ""
    verb = "Installing"
    done = "is installed"

    def is_satisfied(self, ctx: StepCtx) -> bool:
        return pkg.apt_package_installed(ctx.runner, self.package)

    def apply(self, ctx: StepCtx) -> None:
        local = self.local_file or f"/tmp/{self.package}.deb"
        pkg.install_deb_from_url(ctx.runner, self.url, local)


@dataclass(frozen=True)
class DownloadedBinary:
    """A single executable fetched to a system path, e.g. docker-compose."""

    command: str
    label: str
    url: str
    path: str
    verb = "Installing"
    done = "is installed"

    def is_satisfied(self, ctx: StepCtx) -> bool:
        return shutil.which(self.command) is not None

    def apply(self, ctx: StepCtx) -> None:
        ctx.runner.run(["curl", "-fL", self.url, "-o", self.path], sudo=True, capture=False)
        ctx.runner.run(["chmod", "+x", self.path], sudo=True)


@dataclass(frozen=True)
class FileLine:
    path: Path
    line: str
    elevated: bool = False
    label: str = ""
    verb = "Adding"
    done = "is configured"

    def __post_init__(self) -> None:
        if not self.label:
            object.__setattr__(self, "label", f"{self.path}: {self.line}")

    def is_satisfied(self, ctx: StepCtx) -> bool:
        if self.elevated:
            return files.sudo_file_contains_line(ctx.runner, self.path, self.line)
        return files.file_contains_line(self.path, self.line)

    def apply(self, ctx: StepCtx) -> None:
        if self.elevated:
            files.sudo_add_line(ctx.runner, self.path, self.line)
        else:
            files.add_line(self.path, self.line, dry_run=ctx.dry_run)


@dataclass(frozen=True)
class FilePermission:
    path: Path
    mode: int
    verb = "Fixing permissions of"
    done = "is configured"

    @property
    def label(self) -> str:
        return f"{self.path} ({self.mode:o})"

    def is_satisfied(self, ctx: StepCtx) -> bool:
        return files.has_permissions(self.path, self.mode)

    def apply(self, ctx: StepCtx) -> None:
        files.check_permissions(self.path, self.mode, dry_run=ctx.dry_run)


@dataclass(frozen=True)
class InstalledFile:
    """A dotfile copied into place, decrypted from or encrypted to *.gpg."""

    source: Path
    destination: Path
    mode: int
    gpg_recipient: Optional[str] = None
    verb = "Installing"
    done = "is installed"

    @property
    def label(self) -> str:
        return str(self.destination)

    def is_satisfied(self, ctx: StepCtx) -> bool:
        return self.destination.is_file() and files.has_permissions(self.destination, self.mode)

    def apply(self, ctx: StepCtx) -> None:
        files.install_file(
            ctx.runner,
            self.source,
            self.destination,
            self.mode,
            gpg_recipient=self.gpg_recipient,
        )


@dataclass(frozen=True)
class GitConfigValue:
    key: str
    value: str
    verb = "Setting"
    done = "is configured"

    @property
    def label(self) -> str:
        return f"git {self.key}"

    def is_satisfied(self, ctx: StepCtx) -> bool:
        return git.config_get(ctx.runner, self.key) == self.value

    def apply(self, ctx: StepCtx) -> None:
        git.config_set(ctx.runner, self.key, self.value)


@dataclass(frozen=True)
class SshId:
    server: str
    verb = "Copying SSH id to"
    done = "is configured"

    @property
    def label(self) -> str:
        return f"SSH id on {self.server}"

    def is_satisfied(self, ctx: StepCtx) -> bool:
        return ssh.ssh_id_installed(ctx.runner, self.server)

    def apply(self, ctx: StepCtx) -> None:
        ssh.ssh_copy_id(ctx.runner, self.server)


@dataclass(frozen=True)
class GitClone:
    url: str
    destination: Path
    verb = "Cloning"
    done = "is installed"

    @property
    def label(self) -> str:
        return str(self.destination)

    def is_satisfied(self, ctx: StepCtx) -> bool:
        return self.destination.is_dir()

    def apply(self, ctx: StepCtx) -> None:
        git.clone(ctx.runner, self.url, self.destination)


@dataclass(frozen=True)
class AcpiWakeupDisabled:
    device: str
    wakeup_file: Optional[Path] = None
    verb = "Disabling"
    done = "is configured"

    @property
    def label(self) -> str:
        return f"ACPI wakeup {self.device}"

    def is_satisfied(self, ctx: StepCtx) -> bool:
        devices = system.acpi_wakeup_devices(self.wakeup_file)
        return not devices.get(self.device, False)

    def apply(self, ctx: StepCtx) -> None:
        system.toggle_acpi_wakeup(ctx.runner, self.device, self.wakeup_file)
