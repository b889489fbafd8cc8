from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Optional

from .command import Runner

logger = logging.getLogger(__name__)

REBOOT_REQUIRED = Path("/var/run/reboot-required")
ACPI_WAKEUP = Path("/proc/acpi/wakeup")


def is_root() -> bool:
    return os.geteuid() == 0


def root_password_status(runner: Runner) -> str:
    """Second field of `passwd -S root`: P (usable), L (locked) or NP (none)."""

    r = runner.run(["passwd", "-S", "root"], sudo=True, readonly=True)
    fields = r.stdout.split()
    return fields[1] if len(fields) > 1 else ""


def lock_root_password(runner: Runner) -> None:
    runner.run(["passwd", "-l", "root"], sudo=True)


def reboot_required(marker: Optional[Path] = None) -> bool:
    return (marker or REBOOT_REQUIRED).exists()


def parse_acpi_wakeup(text: str) -> Dict[str, bool]:
    """Map device name -> wakeup enabled.

    Format:
        Device  S-state   Status   Sysfs node
        XHC       S3    *enabled   pci:0000:00:14.0
    """

    out: Dict[str, bool] = {}
    for line in text.splitlines()[1:]:
        fields = line.split()
        if len(fields) < 3:
            continue
        out[fields[0]] = fields[2] == "*enabled"
    return out


def acpi_wakeup_devices(path: Optional[Path] = None) -> Dict[str, bool]:
    p = path or ACPI_WAKEUP
    try:
        return parse_acpi_wakeup(p.read_text(encoding="utf-8", errors="ignore"))
    except FileNotFoundError:
        return {}


def toggle_acpi_wakeup(runner: Runner, device: str, path: Optional[Path] = None) -> None:
    # the kernel flips the device state on every write
    runner.run(["tee", str(path or ACPI_WAKEUP)], sudo=True, input_text=device + "\n")
