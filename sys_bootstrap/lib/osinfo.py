from __future__ import annotations

import logging
import platform
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

OS_RELEASE = Path("/etc/os-release")


@dataclass(frozen=True)
class OsInfo:
    """What the steps know about the host OS.

    Built once by detect_os() and injected into the step context, so steps
    never probe the OS themselves and tests can hand in any platform.
    """

    system: str
    distro_id: str = ""
    id_like: str = ""
    version_id: str = ""
    codename: str = ""

    @property
    def is_linux(self) -> bool:
        return self.system.lower() == "linux"

    @property
    def is_ubuntu(self) -> bool:
        if not self.is_linux:
            return False
        return self.distro_id == "ubuntu" or "ubuntu" in self.id_like.split()


def parse_os_release(text: str) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        out[key.strip()] = value.strip().strip('"').strip("'")
    return out


def detect_os(os_release: Optional[Path] = None) -> OsInfo:
    path = os_release or OS_RELEASE
    fields: Dict[str, str] = {}
    try:
        fields = parse_os_release(path.read_text(encoding="utf-8", errors="ignore"))
    except FileNotFoundError:
        logger.debug("%s not found; distro unknown", path)

    info = OsInfo(
        system=platform.system(),
        distro_id=fields.get("ID", "").lower(),
        id_like=fields.get("ID_LIKE", "").lower(),
        version_id=fields.get("VERSION_ID", ""),
        codename=fields.get("VERSION_CODENAME") or fields.get("UBUNTU_CODENAME", ""),
    )
    logger.debug("Detected OS: %s", info)
    return info
