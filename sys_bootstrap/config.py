from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

DEFAULT_CONFIG_PATH = "~/.config/sys-bootstrap/config.yaml"

DEFAULT_GIT_SETTINGS: Dict[str, str] = {
    "branch.autosetuprebase": "always",
    "pull.rebase": "true",
    "core.editor": "vim",
    "color.ui": "true",
    "push.default": "simple",
}

DEFAULT_DOCKER_DAEMON: Dict[str, Any] = {
    "storage-driver": "overlay2",
    "experimental": True,
}


class ConfigError(ValueError):
    pass


def _default_repo_dir() -> Path:
    # sys_bootstrap/config.py -> sys_bootstrap -> checkout root
    return Path(__file__).resolve().parents[1]


def _parse_mode(value: Any, *, where: str) -> int:
    # YAML turns `mode: 0644` into the int 420, so only strings are trusted
    if not isinstance(value, str):
        raise ConfigError(f"{where}: mode {value!r} must be a quoted octal string, e.g. \"0600\"")
    try:
        return int(value, 8)
    except ValueError as e:
        raise ConfigError(f"{where}: invalid octal mode {value!r} (quote it, e.g. \"0600\")") from e


@dataclass(frozen=True)
class FileSpec:
    source: Path
    destination: Path
    mode: int


@dataclass(frozen=True)
class RepoSpec:
    url: str
    destination: Path


@dataclass(frozen=True)
class DownloadSpec:
    package: str
    label: str
    url: str


@dataclass(frozen=True)
class SnapSpec:
    package: str
    label: str
    options: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class BootstrapConfig:
    """Typed view over the raw YAML mapping; every key is optional."""

    raw: Dict[str, Any] = field(default_factory=dict)

    def _section(self, key: str) -> Dict[str, Any]:
        value = self.raw.get(key) or {}
        if not isinstance(value, dict):
            raise ConfigError(f"{key} must be a mapping")
        return value

    def _list(self, key: str) -> List[Any]:
        value = self.raw.get(key) or []
        if not isinstance(value, list):
            raise ConfigError(f"{key} must be a list")
        return value

    def path(self, value: str | Path) -> Path:
        """Resolve ~ and relative paths against the configured home."""

        text = str(value)
        if text == "~" or text.startswith("~/"):
            return self.home / text[2:]
        p = Path(os.path.expanduser(text))
        if not p.is_absolute():
            p = self.home / p
        return p

    @property
    def home(self) -> Path:
        return Path(os.path.expanduser(str(self.raw.get("home") or os.environ.get("HOME") or "~")))

    @property
    def user(self) -> str:
        return str(self.raw.get("user") or os.environ.get("USER") or "")

    @property
    def repo_dir(self) -> Path:
        value = self.raw.get("repo_dir")
        return self.path(value) if value else _default_repo_dir()

    @property
    def self_update_remote(self) -> str:
        return str(self._section("self_update").get("remote") or "origin")

    @property
    def self_update_branch(self) -> str:
        return str(self._section("self_update").get("branch") or "master")

    @property
    def sudo_cmd(self) -> str:
        return str(self._section("commands").get("sudo") or "sudo")

    @property
    def zshrc(self) -> Path:
        return self.path(self.raw.get("zshrc") or "~/.zshrc")

    @property
    def zshrc_lines(self) -> List[str]:
        return [str(line) for line in self._list("zshrc_lines")]

    @property
    def xrandr_enabled(self) -> bool:
        return bool(self._section("xrandr").get("enabled", False))

    @property
    def xrandr_output(self) -> str:
        return str(self._section("xrandr").get("output") or "Virtual1")

    @property
    def xrandr_mode(self) -> str:
        return str(self._section("xrandr").get("mode") or "1920x1200")

    @property
    def git_settings(self) -> Dict[str, str]:
        git = self._section("git")
        settings: Dict[str, str] = {}
        # identity first, like `git config --global user.*` in a fresh setup
        if git.get("user_name"):
            settings["user.name"] = str(git["user_name"])
        if git.get("user_email"):
            settings["user.email"] = str(git["user_email"])
        overrides = git.get("settings")
        if overrides is None:
            overrides = DEFAULT_GIT_SETTINGS
        if not isinstance(overrides, dict):
            raise ConfigError("git.settings must be a mapping")
        for k, v in overrides.items():
            settings[str(k)] = str(v).lower() if isinstance(v, bool) else str(v)
        return settings

    @property
    def files(self) -> List[FileSpec]:
        out: List[FileSpec] = []
        for i, item in enumerate(self._list("files")):
            if not isinstance(item, dict) or not item.get("source") or not item.get("destination"):
                raise ConfigError(f"files[{i}] needs source and destination")
            out.append(
                FileSpec(
                    source=self.path(item["source"]),
                    destination=self.path(item["destination"]),
                    mode=_parse_mode(item.get("mode", "600"), where=f"files[{i}]"),
                )
            )
        return out

    @property
    def gpg_recipient(self) -> Optional[str]:
        value = self.raw.get("gpg_recipient")
        return str(value) if value else None

    @property
    def ssh_ids(self) -> List[str]:
        return [str(s) for s in self._list("ssh_ids")]

    @property
    def repos(self) -> List[RepoSpec]:
        out: List[RepoSpec] = []
        for i, item in enumerate(self._list("repos")):
            if not isinstance(item, dict) or not item.get("url") or not item.get("destination"):
                raise ConfigError(f"repos[{i}] needs url and destination")
            out.append(RepoSpec(url=str(item["url"]), destination=self.path(item["destination"])))
        return out

    @property
    def downloads(self) -> List[DownloadSpec]:
        out: List[DownloadSpec] = []
        for i, item in enumerate(self._list("downloads")):
            if not isinstance(item, dict) or not item.get("package") or not item.get("url"):
                raise ConfigError(f"downloads[{i}] needs package and url")
            out.append(
                DownloadSpec(
                    package=str(item["package"]),
                    label=str(item.get("label") or item["package"]),
                    url=str(item["url"]),
                )
            )
        return out

    @property
    def snaps(self) -> List[SnapSpec]:
        out: List[SnapSpec] = []
        for i, item in enumerate(self._list("snaps")):
            if isinstance(item, str):
                out.append(SnapSpec(package=item, label=item))
                continue
            if not isinstance(item, dict) or not item.get("package"):
                raise ConfigError(f"snaps[{i}] needs package")
            options = item.get("options") or []
            if isinstance(options, str):
                options = options.split()
            out.append(
                SnapSpec(
                    package=str(item["package"]),
                    label=str(item.get("label") or item["package"]),
                    options=[str(o) for o in options],
                )
            )
        return out

    @property
    def docker_channel(self) -> str:
        return str(self._section("docker").get("channel") or "stable")

    @property
    def docker_daemon(self) -> Dict[str, Any]:
        daemon = self._section("docker").get("daemon")
        if daemon is None:
            return dict(DEFAULT_DOCKER_DAEMON)
        if not isinstance(daemon, dict):
            raise ConfigError("docker.daemon must be a mapping")
        return daemon

    @property
    def docker_compose_version(self) -> str:
        return str(self._section("docker_compose").get("version") or "1.22.0")

    @property
    def nvidia_docker(self) -> bool:
        return bool(self.raw.get("nvidia_docker", False))

    @property
    def driver_packages(self) -> List[str]:
        packages = self._section("drivers").get("packages") or []
        if not isinstance(packages, list):
            raise ConfigError("drivers.packages must be a list")
        return [str(p) for p in packages]

    @property
    def drivers_autoinstall(self) -> bool:
        return bool(self._section("drivers").get("autoinstall", False))

    @property
    def logind_lines(self) -> List[str]:
        lines = self._section("power").get("logind_lines") or []
        if not isinstance(lines, list):
            raise ConfigError("power.logind_lines must be a list")
        return [str(line) for line in lines]

    @property
    def acpi_wakeup_disable(self) -> List[str]:
        devices = self._section("power").get("acpi_wakeup_disable") or []
        if not isinstance(devices, list):
            raise ConfigError("power.acpi_wakeup_disable must be a list")
        return [str(d) for d in devices]

    @property
    def disabled_steps(self) -> List[str]:
        return [str(s) for s in self._list("disabled_steps")]

    def validate(self) -> "BootstrapConfig":
        """Touch every setting so malformed config fails before any step runs."""

        for name, value in vars(type(self)).items():
            if isinstance(value, property):
                getattr(self, name)
        return self


def load_config(path: Optional[str] = None) -> BootstrapConfig:
    """Load config from YAML.

    Without an explicit path the default location is used when it exists,
    otherwise every setting keeps its default. An explicit path must exist.
    """

    if path is None:
        p = Path(os.path.expanduser(DEFAULT_CONFIG_PATH))
        if not p.exists():
            return BootstrapConfig()
    else:
        p = Path(os.path.expanduser(path))
        if not p.exists():
            raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ConfigError("config must be YAML")

    import yaml

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"{p}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"{p} must contain a mapping/object")

    return BootstrapConfig(raw=raw).validate()
