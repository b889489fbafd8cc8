"""
Shared fixtures: a fake command runner standing in for the package
managers, git, ssh and sudo, plus a step context rooted in tmp_path.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set

import pytest

from sys_bootstrap.config import BootstrapConfig
from sys_bootstrap.context import StepCtx
from sys_bootstrap.lib.command import CmdResult, CommandError
from sys_bootstrap.lib.osinfo import OsInfo


@dataclass
class Call:
    argv: List[str]
    sudo: bool
    readonly: bool
    input_text: Optional[str]
    cwd: Optional[str]

    @property
    def line(self) -> str:
        return " ".join((["sudo"] if self.sudo else []) + self.argv)


@dataclass
class FakeSystem:
    """Runner double that keeps just enough state to answer probes."""

    dry_run: bool = False
    sudo_cmd: str = "sudo"
    apt: Set[str] = field(default_factory=set)
    snaps: Set[str] = field(default_factory=set)
    git_config: Dict[str, str] = field(default_factory=dict)
    root_password: str = "P"
    ssh_ids: Set[str] = field(default_factory=set)
    # files only reachable through sudo (grep/tee)
    root_files: Dict[str, str] = field(default_factory=dict)
    # local .deb path -> package name it installs
    debs: Dict[str, str] = field(default_factory=dict)
    working_copy: bool = True
    dirty: bool = False
    incoming: List[str] = field(default_factory=list)
    # what `ubuntu-drivers list --recommended` reports
    drivers: List[str] = field(default_factory=list)
    fail_on: Set[str] = field(default_factory=set)
    calls: List[Call] = field(default_factory=list)

    @property
    def lines(self) -> List[str]:
        return [c.line for c in self.calls]

    @property
    def mutations(self) -> List[str]:
        return [c.line for c in self.calls if not c.readonly]

    def run(
        self,
        argv: Sequence[str],
        *,
        check: bool = True,
        sudo: bool = False,
        readonly: bool = False,
        input_text: Optional[str] = None,
        cwd: Optional[str] = None,
        capture: bool = True,
    ) -> CmdResult:
        argv = list(argv)
        call = Call(argv, sudo, readonly, input_text, cwd)
        self.calls.append(call)

        if call.line in self.fail_on:
            rc, out = 100, ""
        elif self.dry_run and not readonly:
            rc, out = 0, ""
        else:
            rc, out = self._respond(argv, input_text)

        if check and rc != 0:
            raise CommandError(argv, rc, "simulated failure")
        return CmdResult(argv=argv, returncode=rc, stdout=out, stderr="")

    def _respond(self, argv: List[str], input_text: Optional[str]):
        cmd, args = argv[0], argv[1:]

        if cmd == "dpkg" and args[:1] == ["-s"]:
            return (0, f"Package: {args[1]}\nStatus: install ok installed\n") if args[1] in self.apt else (1, "")
        if cmd == "dpkg" and args == ["--print-architecture"]:
            return 0, "amd64\n"
        if cmd == "apt" and args[:2] == ["install", "-y"]:
            for p in args[2:]:
                self.apt.add(self.debs.get(p, p))
            return 0, ""
        if cmd == "snap" and args == ["list"]:
            rows = ["Name  Version  Rev  Tracking  Publisher  Notes"]
            rows += [f"{s}  1.0  1  latest/stable  someone  -" for s in sorted(self.snaps)]
            return 0, "\n".join(rows) + "\n"
        if cmd == "snap" and args[:1] == ["install"]:
            self.snaps.add(args[1])
            return 0, ""
        if cmd == "git" and args[:3] == ["config", "--global", "--get"]:
            key = args[3]
            return (0, self.git_config[key] + "\n") if key in self.git_config else (1, "")
        if cmd == "git" and args[:2] == ["config", "--global"]:
            self.git_config[args[2]] = args[3]
            return 0, ""
        if cmd == "git" and args[:1] == ["rev-parse"]:
            return (0, "true\n") if self.working_copy else (128, "")
        if cmd == "git" and args[:1] == ["status"]:
            return 0, (" M sys_bootstrap/main.py\n" if self.dirty else "")
        if cmd == "git" and args[:1] == ["log"]:
            return 0, "".join(f"{c}\n" for c in self.incoming)
        if cmd == "git" and args[:1] == ["merge"]:
            self.incoming = []
            return 0, ""
        if cmd == "git" and args[:1] == ["clone"]:
            Path(args[2]).mkdir(parents=True)
            return 0, ""
        if cmd == "passwd" and args == ["-S", "root"]:
            return 0, f"root {self.root_password} 01/01/2024 0 99999 7 -1\n"
        if cmd == "passwd" and args == ["-l", "root"]:
            self.root_password = "L"
            return 0, ""
        if cmd == "ssh":
            return (0, "") if args[-2] in self.ssh_ids else (255, "")
        if cmd == "ssh-copy-id":
            self.ssh_ids.add(args[0])
            return 0, ""
        if cmd == "grep" and args[:3] == ["-q", "-x", "-F"]:
            text = self.root_files.get(args[4])
            if text is None:
                return 2, ""
            return (0, "") if args[3] in text.splitlines() else (1, "")
        if cmd == "ubuntu-drivers" and args[:1] == ["list"]:
            return 0, "".join(f"{d}, (kernel modules provided by linux-modules-{d})\n" for d in self.drivers)
        if cmd == "tee" and args[:1] == ["-a"]:
            self.root_files[args[1]] = self.root_files.get(args[1], "") + (input_text or "")
            return 0, input_text or ""
        if cmd == "tee":
            self.root_files[args[0]] = input_text or ""
            return 0, input_text or ""
        if cmd == "gpg" and "--output" in args:
            Path(args[args.index("--output") + 1]).write_text("secret\n", encoding="utf-8")
            return 0, ""
        if cmd == "curl" and "-fsSL" in args:
            return 0, "-----BEGIN PGP PUBLIC KEY BLOCK-----\n"
        return 0, ""


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def system() -> FakeSystem:
    return FakeSystem()


@pytest.fixture
def ubuntu() -> OsInfo:
    return OsInfo(system="Linux", distro_id="ubuntu", version_id="22.04", codename="jammy")


@pytest.fixture
def make_ctx(tmp_path, system, ubuntu):
    def _make(raw: Optional[dict] = None, *, os_info: Optional[OsInfo] = None, prompt=None) -> StepCtx:
        cfg_raw = {"home": str(tmp_path), "user": "tester"}
        cfg_raw.update(raw or {})
        kwargs = {}
        if prompt is not None:
            kwargs["prompt"] = prompt
        return StepCtx(
            cfg=BootstrapConfig(raw=cfg_raw),
            runner=system,
            os_info=os_info or ubuntu,
            **kwargs,
        )

    return _make


@pytest.fixture
def ctx(make_ctx) -> StepCtx:
    return make_ctx()
