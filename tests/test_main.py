"""
Tests for the command line entry point and the full step list.
"""

import logging

import pytest

from sys_bootstrap import main as cli
from sys_bootstrap.outcome import Status
from sys_bootstrap.pipeline import PipelineResult, validate_steps
from sys_bootstrap.steps import AptUpdateStep, BaseToolsStep, GitConfigStep, RootPasswordStep

EXPECTED_ORDER = [
    "00_self_update",
    "05_apt_update",
    "06_snap_update",
    "10_reboot_required",
    "12_root_password",
    "20_base_tools",
    "25_downloaded_debs",
    "30_shell",
    "32_git_config",
    "34_dotfiles",
    "40_desktop",
    "50_docker",
    "55_docker_compose",
    "58_nvidia_docker",
    "60_cli_utils",
    "70_drivers",
    "80_power",
]


@pytest.fixture
def calls(monkeypatch):
    recorded = []

    def fake_run(**kwargs):
        recorded.append(kwargs)
        return PipelineResult()

    monkeypatch.setattr(cli, "is_root", lambda: False)
    monkeypatch.setattr(cli, "run", fake_run)
    return recorded


@pytest.fixture(autouse=True)
def reset_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    yield
    for h in root.handlers:
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    for attr in ("_sys_bootstrap_configured", "_sys_bootstrap_log_path"):
        if hasattr(root, attr):
            delattr(root, attr)


class TestMain:
    def test_refuses_root(self, monkeypatch, calls, capsys):
        monkeypatch.setattr(cli, "is_root", lambda: True)
        assert cli.main(["install"]) == 1
        assert "Refusing to run as root." in capsys.readouterr().err
        assert calls == []

    @pytest.mark.parametrize("argv", [[], ["upgrade"]])
    def test_usage_without_install(self, calls, capsys, argv):
        assert cli.main(argv) == 1
        assert "Usage:" in capsys.readouterr().out
        assert calls == []

    def test_unknown_option_prints_usage(self, calls, capsys):
        with pytest.raises(SystemExit) as exc:
            cli.main(["install", "--frobnicate"])
        assert exc.value.code == 1
        assert "Usage:" in capsys.readouterr().out
        assert calls == []

    def test_install_passes_options(self, calls):
        assert cli.main(["install", "--dry-run", "--keep-going", "--yes", "--config", "c.yaml"]) == 0
        assert calls == [
            {
                "config_path": "c.yaml",
                "log_path": cli.DEFAULT_LOG_PATH,
                "dry_run": True,
                "keep_going": True,
                "assume_yes": True,
            }
        ]

    def test_failed_run_exits_nonzero(self, monkeypatch, calls):
        from sys_bootstrap.outcome import Outcome

        result = PipelineResult(outcomes={"05_apt_update": Outcome.failed("apt broke")})
        monkeypatch.setattr(cli, "run", lambda **kwargs: result)
        assert cli.main(["install"]) == 1

    def test_missing_config_exits_nonzero(self, monkeypatch, tmp_path):
        monkeypatch.setattr(cli, "is_root", lambda: False)
        argv = ["install", "--config", str(tmp_path / "nope.yaml"), "--log", str(tmp_path / "b.log")]
        assert cli.main(argv) == 1


class TestBuildSteps:
    def test_documented_order(self):
        assert [s.step_id for s in cli.build_steps()] == EXPECTED_ORDER

    def test_prerequisites_are_valid(self):
        validate_steps(cli.build_steps())


class TestRun:
    def test_runs_with_injected_collaborators(self, system, ubuntu, tmp_path):
        cfg = tmp_path / "config.yaml"
        cfg.write_text(f"home: {tmp_path}\nuser: tester\n", encoding="utf-8")
        log = tmp_path / "logs" / "run.log"

        result = cli.run(
            config_path=str(cfg),
            log_path=str(log),
            runner=system,
            os_info=ubuntu,
            steps=[AptUpdateStep(), RootPasswordStep(), BaseToolsStep(), GitConfigStep()],
        )

        assert result.ok
        assert result.outcomes["12_root_password"].status is Status.APPLIED
        assert "git" in system.apt
        assert system.git_config["core.editor"] == "vim"
        text = log.read_text(encoding="utf-8")
        assert "Great Success!" in text
        assert "[INFO ] Checking Git..." in text

    def test_disabled_steps_from_config(self, system, ubuntu, tmp_path):
        cfg = tmp_path / "config.yaml"
        cfg.write_text("disabled_steps: [12_root_password]\n", encoding="utf-8")

        result = cli.run(
            config_path=str(cfg),
            log_path=str(tmp_path / "run.log"),
            runner=system,
            os_info=ubuntu,
            steps=[RootPasswordStep()],
        )

        assert result.skipped == ["12_root_password"]
        assert system.calls == []

    def test_install_runs_every_step_in_order(self, system, ubuntu, tmp_path, monkeypatch):
        monkeypatch.setattr("shutil.which", lambda name: "/usr/bin/" + name)
        system.apt.add("docker-ce")
        cfg = tmp_path / "config.yaml"
        cfg.write_text(f"home: {tmp_path}\nuser: tester\nrepo_dir: {tmp_path}\n", encoding="utf-8")

        result = cli.run(
            config_path=str(cfg),
            log_path=str(tmp_path / "run.log"),
            assume_yes=True,
            runner=system,
            os_info=ubuntu,
        )

        assert list(result.outcomes) == EXPECTED_ORDER
        assert result.not_run == []
        assert result.halted_by is None
        assert result.ok
        assert result.outcomes["20_base_tools"].status is Status.APPLIED
        assert result.outcomes["50_docker"].status is Status.SKIPPED
