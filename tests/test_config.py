"""
Tests for YAML config loading and the typed settings view.
"""

from pathlib import Path

import pytest

from sys_bootstrap.config import DEFAULT_GIT_SETTINGS, BootstrapConfig, ConfigError, load_config


def _write(tmp_path, text, name="config.yaml"):
    p = tmp_path / name
    p.write_text(text, encoding="utf-8")
    return str(p)


class TestDefaults:
    def test_empty_config(self, tmp_path):
        cfg = BootstrapConfig(raw={"home": str(tmp_path)})
        assert cfg.zshrc == tmp_path / ".zshrc"
        assert cfg.git_settings == DEFAULT_GIT_SETTINGS
        assert cfg.docker_channel == "stable"
        assert cfg.docker_compose_version == "1.22.0"
        assert cfg.self_update_remote == "origin"
        assert cfg.self_update_branch == "master"
        assert cfg.files == []
        assert not cfg.nvidia_docker

    def test_repo_dir_defaults_to_checkout(self):
        assert (BootstrapConfig().repo_dir / "sys_bootstrap" / "config.py").is_file()

    def test_missing_default_config_is_fine(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert load_config().raw == {}


class TestLoad:
    def test_full_config(self, tmp_path):
        path = _write(
            tmp_path,
            f"""
home: {tmp_path}
git:
  user_name: Test User
  settings:
    pull.rebase: false
files:
  - source: dotfiles/netrc.gpg
    destination: ~/.netrc
    mode: "0600"
snaps:
  - code
  - package: slack
    options: --classic
docker:
  channel: edge
""",
        )

        cfg = load_config(path)

        assert cfg.git_settings == {"user.name": "Test User", "pull.rebase": "false"}
        assert cfg.files[0].source == tmp_path / "dotfiles" / "netrc.gpg"
        assert cfg.files[0].destination == tmp_path / ".netrc"
        assert cfg.files[0].mode == 0o600
        assert [(s.package, s.options) for s in cfg.snaps] == [("code", []), ("slack", ["--classic"])]
        assert cfg.docker_channel == "edge"

    @pytest.mark.parametrize("mode", ["0644", "640"])
    def test_unquoted_mode_is_rejected(self, tmp_path, mode):
        path = _write(tmp_path, f"files:\n  - {{source: a, destination: b, mode: {mode}}}\n")
        with pytest.raises(ConfigError, match="quoted"):
            load_config(path)

    def test_quoted_mode(self, tmp_path):
        path = _write(tmp_path, "files:\n  - {source: a, destination: b, mode: \"0644\"}\n")
        assert load_config(path).files[0].mode == 0o644

    def test_invalid_mode(self, tmp_path):
        path = _write(tmp_path, "files:\n  - {source: a, destination: b, mode: rw}\n")
        with pytest.raises(ConfigError, match="octal"):
            load_config(path)

    def test_explicit_path_must_exist(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "absent.yaml"))

    def test_must_be_yaml(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(_write(tmp_path, "{}", name="config.json"))

    def test_must_be_mapping(self, tmp_path):
        with pytest.raises(ConfigError, match="mapping"):
            load_config(_write(tmp_path, "- a\n- b\n"))

    def test_broken_yaml(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(_write(tmp_path, "git: [unclosed\n"))

    @pytest.mark.parametrize(
        "text",
        [
            "repos:\n  - url: git@example.com:me/x.git\n",
            "downloads: code\n",
            "power:\n  logind_lines: HandleLidSwitch=ignore\n",
            "docker:\n  daemon: [1]\n",
        ],
    )
    def test_malformed_settings_fail_at_load(self, tmp_path, text):
        with pytest.raises(ConfigError):
            load_config(_write(tmp_path, text))


class TestPaths:
    def test_relative_paths_resolve_against_home(self, tmp_path):
        cfg = BootstrapConfig(raw={"home": str(tmp_path)})
        assert cfg.path("src/notes") == tmp_path / "src" / "notes"
        assert cfg.path("/etc/hosts") == Path("/etc/hosts")

    def test_tilde_means_configured_home(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", "/nonexistent-home")
        cfg = BootstrapConfig(raw={"home": str(tmp_path)})
        assert cfg.zshrc == tmp_path / ".zshrc"
        assert cfg.path("~/.netrc") == tmp_path / ".netrc"
        assert cfg.path("~") == tmp_path
