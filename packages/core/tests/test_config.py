"""Tests for configuration loading and GitHub token resolution."""

import subprocess

import pytest

from gitgud_core.config import DEFAULT_CONFIG, load_config, resolve_github_token


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ("PORT", "GITGUD_API_TOKENS"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("GITHUB_TOKEN", "env-token")


def test_defaults_applied_when_no_config_file(tmp_path):
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    for key, value in DEFAULT_CONFIG.items():
        assert config[key] == value
    assert config["github_token"] == "env-token"


def test_config_file_overrides_defaults(tmp_path):
    cfg = tmp_path / ".gitgud.yml"
    cfg.write_text("port: 9000\nstore: noop\nmax_workers: 8\n")
    config = load_config(config_path=str(cfg))
    assert config["port"] == 9000
    assert config["store"] == "noop"
    assert config["max_workers"] == 8
    assert config["host"] == "0.0.0.0"


def test_empty_config_file(tmp_path):
    cfg = tmp_path / ".gitgud.yml"
    cfg.write_text("")
    assert load_config(config_path=str(cfg))["port"] == 8080


def test_non_mapping_config_file_rejected(tmp_path):
    cfg = tmp_path / ".gitgud.yml"
    cfg.write_text("- just\n- a list\n")
    with pytest.raises(ValueError, match="mapping"):
        load_config(config_path=str(cfg))


def test_port_env_overrides_file(tmp_path, monkeypatch):
    cfg = tmp_path / ".gitgud.yml"
    cfg.write_text("port: 9000\n")
    monkeypatch.setenv("PORT", "7070")
    assert load_config(config_path=str(cfg))["port"] == 7070


def test_api_tokens_from_file_and_env(tmp_path, monkeypatch):
    cfg = tmp_path / ".gitgud.yml"
    cfg.write_text("api_tokens:\n  - from-file\n")
    monkeypatch.setenv("GITGUD_API_TOKENS", "one, two,,")
    assert load_config(config_path=str(cfg))["api_tokens"] == ["from-file", "one", "two"]


def test_default_token_list_not_shared(tmp_path, monkeypatch):
    monkeypatch.setenv("GITGUD_API_TOKENS", "secret")
    load_config(config_path=str(tmp_path / "none.yml"))
    assert DEFAULT_CONFIG["api_tokens"] == []


def test_cli_overrides_config_file(tmp_path):
    cfg = tmp_path / ".gitgud.yml"
    cfg.write_text("port: 9000\nhost: 127.0.0.1\n")
    config = load_config(config_path=str(cfg), cli_overrides={"port": 1234, "host": None})
    assert config["port"] == 1234
    assert config["host"] == "127.0.0.1"


class TestResolveGithubToken:
    def test_env_var_wins(self, mocker):
        run = mocker.patch("gitgud_core.config.subprocess.run")
        assert resolve_github_token() == "env-token"
        run.assert_not_called()

    def test_falls_back_to_gh_cli(self, mocker, monkeypatch):
        monkeypatch.delenv("GITHUB_TOKEN")
        mocker.patch(
            "gitgud_core.config.subprocess.run",
            return_value=subprocess.CompletedProcess(args=[], returncode=0, stdout="gh-token\n"),
        )
        assert resolve_github_token() == "gh-token"

    def test_gh_not_logged_in(self, mocker, monkeypatch):
        monkeypatch.delenv("GITHUB_TOKEN")
        mocker.patch(
            "gitgud_core.config.subprocess.run",
            return_value=subprocess.CompletedProcess(args=[], returncode=1, stdout=""),
        )
        assert resolve_github_token() is None

    def test_gh_not_installed(self, mocker, monkeypatch):
        monkeypatch.delenv("GITHUB_TOKEN")
        mocker.patch("gitgud_core.config.subprocess.run", side_effect=FileNotFoundError)
        assert resolve_github_token() is None

    def test_gh_timeout(self, mocker, monkeypatch):
        monkeypatch.delenv("GITHUB_TOKEN")
        mocker.patch(
            "gitgud_core.config.subprocess.run",
            side_effect=subprocess.TimeoutExpired(cmd="gh", timeout=5),
        )
        assert resolve_github_token() is None
