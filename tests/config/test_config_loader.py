from pathlib import Path

import pytest

from fedora_setup.config import loader
from fedora_setup.config.loader import CONFIG_ENV, ConfigError, load_config


@pytest.fixture(autouse=True)
def _isolate(monkeypatch, tmp_path: Path):
    monkeypatch.delenv(CONFIG_ENV, raising=False)
    monkeypatch.setattr(loader, "DEFAULT_CONFIG_PATH", tmp_path / "absent.yaml")


def test_defaults_without_any_file():
    cfg = load_config()
    assert cfg.profile == "personal"
    assert cfg.hostname == "fedora"
    assert cfg.dry_run is False
    assert cfg.connectivity.host == "8.8.8.8"
    assert cfg.logging.prefix == "fedora42-setup"
    assert cfg.logging.base_dir == Path("~/fedora42-setup-logs").expanduser()


def test_explicit_file_and_env_expansion(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("SETUP_HOST", "workbox")
    p = tmp_path / "c.yaml"
    p.write_text(
        "profile: workstation\n"
        "hostname: ${SETUP_HOST}\n"
        "logging:\n"
        "  base_dir: " + str(tmp_path / "logs") + "\n"
        "downloads:\n"
        "  retries: 5\n"
    )
    cfg = load_config(p)
    assert cfg.profile == "workstation"
    assert cfg.hostname == "workbox"
    assert cfg.logging.base_dir == tmp_path / "logs"
    assert cfg.downloads.retries == 5


def test_env_var_locates_config(monkeypatch, tmp_path: Path):
    p = tmp_path / "env.yaml"
    p.write_text("profile: beginner\n")
    monkeypatch.setenv(CONFIG_ENV, str(p))
    assert load_config().profile == "beginner"


def test_default_location_is_used_when_present(monkeypatch, tmp_path: Path):
    p = tmp_path / "default.yaml"
    p.write_text("hostname: home\n")
    monkeypatch.setattr(loader, "DEFAULT_CONFIG_PATH", p)
    assert load_config().hostname == "home"


def test_cli_overrides_win_and_none_is_ignored(tmp_path: Path):
    p = tmp_path / "c.yaml"
    p.write_text("profile: beginner\ndry_run: true\n")
    cfg = load_config(p, profile="workstation", dry_run=None)
    assert cfg.profile == "workstation"
    assert cfg.dry_run is True


def test_missing_explicit_file(tmp_path: Path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nope.yaml")


def test_missing_env_file(monkeypatch, tmp_path: Path):
    monkeypatch.setenv(CONFIG_ENV, str(tmp_path / "nope.yaml"))
    with pytest.raises(ConfigError):
        load_config()


@pytest.mark.parametrize(
    "text",
    [
        "profile: gaming\n",
        "unknown_key: 1\n",
        "connectivity:\n  timeout_seconds: 0\n",
        "- a\n- b\n",
        "profile: [unclosed\n",
    ],
)
def test_invalid_configs_are_config_errors(tmp_path: Path, text):
    p = tmp_path / "bad.yaml"
    p.write_text(text)
    with pytest.raises(ConfigError):
        load_config(p)
