from pathlib import Path

import pytest

from config_loader import SetupConfig, load_settings, parse_ports

VARS = ("DISCOURSE_DOCKER_DIR", "DISCOURSE_CONFIG", "DISCOURSE_TEMPLATE",
        "DISCOURSE_LAUNCHER", "DISCOURSE_PORTS")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    for var in VARS:
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)
    monkeypatch.chdir(tmp_path)


def test_defaults_follow_cwd(tmp_path):
    s = load_settings()
    assert s.root == tmp_path
    assert s.deployment_id == "app"
    assert s.template_path == tmp_path / "samples" / "standalone.yml"
    assert s.config_path == tmp_path / "containers" / "app.yml"
    assert s.launcher == tmp_path / "launcher"
    assert s.ports == (80, 443)


def test_env_file_and_overrides(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text(
        "DISCOURSE_DOCKER_DIR=/var/discourse\n"
        "DISCOURSE_CONFIG=web_only\n"
        "DISCOURSE_PORTS=8080, 8443\n"
    )
    monkeypatch.setenv("DISCOURSE_CONFIG", "from_shell")

    s = load_settings(launcher="/usr/local/bin/launcher", deployment_id=None)

    assert s.root == Path("/var/discourse")
    assert s.deployment_id == "from_shell"
    assert s.ports == (8080, 8443)
    assert s.launcher == Path("/usr/local/bin/launcher")
    assert s.config_path == Path("/var/discourse/containers/from_shell.yml")


@pytest.mark.parametrize("raw", ["", "http", "0", "80,70000"])
def test_bad_ports(raw):
    with pytest.raises(ValueError):
        parse_ports(raw)


@pytest.mark.parametrize("email, enabled", [
    ("admin@mysite.org", True),
    ("OFF", False),
    ("Off", False),
    ("  ", False),
    ("me@example.com", False),
])
def test_letsencrypt_enabled(email, enabled):
    assert SetupConfig(letsencrypt_email=email).letsencrypt_enabled is enabled
