#!/usr/bin/env python3
"""
Config Loader — Discourse Setup Kit
===================================
Resolves where the kit works (docker checkout, template, container config,
launcher) and defines the record the wizard fills in.

Settings come from, in increasing priority:
  - built-in defaults (a /var/discourse style checkout in the current dir)
  - .env in the current directory (python-dotenv, never overrides the shell)
  - environment variables
  - command line flags (passed to load_settings as overrides)

Environment variables (all optional):
  DISCOURSE_DOCKER_DIR — docker checkout holding launcher, samples/, containers/
  DISCOURSE_CONFIG     — deployment id / container name (default: app)
  DISCOURSE_TEMPLATE   — template copied to containers/<id>.yml
  DISCOURSE_LAUNCHER   — bootstrap command (default: <root>/launcher)
  DISCOURSE_PORTS      — comma-separated ports that must be free (default: 80,443)
"""
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

PLACEHOLDER_DOMAIN = "example.com"
DEFAULT_PORTS = (80, 443)


@dataclass
class KitSettings:
    root: Path
    deployment_id: str = "app"
    template_path: Path | None = None
    launcher: Path | None = None
    ports: tuple[int, ...] = DEFAULT_PORTS

    def __post_init__(self):
        self.root = Path(self.root)
        if self.template_path is None:
            self.template_path = self.root / "samples" / "standalone.yml"
        if self.launcher is None:
            self.launcher = self.root / "launcher"

    @property
    def config_path(self) -> Path:
        return self.root / "containers" / f"{self.deployment_id}.yml"


@dataclass
class SetupConfig:
    """Everything the wizard collects or derives, carried through each stage."""
    hostname: str = ""
    developer_emails: str = ""
    smtp_address: str = ""
    smtp_user_name: str = ""
    smtp_password: str = ""
    letsencrypt_email: str = "OFF"
    db_shared_buffers: int | None = None
    unicorn_workers: int | None = None

    @property
    def letsencrypt_enabled(self) -> bool:
        email = self.letsencrypt_email.strip()
        return bool(email) and email.lower() != "off" and PLACEHOLDER_DOMAIN not in email


def parse_ports(raw: str) -> tuple[int, ...]:
    ports = tuple(int(p) for p in raw.replace(" ", "").split(",") if p)
    if not ports or any(not 0 < p < 65536 for p in ports):
        raise ValueError(f"invalid port list: {raw!r}")
    return ports


def load_settings(env_file: str | Path = ".env", **overrides) -> KitSettings:
    """
    Build KitSettings from .env, the environment, and explicit overrides.

    Overrides set to None are ignored so argparse defaults can be passed
    straight through.

    Raises:
        ValueError: If DISCOURSE_PORTS is not a list of valid ports
    """
    if Path(env_file).exists():
        load_dotenv(env_file, override=False)

    values = {
        "root":          os.environ.get("DISCOURSE_DOCKER_DIR") or Path.cwd(),
        "deployment_id": os.environ.get("DISCOURSE_CONFIG") or "app",
        "template_path": os.environ.get("DISCOURSE_TEMPLATE") or None,
        "launcher":      os.environ.get("DISCOURSE_LAUNCHER") or None,
    }
    if os.environ.get("DISCOURSE_PORTS"):
        values["ports"] = parse_ports(os.environ["DISCOURSE_PORTS"])
    values.update({k: v for k, v in overrides.items() if v is not None})

    for k in ("template_path", "launcher"):
        if values.get(k) is not None:
            values[k] = Path(values[k])
    return KitSettings(**values)


if __name__ == "__main__":
    """Quick check — run: python3 config_loader.py"""
    try:
        s = load_settings()
    except ValueError as e:
        print(f"Settings error: {e}")
        sys.exit(1)
    print("Settings resolved")
    print(f"   Root:       {s.root}")
    print(f"   Deployment: {s.deployment_id}")
    print(f"   Template:   {s.template_path}")
    print(f"   Config:     {s.config_path}")
    print(f"   Launcher:   {s.launcher}")
    print(f"   Ports:      {', '.join(map(str, s.ports))}")
