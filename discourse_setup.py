#!/usr/bin/env python3
"""
Discourse Setup Kit — Installer
===============================
Creates containers/<id>.yml from the sample template and bootstraps it.

STAGES:
  0: Refuse to run over an existing config; require root; copy the template
  1: Pre-flight: memory/swap (warn), free disk (fatal), ports 80/443
  2: Scale db_shared_buffers / UNICORN_WORKERS to the host
  3: Wizard: hostname, admin email, SMTP, Let's Encrypt (loop until confirmed)
  4: Write answers into the config
  5: Validate the written config
  6: ./launcher bootstrap <id>

Usage:
  sudo python3 discourse_setup.py                   # run from the docker checkout
  sudo python3 discourse_setup.py --root /var/discourse --config app
  sudo python3 discourse_setup.py --skip-bootstrap  # stop after writing the config

A failed run leaves containers/<id>.yml behind. Delete it before retrying.
"""
import argparse
import logging
import shutil
import subprocess
import sys
from pathlib import Path

from config_document import ConfigDocument
from config_loader import KitSettings, SetupConfig, load_settings
from console import bold, dim, fail, hdr, log, ok, yellow
from host_probe import HostProbe, LinuxHost
from preflight_check import check_ports, check_resources, check_root
from scaler import apply_scaling
from validate_config import validate_config
from wizard import defaults_from, run_wizard, write_config

logger = logging.getLogger(__name__)


def section(s): print(f"\n{'='*60}\n  {s}\n{'='*60}")


def copy_template(settings: KitSettings) -> Path:
    """
    Copy the sample template to the container config path.

    Raises:
        FileExistsError: If the container config already exists
        FileNotFoundError: If the template is missing
    """
    target = settings.config_path
    if target.exists():
        raise FileExistsError(
            f"{target} exists already.\n"
            f"If you want to run this setup again, remove it first."
        )
    if not settings.template_path.exists():
        raise FileNotFoundError(f"Template not found at {settings.template_path}")
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(settings.template_path, target)
    logger.debug("copied %s -> %s", settings.template_path, target)
    return target


def run_bootstrap(settings: KitSettings) -> int:
    cmd = [str(settings.launcher), "bootstrap", settings.deployment_id]
    log(f"Running: {' '.join(cmd)}")
    try:
        r = subprocess.run(cmd, cwd=str(settings.root), check=False)
    except FileNotFoundError:
        fail(f"Launcher not found: {settings.launcher}")
        return 1
    return r.returncode


def install(settings: KitSettings, host: HostProbe, skip_bootstrap: bool = False) -> int:
    """Run every stage in order. Fatal stages exit the process directly."""
    hdr("DISCOURSE SETUP")

    section("STAGE 0: Container config")
    if settings.config_path.exists():
        fail(f"{settings.config_path} exists already. Remove it to run setup again.")
        sys.exit(1)
    check_root(host)
    try:
        config_path = copy_template(settings)
    except (FileExistsError, FileNotFoundError) as e:
        fail(str(e))
        sys.exit(1)
    ok(f"Created {config_path} from {settings.template_path.name}")

    section("STAGE 1: Pre-flight checks")
    check_resources(host)
    check_ports(host, settings.ports)

    section("STAGE 2: Scale to host")
    doc = ConfigDocument.load(config_path)
    cfg = apply_scaling(doc, SetupConfig(), host.total_memory(), host.physical_core_count())
    doc.save(config_path)

    section("STAGE 3: Configuration wizard")
    cfg = run_wizard(defaults_from(doc, cfg))

    section("STAGE 4: Write configuration")
    failed = write_config(doc, cfg)
    doc.save(config_path)
    if failed:
        fail(f"{len(failed)} setting(s) could not be written to {config_path}")
        sys.exit(1)
    ok(f"Configuration file at {config_path} updated successfully!")

    section("STAGE 5: Validate configuration")
    validate_config(config_path)
    ok("Configuration validated")

    if skip_bootstrap:
        cmd = f"{settings.launcher} bootstrap {settings.deployment_id}"
        print(f"\n  {dim('When ready:')} {bold(cmd)}")
        return 0

    section("STAGE 6: Bootstrap")
    return run_bootstrap(settings)


def main(argv: list[str] | None = None, host: HostProbe | None = None):
    parser = argparse.ArgumentParser(description="Interactive Discourse installer")
    parser.add_argument("--root", type=Path, help="Docker checkout (default: $DISCOURSE_DOCKER_DIR or cwd)")
    parser.add_argument("--config", dest="deployment_id", help="Container name (default: app)")
    parser.add_argument("--skip-bootstrap", action="store_true", help="Stop after writing the config")
    parser.add_argument("--debug", action="store_true", help="Log every host command")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    try:
        settings = load_settings(root=args.root, deployment_id=args.deployment_id)
    except ValueError as e:
        fail(f"Settings error: {e}")
        sys.exit(1)

    try:
        rc = install(settings, host or LinuxHost(), skip_bootstrap=args.skip_bootstrap)
    except KeyboardInterrupt:
        print(f"\n\n  {yellow('Setup aborted.')}")
        sys.exit(130)
    except RuntimeError as e:
        fail(f"Host check failed: {e}")
        sys.exit(1)
    sys.exit(rc)


if __name__ == "__main__":
    main()
