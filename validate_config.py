#!/usr/bin/env python3
"""Config validation — confirm the wizard left no required setting blank or at its placeholder.

Usage:
  python3 validate_config.py containers/app.yml
"""
import sys
from pathlib import Path

import yaml

from config_loader import PLACEHOLDER_DOMAIN
from console import bold, green, red

REQUIRED_ENV = [
    "DISCOURSE_HOSTNAME",
    "DISCOURSE_DEVELOPER_EMAILS",
    "DISCOURSE_SMTP_ADDRESS",
    "DISCOURSE_SMTP_USER_NAME",
    "DISCOURSE_SMTP_PASSWORD",
]


def find_problems(path: Path) -> list[tuple[str, str]]:
    """Return (setting, reason) for every required setting that is missing or unset."""
    try:
        data = yaml.safe_load(Path(path).read_text()) or {}
    except yaml.YAMLError as e:
        return [(str(path), f"not valid YAML: {e}")]
    env = data.get("env") if isinstance(data, dict) else None
    if not isinstance(env, dict):
        env = {}

    problems = []
    for key in REQUIRED_ENV:
        if key not in env:
            problems.append((key, "not present"))
            continue
        value = "" if env[key] is None else str(env[key])
        if PLACEHOLDER_DOMAIN in value:
            problems.append((key, f"left at default ({value})"))
        elif not value.strip():
            problems.append((key, "blank"))
    return problems


def validate_config(path: Path) -> None:
    """Print a PASS/FAIL line per setting; exit 1 if anything failed."""
    problems = dict(find_problems(path))
    print(f"\n  Validating {bold(str(path))}:")
    for key in REQUIRED_ENV:
        if key in problems:
            print(f"  {red('FAIL')} -- {key}: {problems[key]}")
        else:
            print(f"  {green('PASS')} -- {key}")
    extra = [k for k in problems if k not in REQUIRED_ENV]
    for k in extra:
        print(f"  {red('FAIL')} -- {k}: {problems[k]}")

    if problems:
        print(f"\n  {red(f'{len(problems)} issue(s) found in the configuration.')}")
        print(f"  Edit {bold(str(path))} to fix them, or delete it and run setup again.")
        sys.exit(1)


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(f"Usage: {sys.argv[0]} <containers/app.yml>")
        sys.exit(2)
    validate_config(Path(sys.argv[1]))
    print(f"\n  {green('Configuration OK')}")
