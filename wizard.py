#!/usr/bin/env python3
"""
Discourse Setup Kit — Interactive Configuration Wizard
======================================================
Asks for the settings Discourse cannot guess and writes them into the
container config.

Usage:
  python3 discourse_setup.py        # Full install: checks, wizard, bootstrap
  python3 wizard.py <config.yml>    # Wizard only, against an existing config
"""
import sys
from dataclasses import replace
from pathlib import Path

from config_document import ConfigDocument
from config_loader import PLACEHOLDER_DOMAIN, SetupConfig
from console import bold, dim, fail, green, hdr, ok, red, sec, yellow

# SMTP providers whose user name is fixed regardless of account
SMTP_PROVIDER_USERS = {
    "smtp.sparkpostmail.com": "SMTP_Injection",
    "smtp.sendgrid.net":      "apikey",
}

REQUIRED_FIELDS = [
    ("DISCOURSE_HOSTNAME",         "hostname"),
    ("DISCOURSE_DEVELOPER_EMAILS", "developer_emails"),
    ("DISCOURSE_SMTP_ADDRESS",     "smtp_address"),
    ("DISCOURSE_SMTP_USER_NAME",   "smtp_user_name"),
    ("DISCOURSE_SMTP_PASSWORD",    "smtp_password"),
]
LETSENCRYPT_KEY = "LETSENCRYPT_ACCOUNT_EMAIL"
SSL_TEMPLATES = [
    "templates/web.ssl.template.yml",
    "templates/web.letsencrypt.ssl.template.yml",
]


# ── UI helpers ────────────────────────────────────────────────
def prompt(q: str, default: str = "") -> str:
    sfx = f" [{dim(default)}]" if default else ""
    v = input(f"  {q}{sfx}: ").strip()
    return v or default


def defaults_from(doc: ConfigDocument, cfg: SetupConfig | None = None) -> SetupConfig:
    """Seed the wizard with whatever the config currently holds, placeholders included."""
    def cur(key: str) -> str:
        v = doc.get(key, include_disabled=True)
        return "" if v is None else str(v)

    if cfg is None:
        cfg = SetupConfig()
    for key, attr in REQUIRED_FIELDS:
        setattr(cfg, attr, cur(key))
    le = cur(LETSENCRYPT_KEY)
    if le and PLACEHOLDER_DOMAIN not in le and not doc.is_disabled(LETSENCRYPT_KEY):
        cfg.letsencrypt_email = le
    return cfg


def collect_answers(defaults: SetupConfig) -> SetupConfig:
    """Ask the six questions in order. Returns a new record; `defaults` is untouched."""
    cfg = replace(defaults)
    TOTAL = 6

    sec(1, TOTAL, "HOSTNAME")
    cfg.hostname = prompt("Hostname for your Discourse?", cfg.hostname)

    sec(2, TOTAL, "ADMIN EMAIL")
    print(f"  {dim('Comma separated. These accounts become admins on first signup.')}")
    cfg.developer_emails = prompt("Email address for admin account(s)?", cfg.developer_emails)

    sec(3, TOTAL, "SMTP SERVER")
    cfg.smtp_address = prompt("SMTP server address?", cfg.smtp_address)

    sec(4, TOTAL, "SMTP USER NAME")
    cfg.smtp_user_name = SMTP_PROVIDER_USERS.get(cfg.smtp_address, cfg.smtp_user_name)
    cfg.smtp_user_name = prompt("SMTP user name?", cfg.smtp_user_name)

    sec(5, TOTAL, "SMTP PASSWORD")
    cfg.smtp_password = prompt("SMTP password?", cfg.smtp_password)

    sec(6, TOTAL, "LET'S ENCRYPT")
    print(f"  {dim('Enter an email to get a free HTTPS certificate, or OFF to leave it disabled.')}")
    cfg.letsencrypt_email = prompt("Optional email address for Let's Encrypt warnings?",
                                   cfg.letsencrypt_email or "OFF")
    return cfg


def print_summary(cfg: SetupConfig):
    hdr("DISCOURSE CONFIGURATION — PLEASE REVIEW")
    W = 24
    def row(k, v): print(f"  {bold(k.ljust(W))} {v}")

    print()
    row("Hostname:",       cfg.hostname)
    row("Email:",          cfg.developer_emails)
    row("SMTP address:",   cfg.smtp_address)
    row("SMTP username:",  cfg.smtp_user_name)
    row("SMTP password:",  cfg.smtp_password)
    if cfg.letsencrypt_enabled:
        row("Let's Encrypt:", green(cfg.letsencrypt_email))
    else:
        row("Let's Encrypt:", yellow("OFF"))
    if cfg.db_shared_buffers is not None:
        row("db_shared_buffers:", f"{cfg.db_shared_buffers}MB")
    if cfg.unicorn_workers is not None:
        row("UNICORN_WORKERS:", str(cfg.unicorn_workers))
    print()


def confirm() -> bool:
    """True to accept; False when the operator types n to start over."""
    raw = input(f"  {bold('ENTER')} to continue, 'n' to try again, Ctrl+C to exit: ")
    return raw.strip().lower() not in ("n", "no")


def run_wizard(defaults: SetupConfig) -> SetupConfig:
    """Collect, show, confirm; start over until the operator accepts."""
    hdr("DISCOURSE SETUP — CONFIGURATION WIZARD")
    print(f"  {dim('Press Enter to accept the default shown in [brackets].')}")
    print(f"  {dim('Ctrl+C at any time to abort.')}")
    while True:
        candidate = collect_answers(defaults)
        print_summary(candidate)
        if confirm():
            return candidate
        defaults = candidate


def write_config(doc: ConfigDocument, cfg: SetupConfig) -> list[str]:
    """
    Apply the answers to the document. Every field is attempted.

    Returns the names of settings that could not be written (their key or
    template line was not found).
    """
    failed = []
    for key, attr in REQUIRED_FIELDS:
        if doc.set(key, getattr(cfg, attr)):
            ok(f"{key} set")
        else:
            failed.append(key)

    if cfg.letsencrypt_enabled:
        if doc.set(LETSENCRYPT_KEY, cfg.letsencrypt_email):
            ok(f"{LETSENCRYPT_KEY} set")
        else:
            failed.append(LETSENCRYPT_KEY)
        for tpl in SSL_TEMPLATES:
            if doc.enable_item(tpl):
                ok(f"Enabled {tpl}")
            else:
                failed.append(tpl)

    for name in failed:
        fail(f"{name} was not found in the config; it was NOT updated.")
    return failed


def main():
    """Standalone run against an existing config file."""
    if len(sys.argv) != 2:
        print(f"Usage: {sys.argv[0]} <containers/app.yml>")
        sys.exit(2)
    path = Path(sys.argv[1])
    try:
        doc = ConfigDocument.load(path)
        cfg = run_wizard(defaults_from(doc))
    except FileNotFoundError as e:
        fail(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        print(f"\n\n  {yellow('Wizard aborted. No changes made.')}")
        sys.exit(130)

    failed = write_config(doc, cfg)
    doc.save(path)
    if failed:
        print(f"\n  {red(f'{len(failed)} setting(s) could not be written to')} {bold(str(path))}")
        sys.exit(1)
    print(f"\n  {green('Configuration saved to:')} {bold(str(path))}")


if __name__ == "__main__":
    main()
