"""Terminal output helpers shared by the setup scripts."""
from datetime import datetime

# ── ANSI colours ──────────────────────────────────────────────
BOLD="\033[1m"; DIM="\033[2m"; CYAN="\033[36m"
GREEN="\033[32m"; YELLOW="\033[33m"; RED="\033[31m"; RESET="\033[0m"

def bold(s):   return f"{BOLD}{s}{RESET}"
def dim(s):    return f"{DIM}{s}{RESET}"
def green(s):  return f"{GREEN}{s}{RESET}"
def yellow(s): return f"{YELLOW}{s}{RESET}"
def red(s):    return f"{RED}{s}{RESET}"


def _ts() -> str:
    return datetime.now().strftime('%H:%M:%S')

def log(msg):   print(f"[{_ts()}] {msg}")
def ok(msg):    print(f"[{_ts()}] {green('OK')} {msg}")
def warn(msg):  print(f"[{_ts()}] {yellow('WARN')} {msg}")
def fail(msg):  print(f"[{_ts()}] {red('FAIL')} {msg}")


def hdr(title: str):
    print(f"\n{CYAN}{'='*62}{RESET}")
    print(f"{CYAN}  {BOLD}{title}{RESET}")
    print(f"{CYAN}{'='*62}{RESET}")

def sec(num: int, total: int, title: str):
    print(f"\n{BOLD}{CYAN}[{num}/{total}] {title}{RESET}")
    print(f"{DIM}{'-'*50}{RESET}")
