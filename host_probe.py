"""
Host Probe — Discourse Setup Kit
================================
The only platform-dependent code in the kit. Everything else asks a
HostProbe for memory, disk, ports and CPU so it can be tested with a fake.

LinuxHost shells out to the same utilities an operator would use by hand:
  free -m          total memory / swap (MB)
  df -Pm <path>    free disk space (MB)
  netstat -lnt     listening TCP sockets (falls back to ss -lnt)
  /proc/cpuinfo    physical core count (falls back to os.cpu_count())
"""
import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class HostProbe(Protocol):
    def total_memory(self) -> int: ...
    def total_swap(self) -> int: ...
    def free_disk(self, path: str = "/var") -> int: ...
    def is_port_bound(self, port: int) -> bool: ...
    def physical_core_count(self) -> int: ...
    def is_root(self) -> bool: ...
    def is_interactive(self) -> bool: ...


def run(cmd: list[str], timeout: int = 30) -> tuple[int, str, str]:
    """Run a command, return (returncode, stdout, stderr)."""
    logger.debug("run: %s", " ".join(cmd))
    try:
        r = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
        return r.returncode, r.stdout.strip(), r.stderr.strip()
    except subprocess.TimeoutExpired:
        return -1, "", f"TIMEOUT after {timeout}s"
    except FileNotFoundError as e:
        return -1, "", str(e)


def parse_free(output: str, row: str) -> int:
    """Column 2 of the `Mem:` / `Swap:` row of `free -m`; 0 if the row is missing."""
    for line in output.splitlines():
        parts = line.split()
        if parts and parts[0] == f"{row}:" and len(parts) > 1:
            return int(parts[1])
    return 0


def parse_df_available(output: str) -> int:
    """`Available` column from the last line of `df -Pm`."""
    lines = [l for l in output.splitlines() if l.strip()]
    if len(lines) < 2:
        return 0
    return int(lines[-1].split()[3])


def listening_ports(output: str, state_col: int, addr_col: int) -> set[int]:
    """Ports in LISTEN state from netstat/ss style tables."""
    ports = set()
    for line in output.splitlines():
        parts = line.split()
        if len(parts) <= max(state_col, addr_col) or parts[state_col] != "LISTEN":
            continue
        _, _, port = parts[addr_col].rpartition(":")
        if port.isdigit():
            ports.add(int(port))
    return ports


def parse_cpuinfo_cores(text: str) -> int:
    """Sum of `cpu cores` over distinct `physical id`s; 0 when not reported."""
    cores: dict[str, int] = {}
    phys = "0"
    for line in text.splitlines():
        key, _, value = line.partition(":")
        key = key.strip()
        if key == "physical id":
            phys = value.strip()
        elif key == "cpu cores":
            cores[phys] = int(value.strip())
    return sum(cores.values())


class LinuxHost:
    """HostProbe backed by procps/net-tools on a Linux host."""

    def __init__(self, cpuinfo: Path = Path("/proc/cpuinfo")):
        self.cpuinfo = cpuinfo
        self._free_output: str | None = None

    def _free(self) -> str:
        if self._free_output is None:
            rc, out, err = run(["free", "-m"])
            if rc != 0:
                raise RuntimeError(f"free -m failed: {err}")
            self._free_output = out
        return self._free_output

    def total_memory(self) -> int:
        return parse_free(self._free(), "Mem")

    def total_swap(self) -> int:
        return parse_free(self._free(), "Swap")

    def free_disk(self, path: str = "/var") -> int:
        rc, out, err = run(["df", "-Pm", path])
        if rc != 0:
            raise RuntimeError(f"df {path} failed: {err}")
        return parse_df_available(out)

    def is_port_bound(self, port: int) -> bool:
        rc, out, _ = run(["netstat", "-lnt"])
        if rc == 0:
            return port in listening_ports(out, state_col=5, addr_col=3)
        logger.debug("netstat unavailable, trying ss")
        rc, out, err = run(["ss", "-lnt"])
        if rc != 0:
            raise RuntimeError(f"cannot list listening sockets: {err}")
        return port in listening_ports(out, state_col=0, addr_col=3)

    def physical_core_count(self) -> int:
        try:
            cores = parse_cpuinfo_cores(self.cpuinfo.read_text())
        except OSError:
            cores = 0
        return cores or os.cpu_count() or 1

    def is_root(self) -> bool:
        return os.geteuid() == 0

    def is_interactive(self) -> bool:
        return sys.stdin.isatty()
