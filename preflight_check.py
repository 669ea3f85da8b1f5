#!/usr/bin/env python3
"""Pre-flight checks — verify the host can run Discourse before touching anything."""
import sys

from console import bold, dim, fail, ok, warn, yellow
from host_probe import HostProbe, LinuxHost

MIN_MEMORY_MB       = 900
SWAP_CHECK_BELOW_MB = 1800
MIN_SWAP_MB         = 1000
MIN_FREE_DISK_MB    = 5000
DOCKER_DATA_PATH    = "/var"


def check_root(host: HostProbe) -> None:
    if not host.is_root():
        fail("This script must be run as root. Please sudo or log in as root first.")
        sys.exit(1)


def check_resources(host: HostProbe, disk_path: str = DOCKER_DATA_PATH) -> list[str]:
    """
    Warn about low memory / swap, abort on low disk.

    Returns the warnings that were printed. When attached to a terminal and
    anything was wrong, waits for the operator before carrying on.
    """
    warnings = []
    mem  = host.total_memory()
    swap = host.total_swap()

    if mem < MIN_MEMORY_MB:
        warnings.append(
            "Discourse requires 1GB RAM to run. This system does not appear\n"
            f"     to have sufficient memory ({mem}MB).\n"
            "     Your site may not work properly, or future upgrades of Discourse may not complete successfully."
        )
    if mem < SWAP_CHECK_BELOW_MB and swap < MIN_SWAP_MB:
        warnings.append(
            "Discourse requires at least 2GB of swap when running with less than 2GB of RAM.\n"
            f"     This system has {swap}MB of swap.\n"
            "     Create a swapfile (e.g. fallocate -l 2G /swapfile && mkswap /swapfile && swapon /swapfile)."
        )
    for w in warnings:
        warn(w)

    disk = host.free_disk(disk_path)
    if disk < MIN_FREE_DISK_MB:
        fail(f"You must have at least 5GB of *free* disk space to install Discourse ({disk}MB free on {disk_path}).")
        print(f"  {dim('Insufficient disk space can result in database corruption or a broken install.')}")
        print(f"  {dim('Free up space or add storage, then re-run. Old docker images can be removed with:')}")
        print(f"    {bold('docker image prune --all')}")
        print(f"    {bold('./launcher cleanup')}")
        sys.exit(1)

    if warnings and host.is_interactive():
        input(f"\n  {yellow('Press ENTER to continue, or Ctrl-C to exit and give your system more resources')} ")
    elif not warnings:
        ok(f"Resources: {mem}MB RAM, {swap}MB swap, {disk}MB free disk")
    return warnings


def check_ports(host: HostProbe, ports=(80, 443)) -> None:
    for port in ports:
        if host.is_port_bound(port):
            fail(f"Port {port} appears to already be in use.")
            print(f"  {dim('This will show you what command is using port')} {port}:")
            print(f"    {bold(f'ss -ltnp sport = :{port}')}")
            print(f"  {dim('If you are trying to run Discourse simultaneously with another web server,')}")
            print(f"  {dim('see the Discourse meta guide on running other websites on the same machine.')}")
            sys.exit(1)
    ok(f"Ports {', '.join(map(str, ports))} are free")


if __name__ == "__main__":
    host = LinuxHost()
    check_root(host)
    check_resources(host)
    check_ports(host)
    print("All pre-flight checks passed — READY TO INSTALL")
