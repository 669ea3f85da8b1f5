"""
Scaler — size Postgres and Unicorn to the host.

  db_shared_buffers: 128MB for 1GB, 256MB for 2GB, else 256MB * GB, max 4096MB
  UNICORN_WORKERS:   2 * GB for 2GB or less, else 2 * CPU cores, max 8

"GB" is total memory / 950MB, rounded down, so a 1GB VPS that reports
~985MB still counts as 1GB.
"""
from config_document import ConfigDocument
from config_loader import SetupConfig
from console import log

MB_PER_GB          = 950
MAX_SHARED_BUFFERS = 4096
MAX_WORKERS        = 8


def memory_gb(memory_mb: int) -> int:
    # Deliberate floor: the plain formula gives 0 below 950MB (0MB buffers,
    # 0 workers), so such hosts are sized like a 1GB host instead.
    return max(memory_mb // MB_PER_GB, 1)


def shared_buffers(memory_mb: int) -> int:
    gb = memory_gb(memory_mb)
    if gb == 1:
        value = 128
    elif gb == 2:
        value = 256
    else:
        value = 256 * gb
    return min(value, MAX_SHARED_BUFFERS)


def worker_count(memory_mb: int, cores: int) -> int:
    gb = memory_gb(memory_mb)
    value = 2 * gb if gb <= 2 else 2 * cores
    return min(value, MAX_WORKERS)


def apply_scaling(doc: ConfigDocument, cfg: SetupConfig, memory_mb: int, cores: int) -> SetupConfig:
    """Fill in the scaled settings over their placeholders; unset if a placeholder is missing."""
    buffers = shared_buffers(memory_mb)
    if doc.set("db_shared_buffers", f"{buffers}MB", only_disabled=True, quote=True):
        cfg.db_shared_buffers = buffers
        log(f"setting db_shared_buffers = {buffers}MB")
    else:
        cfg.db_shared_buffers = None

    workers = worker_count(memory_mb, cores)
    if doc.set("UNICORN_WORKERS", workers, only_disabled=True):
        cfg.unicorn_workers = workers
        log(f"setting UNICORN_WORKERS = {workers}")
    else:
        cfg.unicorn_workers = None
    return cfg
