"""CPU description for ``ollabench check``; not used by admission."""

from __future__ import annotations

import logging
import platform
import subprocess
import sys
from typing import Optional

from ._types import CPUInfo

logger = logging.getLogger(__name__)


def detect_cpu() -> CPUInfo:
    import psutil

    physical = psutil.cpu_count(logical=False) or 1
    return CPUInfo(
        brand=_cpu_brand(),
        cores=physical,
        threads=psutil.cpu_count(logical=True) or physical,
        architecture=platform.machine(),
    )


def _cpu_brand() -> str:
    """Marketing name of the CPU, falling back to what ``platform`` knows."""
    lookup = {"darwin": _sysctl_brand, "linux": _proc_cpuinfo_brand}.get(sys.platform)
    brand = None
    if lookup is not None:
        try:
            brand = lookup()
        except (OSError, subprocess.SubprocessError) as exc:
            logger.debug("CPU brand lookup failed: %s", exc)
    return brand or platform.processor() or platform.machine()


def _sysctl_brand() -> Optional[str]:
    proc = subprocess.run(
        ["sysctl", "-n", "machdep.cpu.brand_string"],
        capture_output=True,
        text=True,
        timeout=5,
    )
    out = proc.stdout.strip()
    return out if proc.returncode == 0 and out else None


def _proc_cpuinfo_brand() -> Optional[str]:
    with open("/proc/cpuinfo") as f:
        for line in f:
            key, _, value = line.partition(":")
            if key.strip().lower() == "model name":
                return value.strip()
    return None
