"""System probe: one immutable snapshot per run."""

from __future__ import annotations

import logging
import platform
import sys

from ._cpu import detect_cpu
from ._gpu import detect_gpu_name
from ._types import HardwareProfile, SystemSnapshot

logger = logging.getLogger(__name__)

_GIB = 1024**3


def detect_snapshot() -> SystemSnapshot:
    """Total memory (whole GiB), the memory left for models, and the architecture."""
    import psutil

    total_gb = psutil.virtual_memory().total // _GIB
    snapshot = SystemSnapshot.from_total(total_gb, platform.machine())
    logger.debug(
        "System memory: %d GB total, %d GB available for models (%s)",
        snapshot.total_gb,
        snapshot.available_gb,
        snapshot.architecture,
    )
    return snapshot


def detect_hardware() -> HardwareProfile:
    """Snapshot plus the descriptive CPU/GPU details shown by ``ollabench check``."""
    return HardwareProfile(
        snapshot=detect_snapshot(),
        cpu=detect_cpu(),
        platform=sys.platform,
        gpu_name=detect_gpu_name(),
    )
