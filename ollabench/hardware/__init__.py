"""Hardware detection subsystem for ollabench.

Produces the immutable :class:`SystemSnapshot` that gates admission, plus a
descriptive :class:`HardwareProfile` for display.
"""

from __future__ import annotations

from ._types import CPUInfo, HardwareProfile, SystemSnapshot, reserve_available_gb
from ._unified import detect_hardware, detect_snapshot

__all__ = [
    "CPUInfo",
    "HardwareProfile",
    "SystemSnapshot",
    "detect_hardware",
    "detect_snapshot",
    "reserve_available_gb",
]
