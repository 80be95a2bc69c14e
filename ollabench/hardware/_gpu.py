"""GPU name lookup (macOS only, via system_profiler)."""

from __future__ import annotations

import json
import logging
import subprocess
import sys
from typing import Optional

logger = logging.getLogger(__name__)


def detect_gpu_name() -> Optional[str]:
    """Return the chipset model reported by system_profiler, else None."""
    if sys.platform != "darwin":
        return None
    try:
        out = subprocess.run(
            ["system_profiler", "SPDisplaysDataType", "-json"],
            capture_output=True,
            text=True,
            timeout=10,
        )
        data = json.loads(out.stdout)
    except (OSError, subprocess.SubprocessError, json.JSONDecodeError) as exc:
        logger.debug("system_profiler failed: %s", exc)
        return None
    for gpu in data.get("SPDisplaysDataType", []):
        name = gpu.get("sppci_model") or gpu.get("_name")
        if name:
            return str(name)
    return None
