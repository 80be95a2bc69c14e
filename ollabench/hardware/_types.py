"""Shared dataclasses for hardware detection."""

from __future__ import annotations

from dataclasses import dataclass

# Architectures whose GPU shares system memory (Apple Silicon and other
# unified-memory ARM boards).
UNIFIED_MEMORY_ARCHITECTURES = frozenset({"arm64", "aarch64"})

UNIFIED_MEMORY_FRACTION = 0.7
SYSTEM_RESERVE_GB = 8


def reserve_available_gb(total_gb: int, architecture: str) -> int:
    """Memory (GB) left for models after reserving some for the rest of the system.

    Unified-memory machines expose 70% of total memory; everything else
    keeps a fixed 8 GB back. Never negative.
    """
    if architecture in UNIFIED_MEMORY_ARCHITECTURES:
        available = int(total_gb * UNIFIED_MEMORY_FRACTION)
    else:
        available = total_gb - SYSTEM_RESERVE_GB
    return max(available, 0)


@dataclass(frozen=True)
class SystemSnapshot:
    """Memory picture of the machine, taken once per run."""

    total_gb: int
    available_gb: int
    architecture: str

    @classmethod
    def from_total(cls, total_gb: int, architecture: str) -> SystemSnapshot:
        return cls(
            total_gb=total_gb,
            available_gb=reserve_available_gb(total_gb, architecture),
            architecture=architecture,
        )

    @property
    def unified_memory(self) -> bool:
        return self.architecture in UNIFIED_MEMORY_ARCHITECTURES

    def to_dict(self) -> dict[str, object]:
        return {
            "total_gb": self.total_gb,
            "available_gb": self.available_gb,
            "architecture": self.architecture,
        }


@dataclass(frozen=True)
class CPUInfo:
    brand: str
    cores: int
    threads: int
    architecture: str  # "x86_64", "arm64"


@dataclass(frozen=True)
class HardwareProfile:
    snapshot: SystemSnapshot
    cpu: CPUInfo
    platform: str  # "darwin", "linux", "win32"
    gpu_name: str | None = None

    @property
    def has_metal(self) -> bool:
        return self.platform == "darwin" and self.gpu_name is not None
