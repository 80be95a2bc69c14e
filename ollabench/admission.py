"""Admission filter: which catalog entries fit in this machine's memory."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from .config import ResourceLimits
from .footprint import Estimator, estimate_footprint_gb
from .hardware import SystemSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdmissionDecision:
    """Whether one variant may be benchmarked, and why not if it may not."""

    model: str
    estimated_gb: int
    admitted: bool
    reason: Optional[str] = None

    def to_dict(self) -> dict[str, object]:
        return {
            "model": self.model,
            "estimated_gb": self.estimated_gb,
            "admitted": self.admitted,
            "reason": self.reason,
        }


def fits(estimated_gb: int, min_free_gb: int, available_gb: int) -> bool:
    """The admission rule: estimate plus safety margin within available memory."""
    return estimated_gb + min_free_gb <= available_gb


def evaluate_admission(
    catalog: Iterable[str],
    snapshot: SystemSnapshot,
    limits: ResourceLimits,
    skip_if_insufficient: bool = True,
    estimator: Estimator = estimate_footprint_gb,
) -> list[AdmissionDecision]:
    """Return one decision per catalog entry, in catalog order.

    With ``skip_if_insufficient`` disabled every entry is admitted; the
    estimate is still recorded so reports can show it.
    """
    decisions: list[AdmissionDecision] = []
    for model in catalog:
        estimated = estimator(model)
        if not skip_if_insufficient or fits(
            estimated, limits.min_free_ram_gb, snapshot.available_gb
        ):
            decisions.append(AdmissionDecision(model, estimated, admitted=True))
            continue
        reason = (
            f"insufficient memory (needs ~{estimated} GB + "
            f"{limits.min_free_ram_gb} GB free, {snapshot.available_gb} GB available)"
        )
        logger.debug("Rejecting %s: %s", model, reason)
        decisions.append(AdmissionDecision(model, estimated, admitted=False, reason=reason))
    return decisions


def filter_testable(
    catalog: Iterable[str],
    snapshot: SystemSnapshot,
    limits: ResourceLimits,
    skip_if_insufficient: bool = True,
    estimator: Estimator = estimate_footprint_gb,
) -> list[str]:
    """The admitted subset of ``catalog``, order preserved."""
    return [
        d.model
        for d in evaluate_admission(
            catalog, snapshot, limits, skip_if_insufficient, estimator
        )
        if d.admitted
    ]
