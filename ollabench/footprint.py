"""Memory footprint estimates for model variants.

These are heuristics, not measurements. All figures assume Ollama's default
Q4 quantization, roughly 0.5-0.6 GB per billion parameters plus runtime
overhead. Q5 needs about 20% more, Q8 about 50% more and F16 about twice as
much; none of that is modelled here.

Two estimators are available:

``numeric`` (default)
    Parses the parameter count out of the size tag (``7b``, ``1.5b``,
    ``135m``, ``8x7b``) and buckets it. Tags without a number fall back to
    named sizes (``mini``, ``medium``).

``substring``
    Scans the size tag for fixed tokens in table order and returns the
    first hit. Token order is significant because tokens overlap
    (``"2b"`` is a substring of ``"32b"``), and this estimator keeps those
    collisions exactly as they are.
"""

from __future__ import annotations

import math
import re
from typing import Callable, Optional

from .catalog import size_tag

DEFAULT_FOOTPRINT_GB = 5

# (max billions of parameters, estimated GB)
PARAM_BUCKETS: tuple[tuple[float, int], ...] = (
    (0.6, 1),
    (2.0, 2),
    (3.0, 3),
    (7.0, 5),
    (9.0, 6),
    (14.0, 9),
    (27.0, 16),
    (34.0, 20),
    (70.0, 40),
    (235.0, 130),
    (405.0, 220),
    (671.0, 370),
)

# Beyond the largest bucket.
GB_PER_BILLION_PARAMS = 0.55

NAMED_SIZES: tuple[tuple[str, int], ...] = (
    ("mini", 3),
    ("medium", 9),
)

# Checked top to bottom; first substring hit wins.
SUBSTRING_TOKENS: tuple[tuple[str, int], ...] = (
    ("0.5b", 1),
    ("0.6b", 1),
    ("1b", 2),
    ("1.3b", 2),
    ("1.5b", 2),
    ("1.7b", 2),
    ("2b", 2),
    ("3b", 3),
    ("6.7b", 5),
    ("7b", 5),
    ("8b", 6),
    ("9b", 6),
    ("13b", 9),
    ("14b", 9),
    ("27b", 16),
    ("32b", 20),
    ("33b", 20),
    ("34b", 20),
    ("70b", 40),
    ("235b", 130),
    ("405b", 220),
    ("671b", 370),
    ("mini", 3),
    ("medium", 9),
)

_PARAM_PATTERN = re.compile(r"(?<![\d.])(?:(\d+)x)?(\d+(?:\.\d+)?)([bm])(?![a-z])")

Estimator = Callable[[str], int]


def parse_param_count(tag: str) -> Optional[float]:
    """Billions of parameters named in a size tag, or None.

    >>> parse_param_count("7b-instruct-q4_0")
    7.0
    >>> parse_param_count("8x7b")
    56.0
    >>> parse_param_count("135m")
    0.135
    """
    match = _PARAM_PATTERN.search(tag.lower())
    if match is None:
        return None
    experts, value, unit = match.groups()
    params = float(value)
    if unit == "m":
        params /= 1000.0
    if experts:
        params *= int(experts)
    return params


def footprint_for_params(params_b: float) -> int:
    for upper, estimate in PARAM_BUCKETS:
        if params_b <= upper:
            return estimate
    return math.ceil(params_b * GB_PER_BILLION_PARAMS)


def estimate_footprint_gb(identifier: str) -> int:
    """Estimated memory (GB) for a variant, from the parameter count in its tag."""
    tag = size_tag(identifier).lower()
    params = parse_param_count(tag)
    if params is not None:
        return footprint_for_params(params)
    for token, estimate in NAMED_SIZES:
        if token in tag:
            return estimate
    return DEFAULT_FOOTPRINT_GB


def estimate_footprint_gb_substring(identifier: str) -> int:
    """Estimated memory (GB) using the ordered substring table."""
    tag = size_tag(identifier)
    for token, estimate in SUBSTRING_TOKENS:
        if token in tag:
            return estimate
    return DEFAULT_FOOTPRINT_GB


_ESTIMATORS: dict[str, Estimator] = {
    "numeric": estimate_footprint_gb,
    "substring": estimate_footprint_gb_substring,
}


def get_estimator(name: str = "numeric") -> Estimator:
    try:
        return _ESTIMATORS[name]
    except KeyError:
        raise ValueError(
            f"Unknown footprint estimator {name!r}; "
            f"choose from {', '.join(sorted(_ESTIMATORS))}"
        ) from None
