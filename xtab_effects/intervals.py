# xtab_effects/intervals.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple
import logging
import math
import numbers

import numpy as np
from scipy.stats import norm

from .errors import InvalidConfidenceLevel
from .formulas import Scale

logger = logging.getLogger(__name__)


class Alternative(str, Enum):
    TWO_SIDED = "two-sided"
    LESS = "less"
    GREATER = "greater"

    @classmethod
    def resolve(cls, value: Any) -> "Alternative":
        """
        Resolve an alternative hypothesis from any unambiguous prefix
        ("two", "g", "l", ...). "two.sided" and "two_sided" are accepted too.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"alternative must be a string, got {type(value).__name__}.")

        key = value.strip().lower().replace(".", "-").replace("_", "-")
        matches = [m for m in cls if m.value.startswith(key)] if key else []
        if len(matches) != 1:
            choices = ", ".join(repr(m.value) for m in cls)
            raise ValueError(f"Invalid alternative {value!r}; must be one of {choices}.")
        return matches[0]


@dataclass(frozen=True)
class ConfidenceSpec:
    level: float
    alternative: Alternative = Alternative.TWO_SIDED

    @property
    def two_sided_level(self) -> float:
        # a one-sided bound at `level` is one side of a (2*level - 1) two-sided interval
        if self.alternative is Alternative.TWO_SIDED:
            return self.level
        return 2.0 * self.level - 1.0


# natural (floor, ceiling) of each computation scale, used for one-sided truncation
_LIMITS = {
    Scale.LOG_ODDS: (0.0, math.inf),
    Scale.LOG_RISK: (0.0, math.inf),
    Scale.ARCSINE: (-math.pi, math.pi),
    Scale.LINEAR: (-math.inf, math.inf),
}


def parse_confidence(ci: Any, alternative: Any = Alternative.TWO_SIDED) -> Optional[ConfidenceSpec]:
    """
    None, False, strings and other non-numeric values switch the CI off
    (returns None). Numeric values must be a single number in (0, 1).
    """
    alt = Alternative.resolve(alternative)

    if ci is None or isinstance(ci, (bool, np.bool_, str)):
        return None
    if isinstance(ci, numbers.Real):
        arr = np.asarray([ci], dtype=float)
    else:
        arr = np.asarray(ci)
        if not np.issubdtype(arr.dtype, np.number) or np.issubdtype(arr.dtype, np.bool_):
            return None
        arr = arr.astype(float).ravel()

    if arr.size != 1:
        raise InvalidConfidenceLevel(f"ci must be a single value, got {arr.size} values.")
    level = float(arr[0])
    if not (0.0 < level < 1.0):
        raise InvalidConfidenceLevel(f"ci must be strictly between 0 and 1, got {level}.")

    return ConfidenceSpec(level=level, alternative=alt)


def critical_value(spec: ConfidenceSpec) -> float:
    alpha = 1.0 - spec.two_sided_level
    return float(norm.ppf(1.0 - alpha / 2.0))


def truncate(low: float, high: float, scale: Scale, alternative: Alternative) -> Tuple[float, float]:
    floor, ceiling = _LIMITS[scale]
    if alternative is Alternative.LESS:
        low = floor
    elif alternative is Alternative.GREATER:
        high = ceiling
    return low, high


def build_ci(estimate: float, se: float, scale: Scale, spec: ConfidenceSpec) -> Tuple[float, float]:
    """
    Normal-theory interval around `estimate`, reported on the estimate's own scale.

    Ratio scales are built as exp(log(estimate) -/+ z * se). Cohen's h uses
    twice its standard error around the estimate itself.
    """
    z = critical_value(spec)
    logger.debug(
        "building %s CI: level=%s (two-sided %s), z=%.4f",
        spec.alternative.value, spec.level, spec.two_sided_level, z,
    )

    with np.errstate(divide="ignore", invalid="ignore"):
        if scale in (Scale.LOG_ODDS, Scale.LOG_RISK):
            centre = np.log(estimate)
            low, high = np.exp(centre - z * se), np.exp(centre + z * se)
        elif scale is Scale.ARCSINE:
            low, high = estimate - z * (2.0 * se), estimate + z * (2.0 * se)
        else:
            low, high = estimate - z * se, estimate + z * se

    return truncate(float(low), float(high), scale, spec.alternative)
