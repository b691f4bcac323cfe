# xtab_effects/inputs.py
"""
Input normalisation for the 2x2 effect sizes.

Every public effect size accepts the same kinds of `x`:

- a count table (array-like, DataFrame or Contingency2x2),
- two category vectors `x` (outcome) and `y` (group),
- a prior test result (HTestResult) from a chi-squared or Fisher test,
- a Bayesian contingency-table result (BayesContingencyResult).

`classify_input` is the single place where the kind is decided; `normalize`
maps each kind either to a validated observed matrix or, for test results,
to a finished result computed by the generic dispatcher.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Tuple, Union
import logging

import numpy as np

from .contingency import observed_table, validate_observed
from .errors import InvalidInputKind

if TYPE_CHECKING:
    from .metrics import EffectSizeResult

logger = logging.getLogger(__name__)

CHI_SQUARED_METHODS = ("Pearson's Chi-squared", "Chi-squared test for given probabilities")
FISHER_METHODS = ("Fisher's Exact",)
CONTINGENCY_TABLE_MODEL = "contingency_table"


@dataclass(frozen=True, eq=False)
class HTestResult:
    """Result of a classical hypothesis test, tagged by its method name."""

    method: str
    observed: Optional[np.ndarray] = None
    statistic: Optional[float] = None
    p_value: Optional[float] = None
    estimate: Optional[float] = None
    conf_int: Optional[Tuple[float, float]] = None
    conf_level: Optional[float] = None
    alternative: str = "two-sided"


@dataclass(frozen=True, eq=False)
class BayesContingencyResult:
    """
    Bayes factor result for a contingency table.

    `posterior` holds draws of the cell probabilities, shape (draws, 2, 2),
    laid out like the observed matrix.
    """

    numerator_model: str
    posterior: np.ndarray
    bayes_factor: Optional[float] = None


class InputKind(str, Enum):
    HTEST = "htest"
    BAYES = "bayes"
    TABLE = "table"
    VECTORS = "vectors"


def classify_input(x: Any, y: Optional[Any] = None) -> InputKind:
    if isinstance(x, HTestResult):
        return InputKind.HTEST
    if isinstance(x, BayesContingencyResult):
        return InputKind.BAYES
    if y is not None:
        return InputKind.VECTORS
    return InputKind.TABLE


class ResultFamily(str, Enum):
    CHI_SQUARED = "chi_squared"
    FISHER = "fisher"
    BAYES = "bayes"


def _matches(method: str, tags: Tuple[str, ...]) -> bool:
    return any(tag in method for tag in tags)


def resolve_test_result(x: Any, effect: str) -> ResultFamily:
    """
    Which finished test `x` is, for the requested effect size. Raises
    InvalidInputKind for any test the effect size cannot be taken from.
    """
    kind = classify_input(x)

    if kind is InputKind.HTEST:
        if _matches(x.method, CHI_SQUARED_METHODS):
            return ResultFamily.CHI_SQUARED
        if effect == "or" and _matches(x.method, FISHER_METHODS):
            return ResultFamily.FISHER
        expected = "a Chi-squared / Fisher's Exact test" if effect == "or" else "a Chi-squared test"
        raise InvalidInputKind(f"'x' is not {expected} (got {x.method!r}).")

    if kind is InputKind.BAYES:
        if x.numerator_model != CONTINGENCY_TABLE_MODEL:
            raise InvalidInputKind(
                f"'x' is not a Bayesian contingency-table test (numerator model {x.numerator_model!r})."
            )
        return ResultFamily.BAYES

    raise InvalidInputKind(f"'x' is not a test result (got {x.__class__.__name__}).")


def normalize(
    x: Any,
    y: Optional[Any] = None,
    *,
    effect: str,
    ci: Any = 0.95,
    alternative: Any = "two-sided",
    log: bool = False,
) -> Union[np.ndarray, "EffectSizeResult"]:
    """
    Returns a validated (2, 2) float matrix, or an EffectSizeResult when `x`
    is a test result whose effect size is delegated to `effectsize`.
    """
    from .metrics import effectsize

    kind = classify_input(x, y)
    logger.debug("normalizing %s input for %s", kind.value, effect)

    if kind in (InputKind.HTEST, InputKind.BAYES):
        return effectsize(x, type=effect, ci=ci, alternative=alternative, log=log)

    return validate_observed(observed_table(x, y))
