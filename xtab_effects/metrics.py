from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional
import logging
import math

import numpy as np
import pandas as pd
from scipy.stats.contingency import odds_ratio as _conditional_odds_ratio

from .contingency import validate_observed
from .formulas import (
    EffectEstimate,
    Scale,
    cohens_h_estimate,
    cohens_h_value,
    odds_ratio_estimate,
    odds_ratio_value,
    risk_ratio_estimate,
    risk_ratio_value,
)
from .inputs import (
    BayesContingencyResult,
    HTestResult,
    ResultFamily,
    normalize,
    resolve_test_result,
)
from .intervals import Alternative, ConfidenceSpec, build_ci, parse_confidence, truncate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EffectSizeResult:
    """
    One effect size with its interval and the metadata needed to print it.

    With the CI switched off, `ci`, `ci_low`, `ci_high`, `ci_method` and
    `alternative` are all None.
    """

    name: str
    estimate: float
    ci: Optional[float] = None
    ci_low: Optional[float] = None
    ci_high: Optional[float] = None
    ci_method: Optional[str] = None
    alternative: Optional[Alternative] = None
    approximate: bool = False
    log: bool = False

    @property
    def has_ci(self) -> bool:
        return self.ci is not None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {self.name: self.estimate}
        if self.has_ci:
            out.update({"CI": self.ci, "CI_low": self.ci_low, "CI_high": self.ci_high})
        out.update(
            {
                "ci_method": self.ci_method,
                "alternative": self.alternative.value if self.alternative else None,
                "approximate": self.approximate,
            }
        )
        return out

    def to_frame(self) -> pd.DataFrame:
        """One-row effect size table; metadata goes in `DataFrame.attrs`."""
        cols: Dict[str, Any] = {self.name: [self.estimate]}
        if self.has_ci:
            cols.update({"CI": [self.ci], "CI_low": [self.ci_low], "CI_high": [self.ci_high]})
        frame = pd.DataFrame(cols)
        frame.attrs.update(
            {
                "ci": self.ci,
                "ci_method": self.ci_method,
                "approximate": self.approximate,
                "alternative": self.alternative.value if self.alternative else None,
            }
        )
        return frame


def _log_or_keep(value: Optional[float], log: bool) -> Optional[float]:
    if value is None or not log:
        return value
    # log(0) -> -inf and log(inf) -> inf are valid one-sided bounds
    with np.errstate(divide="ignore"):
        return float(np.log(value))


def _assemble(
    name: str,
    estimate: float,
    spec: Optional[ConfidenceSpec],
    bounds: Optional[tuple] = None,
    *,
    ci_method: str = "normal",
    approximate: bool = False,
    log: bool = False,
) -> EffectSizeResult:
    if spec is None:
        low = high = None
        ci_method_out = None
        alternative = None
        level = None
    else:
        low, high = bounds
        ci_method_out = ci_method
        alternative = spec.alternative
        level = spec.level

    return EffectSizeResult(
        name=f"log_{name}" if log else name,
        estimate=_log_or_keep(float(estimate), log),
        ci=level,
        ci_low=_log_or_keep(low, log),
        ci_high=_log_or_keep(high, log),
        ci_method=ci_method_out,
        alternative=alternative,
        approximate=approximate,
        log=log,
    )


def _normal_effect(
    x: Any,
    y: Optional[Any],
    *,
    effect: str,
    formula: Callable[[np.ndarray], EffectEstimate],
    ci: Any,
    alternative: Any,
    log: bool,
) -> EffectSizeResult:
    alternative = Alternative.resolve(alternative)
    obs = normalize(x, y, effect=effect, ci=ci, alternative=alternative, log=log)
    if isinstance(obs, EffectSizeResult):
        return obs

    spec = parse_confidence(ci, alternative)
    est = formula(obs)
    bounds = build_ci(est.value, est.se, est.scale, spec) if spec is not None else None
    return _assemble(est.label, est.value, spec, bounds, log=log)


def oddsratio(
    x: Any,
    y: Optional[Any] = None,
    ci: Any = 0.95,
    alternative: Any = "two-sided",
    log: bool = False,
) -> EffectSizeResult:
    """
    Odds ratio (treatment / control) for a 2x2 table, groups as COLUMNS.

    The first column is the treatment group, the second the control group;
    transpose the table (or swap `x` and `y`) to use rows as groups.
    CI: exp(log(OR) -/+ z * sqrt(sum(1 / cells))).

    `x` may also be a chi-squared or Fisher's exact HTestResult, or a
    BayesContingencyResult.
    """
    return _normal_effect(
        x, y, effect="or", formula=odds_ratio_estimate, ci=ci, alternative=alternative, log=log
    )


def riskratio(
    x: Any,
    y: Optional[Any] = None,
    ci: Any = 0.95,
    alternative: Any = "two-sided",
    log: bool = False,
) -> EffectSizeResult:
    """Risk ratio p1 / p2 of the row-0 outcome between the two columns."""
    return _normal_effect(
        x, y, effect="rr", formula=risk_ratio_estimate, ci=ci, alternative=alternative, log=log
    )


def cohens_h(
    x: Any,
    y: Optional[Any] = None,
    ci: Any = 0.95,
    alternative: Any = "two-sided",
) -> EffectSizeResult:
    """Cohen's h, the arcsine difference of the two column proportions. No log mode."""
    return _normal_effect(
        x, y, effect="cohens_h", formula=cohens_h_estimate, ci=ci, alternative=alternative, log=False
    )


_EFFECTS: Dict[str, Callable[..., EffectSizeResult]] = {
    "or": oddsratio,
    "rr": riskratio,
    "cohens_h": cohens_h,
}

_POSTERIOR_VALUES = {
    "or": ("Odds_ratio", odds_ratio_value, Scale.LOG_ODDS),
    "rr": ("Risk_ratio", risk_ratio_value, Scale.LOG_RISK),
    "cohens_h": ("Cohens_h", cohens_h_value, Scale.ARCSINE),
}


def _fisher_oddsratio(
    result: HTestResult, ci: Any, alternative: Any, log: bool
) -> EffectSizeResult:
    """Conditional maximum likelihood odds ratio with its exact interval."""
    if result.observed is None:
        if result.estimate is None:
            raise ValueError("Fisher's exact result carries neither a table nor an estimate.")
        spec = parse_confidence(ci, alternative)
        if spec is None:
            return _assemble("Odds_ratio", result.estimate, None, log=log)
        own = parse_confidence(result.conf_level, result.alternative) if result.conf_int else None
        if own is None or own.alternative is not spec.alternative or not math.isclose(own.level, spec.level):
            reported = f"{own.level} {own.alternative.value}" if own else "no"
            raise ValueError(
                f"Exact interval cannot be recomputed without the observed table "
                f"(test reports {reported} interval, requested {spec.level} {spec.alternative.value})."
            )
        bounds = tuple(float(b) for b in result.conf_int)
        return _assemble("Odds_ratio", result.estimate, spec, bounds, ci_method="conditional", log=log)

    obs = validate_observed(result.observed)
    res = _conditional_odds_ratio(np.rint(obs).astype(np.int64), kind="conditional")
    spec = parse_confidence(ci, alternative)
    bounds = None
    if spec is not None:
        interval = res.confidence_interval(
            confidence_level=spec.level, alternative=spec.alternative.value
        )
        bounds = (float(interval.low), float(interval.high))
    return _assemble("Odds_ratio", res.statistic, spec, bounds, ci_method="conditional", log=log)


def _posterior_effect(
    result: BayesContingencyResult, effect: str, ci: Any, alternative: Any, log: bool
) -> EffectSizeResult:
    """Median and equal-tailed interval of the effect over posterior draws."""
    name, value_fn, scale = _POSTERIOR_VALUES[effect]
    draws = np.asarray(result.posterior, dtype=float)
    if draws.ndim != 3 or draws.shape[1:] != (2, 2):
        raise ValueError(f"posterior must have shape (draws, 2, 2), got {draws.shape}.")

    values = value_fn(draws)
    spec = parse_confidence(ci, alternative)
    bounds = None
    if spec is not None:
        tail = (1.0 - spec.two_sided_level) / 2.0
        low, high = np.quantile(values, [tail, 1.0 - tail])
        bounds = truncate(float(low), float(high), scale, spec.alternative)
    return _assemble(
        name, float(np.median(values)), spec, bounds, ci_method="eti", approximate=True, log=log
    )


def effectsize(
    result: Any,
    type: str = "or",
    ci: Any = 0.95,
    alternative: Any = "two-sided",
    log: bool = False,
) -> EffectSizeResult:
    """
    Effect size for a finished test result.

    type: "or" (odds ratio), "rr" (risk ratio) or "cohens_h".
    """
    if type not in _EFFECTS:
        raise ValueError(f"Unsupported effect size type: {type!r}. Expected one of {sorted(_EFFECTS)}.")
    if type == "cohens_h" and log:
        raise ValueError("Cohen's h has no log scale.")

    family = resolve_test_result(result, type)

    if family is ResultFamily.CHI_SQUARED:
        if result.observed is None:
            raise ValueError("Chi-squared result carries no observed table.")
        logger.debug("effect size %s from chi-squared observed table", type)
        kwargs = {"log": log} if type != "cohens_h" else {}
        return _EFFECTS[type](result.observed, ci=ci, alternative=alternative, **kwargs)

    if family is ResultFamily.FISHER:
        logger.debug("conditional odds ratio from Fisher's exact result")
        return _fisher_oddsratio(result, ci, alternative, log)

    logger.debug("effect size %s from %d posterior draws", type, len(result.posterior))
    return _posterior_effect(result, type, ci, alternative, log)
