# xtab_effects/htest.py
"""Thin wrappers over scipy.stats that produce HTestResult objects."""
from __future__ import annotations

from typing import Any, Optional

import numpy as np
from scipy import stats

from .contingency import observed_table
from .inputs import HTestResult
from .intervals import Alternative


def chi_square_test(x: Any, y: Optional[Any] = None, *, correction: bool = True) -> HTestResult:
    """
    Pearson's chi-squared test of independence for a table (or two vectors).
    A single 1-D vector of counts gets the goodness-of-fit test against
    equal probabilities instead.
    """
    obs = observed_table(x, y)
    if obs.ndim == 1:
        res = stats.chisquare(obs)
        return HTestResult(
            method="Chi-squared test for given probabilities",
            observed=obs,
            statistic=float(res.statistic),
            p_value=float(res.pvalue),
        )

    chi2, p, dof, _ = stats.chi2_contingency(obs, correction=correction)
    yates = correction and obs.shape == (2, 2)
    method = "Pearson's Chi-squared test" + (" with Yates' continuity correction" if yates else "")
    return HTestResult(method=method, observed=obs, statistic=float(chi2), p_value=float(p))


def fisher_test(
    x: Any,
    y: Optional[Any] = None,
    *,
    alternative: str = "two-sided",
    conf_level: float = 0.95,
) -> HTestResult:
    """Fisher's exact test for a 2x2 table, with the conditional MLE odds ratio."""
    obs = observed_table(x, y)
    alt = Alternative.resolve(alternative)
    _, p = stats.fisher_exact(obs, alternative=alt.value)
    est = stats.contingency.odds_ratio(np.asarray(obs, dtype=np.int64), kind="conditional")
    interval = est.confidence_interval(confidence_level=conf_level, alternative=alt.value)
    return HTestResult(
        method="Fisher's Exact Test for Count Data",
        observed=np.asarray(obs),
        p_value=float(p),
        estimate=float(est.statistic),
        conf_int=(float(interval.low), float(interval.high)),
        conf_level=conf_level,
        alternative=alt.value,
    )
