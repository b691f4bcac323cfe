# xtab_effects/formulas.py
"""
Point estimates and standard errors for 2x2 tables.

The matrix is laid out with groups as columns (column 0 = treatment,
column 1 = control) and the outcome of interest in row 0. Effects are
treatment / control.

Odds and risk ratios are log-normal in large samples, so their standard
errors are for log(OR) and log(RR). Cohen's h is already a variance
stabilising transform and its standard error is on the h scale itself.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np


class Scale(str, Enum):
    LINEAR = "linear"
    LOG_ODDS = "log-odds"
    LOG_RISK = "log-risk"
    ARCSINE = "arcsine"


@dataclass(frozen=True)
class EffectEstimate:
    label: str
    value: float
    se: float
    scale: Scale


def _columns(obs: np.ndarray):
    obs = np.asarray(obs, dtype=float)
    n1 = obs[..., 0, 0] + obs[..., 1, 0]
    n2 = obs[..., 0, 1] + obs[..., 1, 1]
    return obs, n1, n2


# The *_value functions broadcast over leading axes, so they work on a single
# (2, 2) table of counts or a stack of (draws, 2, 2) cell probabilities.

def odds_ratio_value(obs: np.ndarray) -> np.ndarray:
    obs = np.asarray(obs, dtype=float)
    with np.errstate(divide="ignore", invalid="ignore"):
        return (obs[..., 0, 0] / obs[..., 1, 0]) / (obs[..., 0, 1] / obs[..., 1, 1])


def risk_ratio_value(obs: np.ndarray) -> np.ndarray:
    obs, n1, n2 = _columns(obs)
    with np.errstate(divide="ignore", invalid="ignore"):
        return (obs[..., 0, 0] / n1) / (obs[..., 0, 1] / n2)


def cohens_h_value(obs: np.ndarray) -> np.ndarray:
    obs, n1, n2 = _columns(obs)
    p1 = obs[..., 0, 0] / n1
    p2 = obs[..., 0, 1] / n2
    return 2.0 * np.arcsin(np.sqrt(p1)) - 2.0 * np.arcsin(np.sqrt(p2))


def odds_ratio_estimate(obs: np.ndarray) -> EffectEstimate:
    obs = np.asarray(obs, dtype=float)
    with np.errstate(divide="ignore"):
        se = np.sqrt(np.sum(1.0 / obs))
    return EffectEstimate("Odds_ratio", float(odds_ratio_value(obs)), float(se), Scale.LOG_ODDS)


def risk_ratio_estimate(obs: np.ndarray) -> EffectEstimate:
    """Risk ratio p1 / p2, with the standard error of log(RR)."""
    obs, n1, n2 = _columns(obs)
    p1 = obs[0, 0] / n1
    p2 = obs[0, 1] / n2
    with np.errstate(divide="ignore", invalid="ignore"):
        se = np.sqrt(p1 / ((1.0 - p1) * n1)) + np.sqrt(p2 / ((1.0 - p2) * n2))
    return EffectEstimate("Risk_ratio", float(risk_ratio_value(obs)), float(se), Scale.LOG_RISK)


def cohens_h_estimate(obs: np.ndarray) -> EffectEstimate:
    """
    Cohen's h = 2 asin(sqrt(p1)) - 2 asin(sqrt(p2)).

    se = sqrt(0.25 * (1/n1 + 1/n2)); the interval builder doubles it.
    """
    _, n1, n2 = _columns(obs)
    se = np.sqrt(0.25 * (1.0 / n1 + 1.0 / n2))
    return EffectEstimate("Cohens_h", float(cohens_h_value(obs)), float(se), Scale.ARCSINE)
