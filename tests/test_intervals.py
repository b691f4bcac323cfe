import math

import numpy as np
import pytest

from xtab_effects.errors import InvalidConfidenceLevel
from xtab_effects.formulas import Scale
from xtab_effects.intervals import (
    Alternative,
    ConfidenceSpec,
    build_ci,
    critical_value,
    parse_confidence,
)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("two-sided", Alternative.TWO_SIDED),
        ("two.sided", Alternative.TWO_SIDED),
        ("two", Alternative.TWO_SIDED),
        ("t", Alternative.TWO_SIDED),
        ("l", Alternative.LESS),
        ("GREATER", Alternative.GREATER),
        ("g", Alternative.GREATER),
    ],
)
def test_resolve_alternative(text, expected):
    assert Alternative.resolve(text) is expected


@pytest.mark.parametrize("text", ["", "x", "lesser", 2])
def test_resolve_alternative_invalid(text):
    with pytest.raises(ValueError):
        Alternative.resolve(text)


def test_two_sided_level():
    assert ConfidenceSpec(0.95).two_sided_level == 0.95
    assert ConfidenceSpec(0.95, Alternative.LESS).two_sided_level == pytest.approx(0.90)


def test_critical_value():
    assert critical_value(ConfidenceSpec(0.95)) == pytest.approx(1.959964, abs=1e-6)
    assert critical_value(ConfidenceSpec(0.95, Alternative.GREATER)) == pytest.approx(1.644854, abs=1e-6)


def test_parse_confidence_disabled():
    assert parse_confidence(None) is None
    assert parse_confidence(False) is None
    assert parse_confidence("none") is None


def test_parse_confidence_numeric():
    spec = parse_confidence(0.9, "less")
    assert spec == ConfidenceSpec(0.9, Alternative.LESS)
    assert parse_confidence(np.float64(0.8)).level == pytest.approx(0.8)
    assert parse_confidence(np.array([0.8])).level == pytest.approx(0.8)


@pytest.mark.parametrize("ci", [0, 1, 2, float("nan"), [0.8, 0.9], np.array([])])
def test_parse_confidence_invalid(ci):
    with pytest.raises(InvalidConfidenceLevel):
        parse_confidence(ci)


def test_log_scale_interval():
    lo, hi = build_ci(2.0, 0.5, Scale.LOG_ODDS, ConfidenceSpec(0.95))
    z = 1.959963984540054
    assert lo == pytest.approx(2.0 * math.exp(-z * 0.5))
    assert hi == pytest.approx(2.0 * math.exp(z * 0.5))
    # symmetric on the log scale
    assert math.log(2.0) - math.log(lo) == pytest.approx(math.log(hi) - math.log(2.0))


def test_arcsine_interval_doubles_se():
    lo, hi = build_ci(0.0, 0.1, Scale.ARCSINE, ConfidenceSpec(0.95))
    assert lo == pytest.approx(-0.392, abs=1e-3)
    assert hi == pytest.approx(0.392, abs=1e-3)


def test_linear_interval():
    lo, hi = build_ci(1.0, 0.1, Scale.LINEAR, ConfidenceSpec(0.95, Alternative.GREATER))
    assert lo == pytest.approx(1.0 - 1.644854 * 0.1, abs=1e-6)
    assert hi == math.inf


def test_truncation_after_symmetric_interval():
    _, hi_two = build_ci(2.0, 0.5, Scale.LOG_RISK, ConfidenceSpec(0.90))
    lo, hi = build_ci(2.0, 0.5, Scale.LOG_RISK, ConfidenceSpec(0.95, Alternative.LESS))
    assert lo == 0.0
    assert hi == pytest.approx(hi_two)

    lo, hi = build_ci(0.5, 0.1, Scale.ARCSINE, ConfidenceSpec(0.95, Alternative.LESS))
    assert lo == -math.pi
