# xtab_effects/__init__.py

from .io import read_table
from .contingency import Contingency2x2, build_2x2, observed_table, validate_observed
from .errors import (
    XtabError,
    InvalidInputKind,
    EmptyMarginError,
    ShapeError,
    InvalidConfidenceLevel,
    InvalidCountsError,
)
from .inputs import (
    BayesContingencyResult,
    HTestResult,
    InputKind,
    ResultFamily,
    classify_input,
    normalize,
    resolve_test_result,
)
from .intervals import Alternative, ConfidenceSpec, build_ci, parse_confidence
from .metrics import (
    EffectSizeResult,
    oddsratio,
    riskratio,
    cohens_h,
    effectsize,
)
from .convert import odds_to_probs, probs_to_odds
from .htest import chi_square_test, fisher_test

__all__ = [
    "read_table",
    "Contingency2x2",
    "build_2x2",
    "observed_table",
    "validate_observed",
    "XtabError",
    "InvalidInputKind",
    "EmptyMarginError",
    "ShapeError",
    "InvalidConfidenceLevel",
    "InvalidCountsError",
    "BayesContingencyResult",
    "HTestResult",
    "InputKind",
    "ResultFamily",
    "classify_input",
    "resolve_test_result",
    "normalize",
    "Alternative",
    "ConfidenceSpec",
    "build_ci",
    "parse_confidence",
    "EffectSizeResult",
    "oddsratio",
    "riskratio",
    "cohens_h",
    "effectsize",
    "odds_to_probs",
    "probs_to_odds",
    "chi_square_test",
    "fisher_test",
]
