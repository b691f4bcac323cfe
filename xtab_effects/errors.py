# xtab_effects/errors.py
from __future__ import annotations


class XtabError(ValueError):
    """Base class for contingency-table effect size errors."""


class InvalidInputKind(XtabError):
    """A test result was passed, but not the kind of test the effect size needs."""


class EmptyMarginError(XtabError):
    """A row or column of the observed table sums to zero."""


class ShapeError(XtabError):
    """The observed table is not 2-by-2."""


class InvalidConfidenceLevel(XtabError):
    """A numeric confidence level that is not a single value in (0, 1)."""


class InvalidCountsError(XtabError):
    """Negative or non-finite cell counts."""
