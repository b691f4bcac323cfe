# xtab_effects/contingency.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional
import numpy as np
import pandas as pd

from .errors import EmptyMarginError, InvalidCountsError, ShapeError

@dataclass(frozen=True)
class Contingency2x2:
    # treatment / control groups; outcome=1 is event
    a: int  # treatment & event
    b: int  # treatment & no-event
    c: int  # control & event
    d: int  # control & no-event

    def as_array(self) -> np.ndarray:
        """
        Observed matrix with groups as COLUMNS:
                    treatment   control
        event          a           c
        no-event       b           d
        """
        return np.array([[self.a, self.c], [self.b, self.d]], dtype=int)

    def to_dict(self) -> dict[str, int]:
        return {"a": self.a, "b": self.b, "c": self.c, "d": self.d}

def build_2x2(
    cohort: pd.DataFrame,
    *,
    group_col: str,
    outcome_col: str,
    treatment_value: str,
    control_value: str,
    outcome_positive_value: Any = 1.0,
) -> Contingency2x2:
    """
    Count a cohort table (one row per subject) into a Contingency2x2.
    Rows with a missing group or outcome are dropped.
    """
    for col in (group_col, outcome_col):
        if col not in cohort.columns:
            raise KeyError(f"Column '{col}' not found in cohort table.")

    df = cohort[[group_col, outcome_col]].copy()
    df = df.dropna(subset=[group_col, outcome_col])

    treat = df[group_col].astype(str) == str(treatment_value)
    ctrl = df[group_col].astype(str) == str(control_value)

    if pd.api.types.is_numeric_dtype(df[outcome_col]):
        positive = pd.to_numeric(outcome_positive_value)
        is_event = df[outcome_col] == positive
    else:
        is_event = df[outcome_col].astype(str) == str(outcome_positive_value)

    def _counts(mask: pd.Series) -> tuple[int, int]:
        ev = int(is_event[mask].sum())
        return ev, int(mask.sum()) - ev

    a, b = _counts(treat)
    c, d = _counts(ctrl)

    return Contingency2x2(a=a, b=b, c=c, d=d)

def observed_table(x: Any, y: Optional[Any] = None) -> np.ndarray:
    """
    Observed counts from either a table-like `x` or two category vectors.

    With `y`, rows are the levels of `x` (outcome) and columns the levels of
    `y` (group), both in sorted order; pairs with a missing value are dropped.
    """
    if isinstance(x, Contingency2x2):
        return x.as_array()
    if y is not None:
        xs = pd.Series(np.asarray(x), name="x")
        ys = pd.Series(np.asarray(y), name="y")
        if len(xs) != len(ys):
            raise ValueError(f"'x' and 'y' must have the same length ({len(xs)} != {len(ys)}).")
        return pd.crosstab(xs, ys).to_numpy()
    if isinstance(x, pd.DataFrame):
        return x.to_numpy()
    return np.asarray(x)

def validate_observed(obs: Any) -> np.ndarray:
    """
    The one gate every effect size goes through before any formula runs.
    Returns the table as a float array.
    """
    arr = np.asarray(obs)
    if not np.issubdtype(arr.dtype, np.number):
        raise InvalidCountsError(f"Counts must be numeric, got dtype {arr.dtype}.")
    arr = arr.astype(float)
    if not np.all(np.isfinite(arr)) or np.any(arr < 0):
        raise InvalidCountsError("All entries of the contingency table must be non-negative and finite.")

    if arr.ndim != 2:
        raise ShapeError(f"Expected a 2-by-2 contingency table, got an array with {arr.ndim} dimension(s).")

    if np.any(arr.sum(axis=0) == 0) or np.any(arr.sum(axis=1) == 0):
        raise EmptyMarginError("Cannot have empty rows/columns in the contingency tables.")

    if arr.shape != (2, 2):
        raise ShapeError(f"Only 2-by-2 contingency tables are supported, got {arr.shape[0]}-by-{arr.shape[1]}.")

    return arr
