# xtab_effects/convert.py
from __future__ import annotations

from typing import Any, List, Optional, Sequence, Union

import numpy as np
import pandas as pd
from scipy.special import expit, logit

Columns = Optional[Union[str, Sequence[str]]]


def _as_list(cols: Columns) -> Optional[List[str]]:
    if cols is None:
        return None
    if isinstance(cols, str):
        return [cols]
    return list(cols)


def _odds_to_probs_values(odds: Any, log: bool) -> Any:
    x = np.asarray(odds, dtype=float)
    with np.errstate(divide="ignore"):
        out = expit(x) if log else expit(np.log(x))
    return float(out) if out.ndim == 0 else out


def _probs_to_odds_values(probs: Any, log: bool) -> Any:
    x = np.asarray(probs, dtype=float)
    with np.errstate(divide="ignore"):
        out = logit(x) if log else np.exp(logit(x))
    return float(out) if out.ndim == 0 else out


def _convert_frame(
    df: pd.DataFrame,
    fn,
    *,
    log: bool,
    select: Columns,
    exclude: Columns,
) -> pd.DataFrame:
    """
    split columns -> transform the numeric subset -> reassemble in the
    original column order.
    """
    order = list(df.columns)
    select = _as_list(select)
    exclude = _as_list(exclude)

    for col in (select or []) + (exclude or []):
        if col not in df.columns:
            raise KeyError(f"Column '{col}' not found in data frame.")

    targets = [c for c in order if select is None or c in select]
    if exclude:
        targets = [c for c in targets if c not in exclude]
    targets = [c for c in targets if pd.api.types.is_numeric_dtype(df[c])]

    converted = pd.DataFrame(
        {c: fn(df[c].to_numpy(), log=log) for c in targets}, index=df.index
    )
    untouched = df[[c for c in order if c not in targets]]

    out = pd.concat([untouched, converted], axis=1)[order]
    assert list(out.columns) == order
    return out


def odds_to_probs(
    odds: Any,
    log: bool = False,
    select: Columns = None,
    exclude: Columns = None,
) -> Any:
    """
    Convert odds (or log odds with `log=True`) to probabilities.

    For a DataFrame, `select` / `exclude` choose the columns to convert;
    non-numeric columns are left as they are. odds_to_probs(3) is 0.75.
    """
    if isinstance(odds, pd.DataFrame):
        return _convert_frame(odds, _odds_to_probs_values, log=log, select=select, exclude=exclude)
    return _odds_to_probs_values(odds, log)


def probs_to_odds(
    probs: Any,
    log: bool = False,
    select: Columns = None,
    exclude: Columns = None,
) -> Any:
    """Convert probabilities to odds (or log odds with `log=True`)."""
    if isinstance(probs, pd.DataFrame):
        return _convert_frame(probs, _probs_to_odds_values, log=log, select=select, exclude=exclude)
    return _probs_to_odds_values(probs, log)
