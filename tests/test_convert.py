import math

import numpy as np
import pandas as pd
import pytest

from xtab_effects.convert import odds_to_probs, probs_to_odds


def test_scalar_conversions():
    assert odds_to_probs(3) == pytest.approx(0.75)
    assert odds_to_probs(1.09, log=True) == pytest.approx(1 / (1 + math.exp(-1.09)))
    assert probs_to_odds(0.95) == pytest.approx(19.0)
    assert probs_to_odds(0.95, log=True) == pytest.approx(math.log(19.0))


def test_array_conversion():
    out = odds_to_probs(np.array([1.0, 3.0, 9.0]))
    assert out == pytest.approx([0.5, 0.75, 0.9])


def test_frame_keeps_column_order_and_non_numeric():
    df = pd.DataFrame({"label": ["a", "b"], "p": [0.5, 0.8], "q": [0.2, 0.25]})
    out = probs_to_odds(df)
    assert list(out.columns) == ["label", "p", "q"]
    assert out["label"].tolist() == ["a", "b"]
    assert out["p"].tolist() == pytest.approx([1.0, 4.0])
    assert out["q"].tolist() == pytest.approx([0.25, 1 / 3])


def test_frame_select():
    df = pd.DataFrame({"p": [0.5, 0.8], "q": [0.2, 0.25]})
    out = probs_to_odds(df, select="q")
    assert list(out.columns) == ["p", "q"]
    assert out["p"].tolist() == [0.5, 0.8]
    assert out["q"].tolist() == pytest.approx([0.25, 1 / 3])


def test_frame_exclude():
    df = pd.DataFrame({"odds": [1.0, 3.0], "n": [10, 20], "other": [4.0, 1.0]})
    out = odds_to_probs(df, exclude=["n"])
    assert list(out.columns) == ["odds", "n", "other"]
    assert out["n"].tolist() == [10, 20]
    assert out["odds"].tolist() == pytest.approx([0.5, 0.75])
    assert out["other"].tolist() == pytest.approx([0.8, 0.5])


def test_frame_unknown_column():
    with pytest.raises(KeyError):
        odds_to_probs(pd.DataFrame({"odds": [1.0]}), select="missing")
