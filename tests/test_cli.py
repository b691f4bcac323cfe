import json
import math

import pandas as pd
import pytest

from xtab_effects.cli import main


def _run(capsys, argv):
    main(argv)
    return json.loads(capsys.readouterr().out)


def test_cli_table(capsys):
    out = _run(capsys, ["--table", "71", "30", "50", "100"])
    assert out["table"] == {"observed": [[71.0, 30.0], [50.0, 100.0]]}
    assert out["metrics"]["odds_ratio"]["Odds_ratio"] == pytest.approx(4.7333, abs=1e-3)
    assert out["metrics"]["risk_ratio"]["Risk_ratio"] == pytest.approx(2.5427, abs=1e-3)
    assert out["metrics"]["cohens_h"]["alternative"] == "two-sided"


def test_cli_one_sided_log(capsys):
    out = _run(capsys, ["--table", "71", "30", "50", "100", "--alternative", "g", "--log"])
    metrics = out["metrics"]["odds_ratio"]
    assert "log_Odds_ratio" in metrics
    assert metrics["CI_high"] == math.inf
    assert metrics["alternative"] == "greater"


def test_cli_no_ci(capsys):
    out = _run(capsys, ["--table", "71", "30", "50", "100", "--no-ci"])
    for metrics in out["metrics"].values():
        assert "CI_low" not in metrics
        assert metrics["alternative"] is None


def test_cli_cohort_file(capsys, tmp_path):
    path = tmp_path / "cohort.csv"
    pd.DataFrame(
        {
            "arm": ["T"] * 4 + ["C"] * 4,
            "sick": [1, 1, 1, 0, 1, 0, 0, 0],
        }
    ).to_csv(path, index=False)

    out = _run(
        capsys,
        ["--data", str(path), "--group-col", "arm", "--outcome-col", "sick", "--treatment", "T", "--control", "C"],
    )
    assert out["table"] == {"a": 3, "b": 1, "c": 1, "d": 3}
    assert out["metrics"]["odds_ratio"]["Odds_ratio"] == pytest.approx(9.0)


def test_cli_cohort_needs_groups(tmp_path):
    path = tmp_path / "cohort.csv"
    pd.DataFrame({"group": ["T"], "outcome": [1]}).to_csv(path, index=False)
    with pytest.raises(ValueError):
        main(["--data", str(path)])
