# xtab_effects/cli.py
from __future__ import annotations

import argparse
import json
import logging
from typing import Any, Dict, List, Optional

import numpy as np

from .io import read_table
from .contingency import Contingency2x2, build_2x2
from .metrics import cohens_h, oddsratio, riskratio

logger = logging.getLogger(__name__)


def _table_from_counts(counts: List[float]) -> np.ndarray:
    """
    --table takes the observed matrix row by row:
      treatment_event control_event treatment_no_event control_no_event
    """
    if len(counts) != 4:
        raise ValueError(f"--table needs exactly 4 counts, got {len(counts)}.")
    return np.array(counts, dtype=float).reshape(2, 2)


def _contingency_to_dict(t: Any) -> Dict[str, Any]:
    if isinstance(t, Contingency2x2):
        return t.to_dict()
    arr = np.asarray(t)
    return {"observed": arr.tolist()}


def _parse_ci(args: argparse.Namespace) -> Optional[float]:
    return None if args.no_ci else args.ci


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser("xtab-effects")

    src = ap.add_mutually_exclusive_group(required=True)
    src.add_argument(
        "--table",
        nargs=4,
        type=float,
        metavar="N",
        help="Observed counts row by row: treatment_event control_event treatment_no_event control_no_event.",
    )
    src.add_argument("--data", default=None, help="Cohort table .csv/.tsv/.xlsx, one row per subject.")

    # cohort mode
    ap.add_argument("--group-col", default="group")
    ap.add_argument("--outcome-col", default="outcome")
    ap.add_argument("--treatment", default=None, help="Value of --group-col marking the treatment group.")
    ap.add_argument("--control", default=None, help="Value of --group-col marking the control group.")
    ap.add_argument("--outcome-positive", default="1", help="Value of --outcome-col counted as an event.")
    ap.add_argument("--sheet", default=None, help="Excel sheet name (default: first sheet).")

    ap.add_argument("--ci", type=float, default=0.95)
    ap.add_argument("--no-ci", action="store_true", help="Point estimates only.")
    ap.add_argument(
        "--alternative",
        default="two-sided",
        help="two-sided (default), less or greater; any unambiguous prefix works.",
    )
    ap.add_argument("--log", action="store_true", help="Report log odds ratio and log risk ratio.")
    ap.add_argument("--verbose", "-v", action="store_true")
    return ap


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.table is not None:
        table: Any = _table_from_counts(args.table)
    else:
        if args.treatment is None or args.control is None:
            raise ValueError("--data needs both --treatment and --control.")
        cohort = read_table(args.data, sheet=args.sheet)
        logger.debug("read %d rows from %s", len(cohort), args.data)
        table = build_2x2(
            cohort,
            group_col=args.group_col,
            outcome_col=args.outcome_col,
            treatment_value=args.treatment,
            control_value=args.control,
            outcome_positive_value=args.outcome_positive,
        )

    ci = _parse_ci(args)
    metrics = {
        "odds_ratio": oddsratio(table, ci=ci, alternative=args.alternative, log=args.log).to_dict(),
        "risk_ratio": riskratio(table, ci=ci, alternative=args.alternative, log=args.log).to_dict(),
        "cohens_h": cohens_h(table, ci=ci, alternative=args.alternative).to_dict(),
    }

    out = {
        "inputs": {
            "source": "table" if args.table is not None else args.data,
            "group_col": args.group_col if args.data else None,
            "outcome_col": args.outcome_col if args.data else None,
            "treatment": args.treatment,
            "control": args.control,
            "ci": ci,
            "alternative": args.alternative,
            "log": bool(args.log),
        },
        "table": _contingency_to_dict(table),
        "metrics": metrics,
    }

    print(json.dumps(out, indent=2, default=str))


if __name__ == "__main__":
    main()
