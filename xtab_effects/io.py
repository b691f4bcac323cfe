# xtab_effects/io.py
from __future__ import annotations
from pathlib import Path
from typing import Optional
import pandas as pd

def read_table(path: str, *, sheet: Optional[str] = None) -> pd.DataFrame:
    """Read a cohort table (one row per subject) from .csv, .tsv or .xlsx."""
    p = Path(path)
    suf = p.suffix.lower()
    if suf == ".csv":
        return pd.read_csv(p)
    if suf in [".tsv", ".txt"]:
        return pd.read_csv(p, sep="\t")
    if suf in [".xlsx", ".xls"]:
        return pd.read_excel(p, sheet_name=sheet or 0)
    raise ValueError(f"Unsupported file type: {suf}. Expected .csv, .tsv or .xlsx")
