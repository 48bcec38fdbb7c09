from __future__ import annotations
from typing import List, Optional
import numpy as np, pandas as pd
from .utils import display_dataframe_to_user

BASE_MODEL = "(none)"
SUMMARY_COLUMNS = ["Model", "Primary Estimate", "Primary Std Error", "Primary p",
                   "Secondary Term", "Secondary Estimate", "Secondary Std Error", "Secondary p"]

def _row(model: str, fit, primary: str, secondary: Optional[str]) -> List:
    row = [model, fit.estimate(primary), fit.stderr(primary), fit.pvalue(primary)]
    if secondary is None:
        return row + [None, np.nan, np.nan, np.nan]
    return row + [secondary, fit.estimate(secondary), fit.stderr(secondary), fit.pvalue(secondary)]

def summarize(result) -> pd.DataFrame:
    """
    One row for the base model, then one row per auxiliary coefficient of each family fit,
    in fit order. A k-level categorical entry gives k-1 rows under the same model name.
    The base row has Secondary Term None and NaN secondary statistics.
    """
    primary = result.primary
    rows = [_row(BASE_MODEL, result.base, primary, None)]
    for fit in result.fits:
        rows.extend(_row(fit.name, fit.summary, primary, term) for term in fit.secondary)
    tbl = pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
    # object dtype so the base row keeps None
    tbl["Secondary Term"] = pd.Series([r[4] for r in rows], index=tbl.index, dtype=object)
    return tbl

def format_summary(result, precision: int = 4) -> str:
    tbl = summarize(result)
    fam, link = result.fit_family
    head = [f"famr: {result.y} ~ {result.x} + <family term>   [{fam}{'/' + link if link else ''}]",
            f"base fit on {result.base.nobs} rows; {len(result.fits)} family fit(s)"]
    if result.dropped:
        head.append("dropped: " + "; ".join(f"{k} ({v})" for k, v in result.dropped.items()))
    body = tbl.to_string(index=False, na_rep="", float_format=lambda v: f"{v:.{precision}g}")
    return "\n".join(head + ["", body])

def show_summary(result, precision: Optional[int] = 4) -> None:
    display_dataframe_to_user(f"famr {result.y} ~ {result.x}", summarize(result), precision=precision)
