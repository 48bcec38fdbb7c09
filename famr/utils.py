from __future__ import annotations
from collections.abc import Iterable
from typing import List
import re
import sys
import numpy as np
import pandas as pd

def as_list(x) -> List:
    if x is None: return []
    if isinstance(x, (str, bytes)): return [x]
    if isinstance(x, Iterable): return list(x)
    return [x]

def sanitize(name: str) -> str:
    s = re.sub(r"\W+", "_", str(name)).strip("_")
    if s and s[0].isdigit():
        s = f"c_{s}"
    return s or "col"

def is_factor(s: pd.Series) -> bool:
    """Categorical for modelling purposes: anything that is neither numeric nor boolean."""
    return not (pd.api.types.is_numeric_dtype(s) or pd.api.types.is_bool_dtype(s))

def neg_log10(p: Iterable[float]) -> np.ndarray:
    arr = np.asarray(p, dtype=float)
    return -np.log10(np.clip(arr, np.finfo(float).tiny, None))

def display_dataframe_to_user(name: str, dataframe: pd.DataFrame,
                              show_index: bool = False, max_rows: int = 1000,
                              precision: int | None = None) -> None:
    df = dataframe
    truncated = False
    if len(df) > max_rows:
        df_to_show, truncated = df.head(max_rows), True
    else:
        df_to_show = df
    if "ipykernel" in sys.modules:
        from IPython.display import display, HTML
        styler = df_to_show.style.set_caption(f"{name} — {len(df):,} rows × {df.shape[1]}")
        if precision is not None: styler = styler.format(precision=precision)
        if not show_index: styler = styler.hide(axis="index")
        display(styler)
        if truncated:
            display(HTML(f"<em>Showing first {max_rows} rows of {len(df):,}.</em>"))
        return
    print(f"\n{name} — {len(df)} rows × {df.shape[1]}")
    fmt = (lambda v: f"{v:.{precision}g}") if precision is not None else None
    print(df_to_show.to_string(index=show_index, float_format=fmt))
    if truncated: print(f". showing first {max_rows} rows.")
