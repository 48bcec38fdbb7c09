"""
Term specifications: what a regression term refers to, resolved at fit time.

A term is one of
  Column("w1")                      a column of the data
  Derived(lambda d: d.w1 * d.w2)    a vector computed from the whole data frame
  TermGroup({"w4": "w4", "w5": "w5"})  several named terms entered together

Plain values are accepted wherever a term is expected: a string is a Column,
a callable is a Derived term and a mapping is a TermGroup (see `as_term`).
"""
from __future__ import annotations
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union
import numpy as np
import pandas as pd
from .utils import is_factor

class TermError(ValueError):
    """A term could not be turned into regression columns."""

# Functions available to Derived.from_expr expressions.
EXPR_ENV: Dict[str, Any] = {
    "np": np, "log": np.log, "log10": np.log10, "log2": np.log2, "exp": np.exp, "sqrt": np.sqrt,
    "abs": np.abs, "where": np.where, "clip": np.clip, "maximum": np.maximum,
    "minimum": np.minimum, "isfinite": np.isfinite, "round": np.round,
}

@dataclass(frozen=True)
class Column:
    name: str
    def __repr__(self): return f"Column({self.name!r})"

@dataclass(frozen=True)
class Derived:
    func: Callable[[pd.DataFrame], Any]
    name: Optional[str] = None

    @classmethod
    def from_expr(cls, expression: str, name: Optional[str] = None, *, extra_env: dict | None = None) -> "Derived":
        """
        Derived term from a pandas expression over the data columns, e.g. "log(w1) - w2".
        Column names take precedence over the helper functions in EXPR_ENV.
        """
        env = dict(EXPR_ENV)
        if extra_env: env.update(extra_env)
        def _evaluate(df: pd.DataFrame):
            scope = dict(env)
            scope.update({c: df[c] for c in df.columns if isinstance(c, str)})
            return pd.eval(expression, engine="python", parser="pandas", local_dict=scope)
        return cls(_evaluate, name=name or expression)

    def __repr__(self):
        label = self.name or getattr(self.func, "__name__", "<function>")
        return f"Derived({label!r})"

class TermGroup(Mapping):
    """Named terms that enter one model together. Members are Column or Derived terms."""
    def __init__(self, terms: Mapping[str, Any] | None = None, **kw):
        items = dict(terms or {}); items.update(kw)
        if not items:
            raise TermError("A term group needs at least one member.")
        self._terms: Dict[str, Union[Column, Derived]] = {}
        for key, spec in items.items():
            t = as_term(spec)
            if isinstance(t, TermGroup):
                raise TermError(f"Term groups cannot be nested (member '{key}').")
            self._terms[str(key)] = t
    def __getitem__(self, key): return self._terms[key]
    def __iter__(self) -> Iterator[str]: return iter(self._terms)
    def __len__(self): return len(self._terms)
    def __repr__(self): return f"TermGroup({self._terms!r})"

Term = Union[Column, Derived, TermGroup]

def as_term(spec: Any) -> Term:
    if isinstance(spec, (Column, Derived, TermGroup)): return spec
    if isinstance(spec, str): return Column(spec)
    if isinstance(spec, Mapping): return TermGroup(spec)
    if callable(spec): return Derived(spec)
    raise TermError(f"Cannot use {type(spec).__name__} as a model term; "
                    "expected a column name, a function of the data or a mapping of terms.")

def term_label(spec: Any, default: str = "focus") -> str:
    """Display name for a primary predictor given as a term instead of a column name."""
    if isinstance(spec, str): return spec
    t = as_term(spec)
    if isinstance(t, Column): return t.name
    if isinstance(t, Derived): return t.name or getattr(t.func, "__name__", default).replace("<lambda>", default)
    return "+".join(t)

def _as_vector(out: Any, df: pd.DataFrame, label: str) -> pd.Series:
    n = len(df)
    if isinstance(out, pd.DataFrame):
        if out.shape[1] != 1:
            raise TermError(f"Term '{label}' returned {out.shape[1]} columns; use a TermGroup for several terms.")
        out = out.iloc[:, 0]
    if out is None or np.isscalar(out):
        raise TermError(f"Term '{label}' returned a scalar, expected {n} values.")
    if isinstance(out, pd.Series):
        if len(out) != n:
            raise TermError(f"Term '{label}' returned {len(out)} values for {n} rows.")
        return pd.Series(out.array, index=df.index, name=label)
    arr = np.asarray(out)
    if arr.ndim == 2 and arr.shape[1] == 1: arr = arr[:, 0]
    if arr.ndim != 1:
        raise TermError(f"Term '{label}' returned an array of shape {arr.shape}, expected ({n},).")
    if arr.shape[0] != n:
        raise TermError(f"Term '{label}' returned {arr.shape[0]} values for {n} rows.")
    return pd.Series(arr, index=df.index, name=label)

def _resolve_single(df: pd.DataFrame, t: Union[Column, Derived], label: str) -> pd.Series:
    if isinstance(t, Column):
        if t.name not in df.columns:
            raise TermError(f"Column '{t.name}' not found in the data.")
        col = df[t.name]
        if isinstance(col, pd.DataFrame):
            raise TermError(f"Column name '{t.name}' is not unique in the data.")
        return col.rename(label)
    try:
        out = t.func(df)
    except Exception as exc:
        raise TermError(f"Derived term '{label}' failed: {type(exc).__name__}: {exc}") from exc
    return _as_vector(out, df, label)

def resolve_term(df: pd.DataFrame, spec: Any, name: str) -> pd.DataFrame:
    """
    Evaluate a term against `df`. Returns one column per model variable, indexed like `df`.
    Single terms are named `name`; group members keep their own names.
    """
    t = as_term(spec)
    if isinstance(t, TermGroup):
        return pd.concat([_resolve_single(df, member, key) for key, member in t.items()], axis=1)
    return _resolve_single(df, t, name).to_frame()

def _as_category(s: pd.Series) -> pd.Series:
    cat = s if isinstance(s.dtype, pd.CategoricalDtype) else s.astype("category")
    return cat.cat.remove_unused_categories()

def column_names(spec: Any) -> List[str]:
    """Data columns a term reads directly: a Column's name, or the Column members of a group."""
    t = as_term(spec)
    if isinstance(t, Column): return [t.name]
    if isinstance(t, TermGroup): return [m.name for m in t.values() if isinstance(m, Column)]
    return []

def expand_factors(frame: pd.DataFrame) -> Tuple[pd.DataFrame, Dict[str, List[str]]]:
    """
    Numeric design columns for `frame` (rows already complete).
    Categorical variables become treatment contrasts against their first level,
    named "<var>[T.<level>]". Returns (design, {variable: [design columns]}).
    """
    parts: List[pd.DataFrame] = []; columns: Dict[str, List[str]] = {}
    for var in frame.columns:
        s = frame[var]
        if is_factor(s):
            cat = _as_category(s)
            if len(cat.cat.categories) < 2:
                raise TermError(f"Categorical term '{var}' has a single level; no contrast is possible.")
            dummies = pd.get_dummies(cat, drop_first=True, dtype=float)
            dummies.columns = [f"{var}[T.{lev}]" for lev in dummies.columns]
            parts.append(dummies)
            columns[var] = list(dummies.columns)
        else:
            parts.append(pd.to_numeric(s).astype(float).rename(var).to_frame())
            columns[var] = [var]
    design = pd.concat(parts, axis=1) if parts else pd.DataFrame(index=frame.index)
    return design, columns
