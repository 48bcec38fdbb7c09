"""
Fit a family of regression models around a base model y ~ x.

    res = famr(df, "y", "x")              # one extra model per other column
    res.summary()                         # p-value table
    res.plot("scatter"); res.plot("pvalues")

Each family entry is fitted on its own: an entry whose term cannot be
resolved or whose model cannot be estimated is dropped and reported in
`FamrResult.dropped`, and the rest of the family is unaffected.
"""
from __future__ import annotations
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Optional, Tuple, Union
import logging
import pandas as pd

from .dataset import Dataset, unwrap
from .family import ModelFamily, famr_models
from .fitmodel import FitError, FitSummary, fit_design
from .terms import TermError, column_names, expand_factors, resolve_term, term_label
from .utils import is_factor
from . import plots as _plots
from . import summary as _summary

logger = logging.getLogger(__name__)

@dataclass(frozen=True, eq=False)
class FamilyFit:
    name: str
    summary: FitSummary
    secondary: Tuple[str, ...]

@dataclass(frozen=True, eq=False)
class FamrResult:
    y: str
    x: str
    primary_terms: Tuple[str, ...]
    base: FitSummary
    fits: Tuple[FamilyFit, ...]
    y_values: pd.Series
    x_values: pd.Series
    dropped: Mapping[str, str]
    fit_family: Tuple[str, Optional[str]]

    @property
    def primary(self) -> str:
        """Design column reported as the primary predictor."""
        return self.primary_terms[0]

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fits)

    def get(self, name: str) -> Optional[FamilyFit]:
        for f in self.fits:
            if f.name == name: return f
        return None

    def __iter__(self) -> Iterator[FamilyFit]: return iter(self.fits)
    def __len__(self): return len(self.fits)

    def summary(self) -> pd.DataFrame:
        return _summary.summarize(self)

    def plot(self, mode: str = "scatter", ax=None, **options):
        return _plots.plot_famr(self, mode=mode, ax=ax, **options)

def _response(df: pd.DataFrame, y: Any) -> pd.Series:
    if not isinstance(y, str) or y not in df.columns:
        raise TermError(f"Response '{y}' is not a column of the data.")
    s = df[y]
    if isinstance(s, pd.DataFrame):
        raise TermError(f"Response column name '{y}' is not unique in the data.")
    if is_factor(s):
        raise TermError(f"Response '{y}' must be numeric (got dtype {s.dtype}); code binary outcomes as 0/1.")
    return s.astype(float)

def _as_family(family: Union[ModelFamily, Mapping[str, Any], Iterable[str]]) -> ModelFamily:
    if isinstance(family, ModelFamily): return family
    if isinstance(family, str):
        return ModelFamily([family])
    return ModelFamily(family)

def _fit_entry(df, yv, xframe, name, spec, family, link) -> FamilyFit:
    aux = resolve_term(df, spec, name)
    clash = [c for c in aux.columns if c == yv.name or c in xframe.columns]
    if clash:
        raise TermError(f"Term name(s) {clash} clash with the response or primary predictor.")
    frame = pd.concat([yv, xframe, aux], axis=1).dropna()
    design, cols = expand_factors(frame.drop(columns=[yv.name]))
    secondary = tuple(c for v in aux.columns for c in cols[v])
    fit = fit_design(frame[yv.name], design, family=family, link=link)
    return FamilyFit(name=name, summary=fit, secondary=secondary)

def famr(data: Union[pd.DataFrame, Dataset], y: str, x: Any,
         family: Union[ModelFamily, Mapping[str, Any], Iterable[str], None] = None) -> FamrResult:
    """
    Fit y ~ x and one y ~ x + term model per family entry.

    data    DataFrame or Dataset (a Dataset pins the fitting family; otherwise config.get_fit_family()).
    y       response column name.
    x       primary predictor: a column name or any term (function of the data, Derived, mapping of terms).
    family  ModelFamily, mapping or list of column names; default famr_models(data, exclude={y} plus the columns x reads).

    A bad response or primary predictor raises TermError/FitError. A bad family entry is dropped.
    """
    df, (fit_fam, link) = unwrap(data)
    if df.empty:
        raise ValueError("famr needs a non-empty table.")
    yv = _response(df, y)
    x_name = term_label(x)
    x_columns = column_names(x)
    if y in x_columns:
        raise TermError(f"Response '{y}' is also used by the primary predictor.")
    xframe = resolve_term(df, x, x_name)
    if y in xframe.columns:
        raise TermError(f"Primary term name clashes with the response '{y}'.")

    if family is None:
        family = famr_models(df, exclude=[y, *x_columns])
    family = _as_family(family)

    base_frame = pd.concat([yv, xframe], axis=1).dropna()
    design, cols = expand_factors(base_frame[list(xframe.columns)])
    primary_terms = tuple(c for v in xframe.columns for c in cols[v])
    base = fit_design(base_frame[y], design, family=fit_fam, link=link)
    logger.debug("famr base fit %s ~ %s: %d rows", y, x_name, base.nobs)

    fits, dropped = [], {}
    for name, spec in family.items():
        try:
            fit = _fit_entry(df, yv, xframe, name, spec, fit_fam, link)
        except (TermError, FitError) as exc:
            dropped[name] = str(exc)
            logger.warning("famr: dropped model '%s': %s", name, exc)
            continue
        fits.append(fit)
        logger.debug("famr fit '%s': %d rows, terms=%s", name, fit.summary.nobs, list(fit.secondary))

    return FamrResult(y=y, x=x_name, primary_terms=primary_terms, base=base, fits=tuple(fits),
                      y_values=base_frame[y].copy(), x_values=base_frame[xframe.columns[0]].copy(),
                      dropped=MappingProxyType(dropped), fit_family=(fit_fam, link))
