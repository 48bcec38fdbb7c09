from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple
import logging
import numpy as np, pandas as pd
from math import sqrt
from scipy import stats as _scipy_stats
import statsmodels.api as sm

from .config import check_fit_family

logger = logging.getLogger(__name__)

INTERCEPT = "Intercept"
PARAM_COLUMNS = ["Estimate", "Std Error", "Statistic", "p-value"]

class FitError(ValueError):
    """The fitting service could not fit a design."""

_FAMILIES = {"gaussian": sm.families.Gaussian, "binomial": sm.families.Binomial,
             "poisson": sm.families.Poisson, "gamma": sm.families.Gamma,
             "inverse_gaussian": sm.families.InverseGaussian}
_LINKS = {"identity": sm.families.links.Identity, "log": sm.families.links.Log,
          "logit": sm.families.links.Logit, "probit": sm.families.links.Probit,
          "cloglog": sm.families.links.CLogLog, "inverse_power": sm.families.links.InversePower}

@dataclass(frozen=True, eq=False)
class FitSummary:
    """
    What famr keeps from one regression fit: the parameter table (indexed by
    design column, Intercept first), fit statistics, and enough of the fitted
    model to draw its prediction line.
    """
    personality: str
    terms: Tuple[str, ...]
    params: pd.DataFrame
    nobs: int
    df_model: float
    df_resid: float
    metrics: Dict[str, float]
    means: pd.Series
    model: Any = field(default=None, repr=False)

    def estimate(self, term: str) -> float: return float(self.params.at[term, "Estimate"])
    def stderr(self, term: str) -> float: return float(self.params.at[term, "Std Error"])
    def pvalue(self, term: str) -> float: return float(self.params.at[term, "p-value"])

    def predict_line(self, term: str, grid) -> np.ndarray:
        """Predicted response along `grid` for `term`, every other design column held at its mean."""
        grid = np.asarray(grid, dtype=float)
        if term not in self.terms:
            raise KeyError(f"'{term}' is not a term of this fit.")
        frame = pd.DataFrame({c: np.full(grid.size, float(self.means[c])) for c in self.terms})
        frame[term] = grid
        frame.insert(0, INTERCEPT, 1.0)
        return np.asarray(self.model.predict(frame[[INTERCEPT, *self.terms]].to_numpy()), dtype=float)

    def prediction_expression(self, yname: str) -> str:
        b = self.params["Estimate"]
        parts = [f"{yname}_hat = ({float(b[INTERCEPT]):.6g})"]
        for term in self.terms:
            parts.append(f"+ ({float(b[term]):.6g})·{term}")
        return " ".join(parts)

def _params_table(res, names) -> pd.DataFrame:
    tbl = pd.DataFrame({
        "Estimate": np.asarray(res.params, dtype=float),
        "Std Error": np.asarray(res.bse, dtype=float),
        "Statistic": np.asarray(res.tvalues, dtype=float),
        "p-value": np.asarray(res.pvalues, dtype=float),
    }, index=pd.Index(names, name="Term"))
    return tbl[PARAM_COLUMNS]

def _ols_metrics(res) -> Dict[str, float]:
    df_m, df_e = float(res.df_model), float(res.df_resid)
    ms_m = float(res.ess) / df_m if df_m > 0 else np.nan
    ms_e = float(res.ssr) / df_e if df_e > 0 else np.nan
    fval = ms_m / ms_e if (np.isfinite(ms_m) and np.isfinite(ms_e) and ms_e > 0) else np.nan
    pval = float(_scipy_stats.f.sf(fval, df_m, df_e)) if np.isfinite(fval) else np.nan
    return {"RSquare": float(res.rsquared), "RSquare Adj": float(res.rsquared_adj),
            "Root Mean Square Error": sqrt(ms_e) if np.isfinite(ms_e) else np.nan,
            "AIC": float(res.aic), "BIC": float(res.bic), "F Ratio": fval, "Prob > F": pval}

def _glm_metrics(res) -> Dict[str, float]:
    return {"AIC": float(res.aic), "BIC": float(res.bic_llf),
            "Deviance": float(res.deviance), "Pearson chi2": float(res.pearson_chi2),
            "Log Likelihood": float(res.llf)}

def fit_design(y: pd.Series, X: pd.DataFrame, *, family: str = "gaussian", link: Optional[str] = None) -> FitSummary:
    """
    Fit y on the design columns of X plus an intercept.
    gaussian without a link (or identity) is OLS; everything else is a statsmodels GLM.
    Raises FitError when the design cannot be estimated.
    """
    fam, lnk = check_fit_family(family, link)
    if len(y) != len(X):
        raise FitError(f"Response has {len(y)} rows but the design has {len(X)}.")
    terms = tuple(str(c) for c in X.columns)
    if len(set(terms)) != len(terms) or INTERCEPT in terms:
        raise FitError(f"Design column names must be unique and not '{INTERCEPT}': {list(terms)}")
    endog = pd.to_numeric(y).astype(float).to_numpy()
    exog = np.column_stack([np.ones(len(X)), X.to_numpy(dtype=float)]) if terms else np.ones((len(X), 1))
    n, p = exog.shape
    if n <= p:
        raise FitError(f"{n} complete rows for {p} parameters; no residual degrees of freedom.")
    rank = int(np.linalg.matrix_rank(exog))
    if rank < p:
        raise FitError(f"Design is rank-deficient (rank {rank} < {p} parameters).")

    try:
        if fam == "gaussian" and lnk in (None, "identity"):
            res = sm.OLS(endog, exog).fit()
            personality, metrics = "OLS", _ols_metrics(res)
        else:
            fam_obj = _FAMILIES[fam](link=_LINKS[lnk]()) if lnk else _FAMILIES[fam]()
            res = sm.GLM(endog, exog, family=fam_obj).fit()
            personality = f"GLM({fam}/{type(fam_obj.link).__name__.lower()})"
            metrics = _glm_metrics(res)
    except (np.linalg.LinAlgError, ValueError) as exc:
        raise FitError(f"{type(exc).__name__}: {exc}") from exc

    params = _params_table(res, (INTERCEPT, *terms))
    if not np.isfinite(params.to_numpy()).all():
        raise FitError("Fit produced non-finite estimates or standard errors.")
    metrics["Condition Number"] = float(np.linalg.cond(exog))
    logger.debug("%s fit: %d rows, terms=%s, cond=%.3g", personality, n, list(terms), metrics["Condition Number"])
    return FitSummary(personality=personality, terms=terms, params=params, nobs=int(n),
                      df_model=float(res.df_model), df_resid=float(res.df_resid), metrics=metrics,
                      means=pd.Series(X.to_numpy(dtype=float).mean(axis=0), index=list(terms)), model=res)
