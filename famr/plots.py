from __future__ import annotations
import numpy as np, pandas as pd, matplotlib.pyplot as plt
from .config import get_plot_style
from .utils import neg_log10

def _axes(ax):
    if ax is None:
        fig, ax = plt.subplots()
        return fig, ax
    return ax.figure, ax

def plot_famr_scatter(result, ax=None, *, n_grid: int = 200, title: str | None = None, **style):
    """
    Response against the primary predictor with the base fit line on top of one
    pale line per family fit (other terms held at their mean). Returns (fig, ax).
    """
    st = get_plot_style(**style)
    x = result.x_values
    if not pd.api.types.is_numeric_dtype(x):
        raise ValueError(f"Scatter mode needs a numeric primary predictor; '{result.x}' is {x.dtype}.")
    x = x.astype(float).to_numpy(); y = result.y_values.astype(float).to_numpy()
    fig, ax = _axes(ax)
    ax.scatter(x, y, s=st["point_size"], color=st["point_color"], zorder=2)
    grid = np.linspace(float(x.min()), float(x.max()), n_grid)
    for fit in result.fits:
        ax.plot(grid, fit.summary.predict_line(result.primary, grid), color=st["family_color"],
                linewidth=st["family_width"], alpha=st["family_alpha"], zorder=1)
    ax.plot(grid, result.base.predict_line(result.primary, grid), color=st["base_color"],
            linewidth=st["base_width"], zorder=3, label=f"{result.y} ~ {result.x}")
    ax.set_xlabel(result.x); ax.set_ylabel(result.y)
    ax.set_title(title or f"{result.y} vs {result.x}\n(base fit and {len(result.fits)} family fits)")
    return fig, ax

def pvalue_points(result) -> pd.DataFrame:
    """(label, -log10 primary p, -log10 secondary p) per auxiliary coefficient, in fit order."""
    rows = []
    for fit in result.fits:
        p1 = neg_log10([fit.summary.pvalue(result.primary)])[0]
        for term in fit.secondary:
            label = fit.name if len(fit.secondary) == 1 else f"{fit.name}:{term}"
            rows.append((label, p1, neg_log10([fit.summary.pvalue(term)])[0]))
    return pd.DataFrame(rows, columns=["label", "primary", "secondary"])

def plot_famr_pvalues(result, ax=None, *, labels: bool = True, title: str | None = None, **style):
    """
    -log10 primary p against -log10 secondary p for every family fit; the vertical
    line marks the base model's primary p-value. Returns (fig, ax).
    """
    st = get_plot_style(**style)
    pts = pvalue_points(result)
    fig, ax = _axes(ax)
    base_p = neg_log10([result.base.pvalue(result.primary)])[0]
    ax.axvline(base_p, color=st["reference_color"], linewidth=1, linestyle="--", label="base model")
    if not pts.empty:
        ax.scatter(pts["primary"], pts["secondary"], s=st["point_size"], color=st["point_color"])
        if labels:
            for lab, px, py in pts.itertuples(index=False):
                ax.annotate(lab, (px, py), xytext=(3, 3), textcoords="offset points", fontsize=st["label_size"])
    ax.set_xlabel(f"-log10 p ({result.x})"); ax.set_ylabel("-log10 p (family term)")
    ax.set_title(title or f"{result.y} ~ {result.x}: primary vs secondary p-values")
    return fig, ax

_MODES = {"scatter": plot_famr_scatter, "pvalues": plot_famr_pvalues}

def plot_famr(result, mode: str = "scatter", ax=None, **options):
    fn = _MODES.get((mode or "").lower())
    if fn is None:
        raise ValueError(f"Unknown plot mode '{mode}'; use one of {', '.join(_MODES)}.")
    return fn(result, ax=ax, **options)
