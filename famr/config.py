from __future__ import annotations
from typing import Any, Dict, Optional, Tuple

# -------------------------------------------------
# Fitting family registry (package-wide default)
# -------------------------------------------------
FIT_FAMILIES = ("gaussian", "binomial", "poisson", "gamma", "inverse_gaussian")
FIT_LINKS = ("identity", "log", "logit", "probit", "cloglog", "inverse_power")

FIT_DEFAULTS: Dict[str, Optional[str]] = {"family": "gaussian", "link": None}

def check_fit_family(family: str, link: Optional[str] = None) -> Tuple[str, Optional[str]]:
    fam = (family or "gaussian").lower()
    if fam not in FIT_FAMILIES:
        raise ValueError(f"Unsupported fitting family '{family}'. Choose one of {', '.join(FIT_FAMILIES)}.")
    lnk = link.lower() if link else None
    if lnk is not None and lnk not in FIT_LINKS:
        raise ValueError(f"Unsupported link '{link}'. Choose one of {', '.join(FIT_LINKS)}.")
    return fam, lnk

def set_fit_family(family: str, link: Optional[str] = None) -> None:
    """Set the default fitting family used for data frames without their own setting."""
    fam, lnk = check_fit_family(family, link)
    FIT_DEFAULTS["family"] = fam
    FIT_DEFAULTS["link"] = lnk

def get_fit_family() -> Tuple[str, Optional[str]]:
    return FIT_DEFAULTS["family"], FIT_DEFAULTS["link"]

# -------------------------------------------------
# Plot style registry
# -------------------------------------------------
_PLOT_STYLE_DEFAULTS: Dict[str, Any] = {
    "point_color": "#4C72B0",
    "point_size": 25,
    "base_color": "#C44E52",
    "base_width": 2.0,
    "family_color": "#555555",
    "family_width": 0.8,
    "family_alpha": 0.35,
    "reference_color": "#C44E52",
    "label_size": 8,
}
PLOT_STYLE: Dict[str, Any] = dict(_PLOT_STYLE_DEFAULTS)

def set_plot_style(reset: bool = False, **kw) -> None:
    """
    Update the renderer style. Unknown keys raise so typos are not silently ignored.
    reset=True restores the defaults before applying `kw`.
    """
    unknown = sorted(set(kw) - set(_PLOT_STYLE_DEFAULTS))
    if unknown:
        raise ValueError(f"Unknown plot style option(s): {', '.join(unknown)}")
    if reset:
        PLOT_STYLE.clear(); PLOT_STYLE.update(_PLOT_STYLE_DEFAULTS)
    PLOT_STYLE.update(kw)

def get_plot_style(**overrides) -> Dict[str, Any]:
    style = dict(PLOT_STYLE)
    style.update({k: v for k, v in overrides.items() if k in style and v is not None})
    return style
