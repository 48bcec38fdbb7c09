from .dataset import Dataset
from .terms import Column, Derived, TermGroup, TermError, as_term
from .family import ModelFamily, famr_models, famrModels
from .fitmodel import FitSummary, FitError, fit_design
from .analysis import famr, FamrResult, FamilyFit
from .summary import summarize, format_summary, show_summary
from .plots import plot_famr, plot_famr_scatter, plot_famr_pvalues
from .config import set_fit_family, get_fit_family, set_plot_style, get_plot_style
from .datasets import example_data

__version__ = "0.1.0"
