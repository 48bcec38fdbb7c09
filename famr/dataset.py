from __future__ import annotations
from typing import Optional, Tuple, Union
from types import SimpleNamespace
import pandas as pd
from .config import check_fit_family, get_fit_family
from .utils import sanitize

class Dataset:
    """
    A data frame plus the fitting family every famr analysis on it uses.
    family=None falls back to the package default (see config.set_fit_family).
    """
    def __init__(self, df: pd.DataFrame, family: Optional[str] = None, link: Optional[str] = None,
                 name: Optional[str] = None):
        if not isinstance(df, pd.DataFrame):
            raise TypeError(f"Dataset needs a pandas DataFrame, got {type(df).__name__}.")
        self.df = df
        self.name = name
        self._family = check_fit_family(family, link) if family is not None else None
        self.columns = list(df.columns)
        self.col = SimpleNamespace(**{ sanitize(c): df[c] for c in df.columns })

    @property
    def fit_family(self) -> Tuple[str, Optional[str]]:
        return self._family if self._family is not None else get_fit_family()

    def summary(self) -> pd.DataFrame:
        dtypes = self.df.dtypes.astype(str)
        return pd.DataFrame({
            "dtype": dtypes,
            "non_null": self.df.notna().sum(),
            "nulls": self.df.isna().sum(),
            "unique": self.df.nunique(dropna=True),
        })
    def head(self, n: int = 5): return self.df.head(n)
    def __len__(self): return len(self.df)
    def __repr__(self):
        fam, link = self.fit_family
        label = f" '{self.name}'" if self.name else ""
        return f"<Dataset{label} {self.df.shape[0]}×{self.df.shape[1]} family={fam}{'/' + link if link else ''}>"

def unwrap(data: Union[Dataset, pd.DataFrame]) -> Tuple[pd.DataFrame, Tuple[str, Optional[str]]]:
    """Return (frame, (family, link)) for either a Dataset or a bare DataFrame."""
    if isinstance(data, Dataset):
        return data.df, data.fit_family
    if isinstance(data, pd.DataFrame):
        return data, get_fit_family()
    raise TypeError(f"Expected a pandas DataFrame or famr Dataset, got {type(data).__name__}.")
