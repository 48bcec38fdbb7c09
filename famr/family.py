from __future__ import annotations
from collections.abc import MutableMapping
from typing import Any, Dict, Iterable, Iterator, Mapping, Union
import pandas as pd
from .dataset import Dataset
from .terms import Column, TermGroup
from .utils import as_list

class ModelFamily(MutableMapping):
    """
    Insertion-ordered mapping of model name -> term.

    Values are anything `terms.as_term` accepts: a column name, a Column, a
    function of the data frame, a Derived term, or a mapping of several named
    terms. Values are stored as given and only checked when the family is fit,
    so a bad entry costs that entry and nothing else.

    >>> fam = famr_models(df, exclude=["y", "x"])
    >>> fam["w1sq"] = lambda d: d["w1"] ** 2
    >>> fam.combine("w4w5", "w4", "w5")
    >>> del fam["w6"]
    """
    def __init__(self, entries: Mapping[str, Any] | Iterable[str] | None = None, **kw):
        self._entries: Dict[str, Any] = {}
        if isinstance(entries, Mapping):
            self.update(entries)
        elif entries is not None:
            for name in as_list(entries): self[name] = Column(name)
        self.update(kw)

    def __getitem__(self, name: str): return self._entries[name]
    def __setitem__(self, name: str, spec: Any):
        if not isinstance(name, str):
            raise TypeError(f"Model names must be strings, got {type(name).__name__}.")
        self._entries[name] = spec
    def __delitem__(self, name: str): del self._entries[name]
    def __iter__(self) -> Iterator[str]: return iter(self._entries)
    def __len__(self): return len(self._entries)
    def __repr__(self):
        inner = ", ".join(f"{k!r}: {v!r}" for k, v in self._entries.items())
        return f"ModelFamily({{{inner}}})"

    def copy(self) -> "ModelFamily": return ModelFamily(self._entries)

    def add(self, name: str, spec: Any) -> "ModelFamily":
        self[name] = spec
        return self

    def combine(self, name: str, *members: str) -> "ModelFamily":
        """Add one entry that enters `members` together. Members may be existing entries or column names."""
        self[name] = TermGroup({m: self._entries.get(m, m) for m in members})
        return self

    def drop(self, *names: str) -> "ModelFamily":
        for n in names: self._entries.pop(n, None)
        return self

def famr_models(data: Union[pd.DataFrame, Dataset], exclude: Union[str, Iterable[str], None] = None) -> ModelFamily:
    """One model per column of `data`, in column order, skipping `exclude` (unknown names are ignored)."""
    df = data.df if isinstance(data, Dataset) else data
    if not isinstance(df, pd.DataFrame):
        raise TypeError(f"Expected a pandas DataFrame or famr Dataset, got {type(df).__name__}.")
    if df.empty:
        raise ValueError("Cannot build a model family from an empty table.")
    skip = set(as_list(exclude))
    return ModelFamily({str(c): Column(c) for c in df.columns if c not in skip})

famrModels = famr_models
