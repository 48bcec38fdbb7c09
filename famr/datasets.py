from __future__ import annotations
import numpy as np
import pandas as pd

def example_data(n: int = 100, seed: int = 0, *, factor: bool = False) -> pd.DataFrame:
    """
    Simulated table with columns x, y, w1..w6 (plus a 3-level `site` factor when factor=True).

    y depends on x and w2; w1 is a noisy copy of x, w3 is a noisy copy of y,
    and w4..w6 are unrelated noise, so the family shows both confounders and nuisance terms.
    """
    rng = np.random.default_rng(seed)
    x = rng.normal(size=n)
    w1 = x + rng.normal(scale=0.5, size=n)
    w2 = rng.normal(size=n)
    y = 1.0 + 0.5 * x + 0.4 * w2 + rng.normal(scale=1.0, size=n)
    df = pd.DataFrame({
        "x": x, "y": y, "w1": w1, "w2": w2,
        "w3": y + rng.normal(scale=0.8, size=n),
        "w4": rng.normal(size=n), "w5": rng.uniform(-1, 1, size=n), "w6": rng.normal(size=n),
    })
    if factor:
        df["site"] = pd.Categorical(rng.choice(["a", "b", "c"], size=n), categories=["a", "b", "c"])
    return df
