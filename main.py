import logging
import matplotlib.pyplot as plt
import numpy as np
from famr import (
    Dataset, Derived, example_data, famr, famr_models, format_summary, set_plot_style
)

def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    df = example_data(n=120, seed=3, factor=True)
    data = Dataset(df, name="example")
    print(data)
    print(data.summary())

    # Default family: one model per remaining column
    res = famr(data, "y", "x")
    print(format_summary(res))

    # Edited family: a derived term, a two-column entry, and a broken entry that gets dropped
    fam = famr_models(data, exclude=["y", "x"])
    fam["w1sq"] = lambda d: d["w1"] ** 2
    fam["logw5"] = Derived.from_expr("log(w5 + 2)")
    fam.combine("w4w5", "w4", "w5")
    fam["broken"] = lambda d: np.ones(3)
    del fam["w6"]
    res2 = famr(data, "y", "x", fam)
    print(format_summary(res2))

    # Focus on a derived primary predictor
    res3 = famr(data, "y", Derived(lambda d: d["x"] - d["w1"], name="x_minus_w1"))
    print(format_summary(res3))

    set_plot_style(family_alpha=0.5)
    res2.plot("scatter")
    res2.plot("pvalues")
    plt.show()

if __name__ == "__main__":
    main()
