import matplotlib
matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pytest

from famr import example_data, set_fit_family, set_plot_style


@pytest.fixture
def df():
    """x, y, w1..w6"""
    return example_data(n=80, seed=11)


@pytest.fixture
def df_factor():
    """x, y, w1..w6 plus the 3-level categorical `site`."""
    return example_data(n=90, seed=5, factor=True)


@pytest.fixture(autouse=True)
def _reset_config():
    yield
    set_fit_family("gaussian")
    set_plot_style(reset=True)
    plt.close("all")
