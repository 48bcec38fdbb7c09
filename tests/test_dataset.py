"""Dataset wrapper, configuration registry and the bundled example data."""

import pandas as pd
import pytest

from famr import Dataset, example_data, get_fit_family, get_plot_style, set_fit_family, set_plot_style


def test_dataset_defaults_to_package_family(df):
    data = Dataset(df)
    assert data.fit_family == ("gaussian", None)
    set_fit_family("binomial", "probit")
    assert data.fit_family == ("binomial", "probit")


def test_dataset_pins_family(df):
    data = Dataset(df, family="Poisson", name="counts")
    set_fit_family("gamma")
    assert data.fit_family == ("poisson", None)
    assert "counts" in repr(data) and "poisson" in repr(data)


def test_dataset_validation(df):
    with pytest.raises(ValueError):
        Dataset(df, family="student")
    with pytest.raises(ValueError):
        Dataset(df, family="binomial", link="softmax")
    with pytest.raises(TypeError):
        Dataset(df.to_numpy())


def test_dataset_summary_and_namespace():
    df = pd.DataFrame({"Lot Size": [1.0, None, 3.0], "g": ["a", "b", "a"]})
    data = Dataset(df)
    s = data.summary()
    assert s.loc["Lot Size", "nulls"] == 1
    assert s.loc["g", "unique"] == 2
    assert data.col.Lot_Size.equals(df["Lot Size"])
    assert len(data) == 3 and data.head(1).shape == (1, 2)


def test_set_fit_family_rejects_unknown():
    with pytest.raises(ValueError):
        set_fit_family("tweedie")
    assert get_fit_family() == ("gaussian", None)


def test_plot_style_overrides():
    set_plot_style(point_size=5)
    assert get_plot_style()["point_size"] == 5
    assert get_plot_style(point_size=9)["point_size"] == 9
    set_plot_style(reset=True)
    assert get_plot_style()["point_size"] == 25


def test_example_data_is_deterministic():
    a = example_data(n=20, seed=4, factor=True)
    b = example_data(n=20, seed=4, factor=True)
    pd.testing.assert_frame_equal(a, b)
    assert list(a.columns) == ["x", "y", "w1", "w2", "w3", "w4", "w5", "w6", "site"]
