"""famr(): base fit, family fits, and per-entry failure handling."""

import logging

import numpy as np
import pandas as pd
import pytest
import statsmodels.api as sm
from scipy import stats

from famr import (
    Column, Dataset, Derived, FamrResult, FitError, ModelFamily, TermError, famr, famr_models, set_fit_family,
)


def test_default_family_fits_every_other_column(df):
    res = famr(df, "y", "x")
    assert isinstance(res, FamrResult)
    assert res.names == ("w1", "w2", "w3", "w4", "w5", "w6")
    assert not res.dropped
    for fit in res.fits:
        assert fit.summary.terms == ("x", fit.name)
        assert fit.secondary == (fit.name,)
        assert len(fit.summary.params) == 3


def test_base_fit_matches_simple_regression(df):
    res = famr(df, "y", "x")
    ref = stats.linregress(df["x"], df["y"])
    assert res.base.estimate("x") == pytest.approx(ref.slope, rel=1e-10)
    assert res.base.stderr("x") == pytest.approx(ref.stderr, rel=1e-8)
    assert res.base.pvalue("x") == pytest.approx(ref.pvalue, rel=1e-8)


def test_empty_family(df):
    res = famr(df, "y", "x", ModelFamily())
    assert res.fits == () and len(res) == 0
    ref = sm.OLS(df["y"], sm.add_constant(df["x"])).fit()
    assert res.base.pvalue("x") == pytest.approx(ref.pvalues["x"])


def test_augmented_fit_matches_statsmodels(df):
    res = famr(df, "y", "x")
    ref = sm.OLS(df["y"], sm.add_constant(df[["x", "w2"]])).fit()
    w2 = res.get("w2").summary
    assert w2.pvalue("x") == pytest.approx(ref.pvalues["x"])
    assert w2.pvalue("w2") == pytest.approx(ref.pvalues["w2"])


def test_excluding_one_entry_leaves_others_unchanged(df):
    full = famr(df, "y", "x")
    fewer = famr(df, "y", "x", famr_models(df, exclude=["y", "x", "w3"]))
    assert fewer.names == tuple(n for n in full.names if n != "w3")
    for fit in fewer.fits:
        pd.testing.assert_frame_equal(fit.summary.params, full.get(fit.name).summary.params)


def test_wrong_length_derived_term_is_dropped(df):
    fam = famr_models(df, exclude=["y", "x"])
    fam["short"] = lambda d: np.arange(5)
    res = famr(df, "y", "x", fam)
    assert res.names == ("w1", "w2", "w3", "w4", "w5", "w6")
    assert "short" in res.dropped
    assert "5 values" in res.dropped["short"]


def test_failures_are_isolated_per_entry(df, caplog):
    def boom(d):
        raise ZeroDivisionError("no")

    fam = ModelFamily({"w1": "w1", "boom": boom, "dup": lambda d: 3 * d["x"], "missing": "zz",
                       "bad_spec": 42, "w2": "w2"})
    with caplog.at_level(logging.WARNING, logger="famr.analysis"):
        res = famr(df, "y", "x", fam)
    assert res.names == ("w1", "w2")
    assert list(res.dropped) == ["boom", "dup", "missing", "bad_spec"]
    assert "rank-deficient" in res.dropped["dup"]
    assert "dropped model 'boom'" in caplog.text


def test_dropped_is_read_only(df):
    res = famr(df, "y", "x", {"bad": "zz"})
    with pytest.raises(TypeError):
        res.dropped["other"] = "x"


def test_group_entry_is_one_fit_with_two_terms(df):
    fam = famr_models(df, exclude=["y", "x"]).combine("w4w5", "w4", "w5")
    res = famr(df, "y", "x", fam)
    assert res.names[-1] == "w4w5"
    assert res.names.count("w4w5") == 1
    fit = res.get("w4w5")
    assert fit.secondary == ("w4", "w5")
    assert fit.summary.terms == ("x", "w4", "w5")


def test_categorical_entry_has_one_coefficient_per_level(df_factor):
    res = famr(df_factor, "y", "x")
    site = res.get("site")
    assert site.secondary == ("site[T.b]", "site[T.c]")


def test_single_level_categorical_is_dropped(df):
    df = df.assign(one=pd.Categorical(["a"] * len(df)))
    res = famr(df, "y", "x")
    assert "one" in res.dropped and "single level" in res.dropped["one"]
    assert len(res) == 6


def test_missing_values_only_affect_their_entry(df):
    df = df.copy()
    df.loc[df.index[:10], "w4"] = np.nan
    res = famr(df, "y", "x")
    assert res.get("w4").summary.nobs == len(df) - 10
    assert res.get("w5").summary.nobs == len(df)
    assert res.base.nobs == len(df)


def test_derived_primary_predictor(df):
    focus = Derived(lambda d: d["x"] - d["w1"], name="xd")
    res = famr(df, "y", focus)
    assert res.x == "xd" and res.primary == "xd"
    # only the response is excluded when x is not a column name
    assert res.names == ("x", "w1", "w2", "w3", "w4", "w5", "w6")
    np.testing.assert_allclose(res.x_values.to_numpy(), (df["x"] - df["w1"]).to_numpy())


def test_bad_response_or_primary_is_fatal(df):
    with pytest.raises(TermError):
        famr(df, "nope", "x")
    with pytest.raises(TermError):
        famr(df, "y", "nope")
    with pytest.raises(TermError):
        famr(df, "y", lambda d: np.zeros(2))
    with pytest.raises(TermError):
        famr(df, "y", "y")
    with pytest.raises(FitError):
        famr(df, "y", lambda d: np.ones(len(d)))


def test_non_numeric_response_rejected(df_factor):
    with pytest.raises(TermError, match="numeric"):
        famr(df_factor, "site", "x")


def test_family_as_list_of_names(df):
    res = famr(df, "y", "x", ["w3", "w1"])
    assert res.names == ("w3", "w1")


def test_repeat_runs_are_identical(df_factor):
    a = famr(df_factor, "y", "x").summary()
    b = famr(df_factor, "y", "x").summary()
    pd.testing.assert_frame_equal(a, b)


def test_result_keeps_original_scale_values(df):
    res = famr(df, "y", "x")
    np.testing.assert_array_equal(res.y_values.to_numpy(), df["y"].to_numpy())
    np.testing.assert_array_equal(res.x_values.to_numpy(), df["x"].to_numpy())


def test_dataset_fit_family_overrides_default(df):
    df = df.assign(hit=(df["y"] > df["y"].median()).astype(float))
    res = famr(Dataset(df, family="binomial"), "hit", "x", ["w2"])
    assert res.fit_family == ("binomial", None)
    assert res.base.personality.startswith("GLM(binomial")
    # the package default stays gaussian
    assert famr(df, "y", "x", []).base.personality == "OLS"


def test_package_default_family(df):
    df = df.assign(count=np.round(np.exp(0.3 * df["x"])).astype(float))
    set_fit_family("poisson")
    res = famr(df, "count", "x", ["w1"])
    assert res.fit_family == ("poisson", None)
    assert res.get("w1").summary.personality == "GLM(poisson/log)"


def test_column_primary_excluded_from_default_family(df):
    res = famr(df, "y", Column("x"))
    assert res.names == ("w1", "w2", "w3", "w4", "w5", "w6")
    assert not res.dropped


def test_group_primary_excludes_its_columns(df):
    res = famr(df, "y", {"x": "x", "w1sq": lambda d: d["w1"] ** 2})
    assert res.primary_terms == ("x", "w1sq")
    assert res.names == ("w1", "w2", "w3", "w4", "w5", "w6")
    assert not res.dropped


def test_response_inside_primary_is_fatal(df):
    with pytest.raises(TermError):
        famr(df, "y", Column("y"))
    with pytest.raises(TermError):
        famr(df, "y", {"a": "x", "b": "y"})


def test_results_compare_by_identity(df):
    a = famr(df, "y", "x", ["w1"])
    b = famr(df, "y", "x", ["w1"])
    assert a.base == a.base and a.base != b.base
    assert a != b
    assert len({a, b, a.base, a.fits[0]}) == 4
