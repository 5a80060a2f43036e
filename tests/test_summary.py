import numpy as np
import pandas as pd
import pytest

from wdbc_report.data.preprocess import clean_df
from wdbc_report.data.summary import (
    ORDER_METHODS,
    cluster_order,
    correlation_matrix,
    save_summary,
    summarize,
)


def test_correlation_matrix_properties(clean):
    corr = correlation_matrix(clean)

    assert corr.shape == (31, 31)
    assert corr.columns[0] == "diagnosis"
    np.testing.assert_allclose(np.diag(corr.values), 1.0)
    np.testing.assert_allclose(corr.values, corr.values.T)
    assert corr.values.min() >= -1.0 - 1e-12
    assert corr.values.max() <= 1.0 + 1e-12


def test_malignant_correlates_with_size(clean):
    corr = correlation_matrix(clean)
    # larger nuclei go with malignant (coded 1)
    assert corr.loc["diagnosis", "radius_worst"] > 0.5


@pytest.mark.parametrize("method", ORDER_METHODS)
def test_cluster_order_is_a_permutation(clean, method):
    corr = correlation_matrix(clean)
    order = cluster_order(corr, method=method)
    assert sorted(order) == sorted(corr.columns)


def test_hclust_keeps_correlated_pairs_adjacent():
    rng = np.random.default_rng(3)
    n = 200
    a = rng.normal(size=n)
    b = rng.normal(size=n)
    raw = pd.DataFrame(
        {
            "diagnosis": np.where(rng.random(n) > 0.5, "M", "B"),
            "a1": a,
            "b1": b,
            "a2": 2 * a + 1,
            "b2": b + rng.normal(scale=0.01, size=n),
        }
    )
    corr = correlation_matrix(clean_df(raw))
    order = cluster_order(corr, method="hclust")

    assert abs(order.index("a1") - order.index("a2")) == 1
    assert abs(order.index("b1") - order.index("b2")) == 1


def test_unknown_order_method(clean):
    with pytest.raises(ValueError):
        cluster_order(correlation_matrix(clean), method="alphabetical")


def test_summarize(clean):
    summary = summarize(clean)
    assert summary.n_rows == 569
    assert len(summary.statistics) == 30
    assert {"mean", "std", "min", "max"} <= set(summary.statistics.columns)
    assert summary.missing.sum() == 0
    assert summary.label_counts.sum() == 569


def test_save_summary_writes_csvs(clean, tmp_path):
    paths = save_summary(summarize(clean), correlation_matrix(clean), reports_dir=tmp_path)
    for path in paths.values():
        assert path.exists()
    stats = pd.read_csv(paths["summary_statistics"], index_col="feature")
    assert "radius_mean" in stats.index
