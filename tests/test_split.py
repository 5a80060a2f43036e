import numpy as np
import pytest

from wdbc_report.data.split import split_train_test


def _data(n=569):
    X = np.arange(n * 3, dtype=float).reshape(n, 3)
    y = np.arange(n) % 2
    return X, y


def test_split_sizes_and_disjoint_rows():
    X, y = _data()
    split = split_train_test(X, y, train_fraction=0.75, seed=42)

    assert len(split.train_index) == 426
    assert len(split.test_index) == 143
    assert len(split.train_index) + len(split.test_index) == len(X)
    assert set(split.train_index).isdisjoint(split.test_index)
    assert set(split.train_index) | set(split.test_index) == set(range(len(X)))


def test_labels_stay_aligned_with_rows():
    X, y = _data()
    split = split_train_test(X, y, seed=1)
    np.testing.assert_array_equal(split.X_test, X[split.test_index])
    np.testing.assert_array_equal(split.y_test, y[split.test_index])
    np.testing.assert_array_equal(split.y_train, y[split.train_index])
    assert split.X_train.shape[1] == X.shape[1]


def test_same_seed_same_split():
    X, y = _data()
    a = split_train_test(X, y, seed=7)
    b = split_train_test(X, y, seed=7)
    c = split_train_test(X, y, seed=8)
    np.testing.assert_array_equal(a.test_index, b.test_index)
    assert not np.array_equal(a.test_index, c.test_index)


def test_invalid_inputs():
    X, y = _data(10)
    with pytest.raises(ValueError):
        split_train_test(X, y[:-1])
    with pytest.raises(ValueError):
        split_train_test(X, y, train_fraction=1.0)
