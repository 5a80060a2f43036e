from dataclasses import dataclass

import numpy as np
from sklearn.model_selection import train_test_split

from wdbc_report.config import TRAIN_FRACTION


@dataclass
class SplitData:
    X_train: np.ndarray
    X_test: np.ndarray
    y_train: np.ndarray
    y_test: np.ndarray
    train_index: np.ndarray
    test_index: np.ndarray


def split_train_test(
    X: np.ndarray,
    y: np.ndarray,
    train_fraction: float = TRAIN_FRACTION,
    seed: int = 42,
) -> SplitData:
    """Split features and labels into disjoint train/test sets by row."""
    if len(X) != len(y):
        raise ValueError(f"X has {len(X)} rows but y has {len(y)} labels.")
    if not 0.0 < train_fraction < 1.0:
        raise ValueError(f"train_fraction must be in (0, 1), got {train_fraction}.")

    rows = np.arange(len(X))
    train_index, test_index = train_test_split(
        rows,
        train_size=train_fraction,
        random_state=seed,
        shuffle=True,
    )
    return SplitData(
        X_train=X[train_index],
        X_test=X[test_index],
        y_train=y[train_index],
        y_test=y[test_index],
        train_index=train_index,
        test_index=test_index,
    )
