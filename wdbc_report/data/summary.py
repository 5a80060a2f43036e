from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

import numpy as np
import pandas as pd
from scipy.cluster.hierarchy import leaves_list, linkage
from scipy.spatial.distance import squareform

from wdbc_report.config import LABEL_COLUMN, REPORTS_DIR
from wdbc_report.data.preprocess import encode_labels, get_feature_columns

ORDER_METHODS = ["hclust", "fpc", "original"]


@dataclass
class DatasetSummary:
    n_rows: int
    n_columns: int
    statistics: pd.DataFrame
    missing: pd.Series
    label_counts: pd.Series


def summarize(df: pd.DataFrame, label_column: str = LABEL_COLUMN) -> DatasetSummary:
    """
    Descriptive statistics for a cleaned table: per-feature describe(),
    missing-value counts and the label distribution.
    """
    feature_columns = get_feature_columns(df, label_column=label_column)
    statistics = df[feature_columns].describe().T
    statistics.index.name = "feature"

    return DatasetSummary(
        n_rows=len(df),
        n_columns=len(df.columns),
        statistics=statistics,
        missing=df.isna().sum(),
        label_counts=df[label_column].value_counts(sort=False),
    )


def correlation_matrix(df: pd.DataFrame, label_column: str = LABEL_COLUMN) -> pd.DataFrame:
    """
    Pearson correlation over the label (coded 0/1) and every numeric feature.
    """
    feature_columns = get_feature_columns(df, label_column=label_column)
    numeric = df[feature_columns].copy()
    numeric.insert(0, label_column, encode_labels(df[label_column]))
    return numeric.corr(method="pearson")


def cluster_order(corr: pd.DataFrame, method: str = "hclust") -> List[str]:
    """
    Variable order for displaying a correlation matrix.

    hclust: average-linkage clustering on 1 - r, leaf order.
    fpc: descending loading on the first principal component.
    original: column order unchanged.
    """
    if method == "original":
        return list(corr.columns)

    if method == "hclust":
        dist = (1.0 - corr.values).clip(min=0.0)
        np.fill_diagonal(dist, 0.0)
        dist = (dist + dist.T) / 2.0
        Z = linkage(squareform(dist, checks=False), method="average")
        return [corr.columns[i] for i in leaves_list(Z)]

    if method == "fpc":
        eigvals, eigvecs = np.linalg.eigh(corr.values)
        first = eigvecs[:, np.argmax(eigvals)]
        if first.sum() < 0:
            first = -first
        order = np.argsort(-first, kind="stable")
        return [corr.columns[i] for i in order]

    raise ValueError(f"Unknown order method '{method}'. Choose from {ORDER_METHODS}.")


def save_summary(
    summary: DatasetSummary, corr: pd.DataFrame, reports_dir: Path = REPORTS_DIR
) -> Dict[str, Path]:
    reports_dir.mkdir(parents=True, exist_ok=True)

    stats_path = reports_dir / "summary_statistics.csv"
    corr_path = reports_dir / "correlation_matrix.csv"
    labels_path = reports_dir / "label_distribution.csv"

    summary.statistics.to_csv(stats_path)
    corr.to_csv(corr_path)
    summary.label_counts.rename_axis("diagnosis").reset_index(name="count").to_csv(
        labels_path, index=False
    )

    return {
        "summary_statistics": stats_path,
        "correlation_matrix": corr_path,
        "label_distribution": labels_path,
    }
