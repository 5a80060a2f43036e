import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

import numpy as np
import pandas as pd

from wdbc_report.config import (
    FIGURES_DIR,
    KNN_NEIGHBORS,
    LABEL_COLUMN,
    RAW_DATA_PATH,
    REPORTS_DIR,
    TRAIN_FRACTION,
    SeedPolicy,
)
from wdbc_report.data.load_data import load_raw_data
from wdbc_report.data.preprocess import (
    NormalizerArtifacts,
    clean_df,
    encode_labels,
    fit_normalizer,
    normalize,
)
from wdbc_report.data.split import SplitData, split_train_test
from wdbc_report.data.summary import cluster_order, correlation_matrix, save_summary, summarize
from wdbc_report.modeling.evaluate import EvaluationResult, evaluate_models, save_metrics
from wdbc_report.modeling.train import train_models
from wdbc_report.viz.plots import (
    plot_confusion_matrix_heatmap,
    plot_correlation_heatmap,
    plot_metrics_bar,
    plot_network_topology,
    plot_roc_curve,
    save_figure,
)

logger = logging.getLogger(__name__)


@dataclass
class PreparedData:
    df: pd.DataFrame
    artifacts: NormalizerArtifacts
    X: np.ndarray
    y: np.ndarray
    split: SplitData


@dataclass
class PipelineResult:
    prepared: PreparedData
    models: Dict[str, object]
    results: Dict[str, EvaluationResult]


def load_and_prepare(
    path=RAW_DATA_PATH,
    train_fraction: float = TRAIN_FRACTION,
    split_seed: int = 42,
) -> PreparedData:
    """
    Load -> clean -> normalize -> split.
    """
    df = clean_df(load_raw_data(path))

    # Scaling is fitted on every row before the split, so test rows contribute
    # to the min/max used for training features.
    artifacts = fit_normalizer(df)
    X = normalize(df, artifacts)
    y = encode_labels(df[LABEL_COLUMN])

    split = split_train_test(X, y, train_fraction=train_fraction, seed=split_seed)
    logger.info(
        "Prepared data: rows=%s features=%s train=%s test=%s",
        len(df),
        len(artifacts.feature_columns),
        len(split.train_index),
        len(split.test_index),
    )
    return PreparedData(df=df, artifacts=artifacts, X=X, y=y, split=split)


def run_pipeline(
    path=RAW_DATA_PATH,
    seeds: SeedPolicy = SeedPolicy(),
    train_fraction: float = TRAIN_FRACTION,
    n_neighbors: int = KNN_NEIGHBORS,
) -> PipelineResult:
    """Full in-memory run: prepare, fit all four models, evaluate on the test rows."""
    prepared = load_and_prepare(path, train_fraction=train_fraction, split_seed=seeds.split)
    split = prepared.split

    models = train_models(split.X_train, split.y_train, seeds=seeds, n_neighbors=n_neighbors)
    results = evaluate_models(models, split.X_test, split.y_test)
    return PipelineResult(prepared=prepared, models=models, results=results)


def write_eda_report(
    df: pd.DataFrame,
    order_method: str = "hclust",
    reports_dir: Path = REPORTS_DIR,
    figures_dir: Path = FIGURES_DIR,
) -> Dict[str, Path]:
    summary = summarize(df)
    corr = correlation_matrix(df)

    paths = save_summary(summary, corr, reports_dir=reports_dir)
    order = cluster_order(corr, method=order_method)
    paths["correlation_heatmap"] = save_figure(
        plot_correlation_heatmap(corr, order=order),
        figures_dir / "correlation_heatmap.png",
    )
    return paths


def write_evaluation_report(
    results: Dict[str, EvaluationResult],
    models: Dict[str, object],
    feature_columns: List[str],
    reports_dir: Path = REPORTS_DIR,
    figures_dir: Path = FIGURES_DIR,
) -> Dict[str, Path]:
    paths = {"metrics": save_metrics(results, reports_dir=reports_dir)}

    for name, result in results.items():
        paths[f"confusion_matrix_{name}"] = save_figure(
            plot_confusion_matrix_heatmap(result.crosstab, title=f"Confusion Matrix ({name})"),
            figures_dir / f"confusion_matrix_{name}.png",
        )
        if result.auc is not None:
            paths[f"roc_{name}"] = save_figure(
                plot_roc_curve(result.fpr, result.tpr, result.auc, model_name=name),
                figures_dir / f"roc_{name}.png",
            )

    metrics_df = pd.DataFrame(
        [{"model": name, "accuracy": r.accuracy} for name, r in results.items()]
    )
    paths["accuracy"] = save_figure(
        plot_metrics_bar(metrics_df), figures_dir / "accuracy_by_model.png"
    )

    if "neural_network" in models:
        paths["network_topology"] = save_figure(
            plot_network_topology(models["neural_network"], input_names=feature_columns),
            figures_dir / "network_topology.png",
        )
    return paths
