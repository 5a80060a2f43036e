import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

import numpy as np
import pandas as pd
from sklearn.metrics import accuracy_score, auc, confusion_matrix, roc_curve

from wdbc_report.config import REPORTS_DIR
from wdbc_report.data.preprocess import LABEL_CATEGORIES, Diagnosis
from wdbc_report.errors import DimensionMismatchError, InsufficientClassesError


@dataclass
class EvaluationResult:
    accuracy: float
    true_positive: int
    true_negative: int
    false_positive: int
    false_negative: int
    crosstab: pd.DataFrame
    fpr: Optional[np.ndarray] = None
    tpr: Optional[np.ndarray] = None
    auc: Optional[float] = None

    @property
    def n(self) -> int:
        return (
            self.true_positive
            + self.true_negative
            + self.false_positive
            + self.false_negative
        )

    @property
    def matrix(self) -> list:
        # rows = actual, columns = predicted, both in (benign, malignant) order
        return [
            [self.true_negative, self.false_positive],
            [self.false_negative, self.true_positive],
        ]

    def to_dict(self) -> dict:
        out = {
            "accuracy": self.accuracy,
            "n": self.n,
            "true_positive": self.true_positive,
            "true_negative": self.true_negative,
            "false_positive": self.false_positive,
            "false_negative": self.false_negative,
            "confusion_matrix_labeled": {
                "labels": LABEL_CATEGORIES,
                "matrix": self.matrix,
            },
        }
        if self.auc is not None:
            out["auc"] = self.auc
            out["roc"] = {"fpr": self.fpr.tolist(), "tpr": self.tpr.tolist()}
        return out


def evaluate(predictions, ground_truth, scores=None) -> EvaluationResult:
    """
    Compare predicted labels with the ground truth (malignant = positive).

    When scores (higher = more likely malignant) are given, an ROC curve is
    built by sweeping the score threshold and its AUC is integrated with the
    trapezoidal rule.
    """
    y_pred = np.asarray(predictions)
    y_true = np.asarray(ground_truth)

    if len(y_pred) != len(y_true):
        raise DimensionMismatchError(
            f"{len(y_pred)} predictions vs {len(y_true)} ground-truth labels."
        )
    if len(y_true) == 0:
        raise ValueError("Cannot evaluate an empty test set.")

    labels = [int(d) for d in Diagnosis]
    cm = confusion_matrix(y_true, y_pred, labels=labels)
    tn, fp, fn, tp = (int(v) for v in cm.ravel())

    crosstab = pd.DataFrame(cm, index=LABEL_CATEGORIES, columns=LABEL_CATEGORIES)
    crosstab.index.name = "actual"
    crosstab.columns.name = "predicted"

    result = EvaluationResult(
        accuracy=float(accuracy_score(y_true, y_pred)),
        true_positive=tp,
        true_negative=tn,
        false_positive=fp,
        false_negative=fn,
        crosstab=crosstab,
    )

    if scores is not None:
        scores = np.asarray(scores, dtype=float)
        if len(scores) != len(y_true):
            raise DimensionMismatchError(
                f"{len(scores)} scores vs {len(y_true)} ground-truth labels."
            )
        if len(np.unique(y_true)) < 2:
            raise InsufficientClassesError(
                "ROC/AUC needs both benign and malignant rows in the ground truth."
            )
        fpr, tpr, _thresholds = roc_curve(
            y_true, scores, pos_label=int(Diagnosis.MALIGNANT)
        )
        result.fpr = fpr
        result.tpr = tpr
        result.auc = float(auc(fpr, tpr))

    return result


def evaluate_models(
    models: dict, X_test: np.ndarray, y_test: np.ndarray
) -> Dict[str, EvaluationResult]:
    """
    Evaluate all trained models; models exposing malignant_score also get ROC/AUC.
    """
    results = {}
    for name, model in models.items():
        y_pred = model.predict(X_test)
        scores = (
            model.malignant_score(X_test) if hasattr(model, "malignant_score") else None
        )
        results[name] = evaluate(y_pred, y_test, scores=scores)
    return results


def save_metrics(results: Dict[str, EvaluationResult], reports_dir: Path = REPORTS_DIR):
    """
    Save evaluation results to JSON and labeled confusion matrices to CSV.
    """
    reports_dir.mkdir(parents=True, exist_ok=True)
    metrics_path = reports_dir / "metrics.json"

    with open(metrics_path, "w") as f:
        json.dump({name: r.to_dict() for name, r in results.items()}, f, indent=4)

    for model_name, result in results.items():
        cm_path = reports_dir / f"confusion_matrix_{model_name}.csv"
        result.crosstab.to_csv(cm_path)

    return metrics_path
