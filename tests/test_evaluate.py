import json

import numpy as np
import pytest

from wdbc_report.modeling.evaluate import evaluate, save_metrics
from wdbc_report.errors import DimensionMismatchError, InsufficientClassesError


def test_confusion_cells_malignant_positive():
    truth = [1, 1, 0, 0, 1]
    pred = [1, 0, 0, 1, 1]
    r = evaluate(pred, truth)

    assert (r.true_positive, r.false_negative) == (2, 1)
    assert (r.true_negative, r.false_positive) == (1, 1)
    assert r.accuracy == pytest.approx(0.6)
    assert r.n == 5
    assert r.auc is None


def test_crosstab_is_labelled():
    r = evaluate([0, 1, 1], [0, 1, 0])
    assert list(r.crosstab.index) == ["benign", "malignant"]
    assert list(r.crosstab.columns) == ["benign", "malignant"]
    assert r.crosstab.loc["benign", "malignant"] == r.false_positive == 1
    assert r.matrix == r.crosstab.values.tolist()


def test_length_mismatch_raises():
    with pytest.raises(DimensionMismatchError):
        evaluate([0, 1], [0, 1, 1])


def test_score_length_mismatch_raises():
    with pytest.raises(DimensionMismatchError):
        evaluate([0, 1, 1], [0, 1, 1], scores=[0.1, 0.9])


def test_auc_perfect_random_and_inverted():
    truth = np.array([0, 0, 0, 1, 1, 1])
    perfect = evaluate(truth, truth, scores=[0.1, 0.2, 0.3, 0.7, 0.8, 0.9])
    constant = evaluate(truth, truth, scores=np.full(6, 0.5))
    inverted = evaluate(truth, truth, scores=[0.9, 0.8, 0.7, 0.3, 0.2, 0.1])

    assert perfect.auc == pytest.approx(1.0)
    assert constant.auc == pytest.approx(0.5)
    assert inverted.auc == pytest.approx(0.0)
    assert perfect.fpr[0] == 0.0 and perfect.tpr[-1] == 1.0


@pytest.mark.parametrize(
    "name", ["knn", "decision_tree", "neural_network", "logistic_regression"]
)
def test_model_results_are_consistent(pipeline_result, name):
    r = pipeline_result.results[name]
    y_test = pipeline_result.prepared.split.y_test

    assert 0.0 <= r.accuracy <= 1.0
    assert r.n == len(y_test)
    assert r.true_positive + r.false_negative == int((y_test == 1).sum())
    assert r.true_negative + r.false_positive == int((y_test == 0).sum())


def test_only_knn_gets_roc(pipeline_result):
    results = pipeline_result.results
    assert 0.0 <= results["knn"].auc <= 1.0
    assert results["knn"].auc > 0.9
    for name in ["decision_tree", "neural_network", "logistic_regression"]:
        assert results[name].auc is None


def test_save_metrics(pipeline_result, tmp_path):
    path = save_metrics(pipeline_result.results, reports_dir=tmp_path)
    with open(path) as f:
        saved = json.load(f)

    assert set(saved) == set(pipeline_result.results)
    assert "roc" in saved["knn"]
    assert saved["knn"]["confusion_matrix_labeled"]["labels"] == ["benign", "malignant"]
    assert (tmp_path / "confusion_matrix_neural_network.csv").exists()


def test_auc_needs_both_classes():
    with pytest.raises(InsufficientClassesError):
        evaluate([0, 0, 0], [0, 0, 0], scores=[0.1, 0.2, 0.3])


def test_single_class_without_scores_still_evaluates():
    r = evaluate([0, 0, 1], [0, 0, 0])
    assert r.true_negative == 2
    assert r.false_positive == 1
    assert r.auc is None
