import json
import sys

import pytest


@pytest.fixture
def run_cli(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    def run(*argv):
        from wdbc_report import main as cli

        monkeypatch.setattr(sys, "argv", ["wdbc-report", *argv])
        return cli.main()

    return run


def test_missing_data_file_exits_with_1(run_cli, tmp_path):
    assert run_cli("eda", "--data", str(tmp_path / "missing.csv")) == 1


def test_eval_without_saved_models_exits_with_1(run_cli, dataset_csv):
    assert run_cli("eval", "--data", str(dataset_csv)) == 1


def test_train_then_eval_exits_with_0(run_cli, dataset_csv, tmp_path):
    assert run_cli("train", "--data", str(dataset_csv)) == 0
    assert run_cli("eval", "--data", str(dataset_csv)) == 0

    with open(tmp_path / "artifacts" / "reports" / "metrics.json") as f:
        metrics = json.load(f)
    assert set(metrics) == {"knn", "decision_tree", "neural_network", "logistic_regression"}
    assert all(m["n"] == 143 for m in metrics.values())


def test_eval_refuses_a_split_that_overlaps_training_rows(run_cli, dataset_csv, tmp_path):
    assert run_cli("train", "--data", str(dataset_csv), "--seed", "1") == 0

    # default split seed 42 would score rows the models were trained on
    assert run_cli("eval", "--data", str(dataset_csv)) == 1
    assert not (tmp_path / "artifacts" / "reports" / "metrics.json").exists()

    assert run_cli("eval", "--data", str(dataset_csv), "--seed", "1") == 0
    assert (tmp_path / "artifacts" / "reports" / "metrics.json").exists()


def test_eval_refuses_a_different_train_fraction(run_cli, dataset_csv):
    assert run_cli("train", "--data", str(dataset_csv)) == 0
    assert run_cli("eval", "--data", str(dataset_csv), "--train-fraction", "0.8") == 1
