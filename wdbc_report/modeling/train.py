from pathlib import Path
from typing import Dict, Optional, Tuple

import joblib
import numpy as np
from sklearn.linear_model import LogisticRegression
from sklearn.neighbors import KNeighborsClassifier
from sklearn.neural_network import MLPClassifier
from sklearn.tree import DecisionTreeClassifier

from wdbc_report.config import (
    KNN_NEIGHBORS,
    LR_MAX_ITER,
    MODEL_NAMES,
    MODELS_DIR,
    NN_HIDDEN_UNITS,
    NN_MAX_ITER,
    NN_WEIGHT_DECAY,
    SeedPolicy,
)
from wdbc_report.data.preprocess import Diagnosis, NormalizerArtifacts
from wdbc_report.data.split import SplitData


class NearestNeighborModel:
    """
    Majority vote among the k nearest training rows (Euclidean distance).

    Confidence is the fraction of the k neighbours agreeing with the vote.
    Vote ties go to the lowest encoded class (benign).
    """

    def __init__(self, n_neighbors: int = KNN_NEIGHBORS):
        self.n_neighbors = n_neighbors
        self.classifier = KNeighborsClassifier(
            n_neighbors=n_neighbors,
            weights="uniform",
            algorithm="brute",
            metric="euclidean",
        )

    def fit(self, X: np.ndarray, y: np.ndarray) -> "NearestNeighborModel":
        if len(X) < self.n_neighbors:
            raise ValueError(
                f"Need at least {self.n_neighbors} training rows, got {len(X)}."
            )
        self.classifier.fit(X, y)
        return self

    def predict_with_confidence(self, X: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        proba = self.classifier.predict_proba(X)
        # argmax returns the first maximum, so ties resolve to classes_[0]
        winners = np.argmax(proba, axis=1)
        labels = self.classifier.classes_[winners]
        confidence = proba[np.arange(len(proba)), winners]
        return labels, confidence

    def predict(self, X: np.ndarray) -> np.ndarray:
        labels, _ = self.predict_with_confidence(X)
        return labels

    def malignant_score(self, X: np.ndarray) -> np.ndarray:
        """Fraction of neighbours labelled malignant; used for the ROC sweep."""
        proba = self.classifier.predict_proba(X)
        classes = list(self.classifier.classes_)
        if Diagnosis.MALIGNANT not in classes:
            return np.zeros(len(X))
        return proba[:, classes.index(Diagnosis.MALIGNANT)]


def train_knn(
    X_train: np.ndarray, y_train: np.ndarray, n_neighbors: int = KNN_NEIGHBORS
) -> NearestNeighborModel:
    # Deterministic: no seed is consumed.
    return NearestNeighborModel(n_neighbors=n_neighbors).fit(X_train, y_train)


def train_decision_tree(
    X_train: np.ndarray, y_train: np.ndarray, random_state: int = 42
) -> DecisionTreeClassifier:
    # Entropy splits, grown until leaves are pure (no depth cap)
    tree = DecisionTreeClassifier(
        criterion="entropy",
        max_depth=None,
        min_samples_split=2,
        random_state=random_state,
    )
    tree.fit(X_train, y_train)
    return tree


def train_neural_network(
    X_train: np.ndarray,
    y_train: np.ndarray,
    random_state: int = 42,
    hidden_units: int = NN_HIDDEN_UNITS,
    weight_decay: float = NN_WEIGHT_DECAY,
    max_iter: int = NN_MAX_ITER,
) -> MLPClassifier:
    # One logistic hidden layer, single logistic output unit for two classes
    nn = MLPClassifier(
        hidden_layer_sizes=(hidden_units,),
        activation="logistic",
        solver="lbfgs",
        alpha=weight_decay,
        max_iter=max_iter,
        random_state=random_state,
    )
    nn.fit(X_train, y_train)
    return nn


def train_logistic_regression(
    X_train: np.ndarray, y_train: np.ndarray, random_state: int = 42
) -> LogisticRegression:
    # C=inf removes the penalty: plain maximum-likelihood binomial fit
    lr = LogisticRegression(
        C=np.inf,
        solver="lbfgs",
        max_iter=LR_MAX_ITER,
        random_state=random_state,
    )
    lr.fit(X_train, y_train)
    return lr


def train_models(
    X_train: np.ndarray,
    y_train: np.ndarray,
    seeds: SeedPolicy = SeedPolicy(),
    n_neighbors: int = KNN_NEIGHBORS,
) -> Dict[str, object]:
    return {
        "knn": train_knn(X_train, y_train, n_neighbors=n_neighbors),
        "decision_tree": train_decision_tree(
            X_train, y_train, random_state=seeds.decision_tree
        ),
        "neural_network": train_neural_network(
            X_train, y_train, random_state=seeds.neural_network
        ),
        "logistic_regression": train_logistic_regression(
            X_train, y_train, random_state=seeds.logistic_regression
        ),
    }


def save_models(
    models: Dict[str, object],
    artifacts: NormalizerArtifacts,
    models_dir: Path = MODELS_DIR,
    split: Optional[SplitData] = None,
    split_seed: Optional[int] = None,
    train_fraction: Optional[float] = None,
) -> Dict[str, Path]:
    """
    Persist the fitted models with the scaler and the train/test rows they
    were fitted against, so evaluation can score the same held-out rows.
    """
    models_dir.mkdir(parents=True, exist_ok=True)

    paths = {}
    for name in MODEL_NAMES:
        path = models_dir / f"{name}.joblib"
        joblib.dump(models[name], path)
        paths[name] = path

    prep_path = models_dir / "normalizer_artifacts.joblib"
    joblib.dump(
        {
            "feature_columns": artifacts.feature_columns,
            "scaler": artifacts.scaler,
            "split_seed": split_seed,
            "train_fraction": train_fraction,
            "train_index": None if split is None else split.train_index,
            "test_index": None if split is None else split.test_index,
        },
        prep_path,
    )
    paths["normalizer_artifacts"] = prep_path
    return paths


def load_models(models_dir: Path = MODELS_DIR) -> Tuple[Dict[str, object], dict]:
    models = {name: joblib.load(models_dir / f"{name}.joblib") for name in MODEL_NAMES}
    prep = joblib.load(models_dir / "normalizer_artifacts.joblib")
    return models, prep
