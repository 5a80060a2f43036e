from dataclasses import dataclass
from pathlib import Path
from typing import Optional


RAW_DATA_PATH = Path("data/raw/breast_cancer.csv")
LABEL_COLUMN = "diagnosis"
IDENTIFIER_COLUMNS = ["Unnamed: 0", "id"]

ARTIFACTS_DIR = Path("artifacts")
MODELS_DIR = ARTIFACTS_DIR / "models"
REPORTS_DIR = ARTIFACTS_DIR / "reports"
FIGURES_DIR = ARTIFACTS_DIR / "figures"
LOGS_DIR = ARTIFACTS_DIR / "logs"

FEATURE_MEASURES = [
    "radius",
    "texture",
    "perimeter",
    "area",
    "smoothness",
    "compactness",
    "concavity",
    "concave points",
    "symmetry",
    "fractal_dimension",
]
FEATURE_STATS = ["mean", "se", "worst"]
FEATURE_COLUMNS = [f"{m}_{s}" for s in FEATURE_STATS for m in FEATURE_MEASURES]

TRAIN_FRACTION = 0.75

KNN_NEIGHBORS = 21
NN_HIDDEN_UNITS = 15
NN_WEIGHT_DECAY = 8e-4
NN_MAX_ITER = 100
LR_MAX_ITER = 2000

MODEL_NAMES = ["knn", "decision_tree", "neural_network", "logistic_regression"]


@dataclass(frozen=True)
class SeedPolicy:
    """
    One seed per random-dependent stage. KNN is deterministic and takes none.
    """

    split: int = 42
    decision_tree: int = 42
    neural_network: int = 42
    logistic_regression: int = 42

    @classmethod
    def uniform(cls, seed: int, split: Optional[int] = None) -> "SeedPolicy":
        return cls(
            split=seed if split is None else split,
            decision_tree=seed,
            neural_network=seed,
            logistic_regression=seed,
        )
