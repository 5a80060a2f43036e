import logging
from pathlib import Path

import numpy as np
import pandas as pd

from wdbc_report.config import (
    FEATURE_COLUMNS,
    IDENTIFIER_COLUMNS,
    LABEL_COLUMN,
    RAW_DATA_PATH,
)
from wdbc_report.errors import NotFoundError, ParseError

logger = logging.getLogger(__name__)


# Load raw breast cancer dataset
def load_raw_data(
    path=RAW_DATA_PATH,
    label_column: str = LABEL_COLUMN,
    feature_columns=FEATURE_COLUMNS,
) -> pd.DataFrame:
    path = Path(path)
    if not path.is_file():
        raise NotFoundError(f"Input file not found: {path}")

    try:
        df = pd.read_csv(path)
    except pd.errors.EmptyDataError as e:
        raise ParseError(f"{path} is empty.") from e
    except pd.errors.ParserError as e:
        raise ParseError(f"Could not parse {path}: {e}") from e

    if label_column not in df.columns:
        raise ParseError(f"Label column '{label_column}' not found in {path}.")

    value_columns = [
        c
        for c in df.columns
        if c != label_column and c not in IDENTIFIER_COLUMNS and df[c].notna().any()
    ]
    non_numeric = [
        c for c in value_columns if not pd.api.types.is_numeric_dtype(df[c])
    ]
    if non_numeric:
        raise ParseError(f"Non-numeric feature columns in {path}: {non_numeric}")

    missing = [c for c in feature_columns if c not in df.columns]
    if missing:
        raise ParseError(f"Missing feature columns in {path}: {missing}")

    logger.info("Loaded %s: rows=%s cols=%s", path, len(df), len(df.columns))
    return df


def _feature_name(sklearn_name: str) -> str:
    # "mean radius" -> "radius_mean", "radius error" -> "radius_se"
    if sklearn_name.startswith("mean "):
        measure, stat = sklearn_name[len("mean ") :], "mean"
    elif sklearn_name.startswith("worst "):
        measure, stat = sklearn_name[len("worst ") :], "worst"
    else:
        measure, stat = sklearn_name[: -len(" error")], "se"
    measure = measure.replace("fractal dimension", "fractal_dimension")
    return f"{measure}_{stat}"


def export_sklearn_dataset(path=RAW_DATA_PATH) -> Path:
    """
    Write scikit-learn's bundled copy of the Wisconsin diagnostic table in the
    33-column layout the loader expects (row index, id, diagnosis, 30 features).
    """
    from sklearn.datasets import load_breast_cancer

    bunch = load_breast_cancer(as_frame=True)
    features = bunch.data.rename(columns=_feature_name)[FEATURE_COLUMNS]

    df = pd.DataFrame(
        {
            "id": np.arange(1, len(features) + 1),
            # sklearn encodes 0 = malignant, 1 = benign
            LABEL_COLUMN: np.where(bunch.target.values == 0, "M", "B"),
        }
    )
    df = pd.concat([df, features.reset_index(drop=True)], axis=1)

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=True)
    logger.info("Exported bundled dataset to %s (rows=%s)", path, len(df))
    return path
