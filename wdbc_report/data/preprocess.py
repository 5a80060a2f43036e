import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd
from sklearn.preprocessing import MinMaxScaler

from wdbc_report.config import IDENTIFIER_COLUMNS, LABEL_COLUMN
from wdbc_report.errors import DegenerateColumnError, ParseError

logger = logging.getLogger(__name__)


class Diagnosis(IntEnum):
    """Tumour label. The integer value is the encoding used by every model."""

    BENIGN = 0
    MALIGNANT = 1

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, raw) -> "Diagnosis":
        key = str(raw).strip().lower()
        if key in ("b", "benign"):
            return cls.BENIGN
        if key in ("m", "malignant"):
            return cls.MALIGNANT
        raise ParseError(f"Unknown diagnosis label: {raw!r}")


# Category order follows the encoding, so category codes are the {0, 1} labels.
LABEL_CATEGORIES = [d.label for d in Diagnosis]


@dataclass
class NormalizerArtifacts:
    feature_columns: List[str]
    scaler: MinMaxScaler


def clean_df(
    df: pd.DataFrame,
    label_column: str = LABEL_COLUMN,
    drop_columns: Optional[List[str]] = None,
) -> pd.DataFrame:
    """
    Row/column cleaning only (no fitting):
      - drop identifier columns (default: row index and sample id)
      - drop columns that are entirely empty
      - reject missing values
      - parse the label into a two-valued category
    """
    if label_column not in df.columns:
        raise ParseError(f"Label column '{label_column}' not found.")

    drop_columns = drop_columns if drop_columns is not None else IDENTIFIER_COLUMNS

    df = df.drop(columns=[c for c in drop_columns if c in df.columns])
    empty = [c for c in df.columns if df[c].isna().all()]
    if empty:
        logger.warning("Dropping empty columns: %s", empty)
        df = df.drop(columns=empty)

    missing = df.isna().sum()
    missing = missing[missing > 0]
    if not missing.empty:
        raise ParseError(f"Missing values found: {missing.to_dict()}")

    df = df.copy()
    labels = [Diagnosis.parse(v).label for v in df[label_column]]
    df[label_column] = pd.Categorical(labels, categories=LABEL_CATEGORIES)
    return df


def encode_labels(labels: pd.Series) -> np.ndarray:
    """
    Map the diagnosis category to integers (0 = benign, 1 = malignant).
    This is the only place the mapping is applied.
    """
    if not isinstance(labels.dtype, pd.CategoricalDtype) or list(
        labels.cat.categories
    ) != LABEL_CATEGORIES:
        raise ParseError("Labels must come from clean_df (benign/malignant category).")
    return labels.cat.codes.to_numpy(dtype=np.int64)


def decode_labels(codes: Sequence[int]) -> List[str]:
    return [Diagnosis(int(c)).label for c in codes]


def get_feature_columns(
    df: pd.DataFrame, label_column: str = LABEL_COLUMN
) -> List[str]:
    """
    Select numeric feature columns. Excludes label if numeric.
    """
    feature_columns = df.select_dtypes(include=[np.number]).columns.tolist()
    if label_column in feature_columns:
        feature_columns.remove(label_column)
    return feature_columns


def fit_normalizer(
    df: pd.DataFrame,
    feature_columns: Optional[List[str]] = None,
) -> NormalizerArtifacts:
    """
    Fit min-max scaling on the given table. Every feature must have a
    non-zero observed range.
    """
    feature_columns = feature_columns or get_feature_columns(df)
    X_df = df[feature_columns]

    mins = X_df.min()
    maxs = X_df.max()
    for col in feature_columns:
        if maxs[col] == mins[col]:
            raise DegenerateColumnError(col, float(mins[col]))

    scaler = MinMaxScaler()
    scaler.fit(X_df.values)
    return NormalizerArtifacts(feature_columns=feature_columns, scaler=scaler)


def normalize(df: pd.DataFrame, artifacts: NormalizerArtifacts) -> np.ndarray:
    """
    Apply fitted scaling: (x - min) / (max - min) per feature column.
    """
    missing = [c for c in artifacts.feature_columns if c not in df.columns]
    if missing:
        raise ParseError(
            f"Missing required feature columns: {missing[:10]}... (total {len(missing)})"
        )
    return artifacts.scaler.transform(df[artifacts.feature_columns].values)
