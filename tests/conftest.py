import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from wdbc_report.config import SeedPolicy
from wdbc_report.data.load_data import export_sklearn_dataset, load_raw_data
from wdbc_report.data.preprocess import clean_df
from wdbc_report.pipeline import run_pipeline


@pytest.fixture(scope="session")
def dataset_csv(tmp_path_factory):
    return export_sklearn_dataset(tmp_path_factory.mktemp("data") / "breast_cancer.csv")


@pytest.fixture(scope="session")
def raw_df(dataset_csv):
    return load_raw_data(dataset_csv)


@pytest.fixture
def clean(raw_df):
    return clean_df(raw_df)


@pytest.fixture(scope="session")
def pipeline_result(dataset_csv):
    return run_pipeline(dataset_csv, seeds=SeedPolicy())


@pytest.fixture
def small_raw_df():
    rng = np.random.default_rng(0)
    n = 40
    return pd.DataFrame(
        {
            "id": np.arange(n),
            "diagnosis": ["M" if i % 3 == 0 else "B" for i in range(n)],
            "radius_mean": rng.normal(14.0, 3.0, n),
            "texture_mean": rng.normal(19.0, 4.0, n),
            "area_mean": rng.normal(650.0, 300.0, n),
        }
    )
