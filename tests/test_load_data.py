import pytest

from wdbc_report.config import FEATURE_COLUMNS
from wdbc_report.data.load_data import load_raw_data
from wdbc_report.errors import NotFoundError, ParseError


def test_bundled_dataset_has_expected_layout(raw_df):
    assert raw_df.shape == (569, 33)
    assert list(raw_df.columns[:3]) == ["Unnamed: 0", "id", "diagnosis"]
    assert list(raw_df.columns[3:]) == FEATURE_COLUMNS
    assert set(raw_df["diagnosis"]) == {"B", "M"}


def test_missing_file_raises_not_found(tmp_path):
    with pytest.raises(NotFoundError):
        load_raw_data(tmp_path / "nope.csv")


def test_not_found_is_a_file_not_found_error(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_raw_data(tmp_path / "nope.csv")


def test_ragged_rows_raise_parse_error(tmp_path):
    path = tmp_path / "ragged.csv"
    path.write_text("id,diagnosis,radius_mean\n1,B,12.0\n2,M,14.5,99\n")
    with pytest.raises(ParseError):
        load_raw_data(path)


def test_empty_file_raises_parse_error(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("")
    with pytest.raises(ParseError):
        load_raw_data(path)


def test_non_numeric_feature_raises_parse_error(tmp_path):
    path = tmp_path / "text.csv"
    path.write_text("id,diagnosis,radius_mean\n1,B,abc\n2,M,14.5\n")
    with pytest.raises(ParseError, match="radius_mean"):
        load_raw_data(path)


def test_missing_label_column_raises_parse_error(tmp_path):
    path = tmp_path / "nolabel.csv"
    path.write_text("id,radius_mean\n1,12.0\n")
    with pytest.raises(ParseError, match="diagnosis"):
        load_raw_data(path)


def test_missing_feature_columns_raise_parse_error(raw_df, tmp_path):
    path = tmp_path / "short.csv"
    raw_df.drop(columns=["radius_mean", "area_worst"]).to_csv(path, index=False)
    with pytest.raises(ParseError) as excinfo:
        load_raw_data(path)
    assert "radius_mean" in str(excinfo.value)
    assert "area_worst" in str(excinfo.value)
