from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from capm_quant.data.sources.csv import (
    CSVSchemaError,
    load_price_panel,
    load_price_series_csv,
    load_rate_series_csv,
)
from capm_quant.errors import DataUnavailableError


def _write_csv(tmp_path: Path, filename: str, rows: list[dict[str, object]]) -> Path:
    path = tmp_path / filename
    pd.DataFrame(rows).to_csv(path, index=False)
    return path


@pytest.fixture
def panel_path(tmp_path: Path) -> Path:
    return _write_csv(
        tmp_path,
        "prices.csv",
        [
            {"date": "2024-01-03", "AAPL": 186.0, "^GSPC": 4700.0, "DTB3": 5.2},
            {"date": "2024-01-02", "AAPL": 185.0, "^GSPC": 4740.0, "DTB3": 5.2},
            {"date": "2024-01-04", "AAPL": 184.0, "^GSPC": 4690.0, "DTB3": None},
        ],
    )


def test_load_price_panel_sorts_and_parses(panel_path: Path):
    df = load_price_panel(panel_path, expected_columns=["AAPL", "^GSPC"])
    assert list(df.columns) == ["AAPL", "^GSPC"]
    assert df.index.equals(pd.DatetimeIndex(["2024-01-02", "2024-01-03", "2024-01-04"]))


def test_load_price_panel_missing_expected_column(panel_path: Path):
    with pytest.raises(CSVSchemaError):
        load_price_panel(panel_path, expected_columns=["MSFT"])


def test_load_price_panel_rejects_duplicate_dates(tmp_path: Path):
    path = _write_csv(
        tmp_path,
        "dup.csv",
        [{"date": "2024-01-01", "SPY": 470.0}, {"date": "2024-01-01", "SPY": 471.5}],
    )
    with pytest.raises(CSVSchemaError):
        load_price_panel(path)


def test_load_price_panel_missing_index_column(tmp_path: Path):
    path = _write_csv(tmp_path, "noidx.csv", [{"day": "2024-01-01", "SPY": 470.0}])
    with pytest.raises(CSVSchemaError):
        load_price_panel(path)


def test_load_price_series_csv_slices_inclusive_range(panel_path: Path):
    series = load_price_series_csv(panel_path, "AAPL", "2024-01-02", "2024-01-03")
    assert series.symbol == "AAPL"
    assert series.prices.tolist() == [185.0, 186.0]


def test_load_rate_series_csv_drops_missing_quotes(panel_path: Path):
    series = load_rate_series_csv(panel_path, "DTB3", "2024-01-01", "2024-01-31")
    assert len(series) == 2


def test_unknown_column_is_data_unavailable(panel_path: Path):
    with pytest.raises(DataUnavailableError):
        load_price_series_csv(panel_path, "MSFT", "2024-01-01", "2024-01-31")


def test_empty_range_is_data_unavailable(panel_path: Path):
    with pytest.raises(DataUnavailableError):
        load_price_series_csv(panel_path, "AAPL", "2023-01-01", "2023-12-31")
