"""Immutable value objects passed between the pipeline stages.

Each stage returns a new artefact instead of mutating a shared table. Pandas
objects stored here are copies taken at construction time; callers receive
copies again through the accessor properties, so an artefact never changes
after it is built.
"""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from ..config.constants import (
    COLUMN_ASSET_EXCESS,
    COLUMN_ASSET_PRICE,
    COLUMN_ASSET_RETURN,
    COLUMN_INDEX_EXCESS,
    COLUMN_INDEX_PRICE,
    COLUMN_INDEX_RETURN,
    COLUMN_RF_DAILY,
    COLUMN_RF_RATE_PCT,
)

__all__ = [
    "PriceSeries",
    "RateSeries",
    "MarketInputs",
    "JoinedDataset",
    "ReturnTable",
]

JOINED_COLUMNS = (COLUMN_ASSET_PRICE, COLUMN_INDEX_PRICE, COLUMN_RF_RATE_PCT)
RETURN_COLUMNS = (
    COLUMN_ASSET_RETURN,
    COLUMN_INDEX_RETURN,
    COLUMN_RF_DAILY,
    COLUMN_ASSET_EXCESS,
    COLUMN_INDEX_EXCESS,
)


def _check_dated(obj: pd.Series | pd.DataFrame, label: str) -> None:
    if not isinstance(obj.index, pd.DatetimeIndex):
        raise TypeError(f"{label} must be indexed by a DatetimeIndex")
    if not obj.index.is_unique:
        raise ValueError(f"{label} contains duplicate dates")
    if not obj.index.is_monotonic_increasing:
        raise ValueError(f"{label} is not in ascending date order")


def _dated_series(values: pd.Series, *, name: str) -> pd.Series:
    series = pd.to_numeric(values, errors="coerce").astype(float).dropna()
    series = series.copy()
    series.name = name
    return series


@dataclass(frozen=True, slots=True)
class PriceSeries:
    """Price history of one instrument: unique ascending dates, no gaps in values."""

    symbol: str
    values: pd.Series

    def __post_init__(self) -> None:
        series = _dated_series(self.values, name=self.symbol)
        _check_dated(series, f"PriceSeries[{self.symbol}]")
        object.__setattr__(self, "values", series)

    @property
    def prices(self) -> pd.Series:
        return self.values.copy()

    def __len__(self) -> int:
        return len(self.values)

    @property
    def is_empty(self) -> bool:
        return self.values.empty


@dataclass(frozen=True, slots=True)
class RateSeries:
    """Risk-free quotes in annual percent (5.0 means 5 % a.a.)."""

    series_id: str
    values: pd.Series

    def __post_init__(self) -> None:
        series = _dated_series(self.values, name=self.series_id)
        _check_dated(series, f"RateSeries[{self.series_id}]")
        object.__setattr__(self, "values", series)

    @property
    def rates(self) -> pd.Series:
        return self.values.copy()

    def __len__(self) -> int:
        return len(self.values)

    @property
    def is_empty(self) -> bool:
        return self.values.empty


@dataclass(frozen=True, slots=True)
class MarketInputs:
    """The three acquisition results, available only once all fetches completed."""

    asset: PriceSeries
    index: PriceSeries
    risk_free: RateSeries


@dataclass(frozen=True, slots=True)
class JoinedDataset:
    """Date-keyed table of asset price, index price and risk-free percent.

    ``n_filled`` counts risk-free values supplied by forward fill; a leading
    gap with no prior quote may remain missing.
    """

    table: pd.DataFrame
    n_filled: int = 0

    def __post_init__(self) -> None:
        missing = [c for c in JOINED_COLUMNS if c not in self.table.columns]
        if missing:
            raise ValueError(f"JoinedDataset missing columns: {missing}")
        _check_dated(self.table, "JoinedDataset")
        object.__setattr__(self, "table", self.table.loc[:, list(JOINED_COLUMNS)].copy())

    @property
    def frame(self) -> pd.DataFrame:
        return self.table.copy()

    def __len__(self) -> int:
        return len(self.table)

    @property
    def n_missing_rates(self) -> int:
        return int(self.table[COLUMN_RF_RATE_PCT].isna().sum())


@dataclass(frozen=True, slots=True)
class ReturnTable:
    """Per-date returns and excess returns; every row is fully defined."""

    table: pd.DataFrame
    n_dropped: int = 0

    def __post_init__(self) -> None:
        missing = [c for c in RETURN_COLUMNS if c not in self.table.columns]
        if missing:
            raise ValueError(f"ReturnTable missing columns: {missing}")
        _check_dated(self.table, "ReturnTable")
        if self.table.loc[:, list(RETURN_COLUMNS)].isna().any().any():
            raise ValueError("ReturnTable rows must be fully defined")
        object.__setattr__(self, "table", self.table.loc[:, list(RETURN_COLUMNS)].copy())

    @property
    def frame(self) -> pd.DataFrame:
        return self.table.copy()

    def __len__(self) -> int:
        return len(self.table)

    @property
    def asset_excess(self) -> pd.Series:
        return self.table[COLUMN_ASSET_EXCESS].copy()

    @property
    def index_excess(self) -> pd.Series:
        return self.table[COLUMN_INDEX_EXCESS].copy()
