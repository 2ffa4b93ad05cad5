"""Funções de processamento de retornos.

Retornos simples diários, conversão da taxa livre de risco anual (% a.a.) em
taxa diária efetiva e montagem da tabela de retornos excedentes.
"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from ...config.constants import (
    COLUMN_ASSET_EXCESS,
    COLUMN_ASSET_PRICE,
    COLUMN_ASSET_RETURN,
    COLUMN_INDEX_EXCESS,
    COLUMN_INDEX_PRICE,
    COLUMN_INDEX_RETURN,
    COLUMN_RF_DAILY,
    COLUMN_RF_RATE_PCT,
    RATE_DAY_COUNT,
)
from ...errors import InsufficientDataError
from ..models import JoinedDataset, ReturnTable

__all__ = [
    "simple_returns",
    "daily_rate_from_annual_pct",
    "compute_return_table",
]

logger = logging.getLogger(__name__)


def simple_returns(prices: pd.Series) -> pd.Series:
    """``P_i / P_{i-1} - 1``; the first element has no prior day and is NaN."""
    prices = prices.sort_index().astype(float)
    return prices.divide(prices.shift(1)) - 1.0


def daily_rate_from_annual_pct(rate_pct, day_count: int = RATE_DAY_COUNT):
    """Compound an annual percent quote down to a daily effective rate.

    ``(1 + rate_pct / 100) ** (1 / day_count) - 1``. Works on scalars, numpy
    arrays and pandas objects; missing values stay missing.
    """
    if day_count <= 0:
        raise ValueError("day_count must be positive.")
    return (1.0 + rate_pct / 100.0) ** (1.0 / day_count) - 1.0


def compute_return_table(joined: JoinedDataset) -> ReturnTable:
    """Build daily returns, daily risk-free rate and excess returns.

    The first row (no prior price) and any row whose risk-free rate could not
    be forward-filled are dropped. Missing rates are never replaced by zero.

    Raises
    ------
    InsufficientDataError
        When no fully defined row remains.
    """
    frame = joined.frame

    asset_ret = simple_returns(frame[COLUMN_ASSET_PRICE])
    index_ret = simple_returns(frame[COLUMN_INDEX_PRICE])
    rf_daily = daily_rate_from_annual_pct(frame[COLUMN_RF_RATE_PCT])

    table = pd.DataFrame(
        {
            COLUMN_ASSET_RETURN: asset_ret,
            COLUMN_INDEX_RETURN: index_ret,
            COLUMN_RF_DAILY: rf_daily,
            COLUMN_ASSET_EXCESS: asset_ret - rf_daily,
            COLUMN_INDEX_EXCESS: index_ret - rf_daily,
        },
        index=frame.index,
    )
    table = table.replace([np.inf, -np.inf], np.nan)

    valid = table.notna().all(axis=1)
    n_dropped = int((~valid).sum())
    table = table.loc[valid]

    if table.empty:
        raise InsufficientDataError(
            "No fully defined return rows after dropping the first day and unfilled rates",
            context={"rows": len(frame), "dropped": n_dropped},
        )

    logger.info("Retornos excedentes: %d linhas válidas, %d descartadas", len(table), n_dropped)
    return ReturnTable(table=table, n_dropped=n_dropped)
