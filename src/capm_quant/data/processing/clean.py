"""Alinhamento e limpeza das séries de mercado.

Guia das funções
----------------
`normalize_index(obj)`
    Reordena Series/DataFrame seguindo o índice temporal, validando duplicatas e
    removendo timezone.

`forward_fill_rates(rates)`
    Preenche lacunas da taxa livre de risco com a última cotação anterior,
    retornando a série preenchida e o número de valores preenchidos.

`align_market_data(asset, index, risk_free)`
    Inner join de ativo e índice por data, left join da taxa livre de risco e
    forward-fill da taxa, produzindo um :class:`JoinedDataset`.
"""

from __future__ import annotations

import logging
from typing import Tuple, TypeVar

import pandas as pd

from ...config.constants import COLUMN_ASSET_PRICE, COLUMN_INDEX_PRICE, COLUMN_RF_RATE_PCT
from ...errors import InsufficientDataError
from ..models import JoinedDataset, PriceSeries, RateSeries

__all__ = [
    "normalize_index",
    "forward_fill_rates",
    "align_market_data",
]

logger = logging.getLogger(__name__)

PandasObj = TypeVar("PandasObj", pd.Series, pd.DataFrame)


def normalize_index(obj: PandasObj) -> PandasObj:
    """Retorna cópia com índice DatetimeIndex ordenado, tz-naive e alinhado aos dados.

    Lança ValueError se houver duplicatas após a conversão.
    """
    if obj.empty:
        out = obj.copy()
        out.index = pd.DatetimeIndex(pd.to_datetime(out.index))
        return out

    normalized = obj.copy()
    idx = pd.DatetimeIndex(pd.to_datetime(normalized.index))
    if getattr(idx, "tz", None) is not None:
        idx = idx.tz_localize(None)
    # yfinance devolve timestamps com hora em alguns mercados
    idx = idx.normalize()

    sorted_idx, order = idx.sort_values(return_indexer=True)
    if sorted_idx.has_duplicates:
        raise ValueError("Index contém datas duplicadas após normalização")

    normalized = normalized.iloc[order]
    normalized.index = sorted_idx
    return normalized


def forward_fill_rates(rates: pd.Series) -> Tuple[pd.Series, int]:
    """Carry the most recent prior quote forward over missing dates.

    A leading gap (no prior quote) stays missing. Returns the filled series
    and how many values were filled.
    """
    filled = rates.ffill()
    n_filled = int(rates.isna().sum() - filled.isna().sum())
    return filled, n_filled


def align_market_data(
    asset: PriceSeries,
    index: PriceSeries,
    risk_free: RateSeries,
) -> JoinedDataset:
    """Join the three series on date and forward-fill the risk-free column.

    Asset and index are inner-joined (dates present in both); the risk-free
    quotes are left-joined onto that calendar, so quotes on dates without
    prices are discarded before the fill.

    Raises
    ------
    InsufficientDataError
        When asset and index share no dates, or when no risk-free quote falls
        on the joined calendar.
    """
    prices = pd.concat(
        [asset.prices.rename(COLUMN_ASSET_PRICE), index.prices.rename(COLUMN_INDEX_PRICE)],
        axis=1,
        join="inner",
    ).sort_index()
    if prices.empty:
        raise InsufficientDataError(
            f"{asset.symbol} and {index.symbol} share no trading dates",
            context={"asset": asset.symbol, "index": index.symbol},
        )

    joined = prices.join(risk_free.rates.rename(COLUMN_RF_RATE_PCT), how="left")
    if joined[COLUMN_RF_RATE_PCT].isna().all():
        raise InsufficientDataError(
            f"Risk-free series {risk_free.series_id} has no quotes on the joined calendar",
            context={"series_id": risk_free.series_id, "rows": len(joined)},
        )

    filled, n_filled = forward_fill_rates(joined[COLUMN_RF_RATE_PCT])
    joined[COLUMN_RF_RATE_PCT] = filled

    dataset = JoinedDataset(table=joined, n_filled=n_filled)
    logger.info(
        "Séries alinhadas: %d datas comuns (%s=%d, %s=%d), %d taxas preenchidas, %d ausentes",
        len(dataset),
        asset.symbol,
        len(asset),
        index.symbol,
        len(index),
        n_filled,
        dataset.n_missing_rates,
    )
    return dataset
