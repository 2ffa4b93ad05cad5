"""Fonte de dados: yfinance.

Baixa o histórico de preços de um único instrumento via API pública do Yahoo
Finance e devolve um :class:`PriceSeries` com o preço ajustado (Adj Close),
ou o fechamento quando o ajustado não está disponível.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Union

import logging
import time
import pandas as pd
import yfinance as yf

from ...errors import DataUnavailableError
from ..models import PriceSeries
from ..processing.clean import normalize_index

__all__ = ["download_price_series"]

logger = logging.getLogger(__name__)

DateLike = Union[str, date, datetime]


def _pick_price_column(data: pd.DataFrame, symbol: str) -> pd.Series:
    """Extract the adjusted (or plain) close for ``symbol`` from a yfinance frame."""
    if isinstance(data.columns, pd.MultiIndex):
        fields = data.columns.get_level_values(0)
        col = "Adj Close" if "Adj Close" in fields else "Close"
        if col != "Adj Close":
            logger.warning("Adj Close ausente para %s; usando Close.", symbol)
        block = data[col]
        if isinstance(block, pd.Series):
            return block
        if symbol in block.columns:
            return block[symbol]
        return block.iloc[:, 0]

    col = "Adj Close" if "Adj Close" in data.columns else "Close"
    if col != "Adj Close":
        logger.warning("Adj Close ausente para %s; usando Close.", symbol)
    return data[col]


def download_price_series(
    symbol: str,
    start: DateLike,
    end: DateLike,
    *,
    progress: bool = False,
    sleep_seconds: float = 0.25,
) -> PriceSeries:
    """Download daily prices for ``symbol`` over the inclusive range ``[start, end]``.

    Raises
    ------
    DataUnavailableError
        Unknown symbol, range outside provider coverage, or a provider failure.
    """
    symbol = symbol.strip().upper()
    if not symbol:
        raise ValueError("Ticker vazio.")

    start_ts = pd.Timestamp(start)
    # yfinance trata ``end`` como exclusivo
    end_exclusive = pd.Timestamp(end) + timedelta(days=1)

    logger.info(
        "Baixando preços (yfinance): %s (start=%s, end=%s)",
        symbol, start_ts.date(), pd.Timestamp(end).date(),
    )
    # Throttle leve para evitar rate limit/ban de IP em ambientes CI
    if sleep_seconds and sleep_seconds > 0:
        time.sleep(sleep_seconds)

    try:
        data = yf.download(
            tickers=symbol,
            start=start_ts.strftime("%Y-%m-%d"),
            end=end_exclusive.strftime("%Y-%m-%d"),
            auto_adjust=False,
            progress=progress,
            threads=False,
        )
    except Exception as exc:
        raise DataUnavailableError(
            f"yfinance falhou para {symbol}: {exc}",
            context={"symbol": symbol, "start": str(start), "end": str(end)},
        ) from exc

    if data is None or data.empty:
        raise DataUnavailableError(
            f"Sem preços para {symbol} entre {start_ts.date()} e {pd.Timestamp(end).date()}",
            context={"symbol": symbol, "start": str(start), "end": str(end)},
        )

    prices = normalize_index(_pick_price_column(data, symbol).dropna())
    series = PriceSeries(symbol=symbol, values=prices)
    if series.is_empty:
        raise DataUnavailableError(
            f"Sem preços válidos para {symbol}",
            context={"symbol": symbol, "start": str(start), "end": str(end)},
        )
    logger.debug("%s: %d observações", symbol, len(series))
    return series
