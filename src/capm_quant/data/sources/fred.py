"""Integração com FRED (Federal Reserve Economic Data).

`download_rate_series(series_id, start, end)`
    - Usa ``pandas_datareader`` para puxar a série (ex.: DTB3, % a.a.).
    - Mantém os valores em percentual anual; a conversão para taxa diária é
      feita em ``processing.returns``.
    - Não reamostra nem preenche: a série costuma ser mais esparsa que os
      preços (sem fins de semana/feriados) e o alinhamento cuida das lacunas.
    - Lança ``ImportError`` amigável quando a dependência não pode ser
      importada, sugerindo como habilitar.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Union

import pandas as pd

from ...errors import DataUnavailableError
from ..models import RateSeries
from ..processing.clean import normalize_index

__all__ = ["download_rate_series"]

logger = logging.getLogger(__name__)

try:
    from pandas_datareader import data as pdr
except ImportError:  # pragma: no cover - depende da combinação pandas/datareader
    pdr = None

DateLike = Union[str, date, datetime]


def download_rate_series(
    series_id: str,
    start: DateLike,
    end: DateLike,
) -> RateSeries:
    """Baixa a série ``series_id`` do FRED (% a.a.) no intervalo ``[start, end]``."""
    if pdr is None:
        raise ImportError(
            "pandas_datareader não está disponível. "
            "Instale com 'pip install pandas-datareader' para usar download_rate_series."
        )
    start_ts, end_ts = pd.Timestamp(start), pd.Timestamp(end)
    logger.info("Baixando FRED %s (start=%s, end=%s)", series_id, start_ts.date(), end_ts.date())

    try:
        frame = pdr.DataReader(series_id, "fred", start_ts, end_ts)
    except Exception as exc:
        raise DataUnavailableError(
            f"FRED falhou para {series_id}: {exc}",
            context={"series_id": series_id, "start": str(start), "end": str(end)},
        ) from exc

    if frame is None or frame.empty or series_id not in frame.columns:
        raise DataUnavailableError(
            f"Sem cotações para {series_id} entre {start_ts.date()} e {end_ts.date()}",
            context={"series_id": series_id, "start": str(start), "end": str(end)},
        )

    rates = normalize_index(frame[series_id].astype(float)).loc[start_ts:end_ts]
    series = RateSeries(series_id=series_id, values=rates)
    if series.is_empty:
        raise DataUnavailableError(
            f"Série {series_id} sem valores numéricos no intervalo",
            context={"series_id": series_id, "start": str(start), "end": str(end)},
        )
    return series
