"""Ingestão de dados locais (CSV) com schema padronizado.

Provedor offline com o mesmo contrato das fontes remotas: útil para rodar a
análise sem rede ou reproduzir um resultado com dados congelados.

`CSVSchemaError`
    Exceção para ausência da coluna de datas, erros de parsing ou duplicatas.

`load_price_panel(path, index_col="date", expected_columns=None)`
    Lê um painel largo (uma coluna de datas + uma coluna por instrumento) e
    devolve DataFrame numérico com ``DatetimeIndex`` normalizado.

`load_price_series_csv(path, symbol, start, end)` / `load_rate_series_csv(...)`
    Recortam uma coluna do painel no intervalo ``[start, end]`` e devolvem
    :class:`PriceSeries`/:class:`RateSeries`. Coluna ausente ou intervalo vazio
    resultam em :class:`DataUnavailableError`.
"""

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Iterable, Optional, Union

import pandas as pd

from ...errors import DataUnavailableError
from ..models import PriceSeries, RateSeries
from ..processing.clean import normalize_index

__all__ = [
    "CSVSchemaError",
    "load_price_panel",
    "load_price_series_csv",
    "load_rate_series_csv",
]

DateLike = Union[str, date, datetime]


class CSVSchemaError(ValueError):
    """Raise when a CSV file does not match the expected schema."""


def load_price_panel(
    path: str | Path,
    *,
    index_col: str = "date",
    expected_columns: Optional[Iterable[str]] = None,
) -> pd.DataFrame:
    """Load a wide panel from a CSV file.

    Parameters
    ----------
    path
        CSV file containing a ``date`` column plus one column per instrument.
    index_col
        Name of the column that should become the DatetimeIndex.
    expected_columns
        Optional iterable restricting which columns are retained. Raises
        ``CSVSchemaError`` if any requested column is missing.
    """
    csv_path = Path(path)
    if not csv_path.exists():
        raise FileNotFoundError(f"Arquivo CSV não encontrado: {csv_path}")

    df = pd.read_csv(csv_path)
    if index_col not in df.columns:
        raise CSVSchemaError(f"Coluna de índice '{index_col}' ausente em {csv_path}.")

    columns = [col for col in df.columns if col != index_col]
    if expected_columns is not None:
        expected = [col.strip() for col in expected_columns]
        missing = [col for col in expected if col not in columns]
        if missing:
            raise CSVSchemaError(f"Colunas esperadas ausentes: {', '.join(sorted(missing))}")
        columns = expected

    try:
        df[index_col] = pd.to_datetime(df[index_col])
    except (pd.errors.OutOfBoundsDatetime, ValueError) as exc:
        raise CSVSchemaError(f"Falha ao converter datas: {exc}") from exc

    df = df.set_index(index_col).loc[:, columns]
    df = df.apply(pd.to_numeric, errors="coerce")

    try:
        return normalize_index(df)
    except ValueError as exc:
        raise CSVSchemaError(str(exc)) from exc


def _slice_column(path: str | Path, column: str, start: DateLike, end: DateLike) -> pd.Series:
    panel = load_price_panel(path)
    if column not in panel.columns:
        raise DataUnavailableError(
            f"Coluna {column} ausente em {path}",
            context={"path": str(path), "column": column},
        )
    series = panel[column].loc[pd.Timestamp(start):pd.Timestamp(end)].dropna()
    if series.empty:
        raise DataUnavailableError(
            f"Sem observações de {column} entre {start} e {end} em {path}",
            context={"path": str(path), "column": column, "start": str(start), "end": str(end)},
        )
    return series


def load_price_series_csv(
    path: str | Path, symbol: str, start: DateLike, end: DateLike
) -> PriceSeries:
    """Read ``symbol`` prices from a local wide CSV."""
    return PriceSeries(symbol=symbol, values=_slice_column(path, symbol, start, end))


def load_rate_series_csv(
    path: str | Path, series_id: str, start: DateLike, end: DateLike
) -> RateSeries:
    """Read ``series_id`` annual percent quotes from a local wide CSV."""
    return RateSeries(series_id=series_id, values=_slice_column(path, series_id, start, end))
