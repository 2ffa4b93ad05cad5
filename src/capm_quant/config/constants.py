"""Constantes centrais utilizadas em múltiplos módulos.

O arquivo consolida as convenções de contagem de dias, os identificadores
padrão das séries e os nomes de colunas das tabelas intermediárias. A
centralização evita a propagação de literais mágicos espalhados pelo projeto.
"""

from __future__ import annotations

from typing import Final

__all__ = [
    "COLUMN_ASSET_EXCESS",
    "COLUMN_ASSET_PRICE",
    "COLUMN_ASSET_RETURN",
    "COLUMN_INDEX_EXCESS",
    "COLUMN_INDEX_PRICE",
    "COLUMN_INDEX_RETURN",
    "COLUMN_RF_DAILY",
    "COLUMN_RF_RATE_PCT",
    "DEFAULT_CONFIDENCE_LEVEL",
    "DEFAULT_MARKET_INDEX",
    "DEFAULT_RISK_FREE_SERIES",
    "RATE_DAY_COUNT",
    "TRADING_DAYS_IN_YEAR",
]


# Numeric constants ---------------------------------------------------------

TRADING_DAYS_IN_YEAR: Final[int] = 252
"""Pregões por ano usados para anualizar o erro-padrão diário dos resíduos."""

RATE_DAY_COUNT: Final[int] = 360
"""Convenção de dias para converter a taxa anual livre de risco em taxa diária."""

DEFAULT_CONFIDENCE_LEVEL: Final[float] = 0.90


# Identifiers ---------------------------------------------------------------

DEFAULT_MARKET_INDEX: Final[str] = "^GSPC"
DEFAULT_RISK_FREE_SERIES: Final[str] = "DTB3"
"""Série FRED do T-Bill de 3 meses (% a.a.)."""


# Column names --------------------------------------------------------------

COLUMN_ASSET_PRICE: Final[str] = "asset_price"
COLUMN_INDEX_PRICE: Final[str] = "index_price"
COLUMN_RF_RATE_PCT: Final[str] = "rf_rate_pct"

COLUMN_ASSET_RETURN: Final[str] = "asset_return"
COLUMN_INDEX_RETURN: Final[str] = "index_return"
COLUMN_RF_DAILY: Final[str] = "rf_daily"
COLUMN_ASSET_EXCESS: Final[str] = "asset_excess"
COLUMN_INDEX_EXCESS: Final[str] = "index_excess"
