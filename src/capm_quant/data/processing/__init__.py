"""Alinhamento das séries e cálculo de retornos excedentes."""

from .clean import align_market_data, forward_fill_rates, normalize_index
from .returns import compute_return_table, daily_rate_from_annual_pct, simple_returns

__all__ = [
    "align_market_data",
    "compute_return_table",
    "daily_rate_from_annual_pct",
    "forward_fill_rates",
    "normalize_index",
    "simple_returns",
]
