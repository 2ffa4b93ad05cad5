"""API pública consolidada do subpacote ``capm_quant.data``.

Organização
-----------
- Modelos → ``PriceSeries``, ``RateSeries``, ``MarketInputs``, ``JoinedDataset``,
  ``ReturnTable``.
- Aquisição → ``build_fetchers``, ``fetch_market_inputs``.
- Processamento → alinhamento/forward-fill e retornos excedentes.
"""

from .loader import build_fetchers, fetch_market_inputs
from .models import JoinedDataset, MarketInputs, PriceSeries, RateSeries, ReturnTable
from .processing.clean import align_market_data, forward_fill_rates
from .processing.returns import (
    compute_return_table,
    daily_rate_from_annual_pct,
    simple_returns,
)

__all__ = [
    "JoinedDataset",
    "MarketInputs",
    "PriceSeries",
    "RateSeries",
    "ReturnTable",
    "align_market_data",
    "build_fetchers",
    "compute_return_table",
    "daily_rate_from_annual_pct",
    "fetch_market_inputs",
    "forward_fill_rates",
    "simple_returns",
]
