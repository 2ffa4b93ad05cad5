from __future__ import annotations

from datetime import date
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from capm_quant.config.schemas import AnalysisConfig
from capm_quant.data.models import PriceSeries, RateSeries

TRUE_BETA = 1.3


@pytest.fixture
def market_frames() -> tuple[pd.DataFrame, pd.DataFrame]:
    """Synthetic prices (AAA, ^IDX) and a sparser risk-free series in % a.a."""
    rng = np.random.default_rng(7)
    idx = pd.bdate_range("2022-01-03", periods=260)

    index_ret = rng.normal(0.0004, 0.01, size=len(idx))
    asset_ret = 0.0001 + TRUE_BETA * index_ret + rng.normal(0.0, 0.004, size=len(idx))
    index_ret[0] = asset_ret[0] = 0.0

    prices = pd.DataFrame(
        {
            "AAA": 100.0 * np.cumprod(1.0 + asset_ret),
            "^IDX": 4000.0 * np.cumprod(1.0 + index_ret),
        },
        index=idx,
    )
    # Taxa cotada em 4 de cada 5 pregões
    rate_idx = idx[np.arange(len(idx)) % 5 != 2]
    rates = pd.DataFrame(
        {"DTB3": np.linspace(4.0, 5.0, len(rate_idx))}, index=rate_idx
    )
    return prices, rates


@pytest.fixture
def fake_fetchers(market_frames):
    prices, rates = market_frames
    calls: list[tuple[str, date, date]] = []

    def price_fetcher(symbol, start, end):
        calls.append((symbol, start, end))
        return PriceSeries(symbol, prices[symbol].loc[pd.Timestamp(start):pd.Timestamp(end)])

    def rate_fetcher(series_id, start, end):
        calls.append((series_id, start, end))
        return RateSeries(series_id, rates[series_id].loc[pd.Timestamp(start):pd.Timestamp(end)])

    price_fetcher.calls = calls
    return price_fetcher, rate_fetcher


@pytest.fixture
def analysis_config() -> AnalysisConfig:
    return AnalysisConfig.model_validate(
        {
            "data": {
                "ticker": "AAA",
                "market_index": "^IDX",
                "risk_free_series": "DTB3",
                "start_date": "2022-01-01",
                "end_date": "2022-12-31",
            },
            "scenario": {
                "risk_free_rate": 0.05,
                "market_return": 0.133,
                "confidence_level": 0.90,
            },
        }
    )


@pytest.fixture
def true_beta() -> float:
    return TRUE_BETA


@pytest.fixture
def csv_inputs(tmp_path: Path, market_frames) -> tuple[Path, Path]:
    """Write the synthetic market to wide CSVs (``date`` + one column per series)."""
    prices, rates = market_frames
    prices_path = tmp_path / "prices.csv"
    rates_path = tmp_path / "rates.csv"
    prices.rename_axis("date").reset_index().to_csv(prices_path, index=False)
    rates.rename_axis("date").reset_index().to_csv(rates_path, index=False)
    return prices_path, rates_path


@pytest.fixture
def capm_analysis(analysis_config, fake_fetchers):
    from capm_quant.pipeline import run_capm_analysis

    price_fetcher, rate_fetcher = fake_fetchers
    return run_capm_analysis(
        analysis_config, price_fetcher=price_fetcher, rate_fetcher=rate_fetcher
    )
