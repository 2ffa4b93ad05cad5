"""Aquisição das três séries de entrada da análise.

`build_fetchers(config, settings=None)`
    Resolve as fontes configuradas (``yfinance``/``csv`` para preços,
    ``fred``/``csv`` para a taxa livre de risco) em funções
    ``fetch(identifier, start, end)``.

`fetch_market_inputs(config, price_fetcher, rate_fetcher, max_workers=3)`
    Dispara os três downloads independentes (ativo, índice, taxa) em um pool de
    threads e só retorna quando os três terminaram. O primeiro erro de
    provedor é propagado sem retry.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from datetime import date
from functools import partial
from typing import Callable, Tuple

from ..config.schemas import DataConfig
from ..config.settings import Settings, get_settings
from .models import MarketInputs, PriceSeries, RateSeries

__all__ = [
    "PriceFetcher",
    "RateFetcher",
    "build_fetchers",
    "fetch_market_inputs",
]

logger = logging.getLogger(__name__)

PriceFetcher = Callable[[str, date, date], PriceSeries]
RateFetcher = Callable[[str, date, date], RateSeries]


def build_fetchers(
    config: DataConfig, *, settings: Settings | None = None
) -> Tuple[PriceFetcher, RateFetcher]:
    """Map the configured providers to fetch callables.

    Relative CSV paths are read from ``settings.data_dir``.
    """
    settings = settings or get_settings()

    if config.price_source == "csv":
        from .sources.csv import load_price_series_csv

        price_fetcher: PriceFetcher = partial(
            load_price_series_csv, settings.data_path(config.prices_csv)
        )
    else:
        from .sources.yf import download_price_series

        price_fetcher = partial(
            download_price_series, sleep_seconds=settings.request_pause_seconds
        )

    if config.rate_source == "csv":
        from .sources.csv import load_rate_series_csv

        rate_fetcher: RateFetcher = partial(
            load_rate_series_csv, settings.data_path(config.rates_csv)
        )
    else:
        from .sources.fred import download_rate_series

        rate_fetcher = download_rate_series

    return price_fetcher, rate_fetcher


def fetch_market_inputs(
    config: DataConfig,
    *,
    price_fetcher: PriceFetcher,
    rate_fetcher: RateFetcher,
    max_workers: int = 3,
) -> MarketInputs:
    """Fetch asset prices, index prices and risk-free quotes, then join on completion.

    ``max_workers=1`` runs the three calls sequentially (debug).
    """
    start, end = config.start_date, config.end_date
    jobs = {
        "asset": (price_fetcher, config.ticker),
        "index": (price_fetcher, config.market_index),
        "risk_free": (rate_fetcher, config.risk_free_series),
    }

    t0 = time.perf_counter()
    if max_workers <= 1:
        results = {name: fn(ident, start, end) for name, (fn, ident) in jobs.items()}
    else:
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="fetch") as pool:
            futures = {
                name: pool.submit(fn, ident, start, end) for name, (fn, ident) in jobs.items()
            }
            done, _ = wait(futures.values(), return_when=FIRST_EXCEPTION)
            for future in done:
                exc = future.exception()
                if exc is not None:
                    raise exc
            results = {name: future.result() for name, future in futures.items()}

    logger.info(
        "Aquisição concluída em %.2fs: %s=%d, %s=%d, %s=%d",
        time.perf_counter() - t0,
        config.ticker, len(results["asset"]),
        config.market_index, len(results["index"]),
        config.risk_free_series, len(results["risk_free"]),
    )
    return MarketInputs(
        asset=results["asset"],
        index=results["index"],
        risk_free=results["risk_free"],
    )
