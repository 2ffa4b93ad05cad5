"""CAPM analysis orchestrator.

This module coordinates the execution of the four pipeline stages:
1. Data acquisition (asset, index, risk-free; fetched concurrently)
2. Alignment and forward-fill of the risk-free column
3. Returns, excess returns and the OLS beta
4. Prediction interval for the annual expected return

Parameters are validated before any I/O. Each stage consumes only the
previous stage's artefact. Errors propagate unchanged to the caller; no
partial result is returned.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

from ..config.schemas import AnalysisConfig
from ..config.settings import Settings
from ..data.loader import PriceFetcher, RateFetcher, build_fetchers, fetch_market_inputs
from ..data.models import JoinedDataset, ReturnTable
from ..data.processing.clean import align_market_data
from ..data.processing.returns import compute_return_table
from ..errors import InvalidParameterError
from ..estimators.interval import (
    PredictionInterval,
    prediction_interval,
    validate_confidence_level,
)
from ..estimators.regression import RegressionResult, fit_capm_regression

__all__ = ["CapmAnalysis", "validate_config", "run_capm_analysis"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CapmAnalysis:
    """Every artefact produced by one run, plus run metadata."""

    config: AnalysisConfig
    joined: JoinedDataset
    returns: ReturnTable
    regression: RegressionResult
    interval: PredictionInterval
    metadata: Mapping[str, Any] = field(default_factory=dict)

    @property
    def beta(self) -> float:
        return self.regression.beta


def validate_config(config: AnalysisConfig) -> None:
    """Eager parameter checks, run before any provider call.

    Raises
    ------
    InvalidParameterError
        Non-chronological date range or confidence level outside (0, 1).
    """
    data = config.data
    if data.start_date >= data.end_date:
        raise InvalidParameterError(
            f"start_date ({data.start_date}) must be before end_date ({data.end_date})",
            context={"start_date": str(data.start_date), "end_date": str(data.end_date)},
        )
    validate_confidence_level(config.scenario.confidence_level)


def run_capm_analysis(
    config: AnalysisConfig,
    *,
    price_fetcher: PriceFetcher | None = None,
    rate_fetcher: RateFetcher | None = None,
    settings: Settings | None = None,
    max_workers: int = 3,
) -> CapmAnalysis:
    """Execute acquisition, alignment, regression and inference for ``config``.

    Args:
        config: Validated analysis configuration
        price_fetcher: ``fetch(symbol, start, end) -> PriceSeries``; defaults to
            the provider configured in ``config.data.price_source``
        rate_fetcher: ``fetch(series_id, start, end) -> RateSeries``; defaults to
            the provider configured in ``config.data.rate_source``
        settings: Settings used to build default fetchers
        max_workers: Threads for the three fetches (1 = sequential)

    Returns:
        CapmAnalysis with every stage artefact and timing metadata.

    Raises:
        InvalidParameterError: Bad scenario inputs or date range (before I/O)
        DataUnavailableError: A provider had no data
        InsufficientDataError: Too few valid rows or zero market variance
    """
    validate_config(config)

    if price_fetcher is None or rate_fetcher is None:
        default_price, default_rate = build_fetchers(config.data, settings=settings)
        price_fetcher = price_fetcher or default_price
        rate_fetcher = rate_fetcher or default_rate

    start_time = time.perf_counter()
    durations: dict[str, float] = {}
    data_cfg = config.data
    logger.info(
        "Starting CAPM analysis: %s vs %s, rf=%s, %s..%s",
        data_cfg.ticker, data_cfg.market_index, data_cfg.risk_free_series,
        data_cfg.start_date, data_cfg.end_date,
    )

    logger.info("Stage 1/4: Data acquisition")
    stage_start = time.perf_counter()
    inputs = fetch_market_inputs(
        data_cfg,
        price_fetcher=price_fetcher,
        rate_fetcher=rate_fetcher,
        max_workers=max_workers,
    )
    durations["acquisition"] = time.perf_counter() - stage_start

    logger.info("Stage 2/4: Alignment and cleaning")
    stage_start = time.perf_counter()
    joined = align_market_data(inputs.asset, inputs.index, inputs.risk_free)
    durations["alignment"] = time.perf_counter() - stage_start

    logger.info("Stage 3/4: Returns and regression")
    stage_start = time.perf_counter()
    returns = compute_return_table(joined)
    regression = fit_capm_regression(returns)
    durations["regression"] = time.perf_counter() - stage_start
    logger.info(
        "Stage 3 completed: beta=%.4f, intercept=%.6f, sigma=%.6f, n=%d",
        regression.beta,
        regression.intercept,
        regression.residual_std_error,
        regression.n_observations,
    )

    logger.info("Stage 4/4: Prediction interval")
    stage_start = time.perf_counter()
    scenario = config.scenario
    interval = prediction_interval(
        regression,
        risk_free_rate=scenario.risk_free_rate,
        market_return=scenario.market_return,
        confidence_level=scenario.confidence_level,
    )
    durations["inference"] = time.perf_counter() - stage_start
    logger.info(
        "Stage 4 completed: point=%.4f, %.0f%% interval=[%.4f, %.4f]",
        interval.point_estimate,
        interval.confidence_level * 100,
        interval.lower_bound,
        interval.upper_bound,
    )

    total = time.perf_counter() - start_time
    logger.info("Analysis completed in %.2f seconds", total)

    return CapmAnalysis(
        config=config,
        joined=joined,
        returns=returns,
        regression=regression,
        interval=interval,
        metadata={
            "timestamp": datetime.now().isoformat(timespec="seconds"),
            "duration_seconds": total,
            "stage_seconds": durations,
        },
    )
