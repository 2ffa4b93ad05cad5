"""Pydantic schemas for analysis configuration.

This module defines typed configuration schemas using Pydantic v2 for:
- Data acquisition (instruments, date range, providers)
- Scenario inputs of the prediction interval
- Output artefacts

YAML files under ``configs/`` validate against :class:`AnalysisConfig`.
Domain checks that must raise :class:`~capm_quant.errors.InvalidParameterError`
(chronological range, confidence bounds) live in
:func:`capm_quant.pipeline.orchestrator.validate_config`.
"""

from __future__ import annotations

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from .constants import (
    DEFAULT_CONFIDENCE_LEVEL,
    DEFAULT_MARKET_INDEX,
    DEFAULT_RISK_FREE_SERIES,
)

__all__ = [
    "DataConfig",
    "ScenarioConfig",
    "OutputConfig",
    "AnalysisConfig",
]


class DataConfig(BaseModel):
    """Instruments, inclusive date range and data providers.

    Attributes
    ----------
    ticker : str
        Asset symbol (e.g. ``"AAPL"``)
    market_index : str
        Market index symbol (e.g. ``"^GSPC"``)
    risk_free_series : str
        Identifier of the risk-free series at the rate provider
    start_date, end_date : date
        Inclusive calendar range
    price_source, rate_source : str
        Providers used for prices and for the risk-free rate
    prices_csv, rates_csv : Optional[str]
        Local files used when the corresponding source is ``"csv"``
    """

    ticker: str = Field(min_length=1, description="Asset ticker symbol")
    market_index: str = Field(
        default=DEFAULT_MARKET_INDEX, min_length=1, description="Market index symbol"
    )
    risk_free_series: str = Field(
        default=DEFAULT_RISK_FREE_SERIES,
        min_length=1,
        description="Risk-free series identifier (annual percent)",
    )
    start_date: date = Field(description="First calendar date (inclusive)")
    end_date: date = Field(description="Last calendar date (inclusive)")
    price_source: Literal["yfinance", "csv"] = "yfinance"
    rate_source: Literal["fred", "csv"] = "fred"
    prices_csv: str | None = Field(
        default=None, description="Wide price CSV path; relative paths live under data_dir"
    )
    rates_csv: str | None = Field(
        default=None, description="Risk-free CSV path; relative paths live under data_dir"
    )

    @field_validator("ticker", "market_index")
    @classmethod
    def normalise_symbol(cls, v: str) -> str:
        """Yahoo symbols are case-insensitive; keep them uppercase."""
        return v.strip().upper()

    @model_validator(mode="after")
    def check_csv_paths(self) -> "DataConfig":
        if self.price_source == "csv" and not self.prices_csv:
            raise ValueError("prices_csv is required when price_source is 'csv'")
        if self.rate_source == "csv" and not self.rates_csv:
            raise ValueError("rates_csv is required when rate_source is 'csv'")
        return self


class ScenarioConfig(BaseModel):
    """Scenario scalars for the prediction interval, all decimals."""

    risk_free_rate: float = Field(description="Assumed annual risk-free rate, e.g. 0.05")
    market_return: float = Field(description="Assumed annual market return, e.g. 0.133")
    confidence_level: float = Field(default=DEFAULT_CONFIDENCE_LEVEL)


class OutputConfig(BaseModel):
    """Where and what to write after a successful run."""

    output_dir: str = Field(
        default="capm", description="Output directory; relative paths live under reports_dir"
    )
    plot: bool = True


class AnalysisConfig(BaseModel):
    """Top-level configuration for one CAPM analysis run."""

    data: DataConfig
    scenario: ScenarioConfig
    output: OutputConfig = Field(default_factory=OutputConfig)
