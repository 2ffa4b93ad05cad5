"""Estimadores: regressão CAPM e intervalo de predição."""

from .interval import PredictionInterval, prediction_interval, validate_confidence_level
from .regression import RegressionResult, fit_capm_regression, ols_fit

__all__ = [
    "PredictionInterval",
    "RegressionResult",
    "fit_capm_regression",
    "ols_fit",
    "prediction_interval",
    "validate_confidence_level",
]
