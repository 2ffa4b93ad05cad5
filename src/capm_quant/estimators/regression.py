"""Closed-form OLS for the CAPM time-series regression.

The asset's daily excess return is regressed on the market's daily excess
return with an intercept::

    asset_excess = intercept + beta * index_excess + error

All fit statistics are returned as first-class fields of
:class:`RegressionResult` instead of living on an opaque fitted-model object.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Sequence, Union

import numpy as np
import pandas as pd

from ..data.models import ReturnTable
from ..errors import InsufficientDataError

__all__ = ["RegressionResult", "ols_fit", "fit_capm_regression"]

ArrayLike = Union[pd.Series, np.ndarray, Sequence[float]]


@dataclass(frozen=True, slots=True)
class RegressionResult:
    """Slope, intercept and residual statistics of a simple OLS fit.

    ``residual_std_error`` is the standard deviation of the residuals with an
    ``n - 2`` denominator; ``degrees_of_freedom`` is ``n - 2``.
    """

    beta: float
    intercept: float
    residual_std_error: float
    degrees_of_freedom: int
    n_observations: int
    r_squared: float
    beta_std_error: float
    intercept_std_error: float

    def to_dict(self) -> dict[str, float | int]:
        return asdict(self)


def _as_float_array(values: ArrayLike, name: str) -> np.ndarray:
    array = np.asarray(values, dtype=float)
    if array.ndim != 1:
        raise ValueError(f"{name} must be one-dimensional.")
    return array


def ols_fit(x: ArrayLike, y: ArrayLike) -> RegressionResult:
    """Fit ``y = intercept + beta * x`` by ordinary least squares.

    Raises
    ------
    InsufficientDataError
        Fewer than three observations (no residual degree of freedom), or
        ``x`` without variance.
    """
    x_arr = _as_float_array(x, "x")
    y_arr = _as_float_array(y, "y")
    if x_arr.shape != y_arr.shape:
        raise ValueError("x and y must have the same length.")
    if not (np.isfinite(x_arr).all() and np.isfinite(y_arr).all()):
        raise ValueError("x and y must not contain NaN or infinite values.")

    n = int(x_arr.size)
    dof = n - 2
    if dof < 1:
        raise InsufficientDataError(
            f"OLS needs at least 3 observations, got {n}",
            context={"n_observations": n},
        )

    x_mean = x_arr.mean()
    y_mean = y_arr.mean()
    dx = x_arr - x_mean
    dy = y_arr - y_mean
    sxx = float(dx @ dx)
    if np.ptp(x_arr) == 0.0 or sxx == 0.0:
        raise InsufficientDataError(
            "Market excess return has zero variance; slope is undefined",
            context={"n_observations": n},
        )

    beta = float(dx @ dy) / sxx
    intercept = float(y_mean - beta * x_mean)

    residuals = y_arr - (intercept + beta * x_arr)
    sse = float(residuals @ residuals)
    syy = float(dy @ dy)
    sigma = float(np.sqrt(sse / dof))
    r_squared = 1.0 - sse / syy if syy > 0.0 else 1.0

    return RegressionResult(
        beta=beta,
        intercept=intercept,
        residual_std_error=sigma,
        degrees_of_freedom=dof,
        n_observations=n,
        r_squared=float(r_squared),
        beta_std_error=sigma / float(np.sqrt(sxx)),
        intercept_std_error=sigma * float(np.sqrt(1.0 / n + x_mean**2 / sxx)),
    )


def fit_capm_regression(returns: ReturnTable) -> RegressionResult:
    """Regress asset excess returns on market excess returns."""
    return ols_fit(returns.index_excess.to_numpy(), returns.asset_excess.to_numpy())
