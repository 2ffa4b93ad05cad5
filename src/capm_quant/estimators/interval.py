"""Prediction interval for the asset's annual expected return.

Given a fitted :class:`~capm_quant.estimators.regression.RegressionResult`
and scenario scalars (annual risk-free rate, annual market return,
confidence level), the CAPM point estimate is::

    point = rf + beta * (market - rf)

and the interval is ``point ± t * sigma_daily * sqrt(252)`` with ``t`` the
Student-t quantile at ``(1 + level) / 2`` on the regression's degrees of
freedom. Annualising the daily residual error by ``sqrt(252)`` assumes
independent daily returns; it is an approximation, while the risk-free
conversion upstream uses a 360-day count.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
import math

from scipy import stats

from ..config.constants import DEFAULT_CONFIDENCE_LEVEL, TRADING_DAYS_IN_YEAR
from ..errors import InvalidParameterError
from .regression import RegressionResult

__all__ = [
    "PredictionInterval",
    "validate_confidence_level",
    "prediction_interval",
]


@dataclass(frozen=True, slots=True)
class PredictionInterval:
    point_estimate: float
    lower_bound: float
    upper_bound: float
    confidence_level: float
    expected_excess_return: float
    annual_std_error: float
    t_critical: float
    degrees_of_freedom: int

    @property
    def half_width(self) -> float:
        return self.upper_bound - self.point_estimate

    def to_dict(self) -> dict[str, float | int]:
        return asdict(self)


def validate_confidence_level(confidence_level: float) -> float:
    """Return ``confidence_level`` as float if strictly inside (0, 1)."""
    try:
        level = float(confidence_level)
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(
            f"confidence_level must be a number, got {confidence_level!r}"
        ) from exc
    if not 0.0 < level < 1.0:
        raise InvalidParameterError(
            f"confidence_level must be strictly between 0 and 1, got {level}",
            context={"confidence_level": level},
        )
    return level


def prediction_interval(
    result: RegressionResult,
    *,
    risk_free_rate: float,
    market_return: float,
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL,
    trading_days: int = TRADING_DAYS_IN_YEAR,
) -> PredictionInterval:
    """Build the symmetric interval around the CAPM annual expected return.

    Parameters
    ----------
    result
        Regression supplying ``beta``, ``residual_std_error`` (daily) and
        ``degrees_of_freedom``.
    risk_free_rate, market_return
        Assumed annual rates in decimal form (0.05 = 5 %).
    confidence_level
        Two-sided coverage, e.g. 0.90 uses the 0.95 t quantile.
    trading_days
        Days used to scale the daily residual error to one year.

    Raises
    ------
    InvalidParameterError
        ``confidence_level`` outside (0, 1) or fewer than one degree of freedom.
    """
    level = validate_confidence_level(confidence_level)
    if result.degrees_of_freedom < 1:
        raise InvalidParameterError(
            f"degrees_of_freedom must be >= 1, got {result.degrees_of_freedom}",
            context={"degrees_of_freedom": result.degrees_of_freedom},
        )
    if trading_days <= 0:
        raise InvalidParameterError("trading_days must be positive.")

    expected_excess = result.beta * (market_return - risk_free_rate)
    point = risk_free_rate + expected_excess
    annual_se = result.residual_std_error * math.sqrt(trading_days)
    t_crit = float(stats.t.ppf((1.0 + level) / 2.0, result.degrees_of_freedom))
    half_width = t_crit * annual_se

    return PredictionInterval(
        point_estimate=float(point),
        lower_bound=float(point - half_width),
        upper_bound=float(point + half_width),
        confidence_level=level,
        expected_excess_return=float(expected_excess),
        annual_std_error=float(annual_se),
        t_critical=t_crit,
        degrees_of_freedom=int(result.degrees_of_freedom),
    )
