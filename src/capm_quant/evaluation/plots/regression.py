"""Scatter of daily excess returns with the fitted CAPM line."""

from __future__ import annotations

import matplotlib.pyplot as plt
import numpy as np
from scipy import stats

from ...config.constants import DEFAULT_CONFIDENCE_LEVEL
from ...data.models import ReturnTable
from ...estimators.interval import validate_confidence_level
from ...estimators.regression import RegressionResult

__all__ = ["confidence_band", "plot_capm_regression"]


def _prepare_axis(ax: plt.Axes | None = None, *, title: str | None = None) -> plt.Axes:
    if ax is None:
        _, ax = plt.subplots(figsize=(8, 6))
    if title:
        ax.set_title(title)
    return ax


def confidence_band(
    x: np.ndarray,
    grid: np.ndarray,
    result: RegressionResult,
    confidence_level: float,
) -> tuple[np.ndarray, np.ndarray]:
    """Lower/upper confidence limits of the fitted mean on ``grid``."""
    level = validate_confidence_level(confidence_level)
    x = np.asarray(x, dtype=float)
    x_mean = x.mean()
    sxx = float(((x - x_mean) ** 2).sum())
    t_crit = stats.t.ppf((1.0 + level) / 2.0, result.degrees_of_freedom)
    se_fit = result.residual_std_error * np.sqrt(
        1.0 / result.n_observations + (grid - x_mean) ** 2 / sxx
    )
    fitted = result.intercept + result.beta * grid
    return fitted - t_crit * se_fit, fitted + t_crit * se_fit


def plot_capm_regression(
    returns: ReturnTable,
    result: RegressionResult,
    *,
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL,
    asset_label: str = "Asset",
    index_label: str = "Market",
    ax: plt.Axes | None = None,
    title: str | None = None,
) -> plt.Axes:
    """Scatter (market excess, asset excess) with the OLS line and its confidence band."""

    x = returns.index_excess.to_numpy()
    y = returns.asset_excess.to_numpy()
    ax = _prepare_axis(ax, title=title or f"CAPM: {asset_label} vs {index_label}")

    ax.scatter(x, y, s=8, alpha=0.5, label="Daily excess returns")

    grid = np.linspace(x.min(), x.max(), 200)
    lower, upper = confidence_band(x, grid, result, confidence_level)
    ax.plot(
        grid,
        result.intercept + result.beta * grid,
        color="red",
        label=f"OLS: beta={result.beta:.3f}, alpha={result.intercept:.5f}",
    )
    ax.fill_between(
        grid, lower, upper, color="red", alpha=0.2,
        label=f"{confidence_level:.0%} confidence band",
    )

    ax.set_xlabel(f"{index_label} excess return (daily)")
    ax.set_ylabel(f"{asset_label} excess return (daily)")
    ax.legend(loc="best")
    ax.grid(True, alpha=0.3)
    return ax
