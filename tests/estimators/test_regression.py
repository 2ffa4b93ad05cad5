from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from capm_quant.data.models import JoinedDataset
from capm_quant.data.processing.returns import compute_return_table
from capm_quant.estimators.regression import RegressionResult, fit_capm_regression, ols_fit
from capm_quant.errors import InsufficientDataError



def test_ols_fit_recovers_slope_and_intercept():
    rng = np.random.default_rng(0)
    x = rng.normal(0.0, 0.01, size=2000)
    y = 0.5 + 1.8 * x + rng.normal(0.0, 0.002, size=x.size)

    result = ols_fit(x, y)

    assert result.beta == pytest.approx(1.8, abs=0.1)
    assert result.intercept == pytest.approx(0.5, abs=1e-3)
    assert result.residual_std_error == pytest.approx(0.002, rel=0.1)
    assert result.degrees_of_freedom == 1998
    assert result.n_observations == 2000


def test_ols_fit_matches_polyfit():
    rng = np.random.default_rng(3)
    x = rng.normal(size=50)
    y = -0.2 + 0.7 * x + rng.normal(scale=0.3, size=50)

    result = ols_fit(x, y)
    slope, intercept = np.polyfit(x, y, 1)
    residuals = y - (intercept + slope * x)

    np.testing.assert_allclose(result.beta, slope, rtol=1e-10)
    np.testing.assert_allclose(result.intercept, intercept, rtol=1e-10)
    np.testing.assert_allclose(
        result.residual_std_error, np.sqrt(residuals @ residuals / 48), rtol=1e-10
    )
    assert 0.0 < result.r_squared < 1.0


def test_ols_fit_perfect_line_has_zero_residual_error():
    x = np.array([0.01, -0.02, 0.03, 0.0, 0.015])
    result = ols_fit(x, 2.0 * x + 0.001)

    assert result.beta == pytest.approx(2.0)
    assert result.intercept == pytest.approx(0.001)
    assert result.residual_std_error == pytest.approx(0.0, abs=1e-12)
    assert result.r_squared == pytest.approx(1.0)


def test_ols_fit_zero_market_variance_raises():
    with pytest.raises(InsufficientDataError, match="zero variance"):
        ols_fit([0.01, 0.01, 0.01, 0.01], [0.02, -0.01, 0.0, 0.03])


@pytest.mark.parametrize("n", [0, 1, 2])
def test_ols_fit_requires_three_observations(n):
    x = np.linspace(0.0, 1.0, n)
    with pytest.raises(InsufficientDataError):
        ols_fit(x, x)


def test_ols_fit_rejects_mismatched_or_nan_inputs():
    with pytest.raises(ValueError):
        ols_fit([1.0, 2.0, 3.0], [1.0, 2.0])
    with pytest.raises(ValueError):
        ols_fit([1.0, np.nan, 3.0], [1.0, 2.0, 3.0])


def test_regression_result_is_immutable():
    result = ols_fit([0.0, 1.0, 2.0, 3.0], [0.1, 0.9, 2.2, 2.9])
    assert isinstance(result, RegressionResult)
    with pytest.raises(AttributeError):
        result.beta = 0.0  # type: ignore[misc]
    assert set(result.to_dict()) >= {"beta", "residual_std_error", "degrees_of_freedom"}


def test_fit_capm_regression_on_synthetic_market(market_frames, true_beta):
    prices, rates = market_frames
    table = prices.rename(columns={"AAA": "asset_price", "^IDX": "index_price"})
    table["rf_rate_pct"] = rates["DTB3"].reindex(table.index).ffill()

    returns = compute_return_table(JoinedDataset(table=table))
    result = fit_capm_regression(returns)

    assert result.beta == pytest.approx(true_beta, abs=0.1)
    assert result.n_observations == len(returns)
    assert result.degrees_of_freedom == len(returns) - 2
