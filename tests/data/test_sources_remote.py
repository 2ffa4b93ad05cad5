from __future__ import annotations

from types import SimpleNamespace

import numpy as np
import pandas as pd
import pytest

from capm_quant.data.sources import fred as fred_mod
from capm_quant.data.sources import yf as yf_mod
from capm_quant.errors import DataUnavailableError


def _yf_frame(multi: bool) -> pd.DataFrame:
    idx = pd.DatetimeIndex(["2024-01-03", "2024-01-02"], name="Date")
    data = {"Adj Close": [101.0, 100.0], "Close": [102.0, 101.0], "Volume": [10, 20]}
    frame = pd.DataFrame(data, index=idx)
    if multi:
        frame.columns = pd.MultiIndex.from_product([frame.columns, ["AAPL"]])
    return frame


@pytest.mark.parametrize("multi", [False, True])
def test_download_price_series_uses_adjusted_close(monkeypatch, multi):
    captured = {}

    def fake_download(**kwargs):
        captured.update(kwargs)
        return _yf_frame(multi)

    monkeypatch.setattr(yf_mod.yf, "download", fake_download)
    series = yf_mod.download_price_series("aapl", "2024-01-01", "2024-01-03", sleep_seconds=0)

    assert series.symbol == "AAPL"
    assert series.prices.tolist() == [100.0, 101.0]
    # fim inclusivo -> yfinance recebe o dia seguinte
    assert captured["end"] == "2024-01-04"
    assert captured["tickers"] == "AAPL"


def test_download_price_series_empty_is_data_unavailable(monkeypatch):
    monkeypatch.setattr(yf_mod.yf, "download", lambda **kwargs: pd.DataFrame())
    with pytest.raises(DataUnavailableError) as excinfo:
        yf_mod.download_price_series("NOPE", "2024-01-01", "2024-01-31", sleep_seconds=0)
    assert excinfo.value.context["symbol"] == "NOPE"


def test_download_price_series_wraps_provider_failure(monkeypatch):
    def boom(**kwargs):
        raise RuntimeError("rate limited")

    monkeypatch.setattr(yf_mod.yf, "download", boom)
    with pytest.raises(DataUnavailableError):
        yf_mod.download_price_series("AAPL", "2024-01-01", "2024-01-31", sleep_seconds=0)


def test_download_rate_series_keeps_percent_values(monkeypatch):
    idx = pd.DatetimeIndex(["2024-01-02", "2024-01-03", "2024-01-04"], name="DATE")
    frame = pd.DataFrame({"DTB3": [5.2, np.nan, 5.21]}, index=idx)
    calls = []

    def fake_reader(name, source, start, end):
        calls.append((name, source))
        return frame

    monkeypatch.setattr(fred_mod, "pdr", SimpleNamespace(DataReader=fake_reader))
    series = fred_mod.download_rate_series("DTB3", "2024-01-01", "2024-01-31")

    assert calls == [("DTB3", "fred")]
    assert series.series_id == "DTB3"
    assert series.rates.tolist() == [5.2, 5.21]


def test_download_rate_series_empty_is_data_unavailable(monkeypatch):
    monkeypatch.setattr(
        fred_mod, "pdr", SimpleNamespace(DataReader=lambda *a, **k: pd.DataFrame())
    )
    with pytest.raises(DataUnavailableError):
        fred_mod.download_rate_series("NOPE", "2024-01-01", "2024-01-31")


def test_download_rate_series_without_datareader(monkeypatch):
    monkeypatch.setattr(fred_mod, "pdr", None)
    with pytest.raises(ImportError):
        fred_mod.download_rate_series("DTB3", "2024-01-01", "2024-01-31")


@pytest.mark.skip(reason="evita chamadas de rede em CI; rodar manualmente")
def test_download_price_series_smoke():
    series = yf_mod.download_price_series("SPY", "2024-01-01", "2024-02-01")
    assert len(series) > 10


@pytest.mark.skip(reason="evita chamadas de rede em CI; rodar manualmente")
def test_download_rate_series_smoke():
    series = fred_mod.download_rate_series("DTB3", "2024-01-01", "2024-02-01")
    assert len(series) > 10
