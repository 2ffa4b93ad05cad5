from __future__ import annotations

import json
import logging
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import pytest

from capm_quant.cli import build_config, build_parser, main
from capm_quant.config import ConfigError, reset_settings_cache


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    monkeypatch.setenv("CAPM_QUANT_PROJECT_ROOT", str(tmp_path))
    monkeypatch.setenv("CAPM_QUANT_LOGS_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("CAPM_QUANT_STRUCTURED_LOGGING", raising=False)
    reset_settings_cache()
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)
    reset_settings_cache()


def _analyze_args(csv_inputs, out_dir: Path, *extra: str) -> list[str]:
    prices_path, rates_path = csv_inputs
    return [
        "analyze",
        "--ticker", "AAA",
        "--index", "^IDX",
        "--rf-series", "DTB3",
        "--start", "2022-01-01",
        "--end", "2022-12-31",
        "--price-source", "csv",
        "--prices-csv", str(prices_path),
        "--rate-source", "csv",
        "--rates-csv", str(rates_path),
        "--risk-free-rate", "0.05",
        "--market-return", "0.133",
        "--output-dir", str(out_dir),
        *extra,
    ]


def test_show_settings_json(tmp_path: Path, capsys) -> None:
    assert main(["show-settings", "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["project_root"] == str(tmp_path.resolve())
    assert payload["logs_dir"] == str(tmp_path / "logs")


def test_analyze_json_from_csv_sources(tmp_path: Path, csv_inputs, capsys, true_beta) -> None:
    out_dir = tmp_path / "out"
    assert main(_analyze_args(csv_inputs, out_dir, "--json")) == 0

    captured = capsys.readouterr()
    payload = json.loads(captured.out)
    assert payload["inputs"]["ticker"] == "AAA"
    assert payload["regression"]["beta"] == pytest.approx(true_beta, abs=0.1)
    assert payload["prediction_interval"]["confidence_level"] == pytest.approx(0.90)
    assert (out_dir / "capm_summary.json").exists()
    assert (out_dir / "capm_report.md").exists()
    assert (out_dir / "capm_regression.png").exists()
    assert "summary" in captured.err


def test_analyze_markdown_without_saving(tmp_path: Path, csv_inputs, capsys) -> None:
    out_dir = tmp_path / "out"
    assert main(_analyze_args(csv_inputs, out_dir, "--no-save")) == 0

    assert capsys.readouterr().out.startswith("# CAPM: AAA vs ^IDX")
    assert not out_dir.exists()


def test_analyze_invalid_confidence_exits_1(tmp_path: Path, csv_inputs, capsys) -> None:
    code = main(_analyze_args(csv_inputs, tmp_path / "out", "--confidence", "1.5"))
    assert code == 1
    assert "InvalidParameterError" in capsys.readouterr().err


def test_analyze_missing_config_exits_2(capsys) -> None:
    assert main(["analyze", "--config", "does/not/exist.yaml"]) == 2
    assert "not found" in capsys.readouterr().err


def test_analyze_missing_ticker_exits_2(capsys) -> None:
    assert main(["analyze", "--start", "2022-01-01", "--end", "2022-06-30"]) == 2


def test_build_config_overrides_yaml(tmp_path: Path) -> None:
    from capm_quant.config import get_settings

    config_path = tmp_path / "capm.yaml"
    config_path.write_text(
        "data:\n"
        "  ticker: MSFT\n"
        "  start_date: 2020-01-01\n"
        "  end_date: 2020-12-31\n"
        "scenario:\n"
        "  risk_free_rate: 0.02\n"
        "  market_return: 0.08\n",
        encoding="utf-8",
    )
    args = build_parser().parse_args(
        ["analyze", "--config", "capm.yaml", "--ticker", "aapl", "--confidence", "0.95", "--no-plot"]
    )
    config = build_config(args, get_settings())

    assert config.data.ticker == "AAPL"
    assert config.data.start_date.isoformat() == "2020-01-01"
    assert config.scenario.confidence_level == pytest.approx(0.95)
    assert config.scenario.market_return == pytest.approx(0.08)
    assert config.output.plot is False


def test_build_config_wraps_validation_errors() -> None:
    from capm_quant.config import get_settings

    args = build_parser().parse_args(["analyze", "--ticker", "AAPL"])
    with pytest.raises(ConfigError):
        build_config(args, get_settings())


def test_analyze_relative_output_dir_lands_in_reports_dir(
    tmp_path: Path, csv_inputs, monkeypatch
) -> None:
    reports = tmp_path / "relatorios"
    monkeypatch.setenv("CAPM_QUANT_REPORTS_DIR", str(reports))
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    reset_settings_cache()

    assert main(_analyze_args(csv_inputs, Path("capm_aaa"))) == 0
    assert (reports / "capm_aaa" / "capm_summary.json").exists()
    assert not (workdir / "capm_aaa").exists()


def test_analyze_csv_with_duplicate_dates_exits_2(tmp_path: Path, csv_inputs, capsys) -> None:
    _, rates_path = csv_inputs
    broken = tmp_path / "duplicated.csv"
    broken.write_text(
        "date,AAA,^IDX\n"
        "2022-01-03,100.0,4000.0\n"
        "2022-01-03,101.0,4010.0\n"
        "2022-01-04,102.0,4020.0\n",
        encoding="utf-8",
    )

    code = main(_analyze_args((broken, rates_path), tmp_path / "out"))
    assert code == 2
    assert "duplicadas" in capsys.readouterr().err


def test_analyze_without_datareader_exits_2(
    tmp_path: Path, csv_inputs, monkeypatch, capsys
) -> None:
    from capm_quant.data.sources import fred as fred_mod

    monkeypatch.setattr(fred_mod, "pdr", None)
    args = _analyze_args(csv_inputs, tmp_path / "out")
    args[args.index("--rate-source") + 1] = "fred"

    assert main(args) == 2
    assert "pandas_datareader" in capsys.readouterr().err
