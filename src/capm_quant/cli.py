"""Command line interface for the project.

Commands
--------
- ``analyze``: fetch data, estimate beta and print the prediction interval
- ``show-settings``: print the resolved :class:`Settings`

Values given on the command line override those of the YAML file passed with
``--config``. Relative ``--output-dir`` paths live under ``Settings.reports_dir``
and relative CSV paths under ``Settings.data_dir``, so the result does not
depend on the working directory.

Exit codes: 0 on success, 2 for configuration, file or missing-dependency
problems, 1 for analysis or report errors.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Iterable

from pydantic import ValidationError

from capm_quant.config import (
    AnalysisConfig,
    ConfigError,
    Settings,
    configure_logging,
    get_settings,
    load_config,
)
from capm_quant.data.sources.csv import CSVSchemaError
from capm_quant.errors import CapmError
from capm_quant.evaluation.report import (
    ReportError,
    analysis_to_dict,
    format_markdown_report,
    save_analysis,
)
from capm_quant.pipeline import run_capm_analysis

__all__ = ["build_parser", "build_config", "main"]

# CLI flag -> (section, key) in AnalysisConfig
_OVERRIDES = {
    "ticker": ("data", "ticker"),
    "index": ("data", "market_index"),
    "rf_series": ("data", "risk_free_series"),
    "start": ("data", "start_date"),
    "end": ("data", "end_date"),
    "price_source": ("data", "price_source"),
    "rate_source": ("data", "rate_source"),
    "prices_csv": ("data", "prices_csv"),
    "rates_csv": ("data", "rates_csv"),
    "risk_free_rate": ("scenario", "risk_free_rate"),
    "market_return": ("scenario", "market_return"),
    "confidence": ("scenario", "confidence_level"),
    "output_dir": ("output", "output_dir"),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="capm-quant", description="Beta CAPM e intervalo de predição do retorno anual"
    )
    parser.add_argument(
        "--structured-logs",
        dest="structured_logs",
        action="store_true",
        help="força logs estruturados em JSON",
    )
    parser.add_argument(
        "--plain-logs",
        dest="structured_logs",
        action="store_false",
        help="força logs texto simples",
    )
    parser.set_defaults(structured_logs=None)

    subparsers = parser.add_subparsers(dest="command", required=True)

    show = subparsers.add_parser("show-settings", help="Exibe as Settings resolvidas")
    show.add_argument("--json", action="store_true", help="Formato JSON")

    analyze = subparsers.add_parser("analyze", help="Estima beta e intervalo de predição")
    analyze.add_argument("--config", type=str, help="Arquivo de configuração YAML")
    analyze.add_argument("--ticker", help="Ticker do ativo (ex.: AAPL)")
    analyze.add_argument("--index", help="Índice de mercado (ex.: ^GSPC)")
    analyze.add_argument("--rf-series", help="Série da taxa livre de risco (ex.: DTB3)")
    analyze.add_argument("--start", help="Data inicial (YYYY-MM-DD)")
    analyze.add_argument("--end", help="Data final, inclusiva (YYYY-MM-DD)")
    analyze.add_argument("--price-source", choices=["yfinance", "csv"])
    analyze.add_argument("--rate-source", choices=["fred", "csv"])
    analyze.add_argument("--prices-csv", help="CSV largo de preços (price-source=csv)")
    analyze.add_argument("--rates-csv", help="CSV da taxa livre de risco (rate-source=csv)")
    analyze.add_argument("--risk-free-rate", type=float, help="Taxa livre de risco anual assumida (decimal)")
    analyze.add_argument("--market-return", type=float, help="Retorno anual de mercado assumido (decimal)")
    analyze.add_argument("--confidence", type=float, help="Nível de confiança (ex.: 0.90)")
    analyze.add_argument("--output-dir", help="Diretório para salvar os artefatos")
    analyze.add_argument("--no-plot", action="store_true", help="Não gera o gráfico")
    analyze.add_argument("--no-save", action="store_true", help="Não grava artefatos em disco")
    analyze.add_argument("--json", action="store_true", help="Mostra resultado em JSON")

    return parser


def build_config(args: argparse.Namespace, settings: Settings) -> AnalysisConfig:
    """Merge the optional YAML file with command-line overrides and validate."""
    raw: dict[str, dict[str, Any]] = {"data": {}, "scenario": {}, "output": {}}
    if args.config:
        base = load_config(args.config, AnalysisConfig, project_root=settings.project_root)
        raw = base.model_dump(mode="json")

    for flag, (section, key) in _OVERRIDES.items():
        value = getattr(args, flag, None)
        if value is not None:
            raw.setdefault(section, {})[key] = value
    if args.no_plot:
        raw.setdefault("output", {})["plot"] = False

    try:
        return AnalysisConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid analysis parameters:\n{exc}") from exc


def _print_payload(payload: dict[str, Any], *, as_json: bool) -> None:
    if as_json:
        print(json.dumps(payload, indent=2, sort_keys=True))
    else:
        for key, value in payload.items():
            print(f"{key}: {value}")


def _run_analyze(args: argparse.Namespace, settings: Settings) -> int:
    config = build_config(args, settings)
    analysis = run_capm_analysis(config, settings=settings)

    if args.json:
        print(json.dumps(analysis_to_dict(analysis), indent=2, sort_keys=True))
    else:
        print(format_markdown_report(analysis))

    if not args.no_save:
        output_dir = settings.report_path(config.output.output_dir)
        written = save_analysis(analysis, output_dir, plot=config.output.plot)
        for name, path in written.items():
            print(f"✓ {name}: {path}", file=sys.stderr)
    return 0


def main(argv: Iterable[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    settings = get_settings()
    configure_logging(
        settings=settings,
        structured=args.structured_logs,
        module_levels={"yfinance": "WARNING", "matplotlib": "WARNING"},
        context={"command": args.command},
    )

    try:
        if args.command == "show-settings":
            _print_payload(settings.to_dict(), as_json=args.json)
        elif args.command == "analyze":
            return _run_analyze(args, settings)
        else:  # pragma: no cover - argparse rejects unknown commands
            parser.error(f"Unknown command: {args.command}")
    except (ConfigError, FileNotFoundError, CSVSchemaError, ImportError) as exc:
        print(str(exc), file=sys.stderr)
        return 2
    except (CapmError, ReportError) as exc:
        print(f"{type(exc).__name__}: {exc}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
