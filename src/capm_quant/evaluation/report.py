"""Persist and render the results of a CAPM analysis.

Writes machine-readable (JSON) and human-readable (Markdown) summaries, plus
the regression scatter plot, into an output directory.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover
    from ..pipeline.orchestrator import CapmAnalysis

__all__ = [
    "ReportError",
    "analysis_to_dict",
    "format_markdown_report",
    "save_analysis",
    "validate_write_permissions",
]

logger = logging.getLogger(__name__)

SUMMARY_FILE = "capm_summary.json"
REPORT_FILE = "capm_report.md"
PLOT_FILE = "capm_regression.png"


class ReportError(Exception):
    """Raised when report artefacts cannot be written."""


def validate_write_permissions(output_dir: Path) -> None:
    """Create ``output_dir`` and check that a file can be written there.

    Raises
    ------
    ReportError
        If the directory cannot be created or written to.
    """
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ReportError(f"Cannot create directory {output_dir}: {e}") from e

    test_file = output_dir / ".write_test"
    try:
        test_file.touch()
        test_file.unlink()
    except OSError as e:
        raise ReportError(f"No write permission to {output_dir}: {e}") from e


def analysis_to_dict(analysis: "CapmAnalysis") -> dict[str, Any]:
    """JSON-ready summary of inputs, sample, regression and interval."""
    data_cfg = analysis.config.data
    joined = analysis.joined.frame
    returns = analysis.returns.frame
    return {
        "metadata": dict(analysis.metadata),
        "inputs": {
            "ticker": data_cfg.ticker,
            "market_index": data_cfg.market_index,
            "risk_free_series": data_cfg.risk_free_series,
            "start_date": data_cfg.start_date.isoformat(),
            "end_date": data_cfg.end_date.isoformat(),
            "price_source": data_cfg.price_source,
            "rate_source": data_cfg.rate_source,
        },
        "sample": {
            "joined_rows": len(joined),
            "filled_rates": analysis.joined.n_filled,
            "return_rows": len(returns),
            "dropped_rows": analysis.returns.n_dropped,
            "first_date": returns.index[0].date().isoformat(),
            "last_date": returns.index[-1].date().isoformat(),
        },
        "regression": analysis.regression.to_dict(),
        "scenario": analysis.config.scenario.model_dump(),
        "prediction_interval": analysis.interval.to_dict(),
    }


def format_markdown_report(analysis: "CapmAnalysis") -> str:
    """Human-readable report of one analysis run."""
    payload = analysis_to_dict(analysis)
    inputs = payload["inputs"]
    sample = payload["sample"]
    reg = analysis.regression
    pi = analysis.interval
    scenario = analysis.config.scenario

    md = f"""# CAPM: {inputs['ticker']} vs {inputs['market_index']}

**Período:** {inputs['start_date']} a {inputs['end_date']}
**Taxa livre de risco:** {inputs['risk_free_series']} ({inputs['rate_source']})
**Gerado em:** {payload['metadata'].get('timestamp', 'unknown')}

## Amostra

| Item | Valor |
|------|-------|
| Datas comuns (ativo ∩ índice) | {sample['joined_rows']} |
| Taxas preenchidas (forward-fill) | {sample['filled_rates']} |
| Retornos válidos | {sample['return_rows']} |
| Linhas descartadas | {sample['dropped_rows']} |
| Primeira / última data | {sample['first_date']} / {sample['last_date']} |

## Regressão (retorno excedente diário)

| Estatística | Valor |
|-------------|-------|
| Beta | {reg.beta:.4f} |
| Erro-padrão do beta | {reg.beta_std_error:.4f} |
| Intercepto (alpha diário) | {reg.intercept:.6f} |
| Erro-padrão residual (diário) | {reg.residual_std_error:.6f} |
| R² | {reg.r_squared:.4f} |
| Observações (n) | {reg.n_observations} |
| Graus de liberdade | {reg.degrees_of_freedom} |

## Intervalo de predição do retorno anual

| Item | Valor |
|------|-------|
| Taxa livre de risco assumida | {scenario.risk_free_rate:.2%} |
| Retorno de mercado assumido | {scenario.market_return:.2%} |
| Retorno excedente esperado | {pi.expected_excess_return:.2%} |
| Estimativa pontual | {pi.point_estimate:.2%} |
| Erro-padrão anualizado | {pi.annual_std_error:.2%} |
| t crítico | {pi.t_critical:.4f} |
| Intervalo {pi.confidence_level:.0%} | [{pi.lower_bound:.2%}, {pi.upper_bound:.2%}] |
"""
    return md


def save_analysis(
    analysis: "CapmAnalysis",
    output_dir: str | Path,
    *,
    plot: bool = True,
) -> dict[str, Path]:
    """Write summary JSON, Markdown report and (optionally) the regression plot.

    Returns a mapping ``artefact name -> path``.
    """
    output_path = Path(output_dir)
    validate_write_permissions(output_path)

    written: dict[str, Path] = {}

    json_path = output_path / SUMMARY_FILE
    with open(json_path, "w", encoding="utf-8") as f:
        json.dump(analysis_to_dict(analysis), f, indent=2, ensure_ascii=False)
    written["summary"] = json_path

    md_path = output_path / REPORT_FILE
    with open(md_path, "w", encoding="utf-8") as f:
        f.write(format_markdown_report(analysis))
    written["report"] = md_path

    if plot:
        import matplotlib.pyplot as plt

        from .plots.regression import plot_capm_regression

        ax = plot_capm_regression(
            analysis.returns,
            analysis.regression,
            confidence_level=analysis.interval.confidence_level,
            asset_label=analysis.config.data.ticker,
            index_label=analysis.config.data.market_index,
        )
        plot_path = output_path / PLOT_FILE
        ax.figure.savefig(plot_path, dpi=150, bbox_inches="tight")
        plt.close(ax.figure)
        written["plot"] = plot_path

    logger.info("Artefatos salvos em %s: %s", output_path, ", ".join(sorted(written)))
    return written
