"""Pacote capm_quant: estimação de beta CAPM e intervalos de predição.

O pacote baixa séries de preços (ativo e índice de mercado) e a taxa livre de
risco, calcula retornos excedentes diários, estima o beta via OLS e deriva um
intervalo de predição para o retorno anual esperado do ativo.

Funções de alto nível são expostas aqui para facilitar o consumo como biblioteca.
"""

__version__ = "0.1.0"
__author__ = "CAPM Quant Team"

from .errors import (
    CapmError,
    DataUnavailableError,
    InsufficientDataError,
    InvalidParameterError,
)


def run_capm_analysis(config, **kwargs):
    """Atalho para :func:`capm_quant.pipeline.orchestrator.run_capm_analysis`.

    A importação é feita aqui dentro para não carregar pandas/scipy apenas ao
    importar o pacote.
    """
    from .pipeline.orchestrator import run_capm_analysis as _run

    return _run(config, **kwargs)


__all__ = [
    "CapmError",
    "DataUnavailableError",
    "InsufficientDataError",
    "InvalidParameterError",
    "run_capm_analysis",
    "__version__",
]
