"""Relatórios e gráficos da análise CAPM."""

from .report import (
    ReportError,
    analysis_to_dict,
    format_markdown_report,
    save_analysis,
    validate_write_permissions,
)

__all__ = [
    "ReportError",
    "analysis_to_dict",
    "format_markdown_report",
    "save_analysis",
    "validate_write_permissions",
]
