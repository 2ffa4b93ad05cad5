"""Convenience exports for plotting utilities."""

from .regression import confidence_band, plot_capm_regression

__all__ = ["confidence_band", "plot_capm_regression"]
