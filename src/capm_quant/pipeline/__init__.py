"""Pipeline orchestration: acquisition → alignment → regression → inference."""

from .orchestrator import CapmAnalysis, run_capm_analysis, validate_config

__all__ = ["CapmAnalysis", "run_capm_analysis", "validate_config"]
