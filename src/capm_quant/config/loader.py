"""Configuration loading and validation utilities.

Loads YAML configuration files and validates them against Pydantic schemas.

Example
-------
>>> from capm_quant.config.loader import load_config
>>> from capm_quant.config.schemas import AnalysisConfig
>>>
>>> config = load_config("configs/capm_aapl.yaml", AnalysisConfig)
>>> print(config.data.ticker)
AAPL
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Type, TypeVar, Union

import yaml
from pydantic import BaseModel, ValidationError

__all__ = ["load_config", "ConfigError"]

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class ConfigError(Exception):
    """Raised when configuration loading or validation fails."""


def _resolve_config_path(file_path: Union[str, Path], project_root: Optional[Path] = None) -> Path:
    """Resolve a config path: absolute, then project-root relative, then CWD relative."""
    path = Path(file_path)

    if path.is_absolute() and path.exists():
        return path

    if project_root is None:
        project_root = Path(__file__).resolve().parents[3]

    resolved = project_root / path
    if resolved.exists():
        return resolved

    if path.exists():
        return path.resolve()

    raise FileNotFoundError(f"Config file not found: {file_path}")


def load_config(
    file_path: Union[str, Path],
    schema: Type[T],
    *,
    project_root: Optional[Path] = None,
) -> T:
    """Load and validate a YAML configuration file.

    Parameters
    ----------
    file_path : str or Path
        Path to YAML configuration file
    schema : Type[BaseModel]
        Pydantic model class to validate against
    project_root : Path, optional
        Project root directory for path resolution

    Returns
    -------
    BaseModel
        Validated configuration object

    Raises
    ------
    ConfigError
        If the file is missing, is not valid YAML, is empty or fails validation
    """
    try:
        resolved_path = _resolve_config_path(file_path, project_root)
    except FileNotFoundError as e:
        raise ConfigError(f"Configuration file not found: {file_path}") from e

    logger.debug("Loading config from: %s", resolved_path)
    try:
        with open(resolved_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {file_path}: {e}") from e

    if data is None:
        raise ConfigError(f"Empty configuration file: {file_path}")

    try:
        config = schema.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Configuration validation failed for {file_path}:\n{e}") from e

    logger.info("Successfully loaded config: %s", resolved_path.name)
    return config
