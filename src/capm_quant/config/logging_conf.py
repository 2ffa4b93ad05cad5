"""Configuração padronizada de *logging* para o projeto."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Any, Mapping

from .settings import Settings, get_settings

__all__ = ["JSONFormatter", "configure_logging", "LOG_FILE_NAME"]

LOG_FILE_NAME = "capm_quant.log"

# Atributos padrão de ``LogRecord``; tudo fora daqui veio de ``extra=``.
_RESERVED = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, Path)):
        return str(value)
    if hasattr(value, "item"):
        return value.item()
    return repr(value)


class JSONFormatter(logging.Formatter):
    """Serializa cada ``LogRecord`` como um objeto JSON por linha."""

    def __init__(self, *, default_context: Mapping[str, Any] | None = None) -> None:
        super().__init__()
        self._default_context = dict(default_context or {})

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        payload.update(self._default_context)
        for key, value in record.__dict__.items():
            if key not in _RESERVED:
                payload.setdefault(key, value)

        return json.dumps(payload, ensure_ascii=False, default=_json_default)


def configure_logging(
    *,
    settings: Settings | None = None,
    level: int | str = logging.INFO,
    structured: bool | None = None,
    module_levels: Mapping[str, int | str] | None = None,
    stream: IO[str] | None = None,
    context: Mapping[str, Any] | None = None,
    log_file: Path | None = None,
) -> None:
    """Configure the root logger using the project defaults.

    Parameters
    ----------
    settings:
        Instância de :class:`Settings`; quando ``None`` usa :func:`get_settings`.
    level:
        Nível dos handlers instalados.
    structured:
        ``True`` usa :class:`JSONFormatter`; ``None`` segue
        ``settings.structured_logging``.
    module_levels:
        Mapeamento ``logger -> level`` para ajustes finos (ex.: silenciar
        ``yfinance``).
    stream:
        Alvo do ``StreamHandler``; por padrão ``sys.stderr``.
    context:
        Campos extras aplicados a todos os registros estruturados.
    log_file:
        Caminho alternativo para a cópia em arquivo. Caso ``None`` utiliza
        ``settings.logs_dir / LOG_FILE_NAME``.
    """

    settings = settings or get_settings()
    structured = settings.structured_logging if structured is None else structured

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)
    root_logger.setLevel(logging.DEBUG)

    formatter: logging.Formatter
    if structured:
        formatter = JSONFormatter(default_context=context)
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    stream_handler = logging.StreamHandler(stream)
    stream_handler.setLevel(level)
    stream_handler.setFormatter(formatter)
    root_logger.addHandler(stream_handler)

    file_target = log_file or (settings.logs_dir / LOG_FILE_NAME)
    try:
        file_target.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(file_target, encoding="utf-8")
    except OSError:
        root_logger.warning("Não foi possível abrir o arquivo de log %s", file_target)
    else:
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    if module_levels:
        for logger_name, logger_level in module_levels.items():
            logging.getLogger(logger_name).setLevel(logger_level)
