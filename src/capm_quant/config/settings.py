"""Carrega configurações globais para o projeto.

As funções expostas aqui fornecem um *singleton* barato de configurações com
fallback sensato para ambientes de desenvolvimento. A implementação utiliza
apenas a biblioteca padrão, com suporte a arquivos ``.env`` e parsing
automático de tipos primitivos.

Ordem de precedência (da menor para a maior): valores padrão, arquivo
``.env``, variáveis de ambiente ``CAPM_QUANT_*`` e ``overrides`` explícitos.
Caminhos relativos são interpretados a partir de ``project_root``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Any, Mapping

__all__ = [
    "ENV_PREFIX",
    "Settings",
    "get_settings",
    "load_env_file",
    "reset_settings_cache",
]


ENV_PREFIX = "CAPM_QUANT_"
"""Prefixo utilizado para todas as variáveis de ambiente do projeto."""

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off"})

# nome (sem prefixo), valor padrão, tipo alvo
_FIELDS: tuple[tuple[str, Any, type], ...] = (
    ("DATA_DIR", "data", Path),
    ("REPORTS_DIR", "reports", Path),
    ("LOGS_DIR", "logs", Path),
    ("STRUCTURED_LOGGING", False, bool),
    ("REQUEST_PAUSE_SECONDS", 0.25, float),
)


def _as_bool(raw: Any) -> bool:
    if not isinstance(raw, str):
        return bool(raw)
    token = raw.strip().lower()
    if token in _TRUTHY:
        return True
    if token in _FALSY:
        return False
    raise ValueError(f"Cannot interpret '{raw}' as boolean")


def _resolve_under(base: Path, path: str | Path) -> Path:
    candidate = Path(path).expanduser()
    return candidate if candidate.is_absolute() else base / candidate


def _convert(raw: Any, kind: type, *, root: Path) -> Any:
    if kind is Path:
        return _resolve_under(root, str(raw))
    if kind is bool:
        return _as_bool(raw)
    return kind(raw)


def load_env_file(path: Path) -> dict[str, str]:
    """Parse a ``.env`` style file into ``{KEY: value}``.

    Blank lines, ``#`` comments and lines without ``=`` are skipped; only the
    first ``=`` separates key and value. A missing file yields ``{}``.
    """

    if not path.exists():
        return {}
    entries: dict[str, str] = {}
    for line in (raw.strip() for raw in path.read_text(encoding="utf-8").splitlines()):
        if line and not line.startswith("#") and "=" in line:
            key, value = line.split("=", 1)
            entries[key.strip()] = value.strip()
    return entries


def _project_root() -> Path:
    return Path(__file__).resolve().parents[3]


@dataclass(slots=True, frozen=True)
class Settings:
    """Conjunto imutável de configurações do processo.

    ``data_dir`` ancora os CSVs locais informados com caminho relativo,
    ``reports_dir`` ancora o diretório de saída da análise e ``logs_dir``
    recebe ``capm_quant.log``. ``request_pause_seconds`` é a pausa aplicada
    antes de cada download remoto.
    """

    project_root: Path
    data_dir: Path
    reports_dir: Path
    logs_dir: Path
    structured_logging: bool
    request_pause_seconds: float

    def data_path(self, path: str | Path) -> Path:
        """Resolve ``path`` dentro de ``data_dir`` quando relativo."""
        return _resolve_under(self.data_dir, path)

    def report_path(self, path: str | Path) -> Path:
        """Resolve ``path`` dentro de ``reports_dir`` quando relativo."""
        return _resolve_under(self.reports_dir, path)

    def to_dict(self) -> dict[str, Any]:
        return {
            "project_root": str(self.project_root),
            "data_dir": str(self.data_dir),
            "reports_dir": str(self.reports_dir),
            "logs_dir": str(self.logs_dir),
            "structured_logging": self.structured_logging,
            "request_pause_seconds": self.request_pause_seconds,
        }

    @classmethod
    def from_env(
        cls,
        *,
        overrides: Mapping[str, Any] | None = None,
        env_file: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> "Settings":
        """Build :class:`Settings` from defaults, ``.env``, environment and overrides.

        Override keys are case-insensitive and omit the prefix
        (``project_root``, ``LOGS_DIR``...). Unknown keys raise ``KeyError``.
        """

        pending = {str(key).upper(): value for key, value in (overrides or {}).items()}
        environ = os.environ if environ is None else environ
        file_values = load_env_file(Path(env_file).expanduser()) if env_file is not None else {}

        root_key = f"{ENV_PREFIX}PROJECT_ROOT"
        root_value = pending.pop("PROJECT_ROOT", None)
        if root_value is None:
            root_value = environ.get(root_key, file_values.get(root_key))
        project_root = (
            _project_root() if root_value is None else Path(str(root_value)).expanduser().resolve()
        )

        if env_file is None:
            file_values = load_env_file(project_root / ".env")
        layered = {**file_values, **environ}

        values: dict[str, Any] = {}
        for name, default, kind in _FIELDS:
            raw = pending.pop(name) if name in pending else layered.get(f"{ENV_PREFIX}{name}", default)
            values[name.lower()] = _convert(raw, kind, root=project_root)

        if pending:
            raise KeyError(f"Unknown override(s): {', '.join(sorted(pending))}")

        return cls(project_root=project_root, **values)


_SETTINGS_CACHE: Settings | None = None


def get_settings(**kwargs: Any) -> Settings:
    """Return cached settings; keyword arguments bypass the cache."""

    global _SETTINGS_CACHE
    if kwargs:
        return Settings.from_env(**kwargs)
    if _SETTINGS_CACHE is None:
        _SETTINGS_CACHE = Settings.from_env()
    return _SETTINGS_CACHE


def reset_settings_cache() -> None:
    """Clear the singleton cache (useful for tests)."""

    global _SETTINGS_CACHE
    _SETTINGS_CACHE = None
