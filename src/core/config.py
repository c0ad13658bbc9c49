"""Configuración del cliente.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP/caché/sesión) lean config de forma consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.theme import ThemeMode

DEFAULT_API_URL = "http://localhost:3001"


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "teamflow"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "teamflow"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "teamflow"
    return Path.home() / ".config" / "teamflow"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if key:
            data[key] = value.strip().strip('"').strip("'")
    return data


def write_user_env_vars(values: dict[str, str], env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# teamflow user config (.env)"]
    for key in sorted(existing):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="TEAMFLOW_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    api_url: str | None = Field(
        default=None,
        description="URL explícita del backend (p.ej. https://tfc.example.com).",
    )
    api_host: str | None = Field(
        default=None,
        description="Host del backend si no hay URL explícita (URL completa o host desnudo).",
    )
    api_port: int | None = Field(
        default=None,
        ge=1,
        le=65535,
        description="Puerto que acompaña a `api_host` cuando es un host desnudo.",
    )
    api_prefix: str = Field(
        default="/api",
        description="Prefijo que el backend monta delante de todas las rutas.",
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default="teamflow/0.1",
        min_length=1,
        description="User-Agent enviado al backend.",
    )

    query_stale_seconds: float = Field(
        default=30.0,
        ge=0,
        description="Tiempo durante el cual una entrada de caché se sirve sin refetch.",
    )
    query_cache_seconds: float = Field(
        default=300.0,
        ge=0,
        description="Entradas sin uso durante este tiempo se eliminan de la caché.",
    )
    query_retry: int = Field(
        default=1,
        ge=0,
        le=10,
        description="Reintentos ante fallos transitorios antes de exponer el error.",
    )
    query_retry_delay_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Espera inicial entre reintentos (se duplica por intento).",
    )
    query_max_retry_delay_seconds: float = Field(
        default=30.0,
        ge=0,
        description="Techo de la espera entre reintentos.",
    )
    refetch_on_window_focus: bool = Field(
        default=False,
        description="Marcar consultas observadas como obsoletas al recuperar el foco.",
    )

    theme: ThemeMode = Field(
        default=ThemeMode.default(),
        description="Tema de la salida en terminal (light/dark).",
    )
    log_level: str = Field(
        default="WARNING",
        description="Nivel de logging (DEBUG, INFO, WARNING...).",
    )
    session_path: Path | None = Field(
        default=None,
        description="Fichero donde se guarda la sesión (token + usuario).",
    )

    @property
    def resolved_api_url(self) -> str:
        explicit = (self.api_url or "").strip()
        if explicit:
            return explicit.rstrip("/")

        host = (self.api_host or "").strip().rstrip("/")
        if host.startswith(("http://", "https://")):
            return host
        if host:
            port = f":{self.api_port}" if self.api_port else ""
            return f"http://{host}{port}"

        return DEFAULT_API_URL

    @property
    def resolved_api_base(self) -> str:
        prefix = self.api_prefix.strip().strip("/")
        if not prefix:
            return self.resolved_api_url
        return f"{self.resolved_api_url}/{prefix}"

    @property
    def resolved_session_path(self) -> Path:
        return self.session_path or get_user_config_dir() / "session.json"
