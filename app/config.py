# app/config.py
# =================================================================================
# ⚙️ CONFIGURACIÓN EXPLÍCITA DEL SERVICIO
# ---------------------------------------------------------------------------------
# Lee las variables de entorno UNA vez en el borde del proceso (main/scripts) y
# las entrega como un objeto Settings que se pasa a create_app(). Ningún módulo
# del núcleo lee os.getenv por su cuenta.
# =================================================================================

import os
from typing import List, Literal, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.directory import ColumnLayout
from app.core.matching import MATCHERS

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]


def _env_int(name: str, default: int) -> int:
    """Entero desde env; si el valor es inválido, avisa y usa el default."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Valor inválido para {}={!r}; usando {}", name, raw, default)
        return default


def _env_optional_int(name: str) -> Optional[int]:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        value = -1
    if value < 0:
        logger.warning("Valor inválido para {}={!r}; se ignora la columna", name, raw)
        return None
    return value


class Settings(BaseModel):
    """Configuración del buscador de invitados (inmutable una vez creada)."""

    guest_sheet_id: str = ""                                   # ID de la hoja publicada de Google Sheets.
    guest_sheet_gid: str = "0"                                 # Pestaña (gid) a exportar.
    guest_csv_path: Optional[str] = None                       # Exportación local (desarrollo); tiene prioridad sobre la hoja.
    cache_ttl_seconds: int = Field(default=60, ge=0)           # 0 = volver a descargar en cada búsqueda.
    fetch_timeout_seconds: int = Field(default=10, gt=0)

    search_max: int = Field(default=5, ge=0)                   # Búsquedas por cliente en la ventana (0 = sin límite).
    search_window_seconds: int = Field(default=86400, gt=0)

    matcher: str = "substring"
    empty_query: Literal["all", "none"] = "all"

    name_column: int = Field(default=0, ge=0)
    family_column: int = Field(default=1, ge=0)
    alt_name_column: Optional[int] = Field(default=None, ge=0)
    table_column: Optional[int] = Field(default=None, ge=0)

    admin_api_key: str = ""
    maintenance_mode: bool = False
    cors_origins: List[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    log_file: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @field_validator("matcher")
    @classmethod
    def _known_matcher(cls, v: str) -> str:
        v = (v or "substring").strip().lower()
        if v not in MATCHERS:
            raise ValueError(f"GUEST_MATCHER debe ser uno de: {', '.join(sorted(MATCHERS))}")
        return v

    @property
    def layout(self) -> ColumnLayout:
        return ColumnLayout(
            name=self.name_column,
            family_group=self.family_column,
            alternate_name=self.alt_name_column,
            table_number=self.table_column,
        )

    @classmethod
    def from_env(cls) -> "Settings":
        """Construye Settings desde el entorno actual (llamar tras load_dotenv)."""
        empty_query = (os.getenv("GUEST_EMPTY_QUERY") or "all").strip().lower()
        if empty_query not in ("all", "none"):
            logger.warning("GUEST_EMPTY_QUERY={!r} no reconocido; usando 'all'", empty_query)
            empty_query = "all"

        origins_raw = os.getenv("CORS_ORIGINS", "")
        origins = [o.strip() for o in origins_raw.split(",") if o.strip()] or list(DEFAULT_CORS_ORIGINS)

        return cls(
            guest_sheet_id=os.getenv("GUEST_SHEET_ID", "").strip(),
            guest_sheet_gid=os.getenv("GUEST_SHEET_GID", "0").strip() or "0",
            guest_csv_path=(os.getenv("GUEST_CSV_PATH") or "").strip() or None,
            cache_ttl_seconds=max(0, _env_int("GUEST_CACHE_TTL", 60)),
            fetch_timeout_seconds=max(1, _env_int("GUEST_FETCH_TIMEOUT", 10)),
            search_max=max(0, _env_int("GUEST_SEARCH_MAX", 5)),
            search_window_seconds=max(1, _env_int("GUEST_SEARCH_WINDOW", 86400)),
            matcher=os.getenv("GUEST_MATCHER", "substring"),
            empty_query=empty_query,
            name_column=max(0, _env_int("GUEST_NAME_COLUMN", 0)),
            family_column=max(0, _env_int("GUEST_FAMILY_COLUMN", 1)),
            alt_name_column=_env_optional_int("GUEST_ALT_NAME_COLUMN"),
            table_column=_env_optional_int("GUEST_TABLE_COLUMN"),
            admin_api_key=os.getenv("ADMIN_API_KEY", ""),
            maintenance_mode=os.getenv("MAINTENANCE_MODE") == "1",
            cors_origins=origins,
            log_file=(os.getenv("LOG_FILE") or "").strip() or None,
        )
