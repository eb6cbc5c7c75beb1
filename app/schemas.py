# app/schemas.py  # Ruta y nombre del archivo de esquemas (Pydantic).                               # Indica dónde va este archivo en el proyecto.

# =================================================================================
# 📦 Schemas (MODELOS DE DATOS Pydantic)
# ---------------------------------------------------------------------------------
# Este archivo define los modelos de datos usados por la API, basados en Pydantic.
# - Validan la entrada de la búsqueda (searchQuery).
# - Serializan GuestRecord (dataclass del núcleo) a JSON en camelCase.
# - Usan Pydantic v2: field_validator, ConfigDict y alias.
# =================================================================================

from datetime import datetime                                                                 # Para el sello de la última recarga.
from typing import Any, List, Literal, Optional                                               # Tipos para anotar opcionales, listas y literales.

from pydantic import (                                                                        # Importa utilidades principales de Pydantic v2.
    BaseModel,                                                                                # Clase base para definir modelos.
    ConfigDict,                                                                               # Configuración del modelo (equivalente a class Config).
    Field,                                                                                    # Declaración de campos con metadata y defaults.
    field_validator,                                                                          # Decorador para validación a nivel de campo.
)
from pydantic.alias_generators import to_camel                                             # snake_case → camelCase para el JSON.

SearchLanguage = Literal["en", "ar"]                                                          # Idioma detectado en la búsqueda.

class CamelModel(BaseModel):                                                                  # Base de las respuestas: claves camelCase en JSON.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)                # Se construye por nombre Python o por alias.

# =================================================================================
# 👤 Invitado (salida)
# =================================================================================
class GuestOut(CamelModel):                                                                    # Invitado tal como lo recibe la UI.
    name: str                                                                                 # Nombre visible.
    row_index: int                                                                            # Identidad estable (fila de datos, 0-based).
    family_group: Optional[str] = None                                                        # Grupo familiar (si existe).
    alternate_name: Optional[str] = None                                                      # Nombre alternativo (ej. en árabe).
    table_number: Optional[str] = None                                                        # Mesa asignada (si la hoja la trae).

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)  # Desde GuestRecord (atributos), JSON en camelCase.

# =================================================================================
# 🔍 Búsqueda
# =================================================================================
class GuestSearchRequest(BaseModel):                                                          # Cuerpo de POST /api/guests/search.
    search_query: str = Field(default="", alias="searchQuery")                                # Texto libre escrito por el invitado.

    model_config = ConfigDict(populate_by_name=True)                                          # Acepta 'searchQuery' y 'search_query'.

    @field_validator("search_query", mode="before")                                           # Antes del parseo de tipo.
    @classmethod
    def _coerce_text(cls, v: Any) -> str:                                                     # Cualquier valor se trata como texto.
        if v is None:                                                                         # null o ausente...
            return ""                                                                         # ...equivale a búsqueda vacía.
        return v if isinstance(v, str) else str(v)                                            # Números/booleanos → str.

class RateLimitInfo(BaseModel):                                                               # Cupo de búsquedas del cliente.
    remaining: int                                                                            # Búsquedas restantes (-1 = ilimitado).
    limit: int                                                                                # Máximo por ventana (0 = sin límite).

class GuestSearchResponse(CamelModel):                                                         # Respuesta de la búsqueda.
    guests: List[GuestOut] = Field(default_factory=list)                                      # Coincidencias + familiares.
    search_language: SearchLanguage = "en"                                                    # 'ar' si la búsqueda tenía letras árabes.
    rate_limit: RateLimitInfo                                                                 # Cupo restante tras esta búsqueda.

class GuestSearchError(CamelModel):                                                            # Cuerpo de error: siempre con lista vacía.
    error: str                                                                                # Mensaje legible.
    guests: List[GuestOut] = Field(default_factory=list)                                      # Siempre [] en errores.
    rate_limited: Optional[bool] = None                                                       # True si fue por cupo.
    message: Optional[str] = None                                                             # Detalle para el usuario final.
    remaining: Optional[int] = None                                                           # Cupo restante (0 al bloquear).

# =================================================================================
# 👑 Admin / Meta
# =================================================================================
class RefreshResult(BaseModel):                                                               # Resultado de forzar la recarga.
    guests: int                                                                               # Invitados en el nuevo directorio.
    fetched_at: Optional[datetime] = None                                                     # Momento (UTC) de la descarga.

class PublicConfig(CamelModel):                                                                # Config pública para el frontend.
    guest_sheet_id: str                                                                       # ID de la hoja (no es secreto).
    search_limit: int                                                                         # Búsquedas permitidas por ventana.
    search_window_seconds: int                                                                # Tamaño de la ventana.
