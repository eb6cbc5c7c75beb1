# app/meta.py  # Router de metadatos para el frontend.

from fastapi import APIRouter, Depends  # Importa el enrutador de FastAPI para definir rutas simples.

from app import schemas
from app.config import Settings
from app.deps import get_settings

router = APIRouter(prefix="/api/meta", tags=["meta"])  # Crea un router con prefijo /api/meta.

@router.get("/config", response_model=schemas.PublicConfig)
def get_public_config(settings: Settings = Depends(get_settings)) -> schemas.PublicConfig:
    """
    Devuelve la config NO secreta que necesita el frontend.
    Nunca incluye ADMIN_API_KEY ni rutas locales.
    """
    return schemas.PublicConfig(
        guest_sheet_id=settings.guest_sheet_id,
        search_limit=settings.search_max,
        search_window_seconds=settings.search_window_seconds,
    )
