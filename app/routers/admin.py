# app/routers/admin.py
# =============================================================================
# 👑 Rutas de administración: recarga manual de la lista de invitados
# - Protegido con API Key mediante dependencia `require_admin`
# - Fuerza una nueva descarga de la hoja (ignora el TTL de la caché)
# - Devuelve resumen: número de invitados y momento de la descarga
# =============================================================================

from fastapi import APIRouter, Depends, HTTPException, status     # Importa router y dependencias de FastAPI.
from loguru import logger                                          # Logger para trazas.

import app.schemas as schemas                                      # 🔁 Import del módulo completo de schemas.
from app.core.security import require_admin                        # Dep. que valida x-admin-key == ADMIN_API_KEY.
from app.deps import get_snapshot                                  # Instantánea del directorio de la app.
from app.services.guest_source import DirectorySnapshot, GuestSourceError

router = APIRouter(prefix="/api/admin", tags=["admin"])            # Define el router con prefijo /api/admin.

# --------------------------------- Endpoint -----------------------------------

@router.post(
    "/refresh-guests",                                             # Ruta del endpoint.
    response_model=schemas.RefreshResult,                          # 🔁 Respuesta tipada del módulo schemas.
    dependencies=[Depends(require_admin)],                         # Protege con API Key de admin.
)
def refresh_guests(snapshot: DirectorySnapshot = Depends(get_snapshot)):
    """
    Descarga otra vez la hoja y reemplaza el directorio en memoria.
    - Si la descarga falla, el directorio anterior sigue sirviendo y se responde 502.
    """
    try:
        directory = snapshot.refresh()                             # Recarga forzada.
    except GuestSourceError as e:
        logger.error("Admin: recarga de invitados FALLÓ | err={}", e)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    logger.info("Admin: recarga de invitados OK | invitados={}", len(directory))
    return schemas.RefreshResult(guests=len(directory), fetched_at=snapshot.fetched_at)
