# app/routers/guests.py  # Router público de búsqueda de invitados (paso 1 del RSVP).

# =================================================================================
# 🔍 Router: Búsqueda de invitados
# ---------------------------------------------------------------------------------
# Este módulo expone las rutas PÚBLICAS para:
# - Buscar invitados por nombre e incluir a toda su familia (/search).
# - Comprobar que el servicio está vivo (/health).
# El núcleo (GuestDirectory.search) es puro; aquí solo vive el borde HTTP:
# cupo por cliente, descarga de la hoja y forma de la respuesta.
# =================================================================================

from fastapi import APIRouter, Depends, Request, status
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from app import schemas
from app.config import Settings
from app.core.directory import detect_search_language
from app.deps import get_limiter, get_settings, get_snapshot
from app.rate_limit import RateLimiter, client_key
from app.services.guest_source import DirectorySnapshot, GuestSourceError

# 🧭 Configuración del router
# ---------------------------------------------------------------------------------
router = APIRouter(
    prefix="/api/guests",
    tags=["guests"],
)
SEARCH_PATH = router.prefix + "/search"


def _error(status_code: int, body: schemas.GuestSearchError) -> JSONResponse:
    """Respuesta de error con la forma {error, guests: []} que espera la UI."""
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


async def search_body_error_handler(request: Request, exc: RequestValidationError):
    """Cuerpo inválido en /search → 400 con guests: []; el resto de rutas conserva el 422."""
    if request.url.path != SEARCH_PATH:
        return await request_validation_exception_handler(request, exc)
    logger.warning("Cuerpo de búsqueda inválido | cliente={} | errores={}", client_key(request), len(exc.errors()))
    return _error(status.HTTP_400_BAD_REQUEST, schemas.GuestSearchError(error="Invalid request body"))


@router.get("/health")
def health():
    """Chequeo básico de salud."""
    return {"status": "ok"}

# =================================================================================
# 🔍 POST /api/guests/search — Invitados + familiares
# ---------------------------------------------------------------------------------
@router.post(
    "/search",
    response_model=schemas.GuestSearchResponse,
    response_model_exclude_none=True,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": schemas.GuestSearchError},
        status.HTTP_429_TOO_MANY_REQUESTS: {"model": schemas.GuestSearchError},
        status.HTTP_502_BAD_GATEWAY: {"model": schemas.GuestSearchError},
    },
)
def search_guests(
    payload: schemas.GuestSearchRequest,
    request: Request,
    settings: Settings = Depends(get_settings),
    snapshot: DirectorySnapshot = Depends(get_snapshot),
    limiter: RateLimiter = Depends(get_limiter),
):
    # 🚦 1) Cupo por cliente.
    key = client_key(request)
    if not limiter.is_allowed(key):
        return _error(
            status.HTTP_429_TOO_MANY_REQUESTS,
            schemas.GuestSearchError(
                error="Rate limit exceeded",
                rate_limited=True,
                message=(
                    f"You have reached the search limit of {settings.search_max} searches. "
                    "Please try again later."
                ),
                remaining=0,
            ),
        )

    query = payload.search_query
    rate_info = schemas.RateLimitInfo(remaining=limiter.remaining(key), limit=max(settings.search_max, 0))
    language = detect_search_language(query)

    # 🔕 2) Política para búsquedas vacías (la decide la config, no el núcleo).
    if not query.strip() and settings.empty_query == "none":
        logger.info("Búsqueda vacía ignorada | cliente={}", key)
        return schemas.GuestSearchResponse(guests=[], search_language=language, rate_limit=rate_info)

    # 📥 3) Directorio vigente (sin datos no se busca).
    try:
        directory = snapshot.get()
    except GuestSourceError as e:
        logger.error("No se pudo cargar la lista de invitados | cliente={} | err={}", key, e)
        return _error(
            status.HTTP_502_BAD_GATEWAY,
            schemas.GuestSearchError(error=f"Could not load guest list: {e}"),
        )

    # 👪 4) Búsqueda + expansión familiar.
    guests = directory.search(query)
    logger.info(
        "Búsqueda de invitados | cliente={} | query='{}' | idioma={} | resultados={} | restantes={}",
        key, query.strip(), language, len(guests), rate_info.remaining,
    )

    return schemas.GuestSearchResponse(
        guests=[schemas.GuestOut.model_validate(g) for g in guests],
        search_language=language,
        rate_limit=rate_info,
    )
