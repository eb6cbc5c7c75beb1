# app/main.py                                                                                   # Ruta y nombre del archivo principal de la API.

# =================================================================================             # Separador visual de sección.
# 🧠 NÚCLEO DE LA APLICACIÓN API (FastAPI)                                                      # Título de la sección principal.
# ---------------------------------------------------------------------------------             # Separador de sección.
# - create_app(settings) construye la app con config EXPLÍCITA (sin globales)                   # Lista responsabilidades del módulo.
# - Configura CORS                                                                              # Continua la lista.
# - Crea la instantánea del directorio y el rate limiter (en app.state)                         # Continua la lista.
# - Registra routers modulares (guests, meta, admin)                                            # Continua la lista.
# - MAINTENANCE_MODE=1 → app mínima que responde 503 a todo                                     # Continua la lista.
# =================================================================================             # Fin del encabezado.

from pathlib import Path                                                                        # Importa Path para manipular rutas de archivos.
from typing import Optional                                                                     # Tipado de argumentos opcionales.

from dotenv import load_dotenv                                                                  # Importa load_dotenv para cargar variables desde .env.
from fastapi import FastAPI                                                                     # Importa FastAPI para crear la aplicación.
from fastapi.exceptions import RequestValidationError                                           # Cuerpo inválido → handler propio en /search.
from fastapi.middleware.cors import CORSMiddleware                                              # Importa middleware CORS para orígenes permitidos.
from fastapi.responses import JSONResponse                                                      # Respuesta JSON del modo mantenimiento.
from loguru import logger                                                                       # Importa logger para escribir trazas al arrancar.

from app import meta                                                                            # Router meta (config pública).
from app.config import Settings                                                                 # Config explícita.
from app.core.matching import get_matcher                                                       # Estrategia de coincidencia configurada.
from app.rate_limit import RateLimiter                                                          # Cupo de búsquedas por cliente.
from app.routers import admin, guests                                                           # Routers reales de la aplicación.
from app.services.guest_source import (                                                         # Origen de la exportación + instantánea.
    DirectorySnapshot,
    Fetcher,
    FileCsvFetcher,
    SheetCsvFetcher,
)


def _build_maintenance_app() -> FastAPI:
    """App mínima: cualquier ruta y método responden 503."""
    app = FastAPI(title="API en mantenimiento")

    @app.api_route("/{path:path}", methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"])
    async def maintenance_page(path: str):
        """Responde a cualquier ruta y método con mensaje neutro de mantenimiento."""
        return JSONResponse(
            status_code=503,
            content={
                "status": "offline",
                "message": "🌙 El sistema está en mantenimiento. Vuelve más tarde.",
            },
        )

    logger.warning("🚧 API arrancada en MODO MANTENIMIENTO. Todos los endpoints reales están desactivados.")
    return app


_log_sink: dict = {}                                                                            # Ruta → id del sink de archivo de loguru.


def _configure_log_file(path: str) -> int:
    """Añade el sink de archivo una sola vez por ruta (varias create_app no lo duplican)."""
    if path not in _log_sink:
        _log_sink[path] = logger.add(path, rotation="1 week", retention="4 weeks", level="INFO")
    return _log_sink[path]


def build_fetcher(settings: Settings) -> Fetcher:
    """Archivo local si GUEST_CSV_PATH está definido; si no, la hoja publicada."""
    if settings.guest_csv_path:
        return FileCsvFetcher(settings.guest_csv_path)
    return SheetCsvFetcher(
        settings.guest_sheet_id,
        gid=settings.guest_sheet_gid,
        timeout=settings.fetch_timeout_seconds,
    )


def create_app(settings: Optional[Settings] = None, fetcher: Optional[Fetcher] = None) -> FastAPI:
    """Construye la API de búsqueda de invitados a partir de `settings`."""
    settings = settings or Settings.from_env()                                                  # Config del entorno si no se pasa una.

    if settings.log_file:                                                                       # Sink opcional a archivo con rotación.
        _configure_log_file(settings.log_file)

    if settings.maintenance_mode:                                                               # Modo mantenimiento: nada más se carga.
        return _build_maintenance_app()

    logger.info(                                                                                # Log informativo de variables clave.
        "[BOOT] SHEET_ID_SET={} | CSV_PATH={} | TTL={}s | SEARCH_MAX={}/{}s | MATCHER={} | EMPTY_QUERY={} | ADMIN_KEY_SET={}",
        "yes" if settings.guest_sheet_id else "no",
        settings.guest_csv_path or "-",
        settings.cache_ttl_seconds,
        settings.search_max,
        settings.search_window_seconds,
        settings.matcher,
        settings.empty_query,
        "yes" if settings.admin_api_key else "no",
    )

    if fetcher is None and not (settings.guest_csv_path or settings.guest_sheet_id):
        logger.warning("Ni GUEST_CSV_PATH ni GUEST_SHEET_ID están definidos: las búsquedas fallarán con 502.")

    app = FastAPI(                                                                              # Crea la instancia de la aplicación FastAPI.
        title="API de búsqueda de invitados",                                                  # Título de la API (documentación OpenAPI).
        description="Busca invitados por nombre e incluye a toda su familia para el RSVP",     # Descripción corta de la API.
        version="1.0.0",                                                                        # Versión de la API (para control de cambios).
    )

    app.add_middleware(                                                                         # Registra el middleware de CORS en la app.
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),                                              # Lista de orígenes permitidos (frontends conocidos).
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings                                                               # Config explícita para las dependencias.
    app.state.snapshot = DirectorySnapshot(                                                     # Directorio en memoria (carga perezosa).
        fetcher=fetcher or _lazy_fetcher(settings),
        ttl_seconds=settings.cache_ttl_seconds,
        layout=settings.layout,
        matcher=get_matcher(settings.matcher),
    )
    app.state.limiter = RateLimiter(settings.search_max, settings.search_window_seconds)        # Cupo por cliente.

    app.add_exception_handler(RequestValidationError, guests.search_body_error_handler)         # 400 {error, guests: []} en /search.
    app.include_router(guests.router)                                                           # Monta el router de búsqueda de invitados.
    app.include_router(meta.router)                                                             # Monta el router meta (config pública).
    app.include_router(admin.router)                                                            # Monta el router admin (protegido por API key).
    return app


def _lazy_fetcher(settings: Settings) -> Fetcher:
    """Crea el fetcher real en la primera descarga (así un GUEST_SHEET_ID vacío no rompe el arranque)."""
    built: list = []                                                                            # Fetcher ya construido (una sola sesión HTTP).

    def fetch() -> str:
        if not built:
            built.append(build_fetcher(settings))
        return built[0]()
    return fetch


def get_app() -> FastAPI:
    """Punto de entrada de uvicorn (--factory): carga .env y construye la app."""
    load_dotenv(dotenv_path=Path(".") / ".env")                                                 # Carga las variables de entorno desde .env.
    return create_app(Settings.from_env())
