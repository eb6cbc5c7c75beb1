# app/deps.py
# =================================================================================
# 🛠️ Dependencias comunes de FastAPI
# ---------------------------------------------------------------------------------
# Entregan a los routers los objetos creados por create_app() y guardados en
# app.state (config, instantánea del directorio, rate limiter). No hay estado
# global de proceso: cada app tiene los suyos.
# =================================================================================

from fastapi import Request

from app.config import Settings
from app.rate_limit import RateLimiter
from app.services.guest_source import DirectorySnapshot


def get_settings(request: Request) -> Settings:
    """Config explícita de la app que atiende la petición."""
    return request.app.state.settings


def get_snapshot(request: Request) -> DirectorySnapshot:
    """Instantánea del directorio de invitados (se recarga sola por TTL)."""
    return request.app.state.snapshot


def get_limiter(request: Request) -> RateLimiter:
    return request.app.state.limiter
