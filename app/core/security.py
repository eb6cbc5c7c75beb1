# app/core/security.py
from fastapi import Depends, HTTPException, status
from fastapi.security.api_key import APIKeyHeader

from app.config import Settings
from app.deps import get_settings

_api_key_header = APIKeyHeader(name="x-admin-key", auto_error=False)

def require_admin(
    api_key: str = Depends(_api_key_header),
    settings: Settings = Depends(get_settings),
) -> None:
    if not settings.admin_api_key or api_key != settings.admin_api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing admin key",
        )
