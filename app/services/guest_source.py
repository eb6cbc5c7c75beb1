# app/services/guest_source.py
# =================================================================================
# 📥 ORIGEN DE LA LISTA DE INVITADOS + INSTANTÁNEA EN MEMORIA
# ---------------------------------------------------------------------------------
# - SheetCsvFetcher: descarga la hoja publicada de Google Sheets como CSV.
# - FileCsvFetcher: lee una exportación local (desarrollo / scripts).
# - DirectorySnapshot: guarda el GuestDirectory actual y lo reemplaza de golpe
#   cuando vence el TTL. Los lectores ven el directorio viejo o el nuevo,
#   nunca uno a medio construir.
# =================================================================================

import threading
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

import requests
from loguru import logger

from app.core.directory import ColumnLayout, GuestDirectory
from app.core.matching import Matcher, substring_match

SHEET_EXPORT_URL = "https://docs.google.com/spreadsheets/d/{sheet_id}/export?format=csv&gid={gid}"

Fetcher = Callable[[], str]


class GuestSourceError(RuntimeError):
    """No se pudo obtener la exportación de invitados."""


class SheetCsvFetcher:
    """Descarga la hoja publicada como texto CSV."""

    def __init__(self, sheet_id: str, gid: str = "0", timeout: int = 10,
                 session: Optional[requests.Session] = None) -> None:
        if not sheet_id:
            raise GuestSourceError("GUEST_SHEET_ID no está configurado.")
        self.sheet_id = sheet_id
        self.gid = gid
        self.timeout = timeout
        self._session = session or requests.Session()

    @property
    def url(self) -> str:
        return SHEET_EXPORT_URL.format(sheet_id=self.sheet_id, gid=self.gid)

    def __call__(self) -> str:
        logger.info("Descargando lista de invitados | sheet_id={} | gid={}", self.sheet_id, self.gid)
        try:
            resp = self._session.get(self.url, timeout=self.timeout)
        except requests.RequestException as e:
            raise GuestSourceError(f"Error de red al descargar la hoja: {e}") from e

        if not resp.ok:
            raise GuestSourceError(f"No se pudo descargar la hoja: HTTP {resp.status_code} {resp.reason}")

        resp.encoding = "utf-8"                                        # Google exporta en UTF-8 aunque no lo declare.
        text = resp.text
        logger.info("CSV descargado | longitud={} caracteres", len(text))
        return text


class FileCsvFetcher:
    """Lee una exportación CSV desde disco."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def __call__(self) -> str:
        try:
            return self.path.read_text(encoding="utf-8-sig")           # utf-8-sig tolera el BOM de Excel.
        except OSError as e:
            raise GuestSourceError(f"No se pudo leer {self.path}: {e}") from e


class DirectorySnapshot:
    """Directorio actual + recarga atómica con TTL."""

    def __init__(
        self,
        fetcher: Fetcher,
        ttl_seconds: int = 60,
        layout: ColumnLayout | None = None,
        matcher: Matcher = substring_match,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._fetcher = fetcher
        self._ttl = ttl_seconds
        self._layout = layout or ColumnLayout()
        self._matcher = matcher
        self._clock = clock
        self._lock = threading.Lock()                                  # Serializa recargas, no lecturas.
        self._directory: Optional[GuestDirectory] = None
        self._loaded_at: float = 0.0
        self.fetched_at: Optional[datetime] = None

    def _is_fresh(self) -> bool:
        if self._directory is None:
            return False
        if self._ttl <= 0:
            return False
        return (self._clock() - self._loaded_at) < self._ttl

    def get(self) -> GuestDirectory:
        """Devuelve el directorio vigente, recargándolo si venció."""
        directory = self._directory
        if directory is not None and self._is_fresh():
            return directory
        with self._lock:
            if self._is_fresh():                                       # Otro hilo ya recargó mientras esperábamos.
                return self._directory
            return self._rebuild()

    def refresh(self) -> GuestDirectory:
        """Fuerza una recarga ignorando el TTL."""
        with self._lock:
            return self._rebuild()

    def _rebuild(self) -> GuestDirectory:
        text = self._fetcher()                                         # GuestSourceError se propaga; el anterior queda intacto.
        directory = GuestDirectory.from_export(text, layout=self._layout, matcher=self._matcher)
        self._directory = directory                                    # Reemplazo de una sola referencia.
        self._loaded_at = self._clock()
        self.fetched_at = datetime.now(timezone.utc)
        logger.info("Directorio de invitados recargado | invitados={}", len(directory))
        return directory
