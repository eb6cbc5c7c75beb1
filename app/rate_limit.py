# app/rate_limit.py                                                                                             # Ruta del archivo.

# =================================================================================                               # Separador visual.
# 🚦 Rate limit ligero en memoria para la búsqueda de invitados                                                  # Título.
# ---------------------------------------------------------------------------------                               # Separador.
# - Implementa una ventana deslizante en memoria por clave (IP del cliente).                                     # Descripción.
# - Por defecto: 5 búsquedas por día y cliente (como el buscador público de la web).                                # Regla de negocio.
# - Útil para entornos single-process (uvicorn simple).                                                          # Alcance.
# - Para despliegues multiinstancia usa Redis/Upstash o un reverse-proxy (NGINX, Cloudflare).                    # Nota prod.
# =================================================================================                               # Fin encabezado.

import threading                                       # Lock para peticiones concurrentes en el threadpool.        # Import threading.
import time                                            # Para obtener timestamps con time.time().                   # Import time.
from collections import deque                          # Deque eficiente para pops en cola.                         # Import deque.
from typing import Callable, Dict                      # Tipado.                                                    # Import typing.

from fastapi import Request                            # Petición entrante (cabeceras + peer).                      # Import Request.
from loguru import logger                              # Logger para trazas.                                         # Import logger.


class RateLimiter:
    """Ventana deslizante: como máximo `max_req` intentos cada `window_s` segundos por clave."""

    def __init__(self, max_req: int, window_s: int, clock: Callable[[], float] = time.time) -> None:
        self.max_req = max_req                         # Límite de intentos (0 o negativo = sin límite).             # MAX.
        self.window_s = window_s                       # Tamaño de la ventana en segundos.                           # WINDOW.
        self._clock = clock                            # Reloj inyectable (tests).                                   # Reloj.
        self._buckets: Dict[str, deque] = {}           # clave → deque de timestamps.                                # Estado.
        self._lock = threading.Lock()                  # Protege los cubos.                                          # Lock.
        self._last_sweep = clock()                     # Último barrido de claves vencidas.                          # Barrido.

    def __len__(self) -> int:
        with self._lock:
            return len(self._buckets)                  # Claves con intentos dentro de la ventana.

    def _purge(self, bucket: deque, now: float) -> None:
        cutoff = now - self.window_s                   # Límite inferior de la ventana.                              # cutoff.
        while bucket and bucket[0] <= cutoff:          # Mientras haya elementos viejos al frente...                 # Loop purga.
            bucket.popleft()                           # ...elimínalos.                                              # Pop left.

    def _sweep(self, now: float) -> None:
        """Borra las claves sin intentos vigentes; como mucho una vez por ventana (se llama con el lock tomado)."""
        if now - self._last_sweep < self.window_s:
            return
        for key in list(self._buckets):
            bucket = self._buckets[key]
            self._purge(bucket, now)
            if not bucket:
                del self._buckets[key]
        self._last_sweep = now

    def is_allowed(self, key: str) -> bool:
        """Devuelve True (y registra el intento) si `key` aún tiene cupo."""                                        # Docstring.
        if self.max_req <= 0:                          # Si el límite es 0 o negativo...                              # Chequeo rápido.
            return True                                # ...no rate-limiteamos.                                       # Sin límite.

        with self._lock:
            now = self._clock()                                                                                     # now.
            self._sweep(now)                                                                                        # Olvida clientes inactivos.
            bucket = self._buckets.setdefault(key, deque())                                                         # Obtiene o crea cubo.
            self._purge(bucket, now)                                                                                # Purga.

            if len(bucket) >= self.max_req:            # Si ya alcanzó el máximo dentro de ventana...                 # Chequeo límite.
                logger.warning("Rate limit hit for key='{}' ({}/{} in {}s)", key, len(bucket), self.max_req, self.window_s)  # Log aviso.
                return False                           # Deniega.                                                     # Deniega.

            bucket.append(now)                         # Registra el intento actual.                                  # Push timestamp.
            return True                                # Permite.                                                     # Permite.

    def remaining(self, key: str) -> int:
        """Intentos que le quedan a `key` en la ventana actual (sin registrar nada)."""
        if self.max_req <= 0:
            return -1                                  # -1 = ilimitado.
        with self._lock:
            bucket = self._buckets.get(key)
            if not bucket:
                return self.max_req
            self._purge(bucket, self._clock())
            if not bucket:
                del self._buckets[key]
                return self.max_req
            return max(0, self.max_req - len(bucket))

    def reset(self) -> None:
        with self._lock:
            self._buckets.clear()


def client_key(request: Request) -> str:
    """IP del cliente tras proxies: x-forwarded-for > x-real-ip > cf-connecting-ip > peer."""
    forwarded = request.headers.get("x-forwarded-for", "")
    first = forwarded.split(",")[0].strip() if forwarded else ""
    if first:
        return first
    for header in ("x-real-ip", "cf-connecting-ip"):
        value = (request.headers.get(header) or "").strip()
        if value:
            return value
    if request.client and request.client.host:
        return request.client.host
    return "unknown"
